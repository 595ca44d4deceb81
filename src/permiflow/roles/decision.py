"""Explained access decisions."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DecisionReason(str, Enum):
    """Which step of role resolution produced the decision."""

    INACTIVE = "inactive"
    DENIED = "denied"
    GRANTED = "granted"
    INHERITED = "inherited"
    NOT_GRANTED = "not_granted"
    UNKNOWN_ROLE = "unknown_role"


@dataclass(frozen=True)
class AccessDecision:
    """Immutable result of resolving one permission key for one role.

    Attributes
    ----------
    allowed:
        The boolean decision.
    reason:
        The resolution step that decided it.
    role_name:
        The role the check was made against.
    permission_key:
        The key that was checked.
    source_role:
        The role whose own state decided the outcome: the granting role
        for ``GRANTED``/``INHERITED``, the role itself for ``INACTIVE`` and
        ``DENIED``, ``None`` otherwise.
    """

    allowed: bool
    reason: DecisionReason
    role_name: str
    permission_key: str
    source_role: str | None = None

    def __bool__(self) -> bool:
        return self.allowed

    def describe(self) -> str:
        """Return a one-line human-readable explanation."""
        match self.reason:
            case DecisionReason.INACTIVE:
                return f"Role '{self.role_name}' is deactivated"
            case DecisionReason.DENIED:
                return f"'{self.permission_key}' is explicitly denied on '{self.role_name}'"
            case DecisionReason.GRANTED:
                return f"'{self.permission_key}' is granted directly by '{self.role_name}'"
            case DecisionReason.INHERITED:
                return f"'{self.permission_key}' is inherited from '{self.source_role}'"
            case DecisionReason.UNKNOWN_ROLE:
                return f"Role '{self.role_name}' does not exist"
            case _:
                return f"'{self.permission_key}' is not granted to '{self.role_name}'"

    def to_dict(self) -> dict[str, object]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value,
            "role": self.role_name,
            "permission": self.permission_key,
            "source_role": self.source_role,
        }
