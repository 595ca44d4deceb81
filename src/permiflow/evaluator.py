"""AccessEvaluator — the facade over the registry and the role graph.

The evaluator owns a name → :class:`~permiflow.roles.Role` mapping and a
:class:`~permiflow.registry.PermissionRegistry`.  It answers
``check_access(role_name, key)`` by delegating to the role.

An unknown role is not an error: the check returns ``False`` and an audit
event records the failed lookup.

Example
-------
::

    evaluator = AccessEvaluator(audit_sink=MemoryAuditSink())
    evaluator.add_permission("read", resource="user:123")
    evaluator.create_role("guest", ["user:123:read"])
    assert evaluator.check_access("guest", "user:123:read")
    assert not evaluator.check_access("nobody", "user:123:read")
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from permiflow.audit.sink import AuditSink, NullAuditSink
from permiflow.errors import AlreadyExistsError, InvalidArgumentError
from permiflow.registry.permission import Permission, PermissionRegistry
from permiflow.roles.decision import AccessDecision, DecisionReason
from permiflow.roles.role import Role

logger = logging.getLogger(__name__)


class AccessEvaluator:
    """Creates roles, registers permissions, and resolves access checks.

    Parameters
    ----------
    audit_sink:
        Receives event strings for every mutation and access check.
        Defaults to a :class:`NullAuditSink`.
    registry:
        Permission registry to use.  A new one sharing ``audit_sink`` is
        created if not supplied.
    """

    def __init__(
        self,
        audit_sink: AuditSink | None = None,
        registry: PermissionRegistry | None = None,
    ) -> None:
        self._audit: AuditSink = audit_sink if audit_sink is not None else NullAuditSink()
        self._registry = registry if registry is not None else PermissionRegistry(self._audit)
        self._roles: dict[str, Role] = {}

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def add_permission(
        self,
        name: str,
        resource: str | None = None,
        description: str | None = None,
        deny: bool | None = None,
    ) -> Permission:
        """Register a permission.  See :meth:`PermissionRegistry.add_permission`."""
        return self._registry.add_permission(name, resource, description, deny)

    def bulk_add_permissions(
        self,
        items: Iterable[Mapping[str, object]],
    ) -> list[Permission]:
        """Register several permissions.  Not transactional."""
        return self._registry.bulk_add_permissions(items)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def create_role(self, name: str, permissions: Iterable[str] = ()) -> Role:
        """Create and store a role.

        Parameters
        ----------
        name:
            Unique, non-empty role name.
        permissions:
            Initial granted keys, not checked against the registry.

        Returns
        -------
        Role

        Raises
        ------
        InvalidArgumentError
            If ``name`` is empty.
        AlreadyExistsError
            If a role with ``name`` already exists.
        """
        if not name:
            raise InvalidArgumentError("Role name is required")
        if name in self._roles:
            raise AlreadyExistsError(name)

        role = Role(name, permissions)
        self._roles[name] = role
        self._audit.record(f"Role created: {name}")
        logger.debug("Role created: %s (%d permissions)", name, len(role.permissions))
        return role

    def bulk_create_roles(self, items: Iterable[Mapping[str, object]]) -> list[Role]:
        """Create several roles in order.

        Each item is a mapping with ``name`` and optional ``permissions``.
        Not transactional: roles created before a failing item remain.
        """
        return [
            self.create_role(
                item.get("name"),  # type: ignore[arg-type]
                item.get("permissions") or (),  # type: ignore[arg-type]
            )
            for item in items
        ]

    def get_role(self, name: str) -> Role | None:
        return self._roles.get(name)

    def has_role(self, name: str) -> bool:
        return name in self._roles

    def list_roles(self) -> list[Role]:
        """Return all roles in creation order."""
        return list(self._roles.values())

    @property
    def role_names(self) -> list[str]:
        return list(self._roles)

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Access checks
    # ------------------------------------------------------------------

    def check_access(self, role_name: str, permission: str) -> bool:
        """Return True if ``role_name`` currently grants ``permission``.

        Never raises for an unknown role; returns ``False`` instead.
        """
        return self.explain_access(role_name, permission).allowed

    def explain_access(self, role_name: str, permission: str) -> AccessDecision:
        """Resolve an access check and return the full decision.

        Emits the same audit events as :meth:`check_access`.
        """
        role = self._roles.get(role_name)
        if role is None:
            self._audit.record(
                f"Access check failed: Role {role_name} does not exist"
            )
            logger.debug("Access check against unknown role %s", role_name)
            return AccessDecision(
                False, DecisionReason.UNKNOWN_ROLE, role_name, permission
            )

        decision = role.explain(permission)
        self._audit.record(
            f"Access check: Role {role_name} "
            f"{'has' if decision.allowed else 'does not have'} access to {permission}"
        )
        logger.debug(
            "Access %s: role=%s permission=%s reason=%s",
            "ALLOW" if decision.allowed else "DENY",
            role_name,
            permission,
            decision.reason.value,
        )
        return decision

    def check_all(self, requests: Iterable[tuple[str, str]]) -> list[bool]:
        """Evaluate a batch of ``(role_name, permission)`` pairs in order."""
        return [self.check_access(role_name, key) for role_name, key in requests]

    def summary(self) -> dict[str, object]:
        """Return a plain dict describing the evaluator's contents."""
        return {
            "permission_count": len(self._registry),
            "role_count": len(self._roles),
            "inactive_roles": sorted(r.name for r in self._roles.values() if not r.is_active),
            "roles": [r.to_dict() for r in self._roles.values()],
        }

    def __repr__(self) -> str:
        return (
            f"AccessEvaluator(roles={len(self._roles)}, "
            f"permissions={len(self._registry)})"
        )
