"""Roles and the role-inheritance graph.

A :class:`Role` owns a set of granted permission keys, a set of denied
keys, an activation flag, and references to the roles it inherits from.
Inherited roles are shared, never owned: many roles may inherit the same
parent.

The inheritance relation over all roles is kept acyclic.  Every new edge
is checked at insertion time and rejected with
:class:`~permiflow.errors.CyclicDependencyError` before anything is
mutated.

Resolution order for ``has_permission(key)``:

1. an inactive role grants nothing;
2. a denied key is refused, even if also granted;
3. a granted key is allowed;
4. otherwise the key is allowed if *any* inherited role allows it, each
   parent applying these same rules to its own state.

Example
-------
::

    admin = Role("admin", ["user:123:write"])
    guest = Role("guest", ["user:123:read"])
    guest.add_inherited_role(admin)
    assert guest.has_permission("user:123:write")
    admin.add_inherited_role(guest)  # raises CyclicDependencyError
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from permiflow.errors import (
    CyclicDependencyError,
    DepthExceededError,
    InvalidArgumentError,
)
from permiflow.roles.decision import AccessDecision, DecisionReason

logger = logging.getLogger(__name__)


class Role:
    """A named bundle of granted/denied keys with inherited parents.

    Roles compare and hash by identity.

    Parameters
    ----------
    name:
        Required, non-empty role name.
    permissions:
        Initial granted keys, stored verbatim.  Keys are not checked
        against any permission registry.

    Raises
    ------
    InvalidArgumentError
        If ``name`` is empty or ``None``.
    """

    MAX_INHERITANCE_DEPTH: int = 5

    def __init__(self, name: str, permissions: Iterable[str] = ()) -> None:
        if not name:
            raise InvalidArgumentError("Role name is required")
        self._name = name
        self._permissions: set[str] = set(permissions)
        self._denied_permissions: set[str] = set()
        self._inherited_roles: list[Role] = []
        self._active: bool = True

    # ------------------------------------------------------------------
    # Grant / deny sets
    # ------------------------------------------------------------------

    def add_permission(self, permission: str) -> None:
        self._permissions.add(permission)

    def remove_permission(self, permission: str) -> None:
        self._permissions.discard(permission)

    def deny_permission(self, permission: str) -> None:
        self._denied_permissions.add(permission)

    def allow_permission(self, permission: str) -> None:
        """Lift an explicit deny.  Does not grant the key."""
        self._denied_permissions.discard(permission)

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def add_inherited_role(self, role: Role, depth: int = 0) -> None:
        """Make this role inherit from ``role``.

        Parameters
        ----------
        role:
            The parent role.
        depth:
            Caller-supplied depth, compared as given against
            :attr:`MAX_INHERITANCE_DEPTH`.

        Raises
        ------
        DepthExceededError
            If ``depth`` exceeds :attr:`MAX_INHERITANCE_DEPTH`.
        CyclicDependencyError
            If the edge would create a cycle.  An edge whose parent's
            lineage already meets this role's lineage (a repeated parent, a
            shortcut to an ancestor, or a diamond) is refused the same way.
        """
        if depth > self.MAX_INHERITANCE_DEPTH:
            raise DepthExceededError(depth, self.MAX_INHERITANCE_DEPTH)
        if self._has_cyclic_dependency(role):
            logger.debug(
                "Rejected inheritance edge %s -> %s (cycle)", self._name, role.name
            )
            raise CyclicDependencyError(self._name, role.name)
        self._inherited_roles.append(role)
        logger.debug("Role %s now inherits from %s", self._name, role.name)

    def _has_cyclic_dependency(self, role: Role, visited: set[Role] | None = None) -> bool:
        # Walks ``role`` and its lineage.  Reaching ``self`` closes a cycle;
        # a walked node that one of our parents is, or whose lineage meets
        # that parent's lineage, is refused the same way.
        if role is self:
            return True
        if visited is None:
            visited = set()
        if role in visited:
            return False
        visited.add(role)
        for inherited in role._inherited_roles:
            if self._has_cyclic_dependency(inherited, visited):
                return True
        return any(
            ours is role or ours._has_cyclic_dependency(role)
            for ours in self._inherited_roles
        )

    def ancestors(self) -> list[Role]:
        """Return every transitively inherited role, depth-first, without repeats."""
        seen: set[Role] = set()
        ordered: list[Role] = []
        stack = list(reversed(self._inherited_roles))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            ordered.append(current)
            stack.extend(reversed(current._inherited_roles))
        return ordered

    def inherits_from(self, role: Role) -> bool:
        """Return True if ``role`` is a direct or transitive parent."""
        return any(_reaches(parent, role) for parent in self._inherited_roles)

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def activate(self) -> None:
        self._active = True

    def deactivate(self) -> None:
        self._active = False

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def has_permission(self, permission: str) -> bool:
        """Return True if this role currently grants ``permission``."""
        return self.explain(permission).allowed

    def explain(self, permission: str) -> AccessDecision:
        """Resolve ``permission`` and report which rule decided it."""
        if not self._active:
            return AccessDecision(
                False, DecisionReason.INACTIVE, self._name, permission, self._name
            )
        if permission in self._denied_permissions:
            return AccessDecision(
                False, DecisionReason.DENIED, self._name, permission, self._name
            )
        if permission in self._permissions:
            return AccessDecision(
                True, DecisionReason.GRANTED, self._name, permission, self._name
            )
        for parent in self._inherited_roles:
            decision = parent.explain(permission)
            if decision.allowed:
                return AccessDecision(
                    True,
                    DecisionReason.INHERITED,
                    self._name,
                    permission,
                    decision.source_role,
                )
        return AccessDecision(False, DecisionReason.NOT_GRANTED, self._name, permission)

    def effective_permissions(self) -> frozenset[str]:
        """Return every key this role currently resolves to True.

        Candidates are the granted keys of this role and all its ancestors.
        """
        candidates: set[str] = set(self._permissions)
        for ancestor in self.ancestors():
            candidates.update(ancestor._permissions)
        return frozenset(key for key in candidates if self.has_permission(key))

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def permissions(self) -> frozenset[str]:
        """Keys granted directly on this role."""
        return frozenset(self._permissions)

    @property
    def denied_permissions(self) -> frozenset[str]:
        """Keys denied directly on this role."""
        return frozenset(self._denied_permissions)

    @property
    def inherited_roles(self) -> tuple[Role, ...]:
        """Direct parents, in the order they were added."""
        return tuple(self._inherited_roles)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self._name,
            "active": self._active,
            "permissions": sorted(self._permissions),
            "deny": sorted(self._denied_permissions),
            "inherits": [r.name for r in self._inherited_roles],
        }

    def __repr__(self) -> str:
        return (
            f"Role(name={self._name!r}, permissions={len(self._permissions)}, "
            f"inherits={[r.name for r in self._inherited_roles]!r}, "
            f"active={self._active})"
        )


def _reaches(start: Role, target: Role, visited: set[Role] | None = None) -> bool:
    """Depth-first search over inherited edges: is ``target`` reachable from ``start``?

    ``start`` reaches itself.
    """
    if start is target:
        return True
    if visited is None:
        visited = set()
    visited.add(start)
    for parent in start._inherited_roles:
        if parent not in visited and _reaches(parent, target, visited):
            return True
    return False
