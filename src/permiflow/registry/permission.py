"""Permission definitions and the registry that stores them.

A :class:`Permission` is stored under its *composite key*,
``"<resource>:<name>"``, or ``"global:<name>"`` when no resource is given.
The key is what roles grant and deny; the generated ``id`` is only an
opaque external reference.

Registration is last-write-wins per key.  Re-adding the same
(resource, name) pair builds a brand-new Permission with a new id and
replaces the mapping entry; the earlier object is left untouched.

Example
-------
::

    registry = PermissionRegistry()
    perm = registry.add_permission("read", resource="user:123")
    assert perm.key == "user:123:read"
    assert registry.get("user:123:read") is perm
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from permiflow.audit.sink import AuditSink, NullAuditSink
from permiflow.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

GLOBAL_RESOURCE: str = "global"


def permission_key(name: str, resource: str | None = None) -> str:
    """Return the composite key for a (name, resource) pair.

    >>> permission_key("read", "user:123")
    'user:123:read'
    >>> permission_key("read")
    'global:read'
    """
    return f"{resource or GLOBAL_RESOURCE}:{name}"


@dataclass(frozen=True)
class Permission:
    """An immutable permission definition.

    Attributes
    ----------
    id:
        Generated unique identifier.  Not used for lookup.
    name:
        Permission name, e.g. ``"read"``.
    resource:
        Optional resource scope, e.g. ``"user:123"``.
    description:
        Optional human-readable description.
    deny:
        Optional deny marker.  Carried for callers; role resolution does
        not consult it.
    """

    id: str
    name: str
    resource: str | None = None
    description: str | None = None
    deny: bool | None = None

    @property
    def key(self) -> str:
        """The composite key this permission is registered under."""
        return permission_key(self.name, self.resource)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "resource": self.resource,
            "description": self.description,
            "deny": self.deny,
            "key": self.key,
        }


class PermissionRegistry:
    """Stores permission definitions keyed by composite key.

    Parameters
    ----------
    audit_sink:
        Receives one event string per added permission.  Defaults to a
        :class:`NullAuditSink`.
    """

    def __init__(self, audit_sink: AuditSink | None = None) -> None:
        self._permissions: dict[str, Permission] = {}
        self._audit: AuditSink = audit_sink if audit_sink is not None else NullAuditSink()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_permission(
        self,
        name: str,
        resource: str | None = None,
        description: str | None = None,
        deny: bool | None = None,
    ) -> Permission:
        """Create a permission and register it under its composite key.

        Parameters
        ----------
        name:
            Required, non-empty permission name.
        resource:
            Optional resource scope.  ``None`` or ``""`` means global.
        description:
            Optional description.
        deny:
            Optional deny marker carried on the Permission.

        Returns
        -------
        Permission
            The newly constructed permission.

        Raises
        ------
        InvalidArgumentError
            If ``name`` is empty or ``None``.
        """
        if not name:
            raise InvalidArgumentError("Permission name is required")

        permission = Permission(
            id=str(uuid.uuid4()),
            name=name,
            resource=resource,
            description=description,
            deny=deny,
        )
        key = permission.key
        if key in self._permissions:
            logger.debug("Overwriting permission entry for key=%s", key)
        self._permissions[key] = permission
        self._audit.record(
            f"Permission added: {name} on {resource or GLOBAL_RESOURCE}"
        )
        logger.debug("Permission added: key=%s id=%s", key, permission.id)
        return permission

    def bulk_add_permissions(
        self,
        items: Iterable[Mapping[str, object]],
    ) -> list[Permission]:
        """Add several permissions in order.

        Each item is a mapping with a ``name`` key and optional ``resource``,
        ``description`` and ``deny`` keys.  Not transactional: if an item
        fails, the ones before it stay registered and the error propagates.
        """
        return [
            self.add_permission(
                name=item.get("name"),  # type: ignore[arg-type]
                resource=item.get("resource"),  # type: ignore[arg-type]
                description=item.get("description"),  # type: ignore[arg-type]
                deny=item.get("deny"),  # type: ignore[arg-type]
            )
            for item in items
        ]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: str) -> Permission | None:
        """Return the permission currently registered under ``key``."""
        return self._permissions.get(key)

    def lookup(self, name: str, resource: str | None = None) -> Permission | None:
        """Return the permission registered for (name, resource), if any."""
        return self._permissions.get(permission_key(name, resource))

    def keys(self) -> list[str]:
        """Return all registered composite keys in insertion order."""
        return list(self._permissions)

    def list_permissions(self) -> list[Permission]:
        """Return the currently registered permissions."""
        return list(self._permissions.values())

    def __contains__(self, key: object) -> bool:
        return key in self._permissions

    def __len__(self) -> int:
        return len(self._permissions)

    def __repr__(self) -> str:
        return f"PermissionRegistry(permissions={len(self._permissions)})"
