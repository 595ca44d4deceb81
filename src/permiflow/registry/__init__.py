"""Permission registry."""
from __future__ import annotations

from permiflow.registry.permission import (
    GLOBAL_RESOURCE,
    Permission,
    PermissionRegistry,
    permission_key,
)

__all__ = [
    "GLOBAL_RESOURCE",
    "Permission",
    "PermissionRegistry",
    "permission_key",
]
