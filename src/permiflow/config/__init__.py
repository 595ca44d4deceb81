"""Configuration loading for permiflow."""
from __future__ import annotations

from permiflow.config.loader import (
    AuditConfig,
    ConfigLoader,
    PermiflowConfig,
    PermissionConfig,
    RoleConfig,
    build_evaluator,
    load_evaluator,
)

__all__ = [
    "AuditConfig",
    "ConfigLoader",
    "PermiflowConfig",
    "PermissionConfig",
    "RoleConfig",
    "build_evaluator",
    "load_evaluator",
]
