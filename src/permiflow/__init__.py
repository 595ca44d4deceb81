"""permiflow — role-based access-control resolution engine.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import permiflow
>>> evaluator = permiflow.AccessEvaluator()
>>> evaluator.add_permission("read", resource="user:123").key
'user:123:read'
>>> guest = evaluator.create_role("guest", ["user:123:read"])
>>> evaluator.check_access("guest", "user:123:read")
True
>>> evaluator.check_access("guest", "user:123:write")
False
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------
from permiflow.evaluator import AccessEvaluator
from permiflow.registry.permission import Permission, PermissionRegistry, permission_key
from permiflow.roles.decision import AccessDecision, DecisionReason
from permiflow.roles.role import Role

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from permiflow.errors import (
    AlreadyExistsError,
    ConfigError,
    CyclicDependencyError,
    DepthExceededError,
    InvalidArgumentError,
    PermiflowError,
)

# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
from permiflow.audit.logger import AuditLogger
from permiflow.audit.sink import (
    AuditSink,
    LoggingAuditSink,
    MemoryAuditSink,
    NullAuditSink,
)
from permiflow.gate import ACCESS_DENIED, AccessGate, GateResponse, require_access
from permiflow.config.loader import ConfigLoader, PermiflowConfig, build_evaluator, load_evaluator

__all__ = [
    "__version__",
    # Core
    "AccessDecision",
    "AccessEvaluator",
    "DecisionReason",
    "Permission",
    "PermissionRegistry",
    "Role",
    "permission_key",
    # Errors
    "AlreadyExistsError",
    "ConfigError",
    "CyclicDependencyError",
    "DepthExceededError",
    "InvalidArgumentError",
    "PermiflowError",
    # Audit
    "AuditLogger",
    "AuditSink",
    "LoggingAuditSink",
    "MemoryAuditSink",
    "NullAuditSink",
    # Gate
    "ACCESS_DENIED",
    "AccessGate",
    "GateResponse",
    "require_access",
    # Config
    "ConfigLoader",
    "PermiflowConfig",
    "build_evaluator",
    "load_evaluator",
]
