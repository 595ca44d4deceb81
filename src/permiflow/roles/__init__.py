"""Roles, the inheritance graph, and explained decisions."""
from __future__ import annotations

from permiflow.roles.decision import AccessDecision, DecisionReason
from permiflow.roles.role import Role

__all__ = [
    "AccessDecision",
    "DecisionReason",
    "Role",
]
