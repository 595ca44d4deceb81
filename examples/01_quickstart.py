#!/usr/bin/env python3
"""Example: Quickstart — permiflow

Register permissions, build a small role hierarchy, and check access
with an in-memory audit trail.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install permiflow
"""
from __future__ import annotations

import permiflow


def main() -> None:
    print(f"permiflow version: {permiflow.__version__}")

    # Step 1: Create an evaluator with an in-memory audit sink
    audit = permiflow.MemoryAuditSink()
    evaluator = permiflow.AccessEvaluator(audit_sink=audit)

    # Step 2: Register permissions and roles
    evaluator.bulk_add_permissions([
        {"name": "read", "resource": "user:123"},
        {"name": "write", "resource": "user:123"},
    ])
    admin = evaluator.create_role("admin", ["user:123:write"])
    guest = evaluator.create_role("guest", ["user:123:read"])
    guest.add_inherited_role(admin)

    # Step 3: Check access
    print("\nAccess checks:")
    for role_name, key in [
        ("guest", "user:123:read"),
        ("guest", "user:123:write"),
        ("admin", "user:123:read"),
        ("nobody", "user:123:read"),
    ]:
        decision = evaluator.explain_access(role_name, key)
        icon = "ALLOW" if decision.allowed else "DENY"
        print(f"  [{icon}] {role_name} -> {key}: {decision.describe()}")

    # Step 4: Cycles are rejected
    try:
        admin.add_inherited_role(guest)
    except permiflow.CyclicDependencyError as exc:
        print(f"\nRejected: {exc}")

    print(f"\nAudit trail: {len(audit)} events")
    for message in audit.messages:
        print(f"  {message}")


if __name__ == "__main__":
    main()
