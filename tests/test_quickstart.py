"""Test that the top-level quickstart API works for permiflow."""
from __future__ import annotations


def test_quickstart_import() -> None:
    import permiflow

    assert permiflow.__version__


def test_quickstart_check_access() -> None:
    from permiflow import AccessEvaluator

    evaluator = AccessEvaluator()
    evaluator.add_permission("read", resource="user:123")
    evaluator.create_role("guest", ["user:123:read"])
    assert evaluator.check_access("guest", "user:123:read") is True
    assert evaluator.check_access("guest", "user:123:write") is False


def test_quickstart_public_names_exported() -> None:
    import permiflow

    for name in permiflow.__all__:
        assert hasattr(permiflow, name), name


def test_quickstart_errors_share_base() -> None:
    from permiflow import (
        AlreadyExistsError,
        CyclicDependencyError,
        DepthExceededError,
        InvalidArgumentError,
        PermiflowError,
    )

    for error in (
        AlreadyExistsError,
        CyclicDependencyError,
        DepthExceededError,
        InvalidArgumentError,
    ):
        assert issubclass(error, PermiflowError)
