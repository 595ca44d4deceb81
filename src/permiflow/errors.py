"""Exception hierarchy for permiflow.

Every error raised by the engine derives from :class:`PermiflowError` so
callers can catch the whole family at once.  All of them are raised
synchronously at the call that caused them; none are transient.

Example
-------
>>> from permiflow.errors import CyclicDependencyError, PermiflowError
>>> issubclass(CyclicDependencyError, PermiflowError)
True
"""
from __future__ import annotations


class PermiflowError(Exception):
    """Base class for all permiflow errors."""


class InvalidArgumentError(PermiflowError, ValueError):
    """Raised when a required name is empty or missing."""


class AlreadyExistsError(PermiflowError):
    """Raised when creating a role whose name is already registered.

    Attributes
    ----------
    name:
        The duplicate role name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Role {name} already exists")


class CyclicDependencyError(PermiflowError):
    """Raised when an inheritance edge would introduce a cycle.

    Attributes
    ----------
    role_name:
        The role that was being given a new parent.
    parent_name:
        The parent role that was rejected.
    """

    def __init__(self, role_name: str, parent_name: str) -> None:
        self.role_name = role_name
        self.parent_name = parent_name
        super().__init__(
            f"Role hierarchy cannot have cycles: '{role_name}' -> '{parent_name}'"
        )


class DepthExceededError(PermiflowError):
    """Raised when an inheritance edge is added with a depth beyond the bound.

    Attributes
    ----------
    depth:
        The depth value supplied by the caller.
    max_depth:
        The fixed bound it was compared against.
    """

    def __init__(self, depth: int, max_depth: int) -> None:
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Exceeded maximum role inheritance depth ({depth} > {max_depth})"
        )


class ConfigError(PermiflowError, ValueError):
    """Raised when a permiflow YAML config is malformed or inconsistent.

    Attributes
    ----------
    config_path:
        The path of the config that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")
