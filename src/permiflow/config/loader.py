"""YAML configuration loader with Pydantic v2 validation.

A permiflow config declares the permissions, roles, inheritance edges and
audit settings of one :class:`~permiflow.evaluator.AccessEvaluator`.

Schema
------
::

    version: "1"
    audit:
      enabled: true
      log_path: ./permiflow_audit.jsonl
    permissions:
      - name: read
        resource: "user:123"
      - name: write
        resource: "user:123"
    roles:
      - name: admin
        permissions: ["user:123:read", "user:123:write"]
      - name: guest
        permissions: ["user:123:read"]
        deny: ["user:123:delete"]
        inherits: [admin]
        active: true

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load(Path("permiflow.yaml"))
>>> evaluator = build_evaluator(config)
>>> evaluator.check_access("guest", "user:123:write")
True
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from permiflow.audit.logger import AuditLogger
from permiflow.audit.sink import AuditSink
from permiflow.errors import ConfigError
from permiflow.evaluator import AccessEvaluator

logger = logging.getLogger(__name__)


class AuditConfig(BaseModel):
    """Configuration for the JSONL audit sink."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./permiflow_audit.jsonl"))
    session_id: str | None = Field(default=None)


class PermissionConfig(BaseModel):
    """One permission definition."""

    name: str = Field(min_length=1)
    resource: str | None = Field(default=None)
    description: str | None = Field(default=None)
    deny: bool | None = Field(default=None)


class RoleConfig(BaseModel):
    """One role definition, including its parents and deny set."""

    name: str = Field(min_length=1)
    permissions: list[str] = Field(default_factory=list)
    deny: list[str] = Field(default_factory=list)
    inherits: list[str] = Field(default_factory=list)
    active: bool = Field(default=True)


class PermiflowConfig(BaseModel):
    """Top-level permiflow configuration schema.

    All sections are optional.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    audit: AuditConfig = Field(default_factory=AuditConfig)
    permissions: list[PermissionConfig] = Field(default_factory=list)
    roles: list[RoleConfig] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: object) -> str:
        return str(value)

    @field_validator("roles")
    @classmethod
    def role_names_unique(cls, roles: list[RoleConfig]) -> list[RoleConfig]:
        seen: set[str] = set()
        for role in roles:
            if role.name in seen:
                raise ValueError(f"Duplicate role name '{role.name}'")
            seen.add(role.name)
        return roles


class ConfigLoader:
    """Loads and validates permiflow YAML configuration."""

    def load(self, config_path: Path) -> PermiflowConfig:
        """Load and validate a YAML config file.

        Raises
        ------
        FileNotFoundError
            When the file does not exist.
        ConfigError
            When the YAML cannot be parsed or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Permiflow config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            text = fh.read()
        return self.load_string(text, config_path=str(config_path))

    def load_string(
        self,
        yaml_content: str,
        config_path: str | None = None,
    ) -> PermiflowConfig:
        """Load and validate a YAML string."""
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML: {exc}", config_path) from exc

        if not isinstance(raw, dict):
            raise ConfigError("Permiflow config must be a YAML mapping.", config_path)

        try:
            return PermiflowConfig.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config: {exc}", config_path) from exc

    def defaults(self) -> PermiflowConfig:
        """Return an empty configuration with all defaults applied."""
        return PermiflowConfig()


def build_evaluator(
    config: PermiflowConfig,
    audit_sink: AuditSink | None = None,
) -> AccessEvaluator:
    """Build an :class:`AccessEvaluator` from a validated config.

    Permissions are registered first, then every role is created, then
    inheritance edges are added in declaration order, and finally deny
    sets and activation flags are applied.

    Parameters
    ----------
    config:
        Validated configuration.
    audit_sink:
        Sink to use.  When omitted and ``config.audit.enabled`` is true, an
        :class:`AuditLogger` writing to ``config.audit.log_path`` is used.

    Raises
    ------
    ConfigError
        If a role inherits from a role that is not declared.
    CyclicDependencyError
        If the declared inheritance contains a cycle.
    """
    if audit_sink is None and config.audit.enabled:
        audit_sink = AuditLogger(config.audit.log_path, session_id=config.audit.session_id)

    evaluator = AccessEvaluator(audit_sink=audit_sink)
    evaluator.bulk_add_permissions(p.model_dump() for p in config.permissions)
    created = evaluator.bulk_create_roles(
        {"name": r.name, "permissions": r.permissions} for r in config.roles
    )
    roles = {role.name: role for role in created}

    for role_config in config.roles:
        role = roles[role_config.name]
        for parent_name in role_config.inherits:
            if parent_name not in roles:
                raise ConfigError(
                    f"Role '{role_config.name}' inherits from unknown role '{parent_name}'"
                )
            role.add_inherited_role(roles[parent_name])

    for role_config in config.roles:
        role = roles[role_config.name]
        for key in role_config.deny:
            role.deny_permission(key)
        if not role_config.active:
            role.deactivate()

    logger.info(
        "Built evaluator with %d permissions and %d roles",
        len(evaluator.registry),
        len(evaluator.role_names),
    )
    return evaluator


def load_evaluator(
    config_path: Path,
    audit_sink: AuditSink | None = None,
) -> AccessEvaluator:
    """Load a config file and build its evaluator in one step."""
    return build_evaluator(ConfigLoader().load(config_path), audit_sink=audit_sink)
