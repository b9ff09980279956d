"""Configuration management for firedeploy."""

from .schema import (
    SsrMode,
    TargetReference,
    BuildTarget,
    BuildOutput,
    DeploymentOptions,
    DeployContext,
)
from .workspace import (
    DeployTargetConfig,
    safe_read_json,
    read_workspace,
    default_project,
    read_deploy_target,
    resolve_firebase_project,
)

__all__ = [
    "SsrMode",
    "TargetReference",
    "BuildTarget",
    "BuildOutput",
    "DeploymentOptions",
    "DeployContext",
    "DeployTargetConfig",
    "safe_read_json",
    "read_workspace",
    "default_project",
    "read_deploy_target",
    "resolve_firebase_project",
]
