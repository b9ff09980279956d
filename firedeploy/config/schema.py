"""Configuration schema definitions for firedeploy."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
import logging

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class SsrMode(str, Enum):
    """How the server-rendered part of an application is hosted."""

    NONE = "none"
    FUNCTION = "function"
    CLOUD_RUN = "cloud-run"


class TargetReference(BaseModel):
    """A parsed ``project:configuration`` build target identifier."""

    project: str = Field(..., description="Angular project name")
    configuration: str = Field(..., description="Everything after the first ':'")

    class Config:
        frozen = True

    @classmethod
    def parse(cls, identifier: str) -> "TargetReference":
        """Parse a target identifier such as ``app:build:production``."""
        if not isinstance(identifier, str) or ":" not in identifier:
            raise ConfigurationError(
                f"Invalid build target '{identifier}', expected 'project:configuration'"
            )
        project, configuration = identifier.split(":", 1)
        if not project.strip() or not configuration.strip():
            raise ConfigurationError(
                f"Invalid build target '{identifier}', project and configuration cannot be empty"
            )
        return cls(project=project, configuration=configuration)

    def __str__(self) -> str:
        return f"{self.project}:{self.configuration}"


class BuildTarget(BaseModel):
    """A build target together with its option overrides."""

    ref: TargetReference
    options: Dict[str, Any] = Field(default_factory=dict, description="Build option overrides")

    class Config:
        frozen = True

    @classmethod
    def from_name(cls, name: str, options: Optional[Dict[str, Any]] = None) -> "BuildTarget":
        return cls(ref=TargetReference.parse(name), options=dict(options or {}))

    @property
    def name(self) -> str:
        return str(self.ref)


class BuildOutput(BaseModel):
    """Where a build target writes its artifacts."""

    output_path: str

    class Config:
        frozen = True


class DeploymentOptions(BaseModel):
    """Options of the deploy target, as written in angular.json."""

    ssr: SsrMode = Field(SsrMode.NONE, description="Server-side rendering host")
    preview: bool = Field(False, description="Serve locally and confirm before deploying")
    function_name: Optional[str] = Field(
        None, alias="functionName", description="Cloud Run service name override"
    )
    firebase_project: Optional[str] = Field(
        None, alias="firebaseProject", description="Firebase project id"
    )
    functions_node_version: Optional[int] = Field(
        None, alias="functionsNodeVersion", description="Node.js major version of the runtime"
    )
    region: Optional[str] = Field(None, description="Cloud Functions region")
    functions_runtime_options: Dict[str, Any] = Field(
        default_factory=dict, alias="functionsRuntimeOptions",
        description="Options passed to runWith() in the generated function"
    )

    class Config:
        frozen = True
        populate_by_name = True  # Allow populating by alias or actual field name
        extra = "ignore"

    @field_validator("ssr", mode="before")
    @classmethod
    def normalize_ssr(cls, v):
        """Accept the boolean form used by older workspaces."""
        if v is None or v is False:
            return SsrMode.NONE
        if v is True:
            return SsrMode.FUNCTION
        return v

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DeploymentOptions":
        """Create options from a deploy target's options mapping."""
        try:
            return cls(**(data or {}))
        except ValueError as e:
            raise ConfigurationError(f"Invalid deploy options: {e}") from e


class DeployContext(BaseModel):
    """Resolved, immutable inputs shared by every step of one deploy."""

    workspace_root: Path
    project: str = Field(..., description="Angular project, also the hosting target")
    firebase_project: str
    options: DeploymentOptions
    firebase_token: Optional[str] = Field(None, repr=False)

    class Config:
        frozen = True

    @property
    def hosting_target(self) -> str:
        return f"hosting:{self.project}"
