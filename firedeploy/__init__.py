# firedeploy/__init__.py
"""Build Angular applications and deploy them to Firebase."""

from .config import BuildTarget, DeploymentOptions, SsrMode, TargetReference
from .deploy import DeploymentStatus, FirebaseTools, deploy
from .errors import (
    BuildFailure,
    ConfigurationError,
    DeployApiFailure,
    ExternalProcessFailure,
    FireDeployError,
)

__version__ = "0.1.0"
