"""Readers for angular.json and .firebaserc."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Union

from ..errors import ConfigurationError
from .schema import BuildTarget, DeploymentOptions, SsrMode

logger = logging.getLogger(__name__)

WORKSPACE_FILE = "angular.json"
FIREBASE_RC_FILE = ".firebaserc"


class DeployTargetConfig(NamedTuple):
    """Everything the deploy target of one project declares."""
    project: str
    static_target: BuildTarget
    server_target: Optional[BuildTarget]
    prerender_target: Optional[BuildTarget]
    options: DeploymentOptions


def safe_read_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON document, reporting parse errors as configuration errors."""
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Could not locate {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error when parsing {path}: {e}")


def read_workspace(workspace_root: Union[str, Path]) -> Dict[str, Any]:
    """Load angular.json from the workspace root."""
    return safe_read_json(Path(workspace_root) / WORKSPACE_FILE)


def default_project(workspace: Dict[str, Any]) -> str:
    """Pick the project to deploy when none is named."""
    if workspace.get("defaultProject"):
        return workspace["defaultProject"]
    projects = list(workspace.get("projects", {}))
    if len(projects) == 1:
        return projects[0]
    raise ConfigurationError(
        "Cannot determine which project to deploy, please pass --project"
    )


def read_deploy_target(workspace: Dict[str, Any], project: str) -> DeployTargetConfig:
    """
    Read the deploy target of a project.

    Args:
        workspace: Parsed angular.json
        project: Name of the Angular project

    Returns:
        DeployTargetConfig with parsed build targets and deploy options
    """
    projects = workspace.get("projects", {})
    if project not in projects:
        raise ConfigurationError(f"Project '{project}' not found in {WORKSPACE_FILE}")

    architect = projects[project].get("architect", {})
    deploy_options = architect.get("deploy", {}).get("options", {})
    options = DeploymentOptions.from_dict(deploy_options)

    static_target = BuildTarget.from_name(
        deploy_options.get("buildTarget") or f"{project}:build:production"
    )

    server_target = None
    if options.ssr != SsrMode.NONE:
        server_name = deploy_options.get("serverTarget")
        if not server_name:
            raise ConfigurationError(
                f"Project '{project}' enables ssr but has no serverTarget in {WORKSPACE_FILE}"
            )
        server_target = BuildTarget.from_name(server_name)

    prerender_target = None
    if deploy_options.get("prerenderTarget"):
        prerender_target = BuildTarget.from_name(deploy_options["prerenderTarget"])

    return DeployTargetConfig(
        project=project,
        static_target=static_target,
        server_target=server_target,
        prerender_target=prerender_target,
        options=options,
    )


def resolve_firebase_project(
    workspace_root: Union[str, Path],
    project: str,
    options: DeploymentOptions,
) -> str:
    """
    Work out which Firebase project to deploy to.

    The explicit ``firebaseProject`` option wins. Otherwise .firebaserc is
    searched for a Firebase project whose hosting targets include the Angular
    project, falling back to its default project.

    Raises:
        ConfigurationError: If no Firebase project can be determined
    """
    if options.firebase_project:
        return options.firebase_project

    rc_path = Path(workspace_root) / FIREBASE_RC_FILE
    if rc_path.exists():
        firebase_rc = safe_read_json(rc_path)
        for firebase_project, target in (firebase_rc.get("targets") or {}).items():
            hosting = (target or {}).get("hosting") or {}
            if project in hosting:
                logger.debug(f"Found hosting target '{project}' in {firebase_project}")
                return firebase_project
        default = (firebase_rc.get("projects") or {}).get("default")
        if default:
            return default

    raise ConfigurationError(
        f"Cannot find the Firebase project for '{project}', set firebaseProject "
        f"in the deploy options or add it to {FIREBASE_RC_FILE}"
    )
