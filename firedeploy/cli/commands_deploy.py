"""Deployment commands for the firedeploy CLI."""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click

from ..build.angular import AngularWorkspace
from ..config import (
    TargetReference,
    default_project,
    read_deploy_target,
    read_workspace,
    resolve_firebase_project,
)
from ..deploy.firebase import FirebaseTools, check_firebase_deps
from ..deploy.log_interceptor import EmulatorUrlOpener
from ..deploy.orchestrator import deploy
from ..errors import FireDeployError
from ..utils.environment import get_firebase_token, load_env_file

logger = logging.getLogger(__name__)


@click.command(name="deploy")
@click.option(
    "--project",
    help="Angular project to deploy (defaults to the workspace default)",
)
@click.option(
    "--workspace-root",
    default=".",
    help="Directory containing angular.json",
    show_default=True,
)
@click.option(
    "--env-file",
    default=".env",
    help="Path to environment file",
    show_default=True,
)
@click.option(
    "--token",
    help="Firebase CI token (defaults to FIREBASE_TOKEN)",
)
@click.option(
    "--preview",
    is_flag=True,
    help="Serve locally and confirm before deploying",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
def deploy_command(
    project: Optional[str],
    workspace_root: str,
    env_file: str,
    token: Optional[str] = None,
    preview: bool = False,
    verbose: bool = False,
):
    """Build an Angular project and deploy it to Firebase."""
    if verbose:
        logging.getLogger("firedeploy").setLevel(logging.DEBUG)

    root = Path(workspace_root)

    try:
        env_vars = load_env_file(os.path.join(workspace_root, env_file))
    except ValueError as e:
        logger.error(f"Error loading environment: {e}")
        sys.exit(1)

    if not check_firebase_deps():
        logger.error("Firebase CLI not found. Please install it:")
        logger.error("npm install -g firebase-tools")
        sys.exit(1)

    try:
        workspace = read_workspace(root)
        project = project or default_project(workspace)
        target_config = read_deploy_target(workspace, project)

        options = target_config.options
        if preview:
            options = options.model_copy(update={"preview": True})

        firebase_project = resolve_firebase_project(root, project, options)
        logger.info(f"Deploying {project} to Firebase project {firebase_project}")

        result = asyncio.run(deploy(
            FirebaseTools(),
            AngularWorkspace(root, workspace=workspace),
            target_config.static_target,
            target_config.server_target,
            target_config.prerender_target,
            firebase_project,
            options,
            root,
            firebase_token=token or get_firebase_token(env_vars),
            active_target=TargetReference(project=project, configuration="deploy"),
            observer=EmulatorUrlOpener(),
        ))
    except FireDeployError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if not result.success:
        logger.error(f"❌ {result.message}")
        sys.exit(1)

    logger.info(f"✅ {result.message}")
