"""Top level deploy flow: build, select the pipeline, deploy."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..build.coordinator import BuildSystem, resolve_build_output, run_builds
from ..config.schema import (
    BuildTarget,
    DeployContext,
    DeploymentOptions,
    SsrMode,
    TargetReference,
)
from ..errors import ConfigurationError, DeployApiFailure
from ..utils.filesystem import FileSystemHost
from ..utils.process import ProcessRunner
from ..utils.security import get_secure_logger
from .cloud_run import deploy_to_cloud_run
from .firebase import DeploymentStatus, DeployScope, FirebaseTools, execute_deploy
from .functions import deploy_to_function
from .log_interceptor import LogObserver, NullLogObserver
from .manifest import PackageRegistry
from .preview import ConfirmPrompt, preview_gate

logger = get_secure_logger(__name__)


class Pipeline(str, Enum):
    """Deployment strategies."""

    HOSTING = "hosting"
    FUNCTION = "function"
    CLOUD_RUN = "cloud-run"


def select_pipeline(server_target: Optional[BuildTarget], options: DeploymentOptions) -> Pipeline:
    """Pick the deployment strategy for a request."""
    if server_target is None:
        return Pipeline.HOSTING
    if options.ssr == SsrMode.CLOUD_RUN:
        return Pipeline.CLOUD_RUN
    return Pipeline.FUNCTION


async def deploy_to_hosting(
    firebase_tools: FirebaseTools,
    context: DeployContext,
    confirm: Optional[ConfirmPrompt] = None,
) -> DeploymentStatus:
    """Deploy the static build to Firebase Hosting only."""
    scope = DeployScope(hosting=context.project)

    proceed = await preview_gate(
        firebase_tools,
        context,
        targets=[context.hosting_target],
        message="Would you like to deploy your application to Firebase Hosting?",
        confirm=confirm,
    )
    if not proceed:
        return DeploymentStatus(success=True, message="Deployment cancelled")

    await execute_deploy(firebase_tools, scope, context)
    return DeploymentStatus(
        success=True,
        message=f"Deployed {scope.only}",
        deployed=True,
        scope=scope.only,
    )


async def deploy(
    firebase_tools: FirebaseTools,
    build_system: BuildSystem,
    static_target: BuildTarget,
    server_target: Optional[BuildTarget],
    prerender_target: Optional[BuildTarget],
    firebase_project: str,
    options: DeploymentOptions,
    workspace_root: Union[str, Path],
    firebase_token: Optional[str] = None,
    active_target: Optional[TargetReference] = None,
    fs_host: Optional[FileSystemHost] = None,
    registry: Optional[PackageRegistry] = None,
    runner: Optional[ProcessRunner] = None,
    observer: Optional[LogObserver] = None,
    confirm: Optional[ConfirmPrompt] = None,
) -> DeploymentStatus:
    """
    Build the application and deploy it with the matching strategy.

    Args:
        firebase_tools: Firebase CLI wrapper
        build_system: Build system producing the artifacts
        static_target: Browser build target
        server_target: Server build target, enables server-side rendering
        prerender_target: Prerender target, replaces the other builds
        firebase_project: Firebase project to deploy to
        options: Deploy options
        workspace_root: Workspace directory
        firebase_token: CI token; without one an interactive login runs
        active_target: Target the deploy was invoked for
        fs_host: Filesystem used to stage artifacts
        registry: Installed-version lookup for the package manifest
        runner: Process runner for the Cloud Run steps
        observer: Receives Firebase CLI output
        confirm: Preview confirmation prompt

    Returns:
        DeploymentStatus; rejected Firebase deploys are reported here

    Raises:
        ConfigurationError: Invalid options or workspace, before any side effect
        BuildFailure: A build failed
        ExternalProcessFailure: A Cloud Run step failed
    """
    workspace_root = Path(workspace_root)
    pipeline = select_pipeline(server_target, options)
    logger.debug("Selected the %s pipeline", pipeline.value)

    if pipeline == Pipeline.CLOUD_RUN and options.preview:
        raise ConfigurationError("Cloud Run preview not supported yet.")

    if prerender_target is None and active_target is None:
        raise ConfigurationError("Cannot execute the build target")

    static_output = server_output = server_options = None
    if pipeline != Pipeline.HOSTING:
        static_output = resolve_build_output(build_system, static_target)
        server_output = resolve_build_output(build_system, server_target)
        server_options = build_system.get_target_options(server_target.ref)

    if not firebase_token:
        await firebase_tools.login()

    await run_builds(build_system, active_target, static_target, server_target, prerender_target)

    await firebase_tools.use(firebase_project, cwd=workspace_root)

    context = DeployContext(
        workspace_root=workspace_root,
        project=active_target.project if active_target else static_target.ref.project,
        firebase_project=firebase_project,
        options=options,
        firebase_token=firebase_token,
    )

    try:
        firebase_tools.add_observer(observer or NullLogObserver())
    except Exception as e:
        logger.debug("Could not install the log observer: %s", e)

    try:
        if pipeline == Pipeline.CLOUD_RUN:
            return await deploy_to_cloud_run(
                firebase_tools,
                context,
                static_output,
                server_output,
                server_options=server_options,
                fs_host=fs_host,
                registry=registry,
                runner=runner,
            )
        if pipeline == Pipeline.FUNCTION:
            return await deploy_to_function(
                firebase_tools,
                context,
                static_target,
                static_output,
                server_output,
                server_options=server_options,
                fs_host=fs_host,
                registry=registry,
                confirm=confirm,
            )
        return await deploy_to_hosting(firebase_tools, context, confirm=confirm)
    except DeployApiFailure as e:
        logger.error("%s", e)
        return DeploymentStatus(success=False, message=str(e))
