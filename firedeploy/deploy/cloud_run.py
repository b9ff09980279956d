"""Hosting + Cloud Run deploys."""

import posixpath
from typing import Any, List, Mapping, Optional

from ..config.schema import BuildOutput, DeployContext, SsrMode
from ..errors import ConfigurationError
from ..utils.filesystem import FileSystemHost
from ..utils.process import ProcessRunner
from ..utils.security import get_secure_logger
from .firebase import DeploymentStatus, DeployScope, FirebaseTools, execute_deploy
from .manifest import PackageRegistry, generate_package_manifest
from .relocator import relocate_artifacts
from .runtime import check_runtime_compatibility
from .templates import DEFAULT_FUNCTION_NAME, render_dockerfile, render_package_json

logger = get_secure_logger(__name__)

CLOUD_RUN_REGION = "us-central1"
CLOUD_RUN_PLATFORM = "managed"


def service_id_for(context: DeployContext) -> str:
    return context.options.function_name or DEFAULT_FUNCTION_NAME


def image_reference(firebase_project: str, service_id: str) -> str:
    return f"gcr.io/{firebase_project}/{service_id}"


def build_submit_command(root: str, firebase_project: str, service_id: str) -> List[str]:
    return [
        "gcloud", "builds", "submit", root,
        "--tag", image_reference(firebase_project, service_id),
        "--project", firebase_project,
        "--quiet",
    ]


def run_deploy_command(firebase_project: str, service_id: str) -> List[str]:
    return [
        "gcloud", "run", "deploy", service_id,
        "--image", image_reference(firebase_project, service_id),
        "--project", firebase_project,
        "--platform", CLOUD_RUN_PLATFORM,
        "--allow-unauthenticated",
        f"--region={CLOUD_RUN_REGION}",
        "--quiet",
    ]


async def deploy_to_cloud_run(
    firebase_tools: FirebaseTools,
    context: DeployContext,
    static_output: BuildOutput,
    server_output: BuildOutput,
    server_options: Optional[Mapping[str, Any]] = None,
    fs_host: Optional[FileSystemHost] = None,
    registry: Optional[PackageRegistry] = None,
    runner: Optional[ProcessRunner] = None,
    local_node_version: Optional[str] = None,
) -> DeploymentStatus:
    """
    Build a container image of the server bundle, run it on Cloud Run and
    deploy the static files to Hosting.

    The container serves the dynamic part directly, so the final Firebase
    deploy only touches the hosting target.

    Raises:
        ConfigurationError: If a preview is requested
        ExternalProcessFailure: If a gcloud step fails; later steps are skipped
        DeployApiFailure: If the hosting deploy is rejected
    """
    if context.options.preview:
        raise ConfigurationError("Cloud Run preview not supported yet.")

    fs_host = fs_host or FileSystemHost(context.workspace_root)
    runner = runner or ProcessRunner()
    service_id = service_id_for(context)

    artifacts = relocate_artifacts(
        fs_host, static_output.output_path, server_output.output_path, SsrMode.CLOUD_RUN
    )

    manifest = generate_package_manifest(
        SsrMode.CLOUD_RUN,
        context.options,
        context.workspace_root,
        server_options=server_options,
        registry=registry,
        main=posixpath.join(server_output.output_path, "main.js"),
    )
    check_runtime_compatibility(manifest, "Cloud Run", local_node_version)

    fs_host.write(
        posixpath.join(artifacts.root, "package.json"),
        render_package_json(manifest.to_package_json()),
    )
    fs_host.write(
        posixpath.join(artifacts.root, "Dockerfile"),
        render_dockerfile(context.options),
    )

    logger.info("📦 Deploying to Cloud Run")
    cwd = str(context.workspace_root)
    await runner.run_checked(
        build_submit_command(artifacts.root, context.firebase_project, service_id), cwd=cwd
    )
    await runner.run_checked(
        run_deploy_command(context.firebase_project, service_id), cwd=cwd
    )

    scope = DeployScope(hosting=context.project)
    await execute_deploy(firebase_tools, scope, context)
    return DeploymentStatus(
        success=True,
        message=f"Deployed {scope.only} and Cloud Run service {service_id}",
        deployed=True,
        scope=scope.only,
    )
