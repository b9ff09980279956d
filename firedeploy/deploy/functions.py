"""Hosting + Cloud Functions deploys."""

import logging
import posixpath
from typing import Any, Mapping, Optional

from ..config.schema import BuildOutput, BuildTarget, DeployContext, SsrMode
from ..utils.filesystem import FileSystemHost
from .firebase import DeploymentStatus, DeployScope, FirebaseTools, execute_deploy
from .manifest import PackageRegistry, generate_package_manifest
from .preview import ConfirmPrompt, preview_gate
from .relocator import relocate_artifacts
from .runtime import check_runtime_compatibility
from .templates import render_entry_point, render_package_json

logger = logging.getLogger(__name__)

FUNCTION_ID_PREFIX = "ssr_"


def function_id_for(static_target: BuildTarget) -> str:
    """Name of the Cloud Function serving a project, e.g. ``ssr_app``."""
    return f"{FUNCTION_ID_PREFIX}{static_target.ref.project}"


async def deploy_to_function(
    firebase_tools: FirebaseTools,
    context: DeployContext,
    static_target: BuildTarget,
    static_output: BuildOutput,
    server_output: BuildOutput,
    server_options: Optional[Mapping[str, Any]] = None,
    fs_host: Optional[FileSystemHost] = None,
    registry: Optional[PackageRegistry] = None,
    confirm: Optional[ConfirmPrompt] = None,
    local_node_version: Optional[str] = None,
) -> DeploymentStatus:
    """
    Deploy static files to Hosting and the server bundle as a Cloud Function.

    Args:
        firebase_tools: Firebase CLI wrapper
        context: Deploy context
        static_target: Browser build target, names the function
        static_output: Output of the browser build
        server_output: Output of the server build
        server_options: Options of the server build target
        fs_host: Filesystem (defaults to the workspace root)
        registry: Installed-version lookup
        confirm: Preview confirmation prompt
        local_node_version: Local Node.js version, queried when omitted

    Returns:
        DeploymentStatus
    """
    fs_host = fs_host or FileSystemHost(context.workspace_root)
    function_id = function_id_for(static_target)

    artifacts = relocate_artifacts(
        fs_host, static_output.output_path, server_output.output_path, SsrMode.FUNCTION
    )

    manifest = generate_package_manifest(
        SsrMode.FUNCTION,
        context.options,
        context.workspace_root,
        server_options=server_options,
        registry=registry,
    )
    check_runtime_compatibility(manifest, "Firebase Functions", local_node_version)

    fs_host.write(
        posixpath.join(artifacts.root, "package.json"),
        render_package_json(manifest.to_package_json()),
    )
    fs_host.write(
        posixpath.join(artifacts.root, "index.js"),
        render_entry_point(server_output.output_path, context.options, function_id),
    )

    scope = DeployScope(hosting=context.project, function_id=function_id)

    proceed = await preview_gate(
        firebase_tools,
        context,
        targets=[context.hosting_target, f"functions:{function_id}"],
        message="Would you like to deploy your application to Firebase Hosting & Cloud Functions?",
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
