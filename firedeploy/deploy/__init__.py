"""Deployment pipelines for firedeploy."""

from .cloud_run import deploy_to_cloud_run
from .firebase import (
    DeploymentStatus,
    DeployScope,
    FirebaseTools,
    check_firebase_deps,
    execute_deploy,
)
from .functions import deploy_to_function, function_id_for
from .log_interceptor import EmulatorUrlOpener, LogObserver, NullLogObserver
from .manifest import PackageManifest, PackageRegistry, generate_package_manifest
from .orchestrator import Pipeline, deploy, deploy_to_hosting, select_pipeline
from .preview import confirm_deploy, preview_gate
from .relocator import RelocatedArtifacts, relocate_artifacts, relocation_root
from .runtime import check_runtime_compatibility
from .templates import render_dockerfile, render_entry_point, render_template

__all__ = [
    "deploy_to_cloud_run",
    "DeploymentStatus",
    "DeployScope",
    "FirebaseTools",
    "check_firebase_deps",
    "execute_deploy",
    "deploy_to_function",
    "function_id_for",
    "EmulatorUrlOpener",
    "LogObserver",
    "NullLogObserver",
    "PackageManifest",
    "PackageRegistry",
    "generate_package_manifest",
    "Pipeline",
    "deploy",
    "deploy_to_hosting",
    "select_pipeline",
    "confirm_deploy",
    "preview_gate",
    "RelocatedArtifacts",
    "relocate_artifacts",
    "relocation_root",
    "check_runtime_compatibility",
    "render_dockerfile",
    "render_entry_point",
    "render_template",
]
