"""Generation of the package.json deployed next to the server bundle."""

import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..config.schema import DeploymentOptions, SsrMode
from ..config.workspace import safe_read_json

logger = logging.getLogger(__name__)

DEFAULT_NODE_VERSION = 18
UNPINNED_VERSION = "latest"

FUNCTION_DEPENDENCIES = ("firebase-admin", "firebase-functions")
FUNCTION_DEV_DEPENDENCIES = ("firebase-functions-test",)

# Local builds of the library reference a path that only exists on the
# developer's machine; the release pipeline rewrites the placeholder.
LOCAL_DEVELOPMENT_REFERENCES = {
    "@angular/fire": ("file:../angularfire/dist/packages-dist", "ANGULARFIRE2_VERSION"),
}


class PackageRegistry:
    """Look up versions of locally installed npm packages."""

    def __init__(self, cwd: Optional[Union[str, Path]] = None):
        self.cwd = str(cwd) if cwd is not None else None

    def installed_version(self, name: str) -> Optional[str]:
        """
        Return the installed version of a package, or None if unknown.

        Args:
            name: npm package name

        Returns:
            Version string such as ``"11.2.0"``
        """
        try:
            result = subprocess.run(
                ["npm", "list", name],
                capture_output=True,
                text=True,
                check=False,
                cwd=self.cwd,
            )
        except OSError as e:
            logger.debug(f"npm list {name} failed: {e}")
            return None

        match = re.search(rf" {re.escape(name)}@(\S+)", result.stdout)
        if not match:
            return None
        return match.group(1)


class PackageManifest(BaseModel):
    """The runtime package.json of a deployed server bundle."""

    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(default_factory=dict)
    node_version: int = Field(DEFAULT_NODE_VERSION, description="Node.js major version")
    main: Optional[str] = Field(None, description="Entry point, defaults to index.js")

    @property
    def engine_constraint(self) -> str:
        return f"^{self.node_version}.0.0"

    def to_package_json(self) -> Dict[str, Any]:
        """Return the document written to package.json."""
        return {
            "name": "functions",
            "description": "Angular Universal Application",
            "main": self.main or "index.js",
            "scripts": {
                "start": f"node {self.main}" if self.main else "firebase functions:shell",
            },
            "engines": {
                "node": str(self.node_version),
            },
            "dependencies": dict(self.dependencies),
            "devDependencies": dict(self.dev_dependencies),
            "private": True,
        }


def _resolve_versions(registry: PackageRegistry, versions: Dict[str, str]) -> None:
    for name in list(versions):
        version = registry.installed_version(name)
        if version:
            versions[name] = version
        else:
            logger.debug(f"Could not resolve the installed version of {name}")


def generate_package_manifest(
    mode: SsrMode,
    options: DeploymentOptions,
    workspace_root: Union[str, Path],
    server_options: Optional[Mapping[str, Any]] = None,
    registry: Optional[PackageRegistry] = None,
    main: Optional[str] = None,
) -> PackageManifest:
    """
    Build the package manifest for a server deploy.

    Cloud Run images install nothing beyond what the bundle declares, while
    Cloud Functions need the Firebase runtime packages. When the server
    build does not bundle its dependencies the workspace's own dependencies
    are carried over as pinned; otherwise only the declared external
    dependencies are added.

    Args:
        mode: ``function`` or ``cloud-run``
        options: Deploy options
        workspace_root: Directory holding the workspace package.json
        server_options: Options of the server build target
        registry: Installed-version lookup (defaults to npm)
        main: Entry point of the bundle, if not index.js

    Returns:
        PackageManifest
    """
    registry = registry or PackageRegistry(workspace_root)

    if mode == SsrMode.CLOUD_RUN:
        dependencies: Dict[str, str] = {}
        dev_dependencies: Dict[str, str] = {}
    else:
        dependencies = {name: UNPINNED_VERSION for name in FUNCTION_DEPENDENCIES}
        dev_dependencies = {name: UNPINNED_VERSION for name in FUNCTION_DEV_DEPENDENCIES}
        _resolve_versions(registry, dependencies)
        _resolve_versions(registry, dev_dependencies)

    if server_options is not None:
        external_dependencies = server_options.get("externalDependencies") or []
        if server_options.get("bundleDependencies") is False:
            package_json_path = Path(workspace_root) / "package.json"
            if package_json_path.exists():
                package_json = safe_read_json(package_json_path)
                dependencies.update(package_json.get("dependencies") or {})
            else:
                logger.warning(f"No package.json found in {workspace_root}")
        else:
            for name in external_dependencies:
                version = registry.installed_version(name)
                if version:
                    dependencies[name] = version

    for name, (local_reference, placeholder) in LOCAL_DEVELOPMENT_REFERENCES.items():
        if dependencies.get(name) == local_reference:
            dependencies[name] = placeholder

    return PackageManifest(
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        node_version=options.functions_node_version or DEFAULT_NODE_VERSION,
        main=main,
    )
