"""Warn when the local Node.js does not match the deploy runtime."""

import logging
import subprocess
from typing import Optional

from packaging.version import InvalidVersion, Version

from .manifest import PackageManifest

logger = logging.getLogger(__name__)


def local_node_version() -> Optional[str]:
    """Return the version reported by ``node --version``, without the ``v``."""
    try:
        result = subprocess.run(["node", "--version"], capture_output=True, text=True)
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip().lstrip("v") or None


def satisfies_major(version: str, major: int) -> bool:
    """Check ``version`` against the caret range ``^<major>.0.0``."""
    try:
        parsed = Version(version)
    except InvalidVersion:
        return False
    return parsed.major == major and parsed >= Version(f"{major}.0.0")


def check_runtime_compatibility(
    manifest: PackageManifest,
    runtime_name: str,
    local_version: Optional[str] = None,
) -> bool:
    """
    Compare the local Node.js version with the manifest's engine.

    Never raises; a mismatch is only reported.

    Args:
        manifest: Generated package manifest
        runtime_name: Human readable name of the target runtime
        local_version: Local Node.js version (queried when omitted)

    Returns:
        True if the local version satisfies the engine constraint
    """
    if local_version is None:
        local_version = local_node_version()

    if local_version is None:
        logger.warning(
            f"⚠️ Could not determine your Node.js version, the {runtime_name} "
            f"runtime uses Node.js {manifest.node_version}."
        )
        return False

    if not satisfies_major(local_version, manifest.node_version):
        logger.warning(
            f"⚠️ Your Node.js version ({local_version}) does not match the "
            f"{runtime_name} runtime ({manifest.node_version})."
        )
        return False

    return True
