"""Restaging of build outputs into the directory that gets deployed."""

import logging
import posixpath
from typing import NamedTuple

from ..config.schema import SsrMode
from ..errors import ConfigurationError
from ..utils.filesystem import FileSystemHost

logger = logging.getLogger(__name__)

STATIC_RENDERER_SEGMENT = "browser"
RELOCATION_SEGMENTS = {
    SsrMode.FUNCTION: "functions",
    SsrMode.CLOUD_RUN: "run",
}

ENTRY_DOCUMENT = "index.html"
ENTRY_DOCUMENT_BACKUP = "index.original.html"


class RelocatedArtifacts(NamedTuple):
    """Layout of a relocated deploy directory."""
    root: str
    static_out: str
    server_out: str


def _join(*parts: str) -> str:
    return posixpath.normpath("/".join(parts))


def relocation_root(static_out: str, mode: SsrMode) -> str:
    """
    Compute the deploy directory for a static output path.

    The trailing ``browser`` segment of the static output is swapped for a
    mode specific segment, so ``dist/app/browser`` becomes
    ``dist/app/functions`` or ``dist/app/run``.

    Raises:
        ConfigurationError: If the mode does not relocate, or the static
            output does not end with the ``browser`` segment
    """
    if mode not in RELOCATION_SEGMENTS:
        raise ConfigurationError(f"Artifacts are not relocated for ssr mode '{mode.value}'")

    head, _, tail = static_out.rstrip("/").rpartition("/")
    if tail != STATIC_RENDERER_SEGMENT:
        raise ConfigurationError(
            f"Expected the static output path '{static_out}' to end with "
            f"'/{STATIC_RENDERER_SEGMENT}'"
        )
    segment = RELOCATION_SEGMENTS[mode]
    return f"{head}/{segment}" if head else segment


def relocate_artifacts(
    fs_host: FileSystemHost,
    static_out: str,
    server_out: str,
    mode: SsrMode,
) -> RelocatedArtifacts:
    """
    Copy the static and server outputs into a fresh deploy directory.

    The server bundle expects the browser output at its original relative
    path from the directory it runs in, so both outputs are nested under the
    new root with their full relative paths. The entry document is then moved
    aside so the server renders the original URL while still being able to
    read the shell document.

    Args:
        fs_host: Filesystem to operate on
        static_out: Output path of the browser build
        server_out: Output path of the server build
        mode: ``function`` or ``cloud-run``

    Returns:
        RelocatedArtifacts describing the new layout
    """
    root = relocation_root(static_out, mode)
    new_static_out = _join(root, static_out)
    new_server_out = _join(root, server_out)

    fs_host.remove(root)
    fs_host.copy(static_out, new_static_out)
    fs_host.copy(server_out, new_server_out)
    logger.info(f"Staged build output in {root}")

    try:
        fs_host.rename(
            _join(new_static_out, ENTRY_DOCUMENT),
            _join(new_static_out, ENTRY_DOCUMENT_BACKUP),
        )
    except OSError as e:
        logger.debug(f"Could not rename {ENTRY_DOCUMENT}: {e}")

    return RelocatedArtifacts(root=root, static_out=new_static_out, server_out=new_server_out)
