"""Scheduling of the builds that produce the deploy artifacts."""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from ..config.schema import BuildOutput, BuildTarget, TargetReference
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class BuildSystem(Protocol):
    """The external build system the deploy artifacts come from."""

    async def schedule_target(self, ref: TargetReference, options: Dict[str, Any]) -> None:
        """Run a build target to completion, raising BuildFailure on error."""
        ...

    def get_target_options(self, ref: TargetReference) -> Dict[str, Any]:
        """Return the resolved options of a build target."""
        ...


def resolve_build_output(build_system: BuildSystem, target: BuildTarget) -> BuildOutput:
    """
    Look up where a build target writes its output.

    Raises:
        ConfigurationError: If the target has no usable outputPath option
    """
    options = build_system.get_target_options(target.ref)
    output_path = options.get("outputPath")
    if not output_path or not isinstance(output_path, str):
        raise ConfigurationError(
            f"Cannot read the output path option of the Angular project '{target.name}' in angular.json"
        )
    return BuildOutput(output_path=output_path)


async def run_builds(
    build_system: BuildSystem,
    active_target: Optional[TargetReference],
    static_target: BuildTarget,
    server_target: Optional[BuildTarget] = None,
    prerender_target: Optional[BuildTarget] = None,
) -> None:
    """
    Build everything the deploy needs.

    A prerender target replaces the static and server builds entirely.
    Otherwise the static and server builds run concurrently.

    Args:
        build_system: Build system to schedule targets on
        active_target: Target the deploy was invoked for, if any
        static_target: Browser build
        server_target: Server build, for server-side rendering
        prerender_target: Prerender build

    Raises:
        ConfigurationError: No prerender target and no active target
        BuildFailure: Propagated unchanged from the build system
    """
    if prerender_target is not None:
        logger.info(f"📦 Prerendering \"{prerender_target.name}\"")
        await build_system.schedule_target(prerender_target.ref, prerender_target.options)
        return

    if active_target is None:
        raise ConfigurationError("Cannot execute the build target")

    logger.info(f"📦 Building \"{active_target.project}\"")

    builds = [asyncio.ensure_future(
        build_system.schedule_target(static_target.ref, static_target.options)
    )]
    if server_target is not None:
        builds.append(asyncio.ensure_future(
            build_system.schedule_target(server_target.ref, server_target.options)
        ))

    try:
        await asyncio.gather(*builds)
    except BaseException:
        for build in builds:
            build.cancel()
        await asyncio.gather(*builds, return_exceptions=True)
        raise
