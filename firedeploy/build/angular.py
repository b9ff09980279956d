"""Angular CLI workspace as the build system."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config.schema import TargetReference
from ..config.workspace import read_workspace
from ..errors import BuildFailure, ConfigurationError, ExternalProcessFailure
from ..utils.process import ProcessRunner

logger = logging.getLogger(__name__)


def _format_option(key: str, value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"--{key}={value}"


class AngularWorkspace:
    """Resolve and run architect targets of an Angular workspace."""

    def __init__(
        self,
        workspace_root: Union[str, Path],
        runner: Optional[ProcessRunner] = None,
        workspace: Optional[Dict[str, Any]] = None,
    ):
        self.workspace_root = Path(workspace_root)
        self.runner = runner or ProcessRunner()
        self.workspace = workspace if workspace is not None else read_workspace(self.workspace_root)

    def _architect_target(self, ref: TargetReference) -> Dict[str, Any]:
        target_name = ref.configuration.split(":", 1)[0]
        project = self.workspace.get("projects", {}).get(ref.project)
        if project is None:
            raise ConfigurationError(f"Project '{ref.project}' not found in angular.json")
        target = project.get("architect", {}).get(target_name)
        if target is None:
            raise ConfigurationError(
                f"Target '{target_name}' not found for project '{ref.project}' in angular.json"
            )
        return target

    def get_target_options(self, ref: TargetReference) -> Dict[str, Any]:
        """
        Return a target's options with its named configurations applied.

        Args:
            ref: Target such as ``app:build:production``

        Returns:
            Merged options dictionary
        """
        target = self._architect_target(ref)
        options = dict(target.get("options", {}))

        parts = ref.configuration.split(":", 1)
        if len(parts) == 2:
            configurations = target.get("configurations", {})
            for name in parts[1].split(","):
                name = name.strip()
                if name not in configurations:
                    raise ConfigurationError(
                        f"Configuration '{name}' not found for target '{ref}'"
                    )
                options.update(configurations[name])

        return options

    def build_command(self, ref: TargetReference, options: Dict[str, Any]) -> List[str]:
        command = ["npx", "ng", "run", str(ref)]
        command.extend(_format_option(key, value) for key, value in options.items())
        return command

    async def schedule_target(self, ref: TargetReference, options: Dict[str, Any]) -> None:
        """
        Run a target with ``ng run`` and wait for it.

        Raises:
            BuildFailure: If the build cannot start or exits with an error
        """
        command = self.build_command(ref, options)
        try:
            result = await self.runner.run(command, cwd=str(self.workspace_root))
        except ExternalProcessFailure as e:
            raise BuildFailure(str(ref), str(e)) from e

        if result.failed:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise BuildFailure(str(ref), detail)

        logger.info(f"Built {ref}")
