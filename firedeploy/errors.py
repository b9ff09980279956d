"""Error types raised by firedeploy."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .utils.process import ProcessResult


class FireDeployError(Exception):
    """Base class for all firedeploy errors."""
    pass


class ConfigurationError(FireDeployError):
    """The workspace or deploy options cannot be used as given."""
    pass


class BuildFailure(FireDeployError):
    """A build target failed."""

    def __init__(self, target: str, message: str):
        super().__init__(f"Build of '{target}' failed: {message}")
        self.target = target


class ExternalProcessFailure(FireDeployError):
    """An external command exited with a failure status."""

    def __init__(self, command: List[str], result: Optional["ProcessResult"] = None,
                 message: Optional[str] = None):
        self.command = list(command)
        self.result = result
        if message is None:
            detail = result.stderr.strip() if result is not None else ""
            message = f"Command '{self.command[0]}' failed"
            if result is not None:
                message += f" with exit status {result.returncode}"
            if detail:
                message += f": {detail}"
        super().__init__(message)


class DeployApiFailure(FireDeployError):
    """The Firebase deployment API rejected a call."""
    pass
