# firedeploy/deploy/firebase.py
import asyncio
import signal
import subprocess
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from ..config.schema import DeployContext
from ..errors import ConfigurationError, DeployApiFailure, ExternalProcessFailure
from ..utils.process import ProcessResult, ProcessRunner
from ..utils.security import get_secure_logger
from .log_interceptor import LogObserver

logger = get_secure_logger(__name__)

DEFAULT_EMULATOR_PORT = 5000
DEFAULT_EMULATOR_HOST = "localhost"


class DeploymentStatus(NamedTuple):
    """Result of a deployment pipeline."""
    success: bool
    message: str
    deployed: bool = False
    scope: Optional[str] = None


class DeployScope(NamedTuple):
    """The resources a single deploy call may touch."""
    hosting: str
    function_id: Optional[str] = None

    @property
    def only(self) -> str:
        scope = f"hosting:{self.hosting}"
        if self.function_id:
            scope += f",functions:{self.function_id}"
        return scope


def check_firebase_deps() -> bool:
    """
    Check if the Firebase CLI is installed.

    Returns:
        True if ``firebase --version`` runs, False otherwise
    """
    try:
        result = subprocess.run(['firebase', '--version'], capture_output=True, text=True)
        return result.returncode == 0
    except FileNotFoundError:
        return False


class FirebaseTools:
    """Thin wrapper around the ``firebase`` command line interface."""

    def __init__(self, runner: Optional[ProcessRunner] = None, executable: str = "firebase"):
        self.runner = runner or ProcessRunner()
        self.executable = executable
        self.observers: List[LogObserver] = []

    def add_observer(self, observer: LogObserver) -> None:
        self.observers.append(observer)

    def _notify(self, line: str) -> None:
        for observer in self.observers:
            try:
                observer.on_log(line)
            except Exception as e:
                logger.debug("Log observer failed: %s", e)

    async def _call(self, args: List[str], cwd: Optional[str] = None) -> ProcessResult:
        try:
            return await self.runner.run([self.executable] + args, cwd=cwd, on_line=self._notify)
        except ExternalProcessFailure as e:
            raise DeployApiFailure(str(e)) from e

    async def version(self) -> str:
        result = await self._call(["--version"])
        return result.stdout.strip()

    async def login(self) -> None:
        """Log in interactively."""
        result = await self._call(["login"])
        if result.failed:
            raise DeployApiFailure(f"Firebase login failed: {result.stderr.strip()}")

    async def use(self, firebase_project: str, cwd: Optional[Union[str, Path]] = None) -> None:
        """
        Select the Firebase project for the following commands.

        Raises:
            ConfigurationError: If the project cannot be selected
        """
        try:
            result = await self._call(
                ["use", firebase_project, "--project", firebase_project],
                cwd=str(cwd) if cwd is not None else None,
            )
        except DeployApiFailure as e:
            raise ConfigurationError(f"Cannot select firebase project '{firebase_project}'") from e
        if result.failed:
            raise ConfigurationError(f"Cannot select firebase project '{firebase_project}'")

    async def deploy(
        self,
        only: str,
        cwd: Union[str, Path],
        token: Optional[str] = None,
        non_interactive: bool = True,
    ) -> ProcessResult:
        """
        Deploy the given resources.

        Args:
            only: Comma separated resource list, e.g. ``hosting:app``
            cwd: Directory holding firebase.json
            token: CI token, or None to use the logged in account
            non_interactive: Fail instead of prompting

        Raises:
            DeployApiFailure: If the deploy is rejected
        """
        args = ["deploy", "--only", only]
        if non_interactive:
            args.append("--non-interactive")
        if token:
            args.extend(["--token", token])

        result = await self._call(args, cwd=str(cwd))
        if result.failed:
            detail = result.stderr.strip() or result.stdout.strip()
            raise DeployApiFailure(f"Deploy of '{only}' failed: {detail}")
        return result

    async def serve(
        self,
        targets: List[str],
        port: int = DEFAULT_EMULATOR_PORT,
        host: str = DEFAULT_EMULATOR_HOST,
        cwd: Optional[Union[str, Path]] = None,
        non_interactive: bool = True,
    ) -> ProcessResult:
        """
        Run the local emulator until it is stopped.

        Ctrl+C stops the emulator and returns control to the caller instead
        of aborting the whole deploy.
        """
        args = ["serve", "--port", str(port), "--host", host, "--only", ",".join(targets)]
        if non_interactive:
            args.append("--non-interactive")

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, logger.info, "Stopping the emulator...")
            handles_sigint = True
        except (NotImplementedError, RuntimeError):
            handles_sigint = False

        try:
            result = await self._call(args, cwd=str(cwd) if cwd is not None else None)
        finally:
            if handles_sigint:
                loop.remove_signal_handler(signal.SIGINT)

        if result.failed:
            logger.warning("The emulator exited with status %s", result.returncode)
        return result


async def execute_deploy(
    firebase_tools: FirebaseTools,
    scope: DeployScope,
    context: DeployContext,
) -> ProcessResult:
    """
    Deploy exactly the resources in ``scope``.

    Raises:
        DeployApiFailure: If Firebase rejects the deploy
    """
    logger.info("🚀 Deploying %s", scope.only)
    return await firebase_tools.deploy(
        only=scope.only,
        cwd=context.workspace_root,
        token=context.firebase_token,
        non_interactive=True,
    )
