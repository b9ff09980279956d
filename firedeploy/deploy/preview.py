"""Local preview with a confirmation before the real deploy."""

import asyncio
import logging
from typing import Callable, List, Optional

from ..config.schema import DeployContext
from ..utils.environment import _safe_import_inquirer
from .firebase import DEFAULT_EMULATOR_HOST, DEFAULT_EMULATOR_PORT, FirebaseTools

logger = logging.getLogger(__name__)

ConfirmPrompt = Callable[[str], bool]


def confirm_deploy(message: str) -> bool:
    """Ask a yes/no question, defaulting to no."""
    inquirer = _safe_import_inquirer()
    answers = inquirer.prompt([
        inquirer.Confirm("deploy_project", message=message, default=False)
    ])
    return bool(answers and answers.get("deploy_project"))


async def preview_gate(
    firebase_tools: FirebaseTools,
    context: DeployContext,
    targets: List[str],
    message: str,
    confirm: Optional[ConfirmPrompt] = None,
) -> bool:
    """
    Serve the deploy locally, then ask whether to deploy for real.

    Does nothing unless the preview option is set.

    Args:
        firebase_tools: Firebase CLI wrapper
        context: Deploy context
        targets: Emulator targets, e.g. ``["hosting:app"]``
        message: Confirmation question
        confirm: Yes/no prompt (defaults to an inquirer prompt)

    Returns:
        True if the deploy should go ahead
    """
    if not context.options.preview:
        return True

    logger.info(f"👀 Serving a preview on http://{DEFAULT_EMULATOR_HOST}:{DEFAULT_EMULATOR_PORT}")
    await firebase_tools.serve(
        targets=targets,
        port=DEFAULT_EMULATOR_PORT,
        host=DEFAULT_EMULATOR_HOST,
        cwd=context.workspace_root,
        non_interactive=True,
    )

    confirm = confirm or confirm_deploy
    # The prompt blocks on stdin
    loop = asyncio.get_running_loop()
    if not await loop.run_in_executor(None, confirm, message):
        logger.info("Deployment cancelled.")
        return False
    return True
