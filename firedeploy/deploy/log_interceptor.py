"""Observers for output of the Firebase CLI."""

import logging
import re
from typing import Callable, Optional

import click

logger = logging.getLogger(__name__)

ANSI_ESCAPE = re.compile(r"\x1B\[([0-9]{1,2}(;[0-9]{1,2})?)?[mGK]")
# e.g. "i  hosting: Local server: http://localhost:5000"
EMULATOR_LINE = re.compile(r"^\W*(?:i\s+)?(?P<emulator>[\w-]+)(?:\[[^\]]*\])?:\s+(?P<text>.*)$")
LOCAL_SERVER_PREFIX = "Local server: "


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


class LogObserver:
    """Receives every line the Firebase CLI prints."""

    def on_log(self, line: str) -> None:
        pass


class NullLogObserver(LogObserver):
    """Observer that ignores everything."""
    pass


class EmulatorUrlOpener(LogObserver):
    """Open the hosting emulator's URL in the browser once it is serving."""

    def __init__(self, launch: Optional[Callable[[str], object]] = None):
        self.launch = launch or click.launch

    def on_log(self, line: str) -> None:
        match = EMULATOR_LINE.match(strip_ansi(line).strip())
        if not match or match.group("emulator") != "hosting":
            return
        text = match.group("text")
        if not text.startswith(LOCAL_SERVER_PREFIX):
            return
        url = text[len(LOCAL_SERVER_PREFIX):].strip()
        logger.debug(f"Opening {url}")
        self.launch(url)
