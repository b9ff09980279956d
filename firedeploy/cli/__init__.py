# firedeploy/cli/__init__.py
"""Command-line interface for firedeploy."""

from .commands import cli, check_command, deploy_command

__all__ = ["cli", "check_command", "deploy_command"]
