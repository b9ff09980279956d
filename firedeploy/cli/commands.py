# firedeploy/cli/commands.py
"""Command-line interface for firedeploy."""

import sys
import logging

import click

from ..utils.environment import missing_executables
from .commands_deploy import deploy_command

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REQUIRED_EXECUTABLES = ["node", "npx", "firebase"]
CLOUD_RUN_EXECUTABLES = ["gcloud"]


@click.group()
@click.version_option(package_name="firedeploy")
def cli():
    """Deploy Angular applications to Firebase."""
    pass


@cli.command(name="check")
def check_command():
    """Check that the external tools used for deploying are installed."""
    missing = missing_executables(REQUIRED_EXECUTABLES)
    for name in REQUIRED_EXECUTABLES:
        status = "missing" if name in missing else "found"
        click.echo(f"{name}: {status}")

    for name in CLOUD_RUN_EXECUTABLES:
        status = "missing (needed for Cloud Run)" if missing_executables([name]) else "found"
        click.echo(f"{name}: {status}")

    if missing:
        click.echo(f"Missing required tools: {', '.join(missing)}", err=True)
        sys.exit(1)

    click.echo("All required tools are installed.")


cli.add_command(deploy_command)
