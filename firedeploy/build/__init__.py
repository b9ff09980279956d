"""Build coordination for firedeploy."""

from .angular import AngularWorkspace
from .coordinator import BuildSystem, resolve_build_output, run_builds

__all__ = [
    "AngularWorkspace",
    "BuildSystem",
    "resolve_build_output",
    "run_builds",
]
