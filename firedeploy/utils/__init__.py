"""Utility functions for firedeploy."""

from .environment import (
    load_env_file,
    get_firebase_token,
    missing_executables,
)
from .filesystem import FileSystemHost
from .process import ProcessResult, ProcessRunner
from .security import SecretMasker, get_secure_logger, mask_secrets

__all__ = [
    "load_env_file",
    "get_firebase_token",
    "missing_executables",
    "FileSystemHost",
    "ProcessResult",
    "ProcessRunner",
    "SecretMasker",
    "get_secure_logger",
    "mask_secrets",
]
