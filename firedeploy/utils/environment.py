"""Environment variable utilities for firedeploy."""

import os
import shutil
from typing import Dict, List, Optional

FIREBASE_TOKEN_ENV = "FIREBASE_TOKEN"


# Define a safe import for inquirer to handle the case where it's not installed
def _safe_import_inquirer():
    """Safely import inquirer, raising a clear error if not installed."""
    try:
        import inquirer
        return inquirer
    except ImportError:
        raise ImportError(
            "The 'inquirer' package is required for interactive prompts. "
            "Please install it with 'pip install inquirer'."
        )


def load_env_file(file_path: str) -> Dict[str, str]:
    """Load environment variables from a .env file.

    Args:
        file_path: Path to the .env file

    Returns:
        Dictionary of environment variables
    """
    if not os.path.exists(file_path):
        return {}

    env_vars = {}

    try:
        with open(file_path, "r") as f:
            for line in f:
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith("#"):
                    continue

                # Handle key=value format (including = in values)
                if "=" in line:
                    key, value = line.split("=", 1)
                    env_vars[key.strip()] = value.strip().strip('"').strip("'")
                else:
                    raise ValueError(f"Invalid environment file format: {line}")
    except Exception as e:
        raise ValueError(f"Error parsing environment file: {e}")

    return env_vars


def get_firebase_token(env_vars: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Look up the Firebase CI token.

    The process environment wins over values loaded from a .env file. An
    empty value counts as unset.

    Args:
        env_vars: Variables loaded from a .env file

    Returns:
        The token, or None when no token is configured
    """
    token = os.environ.get(FIREBASE_TOKEN_ENV)
    if not token and env_vars:
        token = env_vars.get(FIREBASE_TOKEN_ENV)
    return token or None


def missing_executables(names: List[str]) -> List[str]:
    """Return the executables from ``names`` that are not on PATH."""
    return [name for name in names if shutil.which(name) is None]
