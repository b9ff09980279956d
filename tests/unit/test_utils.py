# tests/unit/test_utils.py
"""Tests for utility functions."""

import os
import tempfile
import pytest
from unittest.mock import patch
from firedeploy.utils.environment import (
    FIREBASE_TOKEN_ENV,
    get_firebase_token,
    load_env_file,
    missing_executables,
)


def test_load_env_file():
    """Test loading environment variables from file."""
    env_content = """
# Comment
KEY1=value1
KEY2=value2

# Another comment
KEY3=value with spaces
KEY4=value=with=equals
FIREBASE_TOKEN="1//quoted-token"
"""

    with tempfile.NamedTemporaryFile(mode="w", delete=False) as f:
        f.write(env_content)
        env_path = f.name

    try:
        env_vars = load_env_file(env_path)

        assert env_vars["KEY1"] == "value1"
        assert env_vars["KEY2"] == "value2"
        assert env_vars["KEY3"] == "value with spaces"
        assert env_vars["KEY4"] == "value=with=equals"
        assert env_vars["FIREBASE_TOKEN"] == "1//quoted-token"
        assert "Comment" not in env_vars
    finally:
        os.unlink(env_path)


def test_load_env_file_nonexistent():
    """Test loading environment from nonexistent file."""
    env_vars = load_env_file("/nonexistent/file")
    assert env_vars == {}


def test_load_env_file_invalid(tmp_path):
    """Test that a line without '=' is rejected."""
    env_path = tmp_path / ".env"
    env_path.write_text("KEY1=value1\nnot a pair\n")

    with pytest.raises(ValueError):
        load_env_file(str(env_path))


def test_get_firebase_token_from_environment():
    """Test that the process environment wins over the .env file."""
    with patch.dict(os.environ, {FIREBASE_TOKEN_ENV: "from-env"}):
        assert get_firebase_token({FIREBASE_TOKEN_ENV: "from-file"}) == "from-env"


def test_get_firebase_token_from_file():
    with patch.dict(os.environ, {FIREBASE_TOKEN_ENV: ""}):
        assert get_firebase_token({FIREBASE_TOKEN_ENV: "from-file"}) == "from-file"


def test_get_firebase_token_unset():
    """Test that missing and empty tokens are None."""
    with patch.dict(os.environ, {}, clear=True):
        assert get_firebase_token() is None
        assert get_firebase_token({FIREBASE_TOKEN_ENV: ""}) is None


def test_missing_executables():
    """Test reporting executables that are not on PATH."""
    with patch("shutil.which", side_effect=lambda name: None if name == "gcloud" else f"/usr/bin/{name}"):
        assert missing_executables(["node", "gcloud", "firebase"]) == ["gcloud"]
