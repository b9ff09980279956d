"""Tests for the Node.js runtime check."""

import logging
from unittest.mock import patch

import pytest

from firedeploy.deploy.manifest import PackageManifest
from firedeploy.deploy.runtime import (
    check_runtime_compatibility,
    local_node_version,
    satisfies_major,
)


@pytest.mark.parametrize("version,major,expected", [
    ("18.17.0", 18, True),
    ("18.0.0", 18, True),
    ("20.1.0", 18, False),
    ("16.20.2", 18, False),
    ("not-a-version", 18, False),
])
def test_satisfies_major(version, major, expected):
    """Test the caret range comparison."""
    assert satisfies_major(version, major) is expected


def test_matching_runtime_does_not_warn(caplog):
    """Test a local version inside the engine range."""
    with caplog.at_level(logging.WARNING):
        assert check_runtime_compatibility(PackageManifest(node_version=18), "Cloud Run", "18.19.1")

    assert caplog.records == []


def test_mismatched_runtime_only_warns(caplog):
    """Test that a mismatch is reported but does not raise."""
    with caplog.at_level(logging.WARNING):
        result = check_runtime_compatibility(
            PackageManifest(node_version=18), "Firebase Functions", "20.11.0"
        )

    assert result is False
    assert "does not match the Firebase Functions runtime (18)" in caplog.text


def test_unknown_local_runtime_warns(caplog):
    """Test the warning when node is not installed."""
    with patch("firedeploy.deploy.runtime.local_node_version", return_value=None):
        with caplog.at_level(logging.WARNING):
            assert check_runtime_compatibility(PackageManifest(), "Cloud Run") is False

    assert "Could not determine your Node.js version" in caplog.text


def test_local_node_version():
    """Test reading the version from node --version."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        mock_run.return_value.stdout = "v18.17.0\n"
        assert local_node_version() == "18.17.0"

    with patch("subprocess.run", side_effect=FileNotFoundError("node")):
        assert local_node_version() is None
