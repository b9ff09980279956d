"""Tests for restaging build output."""

import pytest

from firedeploy.config import SsrMode
from firedeploy.deploy.relocator import relocate_artifacts, relocation_root
from firedeploy.errors import ConfigurationError
from firedeploy.utils.filesystem import FileSystemHost
from tests.fixtures.fakes import FakeFileSystemHost


@pytest.mark.parametrize("static_out,mode,expected", [
    ("dist/app/browser", SsrMode.FUNCTION, "dist/app/functions"),
    ("dist/app/browser", SsrMode.CLOUD_RUN, "dist/app/run"),
    ("dist/app/browser/", SsrMode.FUNCTION, "dist/app/functions"),
    ("browser", SsrMode.FUNCTION, "functions"),
    ("/abs/dist/browser", SsrMode.CLOUD_RUN, "/abs/dist/run"),
])
def test_relocation_root(static_out, mode, expected):
    """Test the destination computed for each mode."""
    assert relocation_root(static_out, mode) == expected


def test_relocation_root_requires_browser_segment():
    """Test that an unexpected layout is rejected instead of guessed."""
    with pytest.raises(ConfigurationError):
        relocation_root("dist/app", SsrMode.FUNCTION)

    with pytest.raises(ConfigurationError):
        relocation_root("dist/browser/app", SsrMode.FUNCTION)


def test_relocation_root_hosting_mode():
    """Test that hosting-only deploys are not relocated."""
    with pytest.raises(ConfigurationError):
        relocation_root("dist/app/browser", SsrMode.NONE)


def test_relocate_artifacts_operations():
    """Test the order and targets of the filesystem operations."""
    fs_host = FakeFileSystemHost()

    artifacts = relocate_artifacts(fs_host, "dist/app/browser", "dist/app/server", SsrMode.FUNCTION)

    assert artifacts.root == "dist/app/functions"
    assert artifacts.static_out == "dist/app/functions/dist/app/browser"
    assert artifacts.server_out == "dist/app/functions/dist/app/server"
    assert fs_host.operations == [
        ("remove", "dist/app/functions"),
        ("copy", "dist/app/browser", "dist/app/functions/dist/app/browser"),
        ("copy", "dist/app/server", "dist/app/functions/dist/app/server"),
        ("rename",
         "dist/app/functions/dist/app/browser/index.html",
         "dist/app/functions/dist/app/browser/index.original.html"),
    ]


def test_relocate_artifacts_missing_entry_document():
    """Test that a missing index.html is tolerated."""
    fs_host = FakeFileSystemHost(missing=["dist/app/run/dist/app/browser/index.html"])

    artifacts = relocate_artifacts(fs_host, "dist/app/browser", "dist/app/server", SsrMode.CLOUD_RUN)

    assert artifacts.root == "dist/app/run"
    assert [op[0] for op in fs_host.operations] == ["remove", "copy", "copy"]


def test_relocate_artifacts_bad_layout_has_no_side_effects():
    """Test that nothing is touched when the layout is unexpected."""
    fs_host = FakeFileSystemHost()

    with pytest.raises(ConfigurationError):
        relocate_artifacts(fs_host, "dist/app", "dist/server", SsrMode.FUNCTION)

    assert fs_host.operations == []


def _snapshot(root):
    return {
        str(path.relative_to(root)): path.read_text()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_relocate_artifacts_is_idempotent(tmp_path):
    """Test that running twice gives the same tree and drops stale files."""
    browser = tmp_path / "dist" / "app" / "browser"
    server = tmp_path / "dist" / "app" / "server"
    browser.mkdir(parents=True)
    server.mkdir(parents=True)
    (browser / "index.html").write_text("<app-root></app-root>")
    (browser / "main.js").write_text("bootstrap()")
    (server / "main.js").write_text("exports.app = () => {}")

    fs_host = FileSystemHost(tmp_path)
    relocate_artifacts(fs_host, "dist/app/browser", "dist/app/server", SsrMode.FUNCTION)
    functions = tmp_path / "dist" / "app" / "functions"
    first = _snapshot(functions)

    (functions / "stale.txt").write_text("left over")
    relocate_artifacts(fs_host, "dist/app/browser", "dist/app/server", SsrMode.FUNCTION)
    second = _snapshot(functions)

    assert first == second
    assert first == {
        "dist/app/browser/index.original.html": "<app-root></app-root>",
        "dist/app/browser/main.js": "bootstrap()",
        "dist/app/server/main.js": "exports.app = () => {}",
    }
    # The build output itself is left in place
    assert (browser / "index.html").exists()
