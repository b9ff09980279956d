"""Tests for the Hosting + Cloud Run pipeline."""

import json

import pytest

from firedeploy.config.schema import BuildOutput, DeployContext, DeploymentOptions
from firedeploy.deploy.cloud_run import deploy_to_cloud_run, image_reference
from firedeploy.errors import ConfigurationError, ExternalProcessFailure
from firedeploy.utils.process import ProcessResult
from tests.fixtures.fakes import FakeFileSystemHost, FakeRegistry, FakeRunner, mock_firebase_tools

STATIC_OUTPUT = BuildOutput(output_path="dist/app/browser")
SERVER_OUTPUT = BuildOutput(output_path="dist/app/server")


def make_context(tmp_path, **options) -> DeployContext:
    return DeployContext(
        workspace_root=tmp_path,
        project="app",
        firebase_project="my-firebase",
        options=DeploymentOptions(ssr="cloud-run", **options),
        firebase_token="token",
    )


async def run_pipeline(tmp_path, runner=None, **options):
    tools = mock_firebase_tools()
    fs_host = FakeFileSystemHost()
    runner = runner or FakeRunner()
    status = await deploy_to_cloud_run(
        tools,
        make_context(tmp_path, **options),
        STATIC_OUTPUT,
        SERVER_OUTPUT,
        fs_host=fs_host,
        registry=FakeRegistry(),
        runner=runner,
        local_node_version="18.19.0",
    )
    return status, tools, fs_host, runner


def test_image_reference():
    assert image_reference("my-firebase", "ssr") == "gcr.io/my-firebase/ssr"


@pytest.mark.asyncio
async def test_builds_image_then_deploys_service(tmp_path):
    """Test the two gcloud steps with the default service name."""
    _, _, _, runner = await run_pipeline(tmp_path)

    build, run = runner.commands
    assert build[:4] == ["gcloud", "builds", "submit", "dist/app/run"]
    assert "gcr.io/my-firebase/ssr" in build
    assert run[:4] == ["gcloud", "run", "deploy", "ssr"]
    assert "gcr.io/my-firebase/ssr" in run
    assert "--region=us-central1" in run
    assert runner.cwds == [str(tmp_path), str(tmp_path)]


@pytest.mark.asyncio
async def test_service_name_override(tmp_path):
    """Test that functionName names both the image and the service."""
    _, _, _, runner = await run_pipeline(tmp_path, functionName="renderer")

    build, run = runner.commands
    assert "gcr.io/my-firebase/renderer" in build
    assert run[3] == "renderer"
    assert "gcr.io/my-firebase/renderer" in run


@pytest.mark.asyncio
async def test_hosting_only_deploy(tmp_path):
    """Test that the final deploy does not touch functions."""
    status, tools, _, _ = await run_pipeline(tmp_path)

    assert status.success and status.deployed
    assert status.scope == "hosting:app"
    tools.deploy.assert_awaited_once_with(
        only="hosting:app", cwd=tmp_path, token="token", non_interactive=True
    )


@pytest.mark.asyncio
async def test_stages_container(tmp_path):
    """Test the package.json and Dockerfile in the run directory."""
    _, _, fs_host, _ = await run_pipeline(tmp_path, functionsNodeVersion=20)

    package_json = json.loads(fs_host.written("dist/app/run/package.json"))
    dockerfile = fs_host.written("dist/app/run/Dockerfile")

    assert package_json["main"] == "dist/app/server/main.js"
    assert package_json["scripts"]["start"] == "node dist/app/server/main.js"
    assert package_json["engines"]["node"] == "20"
    assert package_json["dependencies"] == {}
    assert dockerfile.startswith("FROM node:20-slim")


@pytest.mark.asyncio
async def test_failed_image_build_aborts(tmp_path):
    """Test that later steps are skipped after a failure."""
    runner = FakeRunner([ProcessResult(1, "", "ERROR: build step 0 failed")])
    tools = mock_firebase_tools()

    with pytest.raises(ExternalProcessFailure) as exc_info:
        await deploy_to_cloud_run(
            tools,
            make_context(tmp_path),
            STATIC_OUTPUT,
            SERVER_OUTPUT,
            fs_host=FakeFileSystemHost(),
            registry=FakeRegistry(),
            runner=runner,
            local_node_version="18.19.0",
        )

    assert len(runner.commands) == 1
    assert exc_info.value.result.returncode == 1
    tools.deploy.assert_not_called()


@pytest.mark.asyncio
async def test_preview_is_rejected_before_any_work(tmp_path):
    """Test that preview fails without side effects."""
    runner = FakeRunner()
    fs_host = FakeFileSystemHost()
    tools = mock_firebase_tools()

    with pytest.raises(ConfigurationError, match="Cloud Run preview not supported yet."):
        await deploy_to_cloud_run(
            tools,
            make_context(tmp_path, preview=True),
            STATIC_OUTPUT,
            SERVER_OUTPUT,
            fs_host=fs_host,
            registry=FakeRegistry(),
            runner=runner,
        )

    assert runner.commands == []
    assert fs_host.operations == []
    tools.deploy.assert_not_called()
    tools.serve.assert_not_called()
