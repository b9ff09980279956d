import tempfile
from pathlib import Path

from firedeploy.config import DeploymentOptions
from firedeploy.deploy.manifest import DEFAULT_NODE_VERSION
from firedeploy.deploy.templates import (
    load_template,
    render_dockerfile,
    render_entry_point,
    render_package_json,
    render_template,
)


def test_render_template_basic():
    """Test basic template rendering with placeholders."""
    template = "Hello {{ name }}!"
    context = {"name": "World"}

    result = render_template(template_string=template, context=context)
    assert result == "Hello World!"


def test_render_template_nested_values():
    """Test rendering templates with nested values."""
    template = "Region: {{ options.region }}"
    context = {"options": {"region": "europe-west1"}}

    result = render_template(template_string=template, context=context)
    assert result == "Region: europe-west1"


def test_load_template():
    """Test loading a template from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        template_path = Path(tmpdir) / "index.js.j2"
        template_path.write_text("exports.{{ function_name }} = handler;")

        template = load_template(template_path)
        assert "{{ function_name }}" in template


def test_render_entry_point_defaults():
    """Test the generated Cloud Function entry point."""
    source = render_entry_point("dist/app/server", DeploymentOptions(), "ssr_app")

    assert "require('./dist/app/server/main').app()" in source
    assert "exports.ssr_app = functions" in source
    assert ".region('us-central1')" in source
    assert ".runWith({})" in source


def test_render_entry_point_with_options():
    """Test region and runtime options in the entry point."""
    options = DeploymentOptions(region="europe-west1", functions_runtime_options={"memory": "1GB"})

    source = render_entry_point("dist/app/server", options, "ssr_app")

    assert ".region('europe-west1')" in source
    assert '.runWith({"memory": "1GB"})' in source


def test_render_dockerfile():
    """Test the Cloud Run Dockerfile uses the configured Node.js version."""
    assert render_dockerfile(DeploymentOptions()).startswith(f"FROM node:{DEFAULT_NODE_VERSION}-slim")
    assert "FROM node:20-slim" in render_dockerfile(DeploymentOptions(functions_node_version=20))
    assert 'CMD [ "npm", "start" ]' in render_dockerfile(DeploymentOptions())


def test_render_package_json():
    """Test package.json is pretty printed."""
    assert render_package_json({"name": "functions"}) == '{\n  "name": "functions"\n}'
