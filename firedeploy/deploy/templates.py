import json
import logging
from pathlib import Path
from typing import Dict, Any, Union
from jinja2 import Template

from ..config.schema import DeploymentOptions
from .manifest import DEFAULT_NODE_VERSION

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
DEFAULT_FUNCTION_NAME = "ssr"
DEFAULT_FUNCTION_REGION = "us-central1"


def render_template(template_string: str, context: Dict[str, Any]) -> str:
    """
    Render a template string with the provided context using Jinja2.

    Args:
        template_string: The template string with placeholders
        context: Dictionary of values to substitute into the template

    Returns:
        The rendered template
    """
    template = Template(template_string, keep_trailing_newline=True)

    try:
        return template.render(**context)
    except Exception as e:
        logger.error(f"Error rendering template: {e}")
        logger.debug(f"Template: {template_string[:100]}...")
        raise


def load_template(template_path: Union[str, Path]) -> str:
    """
    Load a template from a file.

    Args:
        template_path: Path to the template file

    Returns:
        The template content as a string
    """
    with open(template_path, "r") as f:
        return f.read()


def render_entry_point(server_out: str, options: DeploymentOptions, function_name: str) -> str:
    """
    Render the index.js that exposes the server bundle as a Cloud Function.

    Args:
        server_out: Output path of the server build
        options: Deploy options (region, runtime options)
        function_name: Name the function is exported under

    Returns:
        JavaScript source of the entry point
    """
    template = load_template(TEMPLATE_DIR / "function.js.j2")
    context = {
        "server_out": server_out,
        "function_name": function_name or DEFAULT_FUNCTION_NAME,
        "region": options.region or DEFAULT_FUNCTION_REGION,
        "runtime_options": json.dumps(options.functions_runtime_options),
    }
    return render_template(template, context)


def render_dockerfile(options: DeploymentOptions) -> str:
    """Render the Dockerfile of the Cloud Run image."""
    template = load_template(TEMPLATE_DIR / "Dockerfile.j2")
    context = {
        "node_version": options.functions_node_version or DEFAULT_NODE_VERSION,
    }
    return render_template(template, context)


def render_package_json(package_json: Dict[str, Any]) -> str:
    return json.dumps(package_json, indent=2)
