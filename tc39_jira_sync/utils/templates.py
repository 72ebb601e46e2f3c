"""Contains utilities for rendering Jinja2 templates."""

from pathlib import Path
from typing import Any

import jinja2
import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TEMPLATES_DIRECTORY = Path(__file__).parent.parent / "templates"


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment.

    Autoescaping stays off since descriptions are plain text, and undefined
    variables raise instead of rendering as empty strings.
    """
    jinja_env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)
    return jinja_env


def construct_jinja2_template_from_file(template_path: Path | str, environment: jinja2.Environment | None = None) -> jinja2.Template:
    """Construct a Jinja2 template from a file."""
    if environment is None:
        environment = construct_jinja2_environment()
    try:
        with open(template_path, encoding="utf-8") as f:
            template_content = f.read()
    except FileNotFoundError:
        logger.error("Jinja2 template not found", template_path=str(template_path))
        raise
    return environment.from_string(template_content)


def render_template_with_context(template: jinja2.Template, context: dict[str, Any]) -> str:
    """Render a Jinja2 template against a plain context dictionary."""
    try:
        rendered_template = template.render(context)
    except jinja2.UndefinedError as exc:
        logger.error("Failed to render template with context", context_keys=sorted(context), error=str(exc))
        raise
    return rendered_template
