"""Template rendering utilities."""

import logging
import shlex
from typing import Any

from jinja2 import Environment, TemplateError


logger = logging.getLogger(__name__)


def make_environment() -> Environment:
    """Build the Jinja2 environment used for generated shell scripts."""
    env = Environment(
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["shquote"] = shlex.quote
    return env


def render_template(template_str: str, **context: Any) -> str:
    """Render a Jinja2 template string with given context."""
    try:
        return make_environment().from_string(template_str).render(**context)
    except TemplateError as e:
        logger.error(f"Template rendering error: {e}")
        raise
