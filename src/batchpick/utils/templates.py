"""Template loading and rendering utilities for batchpick.

This module provides functions to load and render Jinja2 templates
from the batchpick.templates package.
"""

import json
from typing import Any, Optional
from jinja2 import Environment, PackageLoader

from .output import OutputFormat


def _create_jinja_env() -> Environment:
    """Create and configure the Jinja2 environment.

    Returns:
        Configured Jinja2 Environment with custom filters.
    """
    env = Environment(
        loader=PackageLoader("batchpick", "templates"),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    env.filters["short_sha"] = lambda sha: sha[:8] if sha else "N/A"
    env.filters["or_na"] = lambda value: value if value else "N/A"

    return env


# Global Jinja2 environment (lazy initialization)
_jinja_env: Optional[Environment] = None


def get_jinja_env() -> Environment:
    """Get the global Jinja2 environment (creates it if needed)."""
    global _jinja_env
    if _jinja_env is None:
        _jinja_env = _create_jinja_env()
    return _jinja_env


def render_template(format: str, name: str, **context: Any) -> str:
    """Render a template with the given context.

    Args:
        format: The output format ('text' or 'markdown').
        name: The template name (without .jinja2 extension).
        **context: Template context variables.

    Returns:
        The rendered template string.

    Raises:
        TemplateNotFound: If the template file doesn't exist.
    """
    template = get_jinja_env().get_template(f"{format}/{name}.jinja2")
    return template.render(**context)


def render_to_format(
    format: str,
    template_name: str,
    data: Any,
    pretty: bool = True,
    **extra_context: Any,
) -> str:
    """Render data to the specified output format.

    For JSON format, serializes the data directly.
    For text/markdown, uses templates.

    Args:
        format: The output format ('text', 'markdown', 'json').
        template_name: The template name for text/markdown formats.
        data: The data to render (object with to_dict method for JSON).
        pretty: For JSON, whether to pretty-print.
        **extra_context: Additional context variables for templates.

    Returns:
        The formatted output string.
    """
    if format == OutputFormat.JSON.value:
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        return json.dumps(data, default=str, indent=2 if pretty else None) + "\n"

    return render_template(format, template_name, **{template_name: data, **extra_context})
