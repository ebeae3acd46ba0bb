"""Output format utilities for batchpick CLI commands.

This module provides a unified way to select the output format of a command.
"""

from enum import Enum
from typing import Callable
import click


class OutputFormat(str, Enum):
    """Supported output formats for CLI commands."""

    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


def format_option(default: OutputFormat = OutputFormat.TEXT) -> Callable:
    """Create a Click option decorator for output format selection.

    Provides:
    - --format with choices: text, markdown, json
    - --md / --markdown aliases for markdown format
    - --json alias for json format

    Args:
        default: The default output format.

    Returns:
        A decorator function that adds format options to a Click command.

    Example:
        @click.command()
        @format_option()
        def run(format: str):
            ...
    """

    def decorator(func: Callable) -> Callable:
        func = click.option(
            "--format",
            "format",
            type=click.Choice([f.value for f in OutputFormat]),
            default=default.value,
            help=f"Output format (default: {default.value}).",
            show_default=False,
        )(func)

        def alias_callback(target: OutputFormat):
            def set_format(ctx, param, value):
                if value:
                    ctx.params["format"] = target.value
                return value

            return set_format

        func = click.option(
            "--md",
            "--markdown",
            "markdown_flag",
            is_flag=True,
            is_eager=True,
            expose_value=False,
            callback=alias_callback(OutputFormat.MARKDOWN),
            help="Output in markdown format (alias for --format markdown).",
        )(func)

        func = click.option(
            "--json",
            "json_flag",
            is_flag=True,
            is_eager=True,
            expose_value=False,
            callback=alias_callback(OutputFormat.JSON),
            help="Output in JSON format (alias for --format json).",
        )(func)

        return func

    return decorator
