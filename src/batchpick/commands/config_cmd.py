"""Config command for inspecting the batchpick configuration."""

import click
import yaml
from pathlib import Path

from ..app import AppContext
from ..config import DEFAULT_CONFIG_PATH


@click.group()
def config():
    """Inspect batchpick configuration."""
    pass


@config.command()
@click.pass_obj
def show(app: AppContext):
    """Print the effective configuration as YAML."""
    data = app.config.to_dict()
    data["workspace"]["parent_dir"] = app.workspace()
    click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)


@config.command()
@click.option(
    "--path",
    type=click.Path(dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Where to write the example config.",
)
@click.option("-f", "--force", is_flag=True, default=False, help="Overwrite an existing file.")
def init(path: str, force: bool):
    """Write an example configuration file."""
    target = Path(path)
    if target.exists() and not force:
        raise click.ClickException(f"{target} already exists. Use -f/--force to overwrite.")

    example = {
        "workspace": {"parent_dir": "~/work", "remote": "origin"},
        "log": {"dir": "~/.batchpick/logs", "enabled": True},
        "script": {"comment_prefix": "::", "upstream_remote": "upstream"},
        "credentials": {"username": None},
    }
    target.write_text(yaml.safe_dump(example, sort_keys=False), encoding="utf-8")
    click.echo(f"Wrote {target}")
