import click
import logging
from .app import AppContext

LOG_FORMAT = "[%(levelname)s] %(message)s"

from dotenv import load_dotenv

load_dotenv()


def register_commands(cli):
    from .commands.batch import run, script

    cli.add_command(run)
    cli.add_command(script)

    from .commands.sort import sort

    cli.add_command(sort)

    from .commands.config_cmd import config

    cli.add_command(config)


@click.group()
@click.version_option(package_name="batchpick", prog_name="batchpick")
@click.pass_obj
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the config file (default: .batchpick.yaml if present).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(app: AppContext, config_path: str = None, verbose: bool = False):
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    app.load_config(config_path)


register_commands(cli)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
    )
    cli(obj=AppContext())


if __name__ == "__main__":
    main()
