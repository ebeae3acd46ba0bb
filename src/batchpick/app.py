import click
import yaml
from pathlib import Path
from typing import Optional

from .config import BatchpickConfig, load_config
from .credentials import CredentialsContext
from .git_backend import GitBackend
from .orchestrator import BatchOrchestrator
from .run_log import LogFileStore, RunLog
from .sorter import ChronologicalSorter


class AppContext:
    def __init__(self, config: Optional[BatchpickConfig] = None):
        self.config: BatchpickConfig = config or BatchpickConfig()
        self.credentials: CredentialsContext = CredentialsContext()

    def load_config(self, config_path: Optional[str]):
        try:
            self.config = load_config(config_path)
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            raise click.ClickException(str(e))

    def init_credentials(self, ask: bool = False):
        """Build the credentials for this run; prompts only when asked to."""
        credentials = CredentialsContext.from_env(self.config.credentials.username)
        if ask:
            username = click.prompt("Git username", default=credentials.username or "")
            password = click.prompt("Git password", hide_input=True)
            credentials = CredentialsContext(username=username, password=password)
        self.credentials = credentials

    def workspace(self, cli_value: Optional[str] = None) -> Optional[str]:
        return self.config.resolve_workspace(cli_value)

    def create_backend(self) -> GitBackend:
        return GitBackend(
            credentials=self.credentials,
            remote_name=self.config.workspace.remote,
        )

    def create_orchestrator(self, commands_only: bool = False) -> BatchOrchestrator:
        return BatchOrchestrator(
            self.create_backend(),
            remote_name=self.config.workspace.remote,
            comment_prefix=self.config.script.comment_prefix,
            upstream_remote=self.config.script.upstream_remote,
            commands_only=commands_only,
        )

    def create_sorter(self) -> ChronologicalSorter:
        return ChronologicalSorter(self.create_backend())

    def save_run_log(self, run_log: RunLog) -> Optional[Path]:
        """Persist the run log if enabled; a write failure is reported, not raised."""
        if not self.config.log.enabled:
            return None
        store = LogFileStore(self.config.log.dir)
        try:
            path = store.save(run_log)
        except OSError as e:
            click.echo(f"Failed to save log: {e}", err=True)
            return None
        click.echo(f"Log saved to: {path}", err=True)
        return path
