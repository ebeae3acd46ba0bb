"""Configuration file support for batchpick.

This module handles loading and parsing the .batchpick.yaml configuration file.

The config file has one section per concern. Example:

    # Where the checkouts live
    workspace:
      parent_dir: ~/work/projects
      remote: origin

    # Persisted run logs
    log:
      dir: ~/.batchpick/logs
      enabled: true

    # Generated cross-project command scripts
    script:
      comment_prefix: "#"
      upstream_remote: upstream

    credentials:
      username: jdoe

The password is never read from this file; set BATCHPICK_GIT_PASSWORD
(a .env file in the working directory is loaded at startup).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
import logging
import os
import yaml

from .command_script import DEFAULT_COMMENT_PREFIX, DEFAULT_UPSTREAM_REMOTE

log = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = ".batchpick.yaml"
WORKSPACE_ENV = "BATCHPICK_WORKSPACE"


@dataclass
class WorkspaceConfig:
    """Configuration of the workspace holding the local checkouts.

    Attributes:
        parent_dir: Directory whose immediate children are the checkouts.
        remote: Remote whose URL identifies a checkout and whose branches
            are tracked when a target branch is created locally.
    """

    parent_dir: Optional[str] = None
    remote: str = "origin"

    @classmethod
    def from_dict(cls, data: dict) -> "WorkspaceConfig":
        return cls(
            parent_dir=data.get("parent_dir"),
            remote=data.get("remote", cls.remote),
        )


@dataclass
class LogConfig:
    """Configuration of the persisted run log.

    Attributes:
        dir: Directory for log files (None means ~/.batchpick/logs).
        enabled: Whether a log file is written after each run.
    """

    dir: Optional[str] = None
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "LogConfig":
        return cls(
            dir=data.get("dir"),
            enabled=bool(data.get("enabled", cls.enabled)),
        )


@dataclass
class ScriptConfig:
    """Configuration of generated cross-project command scripts.

    Attributes:
        comment_prefix: Comment marker of the shell the script is pasted into.
        upstream_remote: Name of the temporary remote added to the checkout.
    """

    comment_prefix: str = DEFAULT_COMMENT_PREFIX
    upstream_remote: str = DEFAULT_UPSTREAM_REMOTE

    @classmethod
    def from_dict(cls, data: dict) -> "ScriptConfig":
        return cls(
            comment_prefix=str(data.get("comment_prefix", cls.comment_prefix)),
            upstream_remote=data.get("upstream_remote", cls.upstream_remote),
        )


@dataclass
class CredentialsConfig:
    username: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CredentialsConfig":
        if "password" in data:
            log.warning("Ignoring 'credentials.password' in config file; use BATCHPICK_GIT_PASSWORD")
        return cls(username=data.get("username"))


@dataclass
class BatchpickConfig:
    """Configuration settings for batchpick.

    All settings are optional and have sensible defaults.

    Attributes:
        workspace: Workspace location and identity remote.
        log: Persisted run log settings.
        script: Cross-project command script settings.
        credentials: Non-secret credential settings.
        _raw: Raw dictionary data for accessing arbitrary sections.
    """

    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    log: LogConfig = field(default_factory=LogConfig)
    script: ScriptConfig = field(default_factory=ScriptConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    _raw: Dict[str, Any] = field(default_factory=dict)

    def get_section(self, name: str) -> Dict[str, Any]:
        """Get a configuration section by name.

        Args:
            name: Section name (e.g., "workspace", "log").

        Returns:
            Dictionary with the section's configuration, or empty dict if not found.
        """
        return self._raw.get(name, {})

    def resolve_workspace(self, cli_value: Optional[str] = None) -> Optional[str]:
        """Pick the workspace directory: CLI option, then environment, then file."""
        value = cli_value or os.getenv(WORKSPACE_ENV) or self.workspace.parent_dir
        return str(Path(value).expanduser()) if value else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workspace": {
                "parent_dir": self.workspace.parent_dir,
                "remote": self.workspace.remote,
            },
            "log": {"dir": self.log.dir, "enabled": self.log.enabled},
            "script": {
                "comment_prefix": self.script.comment_prefix,
                "upstream_remote": self.script.upstream_remote,
            },
            "credentials": {"username": self.credentials.username},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BatchpickConfig":
        """Create a BatchpickConfig from a dictionary.

        Unknown keys are kept in _raw for forward compatibility.

        Args:
            data: Dictionary with configuration values.

        Returns:
            BatchpickConfig instance with values from data, using defaults for missing keys.
        """
        return cls(
            workspace=WorkspaceConfig.from_dict(data.get("workspace") or {}),
            log=LogConfig.from_dict(data.get("log") or {}),
            script=ScriptConfig.from_dict(data.get("script") or {}),
            credentials=CredentialsConfig.from_dict(data.get("credentials") or {}),
            _raw=data,
        )


def load_config(config_path: Optional[str] = None) -> BatchpickConfig:
    """Load configuration from a YAML file.

    If config_path is explicitly provided and the file doesn't exist, raises an error.
    If config_path is None and the default .batchpick.yaml doesn't exist, returns default config.

    Args:
        config_path: Path to the config file, or None to use the default path.

    Returns:
        BatchpickConfig instance with loaded or default values.

    Raises:
        FileNotFoundError: If config_path is explicitly provided but file doesn't exist.
        yaml.YAMLError: If the config file contains invalid YAML.
        ValueError: If the config file contains invalid values.
    """
    explicit_path = config_path is not None
    path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_PATH)

    if not path.exists():
        if explicit_path:
            raise FileNotFoundError(f"Config file not found: {path}")
        return BatchpickConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    # Handle empty file or file with only comments
    if data is None:
        return BatchpickConfig()

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a YAML mapping (dictionary)")

    return BatchpickConfig.from_dict(data)
