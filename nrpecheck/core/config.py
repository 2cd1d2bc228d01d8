"""Settings loading and validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from nrpecheck.core.context import Context


DEFAULT_CONFIG_PATH = "/etc/nrpecheck/config.yaml"

ENV_CONFIG_PATH = "NRPECHECK_CONFIG"
ENV_LOG_DIR = "NRPECHECK_LOG_DIR"

# Default locations of the external tools
DEFAULT_BINARIES = {
    "conntrackd": "/usr/sbin/conntrackd",
    "host": "/usr/bin/host",
}

KNOWN_KEYS = {"binaries", "log_dir"}


class ConfigError(Exception):
    """Error loading or validating settings."""

    pass


@dataclass
class Settings:
    """Site settings shared by all checks."""

    binaries: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_BINARIES))
    log_dir: Path | None = None
    path: str | None = None

    def binary(self, tool: str) -> str:
        """Configured path of an external tool."""
        return self.binaries.get(tool, DEFAULT_BINARIES.get(tool, tool))


def parse_settings(content: str, path: str | None = None) -> Settings:
    """
    Parse settings from YAML text.

    Args:
        content: YAML document
        path: Where the document came from (for messages)

    Returns:
        Settings with defaults filled in

    Raises:
        ConfigError: If the document is invalid
    """
    source = path or "<string>"
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a YAML mapping: {source}")

    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown settings in {source}: {', '.join(sorted(unknown))}")

    binaries: dict[str, Any] = data.get("binaries") or {}
    if not isinstance(binaries, dict):
        raise ConfigError(f"'binaries' must be a mapping of tool to path: {source}")
    for tool, binary in binaries.items():
        if not isinstance(binary, str) or not binary.strip():
            raise ConfigError(f"Binary path for '{tool}' must be a non-empty string: {source}")

    log_dir = data.get("log_dir")
    if log_dir is not None and not isinstance(log_dir, str):
        raise ConfigError(f"'log_dir' must be a string: {source}")

    settings = Settings(path=path)
    settings.binaries.update({tool: binary.strip() for tool, binary in binaries.items()})
    if log_dir:
        settings.log_dir = Path(log_dir)
    return settings


def load_settings(context: "Context", path: str | None = None) -> Settings:
    """
    Load settings for a check run.

    The file is taken from path, else $NRPECHECK_CONFIG, else the default
    location. A missing default file yields built-in defaults; a missing
    explicitly requested file is an error. $NRPECHECK_LOG_DIR overrides
    log_dir from the file.

    Args:
        context: Execution context
        path: Explicit settings file

    Returns:
        Loaded Settings

    Raises:
        ConfigError: If the file is missing (when requested) or invalid
    """
    explicit = path or context.get_env(ENV_CONFIG_PATH)
    config_path = explicit or DEFAULT_CONFIG_PATH

    if context.file_exists(config_path):
        try:
            content = context.read_file(config_path)
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")
        settings = parse_settings(content, config_path)
    elif explicit:
        raise ConfigError(f"Settings file not found: {config_path}")
    else:
        settings = Settings()

    log_dir = context.get_env(ENV_LOG_DIR)
    if log_dir:
        settings.log_dir = Path(log_dir)

    return settings
