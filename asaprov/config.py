"""
Configuration management for asaprov.

Loads $ASAPROV_HOME/config.yaml (default ~/.config/asaprov/config.yaml).
An optional env_file is loaded into the process environment with
python-dotenv so Azure credential variables (AZURE_CLIENT_ID, ...) can live
next to the config.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv


DEFAULT_HOME = "~/.config/asaprov"


class ConfigError(Exception):
    """Configuration validation error."""
    pass


@dataclass
class AsaprovConfig:
    """
    Runtime configuration.

    Attributes:
        subscription_id: Azure subscription; falls back to AZURE_SUBSCRIPTION_ID
        state_dir: Directory holding per-job state files
        log_level: DEBUG, INFO, WARNING or ERROR
        log_format: "pretty" (rich console) or "structured" (JSON lines)
        log_file: Optional log file path
        env_file: Optional dotenv file loaded on startup
    """
    subscription_id: Optional[str] = None
    state_dir: str = "~/.local/share/asaprov/state"
    log_level: str = "INFO"
    log_format: str = "pretty"
    log_file: Optional[str] = None
    env_file: Optional[str] = None

    def __post_init__(self):
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ConfigError(f"log_level: unsupported level {self.log_level!r}")
        if self.log_format not in ("pretty", "structured"):
            raise ConfigError(f"log_format: expected 'pretty' or 'structured', got {self.log_format!r}")

    @property
    def state_path(self) -> Path:
        return Path(self.state_dir).expanduser()

    @property
    def log_path(self) -> Optional[Path]:
        return Path(self.log_file).expanduser() if self.log_file else None

    @property
    def resolved_subscription_id(self) -> Optional[str]:
        return self.subscription_id or os.environ.get("AZURE_SUBSCRIPTION_ID")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AsaprovConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def get_asaprov_home() -> Path:
    """Directory holding config.yaml (ASAPROV_HOME or ~/.config/asaprov)."""
    return Path(os.environ.get("ASAPROV_HOME", DEFAULT_HOME)).expanduser()


def load_config(config_path: Optional[Path] = None) -> AsaprovConfig:
    """
    Load asaprov configuration from YAML.

    Args:
        config_path: Path to config file. Defaults to $ASAPROV_HOME/config.yaml

    Returns:
        AsaprovConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the file is empty, not valid YAML, or has bad values
    """
    if config_path is None:
        config_path = get_asaprov_home() / "config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"asaprov config.yaml not found at {config_path}. Run 'asaprov init' first."
        )

    try:
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if not raw:
        raise ConfigError("Configuration file is empty")
    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must contain a mapping")

    config = AsaprovConfig.from_dict(raw)

    if config.env_file:
        env_path = Path(config.env_file).expanduser()
        if env_path.exists():
            load_dotenv(env_path, override=False)

    return config
