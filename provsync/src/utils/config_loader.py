import os
from pathlib import Path
import toml
from typing import Dict, Any, Optional

from provsync.src.errors import ConfigurationError

# Option name -> environment variable, in the names the lane configs already use
ENV_VARS = {
    "xcodeproj": "SPECIFIER_XCODEPROJ",
    "target": "SPECIFIER_TARGET",
    "configuration": "SPECIFIER_CONFIGURATION",
    "provisioning_profile": "PROVISIONING_PROFILE",
    "decoder": "PROVSYNC_DECODER",
}


def get_config_path() -> Path:
    """Return the path to the configuration file."""
    env_config = os.environ.get("PROVSYNC_CONFIG")
    if env_config:
        return Path(env_config)
    return Path.home() / ".provsync" / "config.toml"


def load_config() -> Dict[str, Any]:
    """Load configuration from TOML file."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigurationError(f"Failed to load config {config_path}: {e}")


def get_option(
    name: str, cli_value: Optional[Any], config: Optional[Dict[str, Any]] = None
) -> Optional[Any]:
    """Resolve one update option: CLI, then environment, then [update] table."""
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(ENV_VARS[name])
    if env_value:
        return env_value

    if config is None:
        config = load_config()
    return config.get("update", {}).get(name)
