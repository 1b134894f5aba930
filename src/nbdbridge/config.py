"""Installation settings for nbdbridge."""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from nbdbridge.errors import ConfigError
from nbdbridge.models import BridgeSettings

log = logging.getLogger(__name__)

CONFIG_FILE = Path("/etc/nbdbridge.toml")

ENV_OVERRIDES = {
    "NBDBRIDGE_NBDKIT": "nbdkit_executable",
    "NBDBRIDGE_NBD_CLIENT": "nbd_client_executable",
    "NBDBRIDGE_SOCKET_DIR": "socket_dir",
}


def config_path() -> Path:
    """Return the settings file location, honoring NBDBRIDGE_CONFIG."""
    override = os.environ.get("NBDBRIDGE_CONFIG", "").strip()
    return Path(override) if override else CONFIG_FILE


def _read_config_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        log.debug("no settings file at %s, using defaults", path)
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"{path}: {e}") from e
    log.debug("loaded settings from %s", path)
    return data


def load_settings(path: Path | None = None) -> BridgeSettings:
    """Load settings from the TOML file and environment, on top of the defaults."""
    values = _read_config_file(path if path is not None else config_path())
    for env_key, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_key, "").strip()
        if value:
            values[field] = value
    try:
        return BridgeSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e}") from e
