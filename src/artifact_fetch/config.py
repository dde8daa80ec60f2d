"""Fetch configuration helpers."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import platformdirs
import yaml

from .constants import (
    APP_NAME,
    CHUNK_SIZE,
    CONFIG_ENV,
    CONFIG_FILE,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    INSECURE_ENV,
    TEMP_DIR_ENV,
    TIMEOUT_ENV,
)

logger = logging.getLogger(__name__)


@dataclass
class FetchConfig:
    """Settings shared by the transports and the path allocator."""

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    verify_tls: bool = True
    chunk_size: int = CHUNK_SIZE
    temp_dir: Optional[Path] = None  # None means the system temp dir


def default_config_path() -> Path:
    """Location of the config file: $ARTIFACT_FETCH_CONFIG or the user config dir."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILE


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return _is_truthy(value)
    return bool(value)


def _setting(section: dict, key: str, cast, default):
    """Read one setting; a null or malformed value falls back to ``default``."""
    value = section.get(key)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring invalid %s=%r in config: %s", key, value, e)
        return default


def load_config(path: Optional[Union[str, Path]] = None) -> FetchConfig:
    """Load fetch configuration from YAML, then apply environment overrides.

    A missing or unreadable file yields the defaults, as does any setting
    that is null or has the wrong type. Settings may sit at the top level or
    under a ``fetch:`` section.
    """
    cfg_path = Path(path) if path else default_config_path()

    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
            data = {}
    if not isinstance(data, dict):
        data = {}
    section = data.get("fetch", data)
    if not isinstance(section, dict):
        if section is not None:
            logger.warning("Ignoring non-mapping fetch section in %s", cfg_path)
        section = {}

    temp_dir = _setting(section, "temp_dir", str, None)
    config = FetchConfig(
        timeout=_setting(section, "timeout", float, DEFAULT_TIMEOUT),
        user_agent=_setting(section, "user_agent", str, DEFAULT_USER_AGENT),
        verify_tls=_setting(section, "verify_tls", _as_bool, True),
        chunk_size=_setting(section, "chunk_size", int, CHUNK_SIZE),
        temp_dir=Path(temp_dir) if temp_dir else None,
    )

    # Environment wins over the file
    if os.environ.get(TIMEOUT_ENV):
        config.timeout = float(os.environ[TIMEOUT_ENV])
    if _is_truthy(os.environ.get(INSECURE_ENV, "false")):
        config.verify_tls = False
    if os.environ.get(TEMP_DIR_ENV):
        config.temp_dir = Path(os.environ[TEMP_DIR_ENV])

    return config
