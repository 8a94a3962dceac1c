"""Runtime configuration loading and the process-wide driver settings store."""

from __future__ import annotations

import configparser
import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .settings import DriverSettings

logger = logging.getLogger(__name__)

_ENV_PREFIX = "BROWSER_TESTING_"
_SECTION_PREFIX = "driver:"


@dataclass(slots=True)
class RuntimeConfig:
    """Declarative overrides sourced from environment variables or config files."""

    config_source: Optional[Path] = None
    remote_url: Optional[str] = None
    client: Optional[str] = None
    capabilities: Optional[Dict[str, Any]] = None
    screenshot_dir: Optional[str] = None
    http_timeout: Optional[float] = None

    def apply_to_settings(self, settings: DriverSettings) -> None:
        """Project runtime overrides onto settings without destroying saved values."""

        if self.remote_url is not None:
            settings.remote_url = self.remote_url
        if self.client is not None:
            settings.client = self.client
        if self.capabilities is not None:
            settings.capabilities = self.capabilities
        if self.screenshot_dir is not None:
            settings.screenshot_dir = self.screenshot_dir
        if self.http_timeout is not None:
            settings.http_timeout = self.http_timeout


def load_runtime_config(
    env: Mapping[str, str] | None = None,
    config_path: Optional[Path] = None,
    driver: str = "selenium",
) -> RuntimeConfig:
    """Load overrides for ``driver`` from an optional INI file, then from environment variables."""

    source_env = os.environ if env is None else env
    config_file = _determine_config_path(source_env, config_path)
    config = RuntimeConfig(config_source=config_file)

    if config_file is not None and config_file.is_file():
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(config_file, encoding="utf-8")
        except configparser.Error:
            logger.warning("Ignoring unreadable config file %s", config_file)
            parser = None
        section_name = f"{_SECTION_PREFIX}{driver}"
        if parser and parser.has_section(section_name):
            section = parser[section_name]
            config.remote_url = section.get("remote_url", config.remote_url)
            config.client = _get_lower(section, "client", config.client)
            config.capabilities = _get_json(section, "capabilities", config.capabilities)
            config.screenshot_dir = section.get("screenshot_dir", config.screenshot_dir)
            config.http_timeout = _get_float(section, "http_timeout", config.http_timeout)

    _apply_env_overrides(config, source_env)
    return config


def _determine_config_path(env: Mapping[str, str], explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        return explicit
    env_override = env.get(f"{_ENV_PREFIX}CONFIG_FILE")
    if env_override:
        return Path(env_override).expanduser()
    for candidate in (Path.cwd() / "browser_testing.ini", Path.cwd() / "browser-testing.ini"):
        if candidate.is_file():
            return candidate
    return None


def _apply_env_overrides(config: RuntimeConfig, env: Mapping[str, str]) -> None:
    config.remote_url = env.get(f"{_ENV_PREFIX}REMOTE_URL", config.remote_url)
    config.client = _get_lower(env, f"{_ENV_PREFIX}CLIENT", config.client)
    config.capabilities = _get_json(env, f"{_ENV_PREFIX}CAPABILITIES", config.capabilities)
    config.screenshot_dir = env.get(f"{_ENV_PREFIX}SCREENSHOT_DIR", config.screenshot_dir)
    config.http_timeout = _get_float(env, f"{_ENV_PREFIX}HTTP_TIMEOUT", config.http_timeout)


def _get_lower(source: Mapping[str, str], key: str, default: Optional[str]) -> Optional[str]:
    raw = source.get(key)
    if raw is None or not str(raw).strip():
        return default
    return str(raw).strip().lower()


def _get_float(source: Mapping[str, str], key: str, default: Optional[float]) -> Optional[float]:
    raw = source.get(key)
    if raw is None:
        return default
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _get_json(source: Mapping[str, str], key: str, default: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    raw = source.get(key)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring %s: not valid JSON", key)
        return default
    if not isinstance(value, dict):
        logger.warning("Ignoring %s: expected a JSON object", key)
        return default
    return value


_DRIVER_SETTINGS: Dict[str, DriverSettings] = {}


def settings_path(env: Mapping[str, str] | None = None) -> Optional[Path]:
    """Return the persisted settings file named in the environment, if any."""
    source_env = os.environ if env is None else env
    raw = source_env.get(f"{_ENV_PREFIX}SETTINGS_FILE")
    return Path(raw).expanduser() if raw else None


def get_driver_settings(driver: str) -> DriverSettings:
    """
    Return the process-wide settings for ``driver``.

    On first access the settings are loaded from the JSON file named by
    ``BROWSER_TESTING_SETTINGS_FILE`` (defaults when unset), the runtime
    overrides from the config file and environment are applied on top, and
    the result is cached.
    """
    settings = _DRIVER_SETTINGS.get(driver)
    if settings is None:
        settings_file = settings_path()
        settings = DriverSettings.load(settings_file) if settings_file is not None else DriverSettings()
        load_runtime_config(driver=driver).apply_to_settings(settings)
        _DRIVER_SETTINGS[driver] = settings
    return settings


def set_driver_settings(driver: str, settings: DriverSettings) -> None:
    _DRIVER_SETTINGS[driver] = settings


def configure_driver(driver: str, **fields: Any) -> DriverSettings:
    """Replace selected fields of the settings for ``driver`` and return the result."""
    settings = replace(get_driver_settings(driver), **fields)
    _DRIVER_SETTINGS[driver] = settings
    return settings


def reset_driver_settings(driver: Optional[str] = None) -> None:
    """Forget cached settings for one driver, or for all drivers."""
    if driver is None:
        _DRIVER_SETTINGS.clear()
    else:
        _DRIVER_SETTINGS.pop(driver, None)
