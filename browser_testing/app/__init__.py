"""Application-level utilities (settings, runtime configuration)."""

from .settings import DriverSettings
from .configuration import (
    RuntimeConfig,
    configure_driver,
    get_driver_settings,
    load_runtime_config,
    reset_driver_settings,
    set_driver_settings,
    settings_path,
)
