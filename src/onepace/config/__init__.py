"""Configuration package.

Models, environment reader and the precedence-aware loader.
"""

from onepace.config.env import EnvReader
from onepace.config.loader import (
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config,
    load_config_file,
)
from onepace.config.models import (
    CatalogConfig,
    ImagesConfig,
    LoggingConfig,
    MatchingConfig,
    OnePaceConfig,
    UpdateConfig,
)

__all__ = [
    "CatalogConfig",
    "EnvReader",
    "ImagesConfig",
    "LoggingConfig",
    "MatchingConfig",
    "OnePaceConfig",
    "UpdateConfig",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config",
    "load_config_file",
]
