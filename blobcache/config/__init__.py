"""
Config Module — Store configuration loading.
"""

from .loader import ENV_VARS, MASTER_ENV_VAR, StoreConfig, load_config, load_config_file

__all__ = [
    "StoreConfig",
    "load_config",
    "load_config_file",
    "ENV_VARS",
    "MASTER_ENV_VAR",
]
