"""
Config layer: 구조화 설정(config.yaml) + legacy 설정(mk.conf).
"""

from .legacy import LegacyConfig, load_legacy
from .store import ConfigStore, builtin_templates, default_config, merge_builtins

__all__ = [
    # store
    "ConfigStore",
    "builtin_templates",
    "default_config",
    "merge_builtins",
    # legacy
    "LegacyConfig",
    "load_legacy",
]
