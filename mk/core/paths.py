"""
사용자별 경로 해석.

- config_dir: Windows %APPDATA%, macOS ~/Library/Application Support,
  그 외 $XDG_CONFIG_HOME 또는 ~/.config
- mk_home: $HOME/.mk (legacy 설정, 외부 템플릿 디렉터리)
"""

import os
import sys
from pathlib import Path

from mk.domain.constants import (
    APP_NAME,
    CONFIG_FILENAME,
    LEGACY_CONFIG_FILENAME,
    MK_HOME_DIRNAME,
    PLACEHOLDER_SCRIPT_FILENAME,
    TEMPLATES_DIRNAME,
)


def _home() -> Path:
    home = os.environ.get("HOME")
    return Path(home) if home else Path.home()


def config_dir() -> Path:
    """플랫폼별 사용자 설정 디렉터리 (앱 하위 폴더 제외)."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else _home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return _home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else _home() / ".config"


def app_config_dir() -> Path:
    return config_dir() / APP_NAME


def default_config_path() -> Path:
    return app_config_dir() / CONFIG_FILENAME


def user_placeholder_script() -> Path:
    return app_config_dir() / PLACEHOLDER_SCRIPT_FILENAME


def mk_home() -> Path:
    return _home() / MK_HOME_DIRNAME


def templates_dir() -> Path:
    return mk_home() / TEMPLATES_DIRNAME


def legacy_config_path() -> Path:
    return mk_home() / LEGACY_CONFIG_FILENAME
