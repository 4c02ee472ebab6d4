"""
Legacy flat-file 설정: ~/.mk/mk.conf

형식 (key=value, # 주석, 따옴표 허용):
    auto_update_check=false
    extension_check="true"

구조화 설정(config.yaml)과 함께 사용. 파일 안에 키가 있으면
해당 boolean이 config.yaml 값보다 우선.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from mk.core.paths import legacy_config_path

logger = logging.getLogger(__name__)


@dataclass
class LegacyConfig:
    """mk.conf override 값. None = 파일에 키 없음."""
    auto_update_check: bool = False
    extension_check: bool | None = None

    def effective_extension_check(self, configured: bool) -> bool:
        """legacy 값이 있으면 우선, 없으면 config.yaml 값."""
        if self.extension_check is None:
            return configured
        return self.extension_check


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


def load_legacy(path: Path | None = None) -> LegacyConfig:
    """
    mk.conf 로드. 파일이 없거나 읽기 실패 시 기본값.

    Args:
        path: 설정 경로 (기본: ~/.mk/mk.conf)
    """
    path = path or legacy_config_path()
    legacy = LegacyConfig()
    if not path.is_file():
        return legacy

    try:
        values = dotenv_values(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"ignoring unreadable {path}: {e}")
        return legacy

    # "=" 없는 라인 (값 None)은 무시
    if values.get("auto_update_check") is not None:
        legacy.auto_update_check = _as_bool(values["auto_update_check"])
    if values.get("extension_check") is not None:
        legacy.extension_check = _as_bool(values["extension_check"])

    unknown = set(values) - {"auto_update_check", "extension_check"}
    if unknown:
        logger.debug(f"unknown keys in {path}: {sorted(unknown)}")
    return legacy
