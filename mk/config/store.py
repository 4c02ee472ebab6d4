"""
Config Store: config.yaml 로드/머지/기본값 쓰기.

핵심 규칙:
- 설정 파일 없음 → builtin 기본값 그대로
- 파싱 실패 → ConfigParseError (파일 경로 포함), 타겟 처리 전 중단
- 로드 후 builtin 머지는 entry-or-insert: 같은 이름의 사용자 항목은 보존
- write_default: 기존 파일이 있고 force=False면 ConfigExistsError
"""

import logging
import re
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import yaml
from filelock import FileLock, Timeout

from mk.core.fsio import atomic_write_text, ensure_dir, parse_mode
from mk.core.paths import default_config_path
from mk.domain.constants import CONFIG_LOCK_SUFFIX
from mk.domain.errors import (
    ConfigExistsError,
    ConfigParseError,
    InvalidModeError,
    MkIOError,
)
from mk.domain.schemas import Config, TemplateDef

logger = logging.getLogger(__name__)

# =============================================================================
# YAML Loader
# =============================================================================

# YAML 1.1 octal 정수 (예: 0755)
_LEGACY_OCTAL = re.compile(r"[-+]?0[0-7_]+")


class ConfigLoader(yaml.SafeLoader):
    """
    config.yaml 전용 SafeLoader.

    0755 같은 leading-zero 정수는 원문 문자열로 유지
    (mode: 0755 가 493으로 바뀌지 않도록).
    """


def _construct_int(loader: ConfigLoader, node: yaml.ScalarNode):
    if _LEGACY_OCTAL.fullmatch(node.value):
        return node.value
    return loader.construct_yaml_int(node)


ConfigLoader.add_constructor("tag:yaml.org,2002:int", _construct_int)

# =============================================================================
# Builtin Templates
# =============================================================================

RS_BODY = """\
// {file_name} - created {date}
// Author: {author}

fn main() {
    println!("Hello, {file_stem}!");
}
"""

PY_BODY = '''\
"""
{file_name}

Author: {author}
Created: {date}
"""
'''


def builtin_templates() -> list[TemplateDef]:
    """builtin 템플릿 목록 (호출마다 새 인스턴스)."""
    return [
        TemplateDef(name="default", body="{file_name}\n"),
        TemplateDef(name="rs", ext="rs", body=RS_BODY),
        TemplateDef(
            name="sh",
            ext="sh",
            mode="755",
            body="#!/usr/bin/env bash\nset -euo pipefail\n\n",
        ),
        TemplateDef(name="gd", ext="gd", body="extends Node\n"),
        TemplateDef(name="md", ext="md", body="# {file_stem}\n\n"),
        TemplateDef(name="py", ext="py", body=PY_BODY),
    ]


def default_config() -> Config:
    """builtin 템플릿만 가진 기본 설정."""
    return Config(templates={t.name: t for t in builtin_templates()})


def merge_builtins(config: Config) -> Config:
    """없는 builtin만 추가 (사용자 정의 항목은 덮어쓰지 않음)."""
    for tmpl in builtin_templates():
        config.templates.setdefault(tmpl.name, tmpl)
    return config


# =============================================================================
# Config Store
# =============================================================================


class ConfigStore:
    """
    config.yaml 저장소.

    위치: <config_dir>/mk/config.yaml
    """

    # 락 timeout (초)
    LOCK_TIMEOUT = 10.0

    def __init__(self, path: Path | None = None):
        """
        Args:
            path: 설정 파일 경로 (기본: 플랫폼별 사용자 설정 디렉터리)
        """
        self.path = path or default_config_path()
        self._lock_path = self.path.with_name(self.path.name + CONFIG_LOCK_SUFFIX)

    @contextmanager
    def _config_lock(self) -> Generator[None, None, None]:
        """
        설정 파일 쓰기 락.

        Raises:
            MkIOError: 락 획득 timeout
        """
        ensure_dir(self._lock_path.parent)
        lock = FileLock(self._lock_path, timeout=self.LOCK_TIMEOUT)

        try:
            lock.acquire()
            yield
        except Timeout:
            raise MkIOError(
                f"Failed to acquire lock for config '{self.path}'",
                path=str(self.path),
                timeout=self.LOCK_TIMEOUT,
            )
        finally:
            lock.release()

    # =========================================================================
    # Load
    # =========================================================================

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Config:
        """
        설정 로드 + builtin 머지.

        Returns:
            Config (파일 없으면 builtin 기본값)

        Raises:
            ConfigParseError: YAML 오류 또는 스키마 불일치
            MkIOError: 읽기 실패
        """
        if not self.path.exists():
            logger.debug(f"no config at {self.path}, using builtin defaults")
            return default_config()

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise MkIOError(
                f"reading config: {e.strerror or e}",
                path=str(self.path),
            ) from e

        try:
            data = yaml.load(text, Loader=ConfigLoader)
        except yaml.YAMLError as e:
            raise ConfigParseError(
                f"parsing {self.path.name}: {e}",
                path=str(self.path),
            ) from e

        # 빈 파일은 빈 설정으로 취급
        if data is None:
            data = {}

        try:
            config = Config.from_dict(data)
            for tmpl in config.templates.values():
                if tmpl.mode is not None:
                    parse_mode(tmpl.mode)
        except (TypeError, ValueError, InvalidModeError) as e:
            raise ConfigParseError(
                f"parsing {self.path.name}: {e}",
                path=str(self.path),
            ) from e

        return merge_builtins(config)

    # =========================================================================
    # Write
    # =========================================================================

    def write_default(self, force: bool = False) -> Path:
        """
        builtin 기본 설정을 파일로 저장.

        Args:
            force: 기존 파일 덮어쓰기 허용

        Returns:
            저장된 설정 파일 경로

        Raises:
            ConfigExistsError: 파일이 있고 force=False
        """
        with self._config_lock():
            if self.path.exists() and not force:
                raise ConfigExistsError(
                    f"config exists: {self.path} (use --force to overwrite)",
                    path=str(self.path),
                )
            self.save(default_config())
        return self.path

    def save(self, config: Config) -> Path:
        """설정을 YAML로 원자적 저장."""
        text = yaml.safe_dump(
            config.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        atomic_write_text(self.path, text)
        logger.debug(f"wrote config {self.path}")
        return self.path
