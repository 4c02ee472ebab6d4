"""
Pytest fixtures for mk tests.

모든 테스트는 격리된 HOME / XDG_CONFIG_HOME / 작업 디렉터리에서 실행:
- 실제 사용자 설정(~/.config/mk, ~/.mk)을 읽거나 쓰지 않음
- ./mk_placeholders.lua 탐색이 tmp 작업 디렉터리 기준
"""

from pathlib import Path

import pytest

from mk.domain.schemas import Config, TemplateDef

# =============================================================================
# Environment Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """격리된 HOME (설정 디렉터리 포함)."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("APPDATA", str(home / "AppData"))
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    return home


@pytest.fixture(autouse=True)
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """타겟을 생성할 작업 디렉터리 (cwd)."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def config_path(home_dir: Path) -> Path:
    """격리 환경의 config.yaml 경로."""
    return home_dir / ".config" / "mk" / "config.yaml"


@pytest.fixture
def templates_root(home_dir: Path) -> Path:
    """격리 환경의 ~/.mk/.templates (생성하지 않음)."""
    return home_dir / ".mk" / ".templates"


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def sample_config() -> Config:
    """builtin 일부 + 사용자 템플릿을 가진 설정."""
    return Config(
        author="Jane Doe",
        templates={
            "default": TemplateDef(name="default", body="{file_name}\n"),
            "md": TemplateDef(name="md", ext="md", body="# {file_stem}\n\n"),
            "sh": TemplateDef(
                name="sh",
                ext="sh",
                mode="755",
                body="#!/usr/bin/env bash\n",
            ),
            "header": TemplateDef(
                name="header",
                body="// {file_name} ({year}) by {author}\n",
            ),
        },
    )
