"""
test_store.py - Config Store 테스트

핵심 규칙 검증:
- 설정 파일 없음 → builtin 기본값
- 파싱 실패 → ConfigParseError (파일 경로 포함)
- builtin 머지는 entry-or-insert (사용자 항목 보존)
- write_default: 기존 파일 + force 없음 → ConfigExistsError
- 머지 멱등성: write → load → write(force) → load 결과 동일
"""

from pathlib import Path

import pytest
import yaml

from mk.config.store import (
    ConfigStore,
    builtin_templates,
    default_config,
    merge_builtins,
)
from mk.domain.errors import ConfigExistsError, ConfigParseError
from mk.domain.schemas import Config, TemplateDef

BUILTIN_NAMES = {"default", "rs", "sh", "gd", "md", "py"}


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    return ConfigStore(config_path)


def write_yaml(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


# =============================================================================
# Builtins
# =============================================================================

class TestBuiltins:
    def test_builtin_names(self):
        assert {t.name for t in builtin_templates()} == BUILTIN_NAMES

    def test_sh_is_executable(self):
        sh = default_config().templates["sh"]
        assert sh.mode == "755"
        assert sh.body.startswith("#!/usr/bin/env bash\n")

    def test_md_body(self):
        assert default_config().templates["md"].body == "# {file_stem}\n\n"

    def test_fresh_instances(self):
        first = default_config()
        first.templates["md"].body = "mutated"
        assert default_config().templates["md"].body == "# {file_stem}\n\n"

    def test_merge_preserves_user_entry(self):
        config = Config(templates={"md": TemplateDef(name="md", ext="md", body="custom")})

        merged = merge_builtins(config)

        assert merged.templates["md"].body == "custom"
        assert set(merged.templates) == BUILTIN_NAMES


# =============================================================================
# Load
# =============================================================================

class TestLoad:
    def test_missing_file_uses_defaults(self, store: ConfigStore):
        config = store.load()

        assert set(config.templates) == BUILTIN_NAMES
        assert config.author is None
        assert not store.path.exists()

    def test_minimal_user_file(self, store: ConfigStore):
        write_yaml(store.path, {"author": "Ada"})

        config = store.load()

        assert config.author == "Ada"
        assert config.get_template("default") is not None
        assert config.get_template("rs").ext == "rs"

    def test_user_override_of_builtin(self, store: ConfigStore):
        write_yaml(store.path, {
            "templates": {
                "md": {"ext": "md", "body": "---\ntitle: {file_stem}\n---\n"},
                "notes": {"ext": "txt", "body": "NOTES\n", "mode": "600"},
            },
        })

        config = store.load()

        assert config.templates["md"].body == "---\ntitle: {file_stem}\n---\n"
        assert config.templates["notes"].mode == "600"
        assert set(config.templates) == BUILTIN_NAMES | {"notes"}

    def test_flags(self, store: ConfigStore):
        write_yaml(store.path, {
            "auto_parents": True,
            "extension_check": False,
            "apply_placeholders": False,
        })

        config = store.load()

        assert config.auto_parents is True
        assert config.extension_check is False
        assert config.apply_placeholders is False

    def test_empty_file(self, store: ConfigStore):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("")

        assert set(store.load().templates) == BUILTIN_NAMES

    def test_malformed_yaml(self, store: ConfigStore):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("templates: [unclosed\n")

        with pytest.raises(ConfigParseError) as exc_info:
            store.load()

        assert exc_info.value.context["path"] == str(store.path)
        assert "config.yaml" in exc_info.value.message

    def test_wrong_shape(self, store: ConfigStore):
        write_yaml(store.path, {"templates": {"md": "not a mapping"}})

        with pytest.raises(ConfigParseError):
            store.load()

    def test_root_not_mapping(self, store: ConfigStore):
        write_yaml(store.path, ["a", "b"])

        with pytest.raises(ConfigParseError):
            store.load()

    @pytest.mark.parametrize("key", ["apply_placeholders", "extension_check", "auto_parents"])
    def test_quoted_boolean_rejected(self, store: ConfigStore, key: str):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(f'{key}: "false"\n')

        with pytest.raises(ConfigParseError) as exc_info:
            store.load()

        assert key in exc_info.value.message
        assert exc_info.value.context["path"] == str(store.path)


# =============================================================================
# Template Modes
# =============================================================================

class TestTemplateModes:
    def load_mode(self, store: ConfigStore, raw_mode: str) -> str:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            f"templates:\n  sh:\n    ext: sh\n    mode: {raw_mode}\n    body: x\n"
        )
        return store.load().templates["sh"].mode

    @pytest.mark.parametrize(
        "raw_mode, expected",
        [("0755", "0755"), ("0644", "0644"), ("755", "755"), ('"700"', "700")],
    )
    def test_unquoted_octal_kept(self, store: ConfigStore, raw_mode: str, expected: str):
        assert self.load_mode(store, raw_mode) == expected

    @pytest.mark.parametrize("raw_mode", ["493", "rwx", "0789", "[7, 5, 5]"])
    def test_invalid_mode_rejected_at_load(self, store: ConfigStore, raw_mode: str):
        with pytest.raises(ConfigParseError) as exc_info:
            self.load_mode(store, raw_mode)

        assert exc_info.value.context["path"] == str(store.path)

    def test_other_integers_unchanged(self, store: ConfigStore):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("author: 0\ntemplates:\n  n:\n    body: x\n    ext: 10\n")

        config = store.load()

        assert config.author == "0"
        assert config.templates["n"].ext == "10"


# =============================================================================
# Write
# =============================================================================

class TestWriteDefault:
    def test_writes_yaml(self, store: ConfigStore):
        path = store.write_default()

        assert path == store.path
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert set(data["templates"]) == BUILTIN_NAMES
        assert data["templates"]["sh"]["mode"] == "755"
        assert data["extension_check"] is True

    def test_refuses_existing(self, store: ConfigStore):
        write_yaml(store.path, {"author": "Ada"})

        with pytest.raises(ConfigExistsError):
            store.write_default()

        assert yaml.safe_load(store.path.read_text()) == {"author": "Ada"}

    def test_force_overwrites(self, store: ConfigStore):
        write_yaml(store.path, {"author": "Ada"})

        store.write_default(force=True)

        assert store.load().author is None

    def test_merge_idempotent(self, store: ConfigStore):
        store.write_default()
        first = store.load()
        store.write_default(force=True)
        second = store.load()

        assert first.to_dict() == second.to_dict()
        assert first.to_dict() == default_config().to_dict()

    def test_save_round_trip_keeps_user_entry(self, store: ConfigStore):
        config = merge_builtins(Config(
            author="Ada",
            templates={"md": TemplateDef(name="md", ext="md", body="mine\n")},
        ))
        store.save(config)

        reloaded = store.load()
        store.save(reloaded)

        assert store.load().templates["md"].body == "mine\n"
