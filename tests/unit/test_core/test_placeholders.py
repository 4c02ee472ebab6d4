"""
test_placeholders.py - Placeholder Source Aggregator 테스트

- builtin 4개 키
- 스크립트 탐색 순서 (./ → config dir)
- 출력 해석: table 우선, KEY=VALUE fallback, 잘못된 라인 버림
- 실패는 빈 map (예외 전파 없음)
- PlaceholderSource 메모이제이션 + 외부 값 우선
- apply: 모든 occurrence, 미매칭 토큰 유지
"""

import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from mk.core.placeholders import (
    TABLE_MARKER,
    PlaceholderSource,
    apply,
    builtins_for,
    find_script,
    parse_lines,
    parse_script_output,
    run_script,
    token_for,
)

FIXED_NOW = datetime(2024, 3, 9, 14, 5, 7)


# =============================================================================
# Builtins
# =============================================================================

class TestBuiltins:
    def test_keys_and_formats(self):
        values = builtins_for(Path("dir/report.txt"), now=FIXED_NOW)

        assert values == {
            "FILENAME": "report.txt",
            "DATE": "2024-03-09",
            "TIME": "14:05:07",
            "DATETIME": "2024-03-09 14:05:07",
        }


# =============================================================================
# Script Discovery
# =============================================================================

class TestFindScript:
    """탐색 순서."""

    def test_none_when_missing(self, work_dir: Path, tmp_path: Path):
        assert find_script(work_dir, tmp_path / "nope.lua") is None

    def test_local_wins(self, work_dir: Path, tmp_path: Path):
        local = work_dir / "mk_placeholders.lua"
        local.write_text("print('A=1')")
        user = tmp_path / "user.lua"
        user.write_text("print('A=2')")

        assert find_script(work_dir, user) == local

    def test_user_script_fallback(self, work_dir: Path, tmp_path: Path):
        user = tmp_path / "user.lua"
        user.write_text("print('A=2')")

        assert find_script(work_dir, user) == user

    def test_default_user_location(self, home_dir: Path, work_dir: Path):
        script = home_dir / ".config" / "mk" / "mk_placeholders.lua"
        script.parent.mkdir(parents=True)
        script.write_text("return {}")

        assert find_script(work_dir) == script


# =============================================================================
# Output Parsing
# =============================================================================

class TestParseOutput:
    """KEY=VALUE / table 출력 해석."""

    def test_parse_lines_discards_invalid(self):
        text = "PROJECT=mk\nno delimiter\n=empty key\n  OWNER =  ada  \nURL=a=b\n"

        assert parse_lines(text) == {
            "PROJECT": "mk",
            "OWNER": "ada",
            "URL": "a=b",
        }

    def test_table_takes_precedence(self):
        stdout = f"PRINTED=1\n\n{TABLE_MARKER}\nFROM_TABLE=2\n"
        assert parse_script_output(stdout) == {"FROM_TABLE": "2"}

    def test_printed_lines_when_no_table(self):
        stdout = f"PRINTED=1\n\n{TABLE_MARKER}\n"
        assert parse_script_output(stdout) == {"PRINTED": "1"}

    def test_printed_lines_when_script_exits_early(self):
        """wrapper marker 없음 (os.exit 등) → 출력 라인 사용."""
        assert parse_script_output("A=1\nB=2\n") == {"A": "1", "B": "2"}


# =============================================================================
# Script Execution
# =============================================================================

class TestRunScript:
    """인터프리터 실행 (subprocess mock)."""

    def test_uses_wrapper_and_parses(self, tmp_path: Path):
        script = tmp_path / "p.lua"
        completed = subprocess.CompletedProcess(
            args=[], returncode=0, stdout=f"\n{TABLE_MARKER}\nTEAM=core\n", stderr="",
        )

        with patch("mk.core.placeholders.subprocess.run", return_value=completed) as run:
            result = run_script(script, interpreter="lua5.4")

        assert result == {"TEAM": "core"}
        argv = run.call_args.args[0]
        assert argv == ["lua5.4", "-", str(script)]
        assert "pcall(dofile, arg[1])" in run.call_args.kwargs["input"]

    def test_missing_interpreter_returns_empty(self, tmp_path: Path):
        with patch(
            "mk.core.placeholders.subprocess.run",
            side_effect=FileNotFoundError("lua"),
        ):
            assert run_script(tmp_path / "p.lua") == {}

    def test_nonzero_exit_still_uses_printed_lines(self, tmp_path: Path):
        completed = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="A=1\n", stderr="lua: error",
        )
        with patch("mk.core.placeholders.subprocess.run", return_value=completed):
            assert run_script(tmp_path / "p.lua") == {"A": "1"}

    @pytest.mark.skipif(shutil.which("lua") is None, reason="lua not installed")
    def test_real_interpreter_table(self, tmp_path: Path):
        script = tmp_path / "table.lua"
        script.write_text('print("IGNORED=1")\nreturn { TEAM = "core" }\n')

        assert run_script(script) == {"TEAM": "core"}

    @pytest.mark.skipif(shutil.which("lua") is None, reason="lua not installed")
    def test_real_interpreter_print_and_error(self, tmp_path: Path):
        script = tmp_path / "broken.lua"
        script.write_text('print("OWNER=ada")\nerror("boom")\n')

        assert run_script(script) == {"OWNER": "ada"}


class TestPlaceholderSource:
    """invocation 범위 메모이제이션."""

    def test_runs_script_once(self, work_dir: Path):
        (work_dir / "mk_placeholders.lua").write_text("return {}")
        calls = []

        def runner(script: Path, interpreter: str) -> dict[str, str]:
            calls.append(script)
            return {"OWNER": "ada"}

        source = PlaceholderSource(cwd=work_dir, runner=runner)

        assert source.external() == {"OWNER": "ada"}
        assert source.external() == {"OWNER": "ada"}
        assert len(calls) == 1

    def test_no_script_no_run(self, work_dir: Path):
        def runner(script: Path, interpreter: str) -> dict[str, str]:
            raise AssertionError("must not run")

        source = PlaceholderSource(cwd=work_dir, runner=runner)
        assert source.external() == {}

    def test_cache_not_mutated_by_caller(self, work_dir: Path):
        (work_dir / "mk_placeholders.lua").write_text("return {}")
        source = PlaceholderSource(cwd=work_dir, runner=lambda s, i: {"A": "1"})

        source.external()["A"] = "changed"

        assert source.external() == {"A": "1"}

    def test_external_overrides_builtins(self, work_dir: Path):
        (work_dir / "mk_placeholders.lua").write_text("return {}")
        source = PlaceholderSource(
            cwd=work_dir,
            runner=lambda s, i: {"DATE": "someday", "OWNER": "ada"},
        )

        mapping = source.for_path(Path("x.txt"), now=FIXED_NOW)

        assert mapping["DATE"] == "someday"
        assert mapping["OWNER"] == "ada"
        assert mapping["FILENAME"] == "x.txt"
        assert mapping["TIME"] == "14:05:07"


# =============================================================================
# Apply
# =============================================================================

class TestApply:
    def test_token_format(self):
        assert token_for("DATE") == "<{&DATE&}>"

    def test_every_occurrence(self):
        content = "<{&A&}> and <{&A&}> and <{&B&}>"
        assert apply(content, {"A": "1", "B": "2"}) == "1 and 1 and 2"

    def test_unmatched_left_verbatim(self):
        content = "<{&KNOWN&}> <{&UNKNOWN&}> <{&known&}>"
        assert apply(content, {"KNOWN": "x"}) == "x <{&UNKNOWN&}> <{&known&}>"
