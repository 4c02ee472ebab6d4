"""
Placeholder Source Aggregator: <{&KEY&}> 치환용 map 구성.

레이어 (나중 것이 우선):
1. builtin runtime 값: FILENAME, DATE, TIME, DATETIME
2. 외부 Lua 스크립트 값: table 반환 또는 KEY=VALUE 출력

외부 스크립트는 best-effort:
- 인터프리터 없음 / 스크립트 에러 → 빈 map (예외 전파 안 함)
- 인터프리터 기동 비용 때문에 invocation당 1회만 실행 (PlaceholderSource)
"""

import logging
import subprocess
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from mk.core.paths import user_placeholder_script
from mk.domain.constants import (
    DATE_FORMAT,
    DATETIME_FORMAT,
    DEFAULT_LUA_INTERPRETER,
    PLACEHOLDER_DATE,
    PLACEHOLDER_DATETIME,
    PLACEHOLDER_FILENAME,
    PLACEHOLDER_SCRIPT_FILENAME,
    PLACEHOLDER_TIME,
    PLACEHOLDER_TOKEN_PREFIX,
    PLACEHOLDER_TOKEN_SUFFIX,
    TIME_FORMAT,
)

logger = logging.getLogger(__name__)

# 스크립트 출력과 반환 table 경계
TABLE_MARKER = "__MK_PLACEHOLDER_TABLE__"

# 스크립트를 pcall로 실행하고, table 반환 시 marker 뒤에 key=value로 출력.
# 스크립트 경로는 arg[1].
LUA_WRAPPER = f"""\
local ok, result = pcall(dofile, arg[1])
io.stdout:write("\\n{TABLE_MARKER}\\n")
if ok and type(result) == "table" then
  for k, v in pairs(result) do
    io.stdout:write(tostring(k), "=", tostring(v), "\\n")
  end
end
"""

# =============================================================================
# Builtins
# =============================================================================


def builtins_for(path: Path, now: datetime | None = None) -> dict[str, str]:
    """
    runtime builtin placeholder 값.

    Args:
        path: 타겟 경로
        now: 기준 시각 (테스트용)

    Returns:
        FILENAME, DATE, TIME, DATETIME 4개 키
    """
    now = now or datetime.now()
    return {
        PLACEHOLDER_FILENAME: path.name,
        PLACEHOLDER_DATE: now.strftime(DATE_FORMAT),
        PLACEHOLDER_TIME: now.strftime(TIME_FORMAT),
        PLACEHOLDER_DATETIME: now.strftime(DATETIME_FORMAT),
    }


# =============================================================================
# External Script
# =============================================================================


def find_script(
    cwd: Path | None = None,
    user_script: Path | None = None,
) -> Path | None:
    """
    외부 placeholder 스크립트 탐색.

    순서: ./mk_placeholders.lua → <config_dir>/mk/mk_placeholders.lua
    """
    local = (cwd or Path.cwd()) / PLACEHOLDER_SCRIPT_FILENAME
    if local.is_file():
        return local
    home = user_script or user_placeholder_script()
    if home.is_file():
        return home
    return None


def parse_lines(text: str) -> dict[str, str]:
    """KEY=VALUE 라인 파싱. '=' 없거나 key가 빈 라인은 버림."""
    result: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        result[key] = value.strip()
    return result


def parse_script_output(stdout: str) -> dict[str, str]:
    """
    wrapper 출력 해석.

    marker 뒤 table 값이 하나라도 있으면 table 우선,
    아니면 스크립트가 print한 KEY=VALUE 라인 사용.
    """
    printed, marker, table = stdout.partition(f"\n{TABLE_MARKER}\n")
    if marker:
        from_table = parse_lines(table)
        if from_table:
            return from_table
    return parse_lines(printed)


def run_script(
    script: Path,
    interpreter: str = DEFAULT_LUA_INTERPRETER,
) -> dict[str, str]:
    """
    Lua 스크립트를 별도 인터프리터 프로세스에서 실행.

    Returns:
        key → value map, 실패 시 빈 map
    """
    try:
        completed = subprocess.run(
            [interpreter, "-", str(script)],
            input=LUA_WRAPPER,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        logger.debug(f"placeholder script not run ({interpreter}): {e}")
        return {}

    if completed.returncode != 0:
        logger.debug(
            f"placeholder script exited {completed.returncode}: "
            f"{completed.stderr.strip()}"
        )
    return parse_script_output(completed.stdout)


class PlaceholderSource:
    """
    invocation 범위 placeholder 소스.

    외부 스크립트 결과는 첫 사용 시 계산되어 이 인스턴스 수명 동안 재사용.
    단일 스레드 전제 (타겟은 순차 처리).
    """

    def __init__(
        self,
        cwd: Path | None = None,
        user_script: Path | None = None,
        interpreter: str = DEFAULT_LUA_INTERPRETER,
        runner: Callable[[Path, str], dict[str, str]] = run_script,
    ):
        self.cwd = cwd
        self.user_script = user_script
        self.interpreter = interpreter
        self._runner = runner
        self._external: dict[str, str] | None = None

    def external(self) -> dict[str, str]:
        if self._external is None:
            script = find_script(self.cwd, self.user_script)
            if script is None:
                self._external = {}
            else:
                logger.debug(f"running placeholder script {script}")
                self._external = self._runner(script, self.interpreter)
        return dict(self._external)

    def for_path(self, path: Path, now: datetime | None = None) -> dict[str, str]:
        """builtin 먼저, 외부 값이 같은 키를 덮어씀."""
        mapping = builtins_for(path, now)
        mapping.update(self.external())
        return mapping


# =============================================================================
# Apply
# =============================================================================


def token_for(key: str) -> str:
    return f"{PLACEHOLDER_TOKEN_PREFIX}{key}{PLACEHOLDER_TOKEN_SUFFIX}"


def apply(content: str, mapping: dict[str, str]) -> str:
    """모든 키의 <{&KEY&}> 토큰을 전부 치환. 매칭 안 된 토큰은 그대로."""
    for key, value in mapping.items():
        content = content.replace(token_for(key), value)
    return content
