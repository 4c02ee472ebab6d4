"""
Error definitions for mk.

규칙:
- 조용한 실패 금지 → MkError 하위 클래스로 명시적 실패
- 외부 placeholder 스크립트 실패는 예외 아님 (빈 map으로 degrade)
- overwrite 거절(prompt에서 n)은 에러 아님 → skipped 결과
"""

from typing import Any


class MkError(Exception):
    """
    mk 파이프라인 에러의 기반 클래스.

    Usage:
        raise PathConflictError(
            "path exists and is not a directory",
            path=str(target),
        )
    """

    code = "MK_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        base = f"[{self.code}] {self.message}"
        return f"{base} ({ctx_str})" if ctx_str else base

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Config ===
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"  # 치명적, 타겟 처리 전 중단
    CONFIG_EXISTS = "CONFIG_EXISTS"  # init만 실패

    # === Options ===
    FLAG_CONFLICT = "FLAG_CONFLICT"  # --force + --no-clobber
    INVALID_MODE = "INVALID_MODE"

    # === Target ===
    PATH_CONFLICT = "PATH_CONFLICT"  # 해당 타겟만 실패
    IO_ERROR = "IO_ERROR"

    # === Post-creation ===
    EDITOR_LAUNCH_FAILED = "EDITOR_LAUNCH_FAILED"


# =============================================================================
# Taxonomy
# =============================================================================

class ConfigParseError(MkError):
    """설정 파일 파싱 실패. 파일 경로를 context에 포함."""

    code = ErrorCodes.CONFIG_PARSE_ERROR


class ConfigExistsError(MkError):
    """force 없이 기존 설정 파일 덮어쓰기 시도."""

    code = ErrorCodes.CONFIG_EXISTS


class FlagConflictError(MkError):
    """상호 배타적인 옵션 조합."""

    code = ErrorCodes.FLAG_CONFLICT


class InvalidModeError(MkError):
    """8진수 파일 모드 문자열 파싱 실패."""

    code = ErrorCodes.INVALID_MODE


class PathConflictError(MkError):
    """타겟이 존재하지만 기대한 종류(파일/디렉터리)가 아님."""

    code = ErrorCodes.PATH_CONFLICT


class MkIOError(MkError):
    """읽기/쓰기/권한 실패."""

    code = ErrorCodes.IO_ERROR


class EditorLaunchError(MkError):
    """에디터 실행 실패 또는 non-zero 종료. 파일은 이미 생성된 상태."""

    code = ErrorCodes.EDITOR_LAUNCH_FAILED
