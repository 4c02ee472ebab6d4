"""
파일시스템 I/O 헬퍼.

규칙:
- OSError는 경로 정보를 담은 MkIOError로 변환 (해당 타겟만 실패)
- 설정 파일 쓰기는 원자적: temp → rename + fsync
- fsync 실패 시 경고 남기고 계속 진행
- mode 적용은 POSIX 전용, 그 외 플랫폼에서는 조용히 no-op
"""

import logging
import os
import tempfile
from pathlib import Path

from mk.domain.errors import InvalidModeError, MkIOError

logger = logging.getLogger(__name__)

# =============================================================================
# Read / Write
# =============================================================================


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise MkIOError(f"reading {path}: {e.strerror or e}", path=str(path)) from e


def write_bytes(path: Path, data: bytes) -> None:
    """파일 생성 또는 truncate 후 쓰기."""
    try:
        path.write_bytes(data)
    except OSError as e:
        raise MkIOError(f"writing {path}: {e.strerror or e}", path=str(path)) from e


def ensure_dir(path: Path, parents: bool = True) -> None:
    """디렉터리 생성 (parents=True면 mkdir -p)."""
    try:
        path.mkdir(parents=parents, exist_ok=parents)
    except OSError as e:
        raise MkIOError(f"creating {path}: {e.strerror or e}", path=str(path)) from e


def _fsync_dir(dir_path: Path) -> None:
    """디렉터리 fsync (가능한 환경에서)."""
    try:
        dir_fd = os.open(dir_path, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except OSError as e:
        logger.debug(f"Directory fsync skipped for {dir_path}: {e}")


def atomic_write_text(path: Path, text: str) -> None:
    """
    원자적 텍스트 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 실패 시 cleanup: temp 파일 삭제, 기존 파일 보존

    Args:
        path: 저장할 파일 경로
        text: 파일 내용

    Raises:
        MkIOError: 쓰기/rename 실패
    """
    dir_path = path.parent
    ensure_dir(dir_path)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except OSError as e:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise MkIOError(f"writing {path}: {e.strerror or e}", path=str(path)) from e


# =============================================================================
# File Mode
# =============================================================================


def parse_mode(octal: str) -> int:
    """
    8진수 mode 문자열 파싱 ("644", "0755", "0o600").

    Raises:
        InvalidModeError: 8진수가 아니거나 0o7777 초과
    """
    text = octal.strip().lower()
    if text.startswith("0o"):
        text = text[2:]
    try:
        value = int(text, 8)
    except ValueError:
        raise InvalidModeError(
            "parsing mode octal (e.g. 644)",
            mode=octal,
        ) from None
    if value > 0o7777:
        raise InvalidModeError("mode out of range", mode=octal)
    return value


def apply_mode(path: Path, octal: str) -> bool:
    """
    파일/디렉터리 mode 적용.

    Returns:
        적용 여부 (POSIX가 아니면 False, 에러 아님)

    Raises:
        InvalidModeError: mode 문자열 오류
        MkIOError: chmod 실패
    """
    value = parse_mode(octal)
    if os.name != "posix":
        logger.debug(f"mode {octal} ignored on this platform: {path}")
        return False
    try:
        os.chmod(path, value)
    except OSError as e:
        raise MkIOError(
            f"chmod {octal} {path}: {e.strerror or e}",
            path=str(path),
            mode=octal,
        ) from e
    return True
