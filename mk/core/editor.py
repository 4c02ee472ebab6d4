"""
생성 후 에디터 실행.

에디터 결정 순서: --editor → $VISUAL → $EDITOR → notepad(Windows) / nano
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path

from mk.domain.errors import EditorLaunchError

logger = logging.getLogger(__name__)


def resolve_editor(explicit: str | None = None) -> str:
    if explicit:
        return explicit
    for var in ("VISUAL", "EDITOR"):
        value = os.environ.get(var)
        if value:
            return value
    return "notepad" if os.name == "nt" else "nano"


def open_in_editor(path: Path, editor: str | None = None) -> None:
    """
    에디터로 파일 열기 (종료까지 대기).

    Raises:
        EditorLaunchError: 실행 실패 또는 non-zero 종료
    """
    command = resolve_editor(editor)
    argv = shlex.split(command, posix=os.name != "nt") + [str(path)]
    logger.debug(f"launching editor: {argv}")

    try:
        completed = subprocess.run(argv, check=False)
    except OSError as e:
        raise EditorLaunchError(
            f"spawning editor: {e}",
            editor=command,
            path=str(path),
        ) from e

    if completed.returncode != 0:
        raise EditorLaunchError(
            "editor exited with non-zero status",
            editor=command,
            path=str(path),
            returncode=completed.returncode,
        )
