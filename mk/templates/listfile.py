"""
List file 파싱: 한 줄에 타겟 하나 + 줄 단위 옵션.

형식:
    # 주석
    src/main.rs -t=rs
    bin/run.sh --chmod=700 -y
    notes/ -d
    README.md -o

지원 옵션:
    -t= / --template=       템플릿 이름
    -c= / --chmod= / -m= / --mode=   8진수 mode
    -o / --open             생성 후 에디터로 열기
    --no-template           외부 템플릿/placeholder 미적용
    -y / --yes, -f / --force   덮어쓰기 (no_clobber 해제)
    -n / --no               덮어쓰지 않음 (force 해제)
    -d / --dir, --file      디렉터리/파일 강제
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from mk.domain.schemas import CreateOptions

logger = logging.getLogger(__name__)

TEMPLATE_PREFIXES = ("-t=", "--template=")
MODE_PREFIXES = ("-c=", "--chmod=", "-m=", "--mode=")


@dataclass
class ListEntry:
    """list file 한 줄."""
    target: Path
    options: CreateOptions
    open: bool = False
    line_no: int = 0


def _value_after(arg: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        if arg.startswith(prefix):
            return arg[len(prefix):]
    return None


def parse_list(
    text: str,
    base: CreateOptions,
    open_default: bool = False,
) -> list[ListEntry]:
    """
    list file 내용 → ListEntry 목록.

    Args:
        text: list file 내용
        base: 명령줄 옵션 (줄 단위 옵션의 기본값)
        open_default: 명령줄 --open 값

    Returns:
        파일 순서대로의 ListEntry 목록
    """
    entries = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        path_str, *args = line.split()
        options = replace(base)
        open_file = open_default

        for arg in args:
            template = _value_after(arg, TEMPLATE_PREFIXES)
            mode = _value_after(arg, MODE_PREFIXES)
            if template is not None:
                options.template = template
            elif mode is not None:
                options.mode = mode
            elif arg in ("-o", "--open"):
                open_file = True
            elif arg == "--no-template":
                options.no_template = True
            elif arg in ("-y", "--yes", "-f", "--force"):
                options.force = True
                options.no_clobber = False
            elif arg in ("-n", "--no"):
                options.no_clobber = True
                options.force = False
            elif arg in ("-d", "--dir"):
                options.as_dir = True
            elif arg == "--file":
                options.as_dir = False
            else:
                logger.warning(f"list line {line_no}: ignoring unknown option {arg!r}")

        entries.append(
            ListEntry(
                target=Path(path_str),
                options=options,
                open=open_file,
                line_no=line_no,
            )
        )
    return entries
