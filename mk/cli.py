"""
mk - Just Make It: 템플릿 기반 파일/디렉터리 생성 CLI.

사용법:
    # 파일 생성 (확장자로 내부 템플릿 선택)
    mk README.md src/main.rs -p

    # 템플릿 지정 + mode
    mk bin/run -t sh -m 700

    # stdin 내용으로 생성
    echo "hello" | mk notes.txt --stdin

    # list file (줄 단위 옵션 지원)
    mk -l targets.txt

    # 미리보기
    mk src/lib.rs --dry-run

    # 설정 초기화 / 템플릿 목록
    mk init [--force]
    mk templates
    mk --list-templates
"""

import argparse
import logging
import sys
from pathlib import Path

from mk import __version__
from mk.config.legacy import load_legacy
from mk.config.store import ConfigStore
from mk.core.editor import open_in_editor
from mk.core.logging import configure_logging
from mk.core.placeholders import PlaceholderSource
from mk.domain.errors import (
    ConfigExistsError,
    EditorLaunchError,
    MkError,
    MkIOError,
)
from mk.domain.schemas import CreateOptions, CreateResult, CreateStatus, TargetKind
from mk.templates.listfile import ListEntry, parse_list
from mk.templates.materializer import Materializer, validate_options
from mk.templates.resolver import TemplateResolver

logger = logging.getLogger(__name__)

SUBCOMMANDS = ("init", "templates")

# =============================================================================
# Parsers
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mk",
        description="Just Make It - fast file/dir creation from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="subcommands:\n  init [--force]   write default config\n"
               "  templates        list config templates",
    )
    parser.add_argument("targets", nargs="*", type=Path, metavar="PATH",
                        help="생성할 경로 (파일/디렉터리)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="진단 로그 출력")
    parser.add_argument("-f", "-y", "--force", "--yes", dest="force",
                        action="store_true",
                        help="기존 파일 덮어쓰기")
    parser.add_argument("-n", "--no-clobber", "--no", dest="no_clobber",
                        action="store_true",
                        help="기존 파일 덮어쓰지 않음")
    parser.add_argument("-p", "--parents", action="store_true",
                        help="부모 디렉터리 생성")
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("-d", "--dir", action="store_true",
                      help="타겟을 디렉터리로 처리")
    kind.add_argument("--file", action="store_true",
                      help="타겟을 파일로 처리")
    parser.add_argument("-t", "--template", metavar="NAME|EXT",
                        help="템플릿 이름 (~/.mk/.templates 파일) 또는 확장자")
    parser.add_argument("--no-template", action="store_true",
                        help="외부 템플릿 파일/placeholder 미적용")
    parser.add_argument("-m", "-c", "--mode", "--chmod", dest="mode",
                        metavar="OCTAL",
                        help="파일 mode (Unix 전용, 예: 644, 755)")
    parser.add_argument("-o", "--open", action="store_true",
                        help="생성 후 $VISUAL/$EDITOR로 열기")
    parser.add_argument("--editor", metavar="EDITOR",
                        help="--open에 사용할 에디터 명령")
    parser.add_argument("--stdin", action="store_true",
                        help="stdin 내용을 파일에 쓰기")
    parser.add_argument("-l", "--list", dest="list_file", type=Path,
                        metavar="FILE",
                        help="list file에서 타겟 읽기 (한 줄에 하나)")
    parser.add_argument("--list-templates", action="store_true",
                        help="~/.mk/.templates의 템플릿 목록")
    parser.add_argument("--dry-run", action="store_true",
                        help="실제 생성 없이 미리보기")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mk init",
        description="기본 설정 파일 생성",
    )
    parser.add_argument("-f", "--force", action="store_true",
                        help="기존 설정 덮어쓰기")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


# =============================================================================
# Commands
# =============================================================================


def _error(message: str) -> None:
    print(f"mk: error: {message}", file=sys.stderr)


def cmd_init(force: bool = False) -> int:
    store = ConfigStore()
    try:
        path = store.write_default(force=force)
    except ConfigExistsError as e:
        _error(e.message)
        return 1
    except MkError as e:
        _error(str(e))
        return 1

    print(f"mk: wrote default config to {path}")
    return 0


def cmd_templates() -> int:
    try:
        config = ConfigStore().load()
    except MkError as e:
        _error(str(e))
        return 1

    for name, tmpl in config.templates.items():
        suffix = f" (.{tmpl.ext})" if tmpl.ext else ""
        print(f"{name}{suffix}")
    return 0


def cmd_list_templates(resolver: TemplateResolver) -> int:
    templates = resolver.list_templates()
    if not templates:
        print(f"No templates in {resolver.root}")
        return 0

    print("Available templates:")
    for path in templates:
        print(f"  - {path.name}")
    return 0


def _base_options(args: argparse.Namespace) -> CreateOptions:
    as_dir = True if args.dir else (False if args.file else None)
    return CreateOptions(
        force=args.force,
        no_clobber=args.no_clobber,
        parents=args.parents,
        mode=args.mode,
        template=args.template,
        no_template=args.no_template,
        dry_run=args.dry_run,
        as_dir=as_dir,
    )


def _collect_entries(
    args: argparse.Namespace,
    base: CreateOptions,
) -> list[ListEntry]:
    """명령줄 타겟 + list file 항목 (list file이 있으면 그것만)."""
    if args.list_file is not None:
        try:
            text = args.list_file.read_text(encoding="utf-8")
        except OSError as e:
            raise MkIOError(
                f"reading list {args.list_file}: {e.strerror or e}",
                path=str(args.list_file),
            ) from e
        return parse_list(text, base, open_default=args.open)

    return [ListEntry(target=t, options=base, open=args.open) for t in args.targets]


def _report(result: CreateResult) -> None:
    if result.status == CreateStatus.FAILED:
        _error(result.message)
    else:
        print(f"mk: {result.message}")


def run(args: argparse.Namespace) -> int:
    """타겟 생성 실행. 반환값은 exit code."""
    resolver = TemplateResolver()
    if args.list_templates:
        return cmd_list_templates(resolver)

    base = _base_options(args)
    try:
        validate_options(base)
    except MkError as e:
        _error(str(e))
        return 1

    if not args.targets and args.list_file is None:
        _error("No targets provided. Try: mk README.md src/main.rs -p -t rs")
        return 1

    if args.stdin:
        base.content = sys.stdin.buffer.read()

    try:
        config = ConfigStore().load()
        entries = _collect_entries(args, base)
    except MkError as e:
        _error(str(e))
        return 1

    legacy = load_legacy()
    if legacy.auto_update_check:
        logger.debug("auto_update_check is set; update checks are not performed")

    materializer = Materializer(
        config,
        resolver=resolver,
        placeholders=PlaceholderSource(),
        extension_check=legacy.effective_extension_check(config.extension_check),
    )

    exit_code = 0
    try:
        results = materializer.iter_create((e.target, e.options) for e in entries)
        for entry, result in zip(entries, results):
            _report(result)
            if not result.ok:
                exit_code = 1
                continue
            if not entry.open or result.kind != TargetKind.FILE:
                continue
            if result.status not in (CreateStatus.CREATED, CreateStatus.OVERWRITTEN):
                continue
            try:
                open_in_editor(result.path, args.editor)
            except EditorLaunchError as e:
                _error(str(e))
                exit_code = 1
    except MkError as e:
        _error(str(e))
        return 1

    return exit_code


def _subcommand(args: argparse.Namespace, argv: list[str]) -> str | None:
    """
    옵션 뒤에 온 subcommand (예: mk -v init).

    타겟이 subcommand 이름 하나뿐이고 argv에 그대로 적힌 경우만
    (./init 처럼 경로로 적으면 타겟).
    """
    if len(args.targets) != 1:
        return None
    name = str(args.targets[0])
    if name in SUBCOMMANDS and name in argv:
        return name
    return None


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] == "init":
        init_args = build_init_parser().parse_args(argv[1:])
        configure_logging(init_args.verbose)
        return cmd_init(init_args.force)
    if argv and argv[0] == "templates":
        configure_logging("-v" in argv or "--verbose" in argv)
        return cmd_templates()

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    command = _subcommand(args, argv)
    if command == "init":
        return cmd_init(args.force)
    if command == "templates":
        return cmd_templates()
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
