"""
Materializer: 타겟 하나를 파일/디렉터리로 생성.

상태 흐름 (파일):
    CheckExists → {Skip, Prompt, Proceed}
    → WriteBody → ApplyExternalTemplate? → ApplyPlaceholders? → SetMode? → Done

규칙:
- force + no_clobber 동시 지정 → FlagConflictError (어떤 타겟도 건드리기 전)
- 초기 본문: 외부 입력(content)이 있으면 그것, 없으면 내부 템플릿 렌더 결과
- 외부 템플릿 파일이 있으면 초기 본문을 통째로 대체 (merge 아님)
- placeholder 치환은 config.apply_placeholders일 때만, 디스크 내용 기준
- mode: 명시 옵션 > 템플릿 mode, 둘 다 없으면 OS 기본값
- dry_run: 설명만 반환, 파일시스템 변경 없음
- 타겟은 순차 처리, 한 타겟의 실패가 나머지를 중단시키지 않음
"""

import logging
import sys
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from mk.core import placeholders as ph
from mk.core.context import build_context, render
from mk.core.fsio import apply_mode, ensure_dir, parse_mode, read_bytes, write_bytes
from mk.core.placeholders import PlaceholderSource
from mk.domain.constants import AFFIRMATIVE_ANSWERS, PLACEHOLDER_TOKEN_PREFIX
from mk.domain.errors import (
    FlagConflictError,
    InvalidModeError,
    MkIOError,
    PathConflictError,
)
from mk.domain.schemas import (
    Config,
    CreateOptions,
    CreateResult,
    CreateStatus,
    TargetKind,
    TemplateDef,
)
from mk.templates.resolver import TemplateResolver

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]

# 타겟 단위로 처리하고 계속 진행하는 에러
TARGET_ERRORS = (PathConflictError, MkIOError, InvalidModeError)


def stdin_prompt(question: str) -> str:
    """stderr로 질문, stdin에서 한 줄 읽기 (EOF면 빈 문자열 = 거절)."""
    sys.stderr.write(question)
    sys.stderr.flush()
    return sys.stdin.readline()


def validate_options(options: CreateOptions) -> None:
    """
    파일시스템 접근 전 옵션 검증.

    Raises:
        FlagConflictError: force + no_clobber
        InvalidModeError: mode가 8진수가 아님
    """
    if options.force and options.no_clobber:
        raise FlagConflictError("--no-clobber and --force are mutually exclusive")
    if options.mode is not None:
        parse_mode(options.mode)


def is_directory_target(target: Path, options: CreateOptions) -> bool:
    """
    디렉터리로 처리할지 결정.

    순서: 명시(as_dir) → 기존 디렉터리 → 확장자/템플릿/입력 모두 없음
    """
    if options.as_dir is not None:
        return options.as_dir
    if target.is_dir():
        return True
    return (
        options.template is None
        and options.content is None
        and not target.suffix
    )


class Materializer:
    """
    템플릿 → 파일시스템 materialization.

    Config Store, Template Resolver, Placeholder Source를 조합.
    resolver/placeholders 캐시는 이 인스턴스(=한 번의 실행) 동안만 유효.
    """

    def __init__(
        self,
        config: Config,
        resolver: TemplateResolver | None = None,
        placeholders: PlaceholderSource | None = None,
        extension_check: bool | None = None,
        prompt: PromptFn = stdin_prompt,
    ):
        """
        Args:
            config: 로드된 설정 (실행 동안 읽기 전용)
            resolver: 외부 템플릿 resolver (기본: ~/.mk/.templates)
            placeholders: placeholder 소스 (기본: 현재 디렉터리 기준)
            extension_check: 확장자 자동 매칭 (None이면 config 값)
            prompt: 덮어쓰기 확인 함수
        """
        self.config = config
        self.resolver = resolver or TemplateResolver()
        self.placeholders = placeholders or PlaceholderSource()
        self.extension_check = (
            config.extension_check if extension_check is None else extension_check
        )
        self.prompt = prompt

    # =========================================================================
    # Batch
    # =========================================================================

    def iter_create(
        self,
        items: Iterable[tuple[Path, CreateOptions]],
    ) -> Iterator[CreateResult]:
        """
        여러 타겟을 순차 처리 (결과를 하나씩 yield).

        첫 타겟 처리 전에 모든 옵션을 검증. 타겟 단위 에러는
        FAILED 결과로 기록하고 다음 타겟으로 진행.

        Raises:
            FlagConflictError, InvalidModeError: 첫 타겟 처리 전
        """
        items = list(items)
        for _, options in items:
            validate_options(options)

        for target, options in items:
            try:
                yield self.create(target, options)
            except TARGET_ERRORS as e:
                logger.debug(f"target failed {target}: {e}")
                yield CreateResult(
                    path=target,
                    kind=(
                        TargetKind.DIR
                        if is_directory_target(target, options)
                        else TargetKind.FILE
                    ),
                    status=CreateStatus.FAILED,
                    message=e.message,
                    error=e,
                )

    def create_all(
        self,
        items: Iterable[tuple[Path, CreateOptions]],
    ) -> list[CreateResult]:
        return list(self.iter_create(items))

    def create(self, target: Path, options: CreateOptions) -> CreateResult:
        """
        타겟 하나 생성.

        Raises:
            FlagConflictError: force + no_clobber
            PathConflictError: 기대와 다른 종류의 경로가 존재
            MkIOError: 읽기/쓰기/권한 실패
            InvalidModeError: mode 파싱 실패
        """
        validate_options(options)
        if is_directory_target(target, options):
            return self._create_dir(target, options)
        return self._create_file(target, options)

    # =========================================================================
    # Directory
    # =========================================================================

    def _create_dir(self, target: Path, options: CreateOptions) -> CreateResult:
        parents = options.parents or self.config.auto_parents

        if options.dry_run:
            if target.exists() and not target.is_dir():
                message = f"would fail: path exists and is not a directory: {target}"
            else:
                message = f"create dir {target}{' (parents)' if parents else ''}"
            return CreateResult(target, TargetKind.DIR, CreateStatus.DRY_RUN, message)

        if target.exists():
            if not target.is_dir():
                raise PathConflictError(
                    f"path exists and is not a directory: {target}",
                    path=str(target),
                )
            if options.no_clobber:
                return CreateResult(
                    target, TargetKind.DIR, CreateStatus.SKIPPED,
                    f"exists, skipping {target}",
                )
            if options.mode:
                apply_mode(target, options.mode)
            return CreateResult(
                target, TargetKind.DIR, CreateStatus.EXISTS, f"exists {target}",
            )

        ensure_dir(target, parents=parents)
        if options.mode:
            apply_mode(target, options.mode)
        return CreateResult(
            target, TargetKind.DIR, CreateStatus.CREATED, f"created dir {target}",
        )

    # =========================================================================
    # File
    # =========================================================================

    def select_template(self, target: Path, options: CreateOptions) -> TemplateDef | None:
        """명시 템플릿 → 타겟 확장자 → default."""
        key = options.template or target.suffix.lstrip(".") or None
        return self.config.select_template(key)

    def resolve_external(self, target: Path, options: CreateOptions) -> Path | None:
        if options.no_template:
            return None
        return self.resolver.resolve(target, options.template, self.extension_check)

    def _create_file(self, target: Path, options: CreateOptions) -> CreateResult:
        tmpl = self.select_template(target, options)
        external = self.resolve_external(target, options)
        template_name = tmpl.name if tmpl and options.content is None else None

        if options.dry_run:
            return CreateResult(
                target, TargetKind.FILE, CreateStatus.DRY_RUN,
                self._describe(target, options, template_name, external),
                template_name=template_name,
                external_template=external,
            )

        # === CheckExists ===
        exists = target.exists()
        if exists and target.is_dir():
            raise PathConflictError(
                f"path exists and is a directory: {target}",
                path=str(target),
            )
        if exists and not options.force:
            if options.no_clobber:
                return CreateResult(
                    target, TargetKind.FILE, CreateStatus.SKIPPED,
                    f"exists, skipping {target}",
                )
            answer = self.prompt(f"The file '{target}' exists. Overwrite? (y/n) ")
            if answer.strip() not in AFFIRMATIVE_ANSWERS:
                return CreateResult(
                    target, TargetKind.FILE, CreateStatus.SKIPPED,
                    f"skipped {target}",
                )

        if options.parents or self.config.auto_parents:
            ensure_dir(target.parent)

        # === WriteBody ===
        if options.content is not None:
            body = options.content
        elif tmpl is not None:
            ctx = build_context(target, self.config.author)
            body = render(tmpl.body, ctx).encode("utf-8")
        else:
            body = b""
        write_bytes(target, body)

        # === ApplyExternalTemplate ===
        if external is not None:
            write_bytes(target, read_bytes(external))
            logger.info(f"Template applied: {external}")

        # === ApplyPlaceholders ===
        if not options.no_template and self.config.apply_placeholders:
            self._apply_placeholders(target)
        else:
            logger.debug(f"Skipped placeholders for {target}")

        # === SetMode ===
        mode = options.mode or (tmpl.mode if tmpl else None)
        if mode:
            apply_mode(target, mode)

        return CreateResult(
            target,
            TargetKind.FILE,
            CreateStatus.OVERWRITTEN if exists else CreateStatus.CREATED,
            f"{'overwrote' if exists else 'created'} {target}",
            template_name=template_name,
            external_template=external,
        )

    def _apply_placeholders(self, target: Path) -> None:
        """디스크의 현재 내용에 <{&KEY&}> 치환 적용."""
        data = read_bytes(target)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"not UTF-8, placeholders skipped: {target}")
            return

        # 토큰 없음 → 외부 스크립트 실행 안 함
        if PLACEHOLDER_TOKEN_PREFIX not in text:
            return

        updated = ph.apply(text, self.placeholders.for_path(target))
        if updated != text:
            write_bytes(target, updated.encode("utf-8"))
        logger.info(f"Processed placeholders for {target}")

    def _describe(
        self,
        target: Path,
        options: CreateOptions,
        template_name: str | None,
        external: Path | None,
    ) -> str:
        """dry_run 설명 메시지."""
        if target.is_dir():
            action = "would fail: path exists and is a directory:"
        elif target.exists():
            if options.no_clobber:
                action = "would skip existing file"
            elif options.force:
                action = "overwrite file"
            else:
                action = "overwrite file (after confirmation)"
        else:
            action = "create file"

        parts = [f"{action} {target}"]
        if options.content is not None:
            parts.append("from supplied content")
        elif template_name:
            parts.append(f"from template '{template_name}'")
        if external is not None:
            parts.append(f"then external template {external}")
        return " ".join(parts)
