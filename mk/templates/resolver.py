"""
외부 템플릿 파일 resolver: ~/.mk/.templates

우선순위 (첫 매칭 우선):
1. 디렉터리 없음 → None
2. 명시적 key: 정확한 파일명 → stem 또는 파일명 일치
3. key 없음 + extension_check: 타겟과 같은 확장자
4. 그 외 → None

디렉터리 목록은 인스턴스당 1회만 읽음 (실행 중 추가된 템플릿은 보지 않음).
여러 파일이 매칭되면 파일명 정렬 순서의 첫 번째를 사용.
"""

import logging
from pathlib import Path

from mk.core.paths import templates_dir

logger = logging.getLogger(__name__)


class TemplateResolver:
    """외부 템플릿 파일 선택기."""

    def __init__(self, root: Path | None = None):
        """
        Args:
            root: 템플릿 디렉터리 (기본: ~/.mk/.templates)
        """
        self.root = root or templates_dir()
        self._listing: list[Path] | None = None

    def list_templates(self) -> list[Path]:
        """디렉터리의 일반 파일 목록 (캐시)."""
        if self._listing is None:
            self._listing = self._scan()
        return list(self._listing)

    def _scan(self) -> list[Path]:
        if not self.root.is_dir():
            return []
        try:
            entries = [p for p in self.root.iterdir() if p.is_file()]
        except OSError as e:
            logger.warning(f"cannot list templates in {self.root}: {e}")
            return []
        return sorted(entries, key=lambda p: p.name)

    def resolve(
        self,
        target: Path,
        explicit_key: str | None = None,
        extension_check: bool = True,
    ) -> Path | None:
        """
        타겟에 적용할 외부 템플릿 파일 결정.

        Args:
            target: 생성할 파일 경로
            explicit_key: -t로 지정한 이름 (파일명 또는 stem)
            extension_check: key 없을 때 확장자 자동 매칭 여부

        Returns:
            템플릿 파일 경로 또는 None
        """
        if not self.root.is_dir():
            return None

        if explicit_key:
            return self._by_name(explicit_key)

        extension = target.suffix
        if extension_check and extension:
            return self._by_extension(extension)

        return None

    def _by_name(self, key: str) -> Path | None:
        # exact 매칭은 파일명 key만 (경로 구분자 불가)
        exact = self.root / key
        if Path(key).name == key and exact.is_file():
            return exact
        return next(
            (p for p in self.list_templates() if key in (p.stem, p.name)),
            None,
        )

    def _by_extension(self, extension: str) -> Path | None:
        return next(
            (p for p in self.list_templates() if p.suffix == extension),
            None,
        )
