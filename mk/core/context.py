"""
Context Builder: 타겟 경로 → ContextVars.

내부 템플릿 본문의 {date}, {year}, {author}, {file_name}, {file_stem}
토큰을 치환한다. 단순 부분 문자열 치환, escape 없음.
"""

from datetime import datetime
from pathlib import Path

from mk.domain.constants import DATE_FORMAT, YEAR_FORMAT
from mk.domain.schemas import ContextVars


def build_context(
    path: Path,
    author: str | None = None,
    now: datetime | None = None,
) -> ContextVars:
    """
    타겟 경로로부터 ContextVars 생성.

    Args:
        path: 타겟 경로 (마지막 component가 file_name)
        author: 설정의 author (없으면 빈 문자열)
        now: 기준 시각 (테스트용, 기본: 현재 로컬 시각)

    Returns:
        불변 ContextVars
    """
    now = now or datetime.now()
    return ContextVars(
        date=now.strftime(DATE_FORMAT),
        year=now.strftime(YEAR_FORMAT),
        author=author or "",
        file_name=path.name,
        file_stem=path.stem if path.name else "",
    )


def render(body: str, ctx: ContextVars) -> str:
    """본문의 모든 context 토큰을 치환 (토큰마다 전체 occurrence)."""
    out = body
    for token, value in ctx.as_tokens().items():
        out = out.replace(token, value)
    return out
