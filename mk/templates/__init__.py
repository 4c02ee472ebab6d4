"""
Templates layer: 템플릿 선택 + materialization.

역할:
- 외부 템플릿 파일 선택 (resolver.py)
- 타겟 생성 상태 흐름 (materializer.py)
- list file → 타겟/옵션 (listfile.py)

주의: 내부(config.yaml) 템플릿 조회는 mk.config / mk.domain.schemas.Config
"""

from .listfile import ListEntry, parse_list
from .materializer import (
    Materializer,
    is_directory_target,
    stdin_prompt,
    validate_options,
)
from .resolver import TemplateResolver

__all__ = [
    # resolver
    "TemplateResolver",
    # materializer
    "Materializer",
    "validate_options",
    "is_directory_target",
    "stdin_prompt",
    # listfile
    "ListEntry",
    "parse_list",
]
