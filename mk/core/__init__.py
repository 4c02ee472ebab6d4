"""
Core layer: 경로, I/O, context/placeholder 치환.

역할:
- 사용자별 경로 해석 (paths)
- 파일 쓰기/mode 적용 (fsio)
- {date} 등 context 토큰 (context)
- <{&KEY&}> placeholder 소스 + 치환 (placeholders)
"""

from .context import build_context, render
from .editor import open_in_editor, resolve_editor
from .fsio import apply_mode, atomic_write_text, parse_mode
from .placeholders import PlaceholderSource, apply, builtins_for

__all__ = [
    # context
    "build_context",
    "render",
    # placeholders
    "PlaceholderSource",
    "builtins_for",
    "apply",
    # fsio
    "atomic_write_text",
    "parse_mode",
    "apply_mode",
    # editor
    "open_in_editor",
    "resolve_editor",
]
