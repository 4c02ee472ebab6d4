"""
mk - Just Make It.

템플릿 기반 파일/디렉터리 생성:
- config.yaml 내부 템플릿 + ~/.mk/.templates 외부 템플릿
- {date} 등 context 토큰, <{&KEY&}> placeholder 치환
- overwrite / skip / prompt / dry-run 정책
"""

__version__ = "0.3.0"

from mk.config import ConfigStore, load_legacy
from mk.core import PlaceholderSource, build_context, render
from mk.domain import Config, CreateOptions, CreateResult, CreateStatus, MkError
from mk.templates import Materializer, TemplateResolver

__all__ = [
    "__version__",
    "ConfigStore",
    "load_legacy",
    "PlaceholderSource",
    "build_context",
    "render",
    "Config",
    "CreateOptions",
    "CreateResult",
    "CreateStatus",
    "MkError",
    "Materializer",
    "TemplateResolver",
]
