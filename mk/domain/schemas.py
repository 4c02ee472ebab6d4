"""
Data schemas for mk.

규칙:
- 필드명 통일: config.yaml 키와 동일하게 사용
- ContextVars는 타겟 경로마다 새로 생성, 생성 후 불변
- mode는 8진수 문자열 ("755") 그대로 보관, 적용 시점에 파싱
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from mk.domain.constants import CONTEXT_TOKENS, DEFAULT_TEMPLATE_NAME

# =============================================================================
# Templates / Config
# =============================================================================

@dataclass
class TemplateDef:
    """config.yaml의 templates.<name> 항목."""
    name: str
    body: str = ""
    ext: str | None = None  # 연결된 확장자 (예: "rs")
    mode: str | None = None  # 8진수 문자열, Unix 전용 (예: "755")

    def to_dict(self) -> dict[str, Any]:
        return {
            "ext": self.ext,
            "mode": self.mode,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "TemplateDef":
        if not isinstance(data, dict):
            raise TypeError(f"template '{name}' must be a mapping")

        body = data.get("body", "")
        if not isinstance(body, str):
            raise TypeError(f"template '{name}': body must be a string")

        ext = data.get("ext")
        mode = data.get("mode")
        if mode is not None and (isinstance(mode, bool) or not isinstance(mode, (str, int))):
            raise TypeError(f"template '{name}': mode must be an octal string")
        return cls(
            name=name,
            body=body,
            ext=str(ext) if ext is not None else None,
            mode=str(mode) if mode is not None else None,
        )


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    """boolean 설정값. YAML 문자열 "false" 등은 거부."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be a boolean")
    return value


@dataclass
class Config:
    """
    구조화 설정 (config.yaml).

    불변식: builtin 템플릿 이름은 항상 존재
    (같은 이름의 사용자 정의 항목이 있으면 그것이 우선).
    """
    author: str | None = None
    templates: dict[str, TemplateDef] = field(default_factory=dict)

    # === Behavior Flags ===
    auto_parents: bool = False  # 부모 디렉터리 자동 생성
    extension_check: bool = True  # 확장자 기반 외부 템플릿 자동 매칭
    apply_placeholders: bool = True  # <{&KEY&}> 치환 적용

    def get_template(self, key: str) -> TemplateDef | None:
        """이름 일치 우선, 없으면 ext가 key와 같은 첫 번째 템플릿."""
        found = self.templates.get(key)
        if found is not None:
            return found
        return next(
            (t for t in self.templates.values() if t.ext == key),
            None,
        )

    def select_template(self, key: str | None) -> TemplateDef | None:
        """
        이름/확장자 → default 순서로 템플릿 선택.

        Args:
            key: 명시적 템플릿 이름 또는 타겟 확장자 (None 가능)

        Returns:
            선택된 TemplateDef, default도 없으면 None
        """
        found = self.get_template(key) if key else None
        return found or self.get_template(DEFAULT_TEMPLATE_NAME)

    def to_dict(self) -> dict[str, Any]:
        return {
            "author": self.author,
            "auto_parents": self.auto_parents,
            "extension_check": self.extension_check,
            "apply_placeholders": self.apply_placeholders,
            "templates": {
                name: tmpl.to_dict() for name, tmpl in self.templates.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        if not isinstance(data, dict):
            raise TypeError("config root must be a mapping")

        raw_templates = data.get("templates") or {}
        if not isinstance(raw_templates, dict):
            raise TypeError("'templates' must be a mapping of name -> template")

        author = data.get("author")
        return cls(
            author=str(author) if author is not None else None,
            templates={
                str(name): TemplateDef.from_dict(str(name), entry)
                for name, entry in raw_templates.items()
            },
            auto_parents=_flag(data, "auto_parents", False),
            extension_check=_flag(data, "extension_check", True),
            apply_placeholders=_flag(data, "apply_placeholders", True),
        )


# =============================================================================
# Context Variables
# =============================================================================

@dataclass(frozen=True)
class ContextVars:
    """내부 템플릿 본문 치환용 변수 ({date}, {year}, ...)."""
    date: str  # YYYY-MM-DD
    year: str  # YYYY
    author: str
    file_name: str
    file_stem: str

    def as_tokens(self) -> dict[str, str]:
        return {"{" + name + "}": getattr(self, name) for name in CONTEXT_TOKENS}


# =============================================================================
# Materialization
# =============================================================================

class TargetKind(str, Enum):
    """타겟 종류."""
    FILE = "file"
    DIR = "dir"


class CreateStatus(str, Enum):
    """타겟 처리 결과."""
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    EXISTS = "exists"  # 디렉터리가 이미 있음 (mode만 적용)
    SKIPPED = "skipped"  # no_clobber 또는 prompt 거절
    DRY_RUN = "dry_run"
    FAILED = "failed"


@dataclass
class CreateOptions:
    """타겟 단위 사용자 의도."""
    force: bool = False
    no_clobber: bool = False
    parents: bool = False
    mode: str | None = None  # 템플릿 mode보다 우선
    template: str | None = None  # 이름 또는 확장자
    no_template: bool = False  # 외부 템플릿 + placeholder 비활성
    content: bytes | None = None  # stdin 등 외부 입력 (템플릿보다 우선)
    dry_run: bool = False
    as_dir: bool | None = None  # None이면 추론


@dataclass
class CreateResult:
    """타겟 하나의 처리 결과."""
    path: Path
    kind: TargetKind
    status: CreateStatus
    message: str = ""
    template_name: str | None = None
    external_template: Path | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status != CreateStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "kind": self.kind.value,
            "status": self.status.value,
            "message": self.message,
            "template_name": self.template_name,
            "external_template": (
                str(self.external_template) if self.external_template else None
            ),
            "error": str(self.error) if self.error else None,
        }
