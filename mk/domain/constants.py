"""
Domain Constants: mk 전역 상수.

파일명 정책, 경로 상수, 토큰 문법 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# App Directories (사용자별 경로)
# =============================================================================
# <config_dir>/mk/
# ├── config.yaml            # 구조화 설정 (author, flags, templates)
# └── mk_placeholders.lua    # 외부 placeholder 스크립트 (선택)
#
# ~/.mk/
# ├── mk.conf                # legacy key=value 설정
# └── .templates/            # 외부 템플릿 파일

APP_NAME = "mk"
CONFIG_FILENAME = "config.yaml"
CONFIG_LOCK_SUFFIX = ".lock"

MK_HOME_DIRNAME = ".mk"
LEGACY_CONFIG_FILENAME = "mk.conf"
TEMPLATES_DIRNAME = ".templates"

PLACEHOLDER_SCRIPT_FILENAME = "mk_placeholders.lua"
DEFAULT_LUA_INTERPRETER = "lua"

# =============================================================================
# Template Lookup
# =============================================================================

DEFAULT_TEMPLATE_NAME = "default"

# =============================================================================
# Token Grammar
# =============================================================================
# 내부 템플릿 본문: {date}, {year}, {author}, {file_name}, {file_stem}
# 파일 내용 전체: <{&KEY&}>  (대소문자 구분, escape 없음)

CONTEXT_TOKENS = ("date", "year", "author", "file_name", "file_stem")

PLACEHOLDER_TOKEN_PREFIX = "<{&"
PLACEHOLDER_TOKEN_SUFFIX = "&}>"

# =============================================================================
# Date/Time Formats
# =============================================================================

DATE_FORMAT = "%Y-%m-%d"
YEAR_FORMAT = "%Y"
TIME_FORMAT = "%H:%M:%S"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# builtin placeholder 키 (runtime)
PLACEHOLDER_FILENAME = "FILENAME"
PLACEHOLDER_DATE = "DATE"
PLACEHOLDER_TIME = "TIME"
PLACEHOLDER_DATETIME = "DATETIME"

# =============================================================================
# Prompt
# =============================================================================

AFFIRMATIVE_ANSWERS = frozenset({"y", "Y"})
