"""
Domain Constants: 전역 상수.

레코드 필드명, 기본 경로, 환경 변수 이름 등.
필드명은 저장된 문서와 동일 (camelCase).
"""

# =============================================================================
# Record Fields (문서 필드명)
# =============================================================================

FIELD_ID = "_id"
FIELD_CLIENT_ID = "clientId"
FIELD_TYPE = "type"
FIELD_SUBJECT = "subject"
FIELD_COUNTRIES = "countries"
FIELD_TEMPLATE = "template"
FIELD_HTML = "html"
FIELD_CREATED_AT = "createdAt"
FIELD_UPDATED_AT = "updatedAt"

# 완전성 판정 대상 (표시 순서 고정)
REQUIRED_METADATA_FIELDS = (FIELD_TYPE, FIELD_SUBJECT, FIELD_COUNTRIES)

# 생성 후 변경 금지
IMMUTABLE_FIELDS = (FIELD_ID, FIELD_CLIENT_ID, FIELD_CREATED_AT)

# =============================================================================
# HTML
# =============================================================================

DOCTYPE_PREFIX = "<!DOCTYPE"
DEFAULT_DOCTYPE = "<!DOCTYPE html>"

# =============================================================================
# Source Files (HTML → JSON artifact)
# =============================================================================

DEFAULT_HTML_PATH = "index.html"
DEFAULT_ARTIFACT_PATH = "mailTemplate.json"
ARTIFACT_INDENT = 2

# =============================================================================
# Environment Variables
# =============================================================================

ENV_MONGODB_URI = "MONGODB_URI"
ENV_DB_NAME = "DB_NAME"
ENV_COLLECTION_NAME = "COLLECTION_NAME"
ENV_LOG_LEVEL = "MAILTEMPLATES_LOG_LEVEL"

# =============================================================================
# Menu
# =============================================================================

MENU_SYNCHRONIZE = "1"
MENU_LIST = "2"
MENU_EXIT = "3"

COUNTRIES_SEPARATOR = ","
COUNTRIES_DISPLAY_SEPARATOR = ", "
