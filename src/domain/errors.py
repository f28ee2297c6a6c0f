"""
Error definitions for the mail template manager.

규칙:
- 조용한 실패 금지 → 도메인 에러로 명시적 실패
- 라이브러리 예외(pymongo, OSError, JSON)는 경계에서 변환 (raise ... from e)
- 모든 에러는 synchronizer 또는 entry point에서 잡아서 사용자에게 표시
"""

from typing import Any


class MailTemplateError(Exception):
    """
    모든 도메인 에러의 베이스.

    Usage:
        raise ValidationError(ErrorCodes.EMPTY_CLIENT_ID, "clientId cannot be empty")
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class ValidationError(MailTemplateError):
    """
    입력 검증 실패.

    codec 입력 오류, 빈 clientId, HTML 소스 누락 등.
    store에 절대 접근하지 않은 상태에서 발생.
    """


class PersistenceError(MailTemplateError):
    """store 연산 실패 (예외 또는 실패 sentinel)."""


class StoreConnectionError(MailTemplateError):
    """시작 시 store 연결 실패. 치명적 → exit code 1."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Validation ===
    EMPTY_CLIENT_ID = "EMPTY_CLIENT_ID"
    INVALID_HTML = "INVALID_HTML"
    INVALID_TEMPLATE = "INVALID_TEMPLATE"
    HTML_SOURCE_NOT_FOUND = "HTML_SOURCE_NOT_FOUND"
    INVALID_ARTIFACT = "INVALID_ARTIFACT"

    # === Persistence ===
    INSERT_FAILED = "INSERT_FAILED"
    UPDATE_FAILED = "UPDATE_FAILED"
    STORE_OPERATION_FAILED = "STORE_OPERATION_FAILED"
    DUPLICATE_CLIENT_ID = "DUPLICATE_CLIENT_ID"

    # === Connection ===
    STORE_NOT_CONFIGURED = "STORE_NOT_CONFIGURED"
    STORE_UNREACHABLE = "STORE_UNREACHABLE"
    STORE_NOT_OPEN = "STORE_NOT_OPEN"
