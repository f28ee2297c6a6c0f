"""
Data schemas for the mail template manager.

규칙:
- 필드명 통일: 저장 문서 키(camelCase)와 동일하게 직렬화
- store 문서는 경계(from_document)에서 한 번만 검증/정규화
- countries 빈 리스트 == 누락
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.constants import (
    FIELD_CLIENT_ID,
    FIELD_COUNTRIES,
    FIELD_CREATED_AT,
    FIELD_HTML,
    FIELD_SUBJECT,
    FIELD_TEMPLATE,
    FIELD_TYPE,
    FIELD_UPDATED_AT,
)

# =============================================================================
# Enums
# =============================================================================

class Severity(str, Enum):
    """사용자 표시 메시지 심각도."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class SyncOutcome(str, Enum):
    """synchronize() 결과 분기."""
    CREATED = "created"      # create branch, insert 성공
    UPDATED = "updated"      # reconcile branch, update 성공
    UNCHANGED = "unchanged"  # 완전한 레코드 또는 채울 값 없음, write 없음
    INVALID = "invalid"      # ValidationError, store 접근 없음 (또는 read만)
    FAILED = "failed"        # PersistenceError


# =============================================================================
# Template Record
# =============================================================================

@dataclass
class TemplateRecord:
    """
    템플릿 레코드 (저장 단위).

    clientId, createdAt은 생성 후 변경 금지.
    template은 {"html": str} envelope.
    """
    client_id: str
    type: str | None = None
    subject: str | None = None
    countries: list[str] = field(default_factory=list)
    template: dict[str, str] = field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def html(self) -> str | None:
        """template.html 본문."""
        return self.template.get(FIELD_HTML)

    def missing_fields(self) -> list[str]:
        """
        누락 필드 목록.

        type/subject: None 또는 빈 문자열
        countries: 빈 리스트

        Returns:
            (type, subject, countries) 순서의 누락 필드명
        """
        missing = []
        if not self.type:
            missing.append(FIELD_TYPE)
        if not self.subject:
            missing.append(FIELD_SUBJECT)
        if not self.countries:
            missing.append(FIELD_COUNTRIES)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_document(self) -> dict[str, Any]:
        """store 문서 직렬화. updatedAt은 설정된 경우에만 포함."""
        doc: dict[str, Any] = {
            FIELD_CLIENT_ID: self.client_id,
            FIELD_TYPE: self.type,
            FIELD_SUBJECT: self.subject,
            FIELD_COUNTRIES: list(self.countries),
            FIELD_TEMPLATE: dict(self.template),
            FIELD_CREATED_AT: self.created_at,
        }
        if self.updated_at:
            doc[FIELD_UPDATED_AT] = self.updated_at
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "TemplateRecord":
        """
        store 문서 → TemplateRecord.

        - _id 등 알 수 없는 키는 무시
        - countries: None → [], 문자열 하나 → [문자열], 항목은 str로 변환
        - template: dict가 아니면 빈 envelope
        """
        countries = doc.get(FIELD_COUNTRIES) or []
        if isinstance(countries, str):
            countries = [countries]

        template = doc.get(FIELD_TEMPLATE)
        if not isinstance(template, dict):
            template = {}

        return cls(
            client_id=str(doc.get(FIELD_CLIENT_ID, "")),
            type=doc.get(FIELD_TYPE),
            subject=doc.get(FIELD_SUBJECT),
            countries=[str(c) for c in countries],
            template=dict(template),
            created_at=_as_timestamp(doc.get(FIELD_CREATED_AT)),
            updated_at=_as_timestamp(doc.get(FIELD_UPDATED_AT)),
        )


def _as_timestamp(value: Any) -> str | None:
    # 다른 클라이언트가 BSON datetime으로 저장한 경우
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return str(value.isoformat())
    return str(value)


# =============================================================================
# Sync Result
# =============================================================================

@dataclass
class SyncResult:
    """synchronize() 반환값."""
    outcome: SyncOutcome
    client_id: str
    record: TemplateRecord | None = None
    missing_fields: list[str] = field(default_factory=list)
    inserted_id: Any = None
    error_code: str | None = None

    @property
    def wrote(self) -> bool:
        """store write가 성공했는지."""
        return self.outcome in (SyncOutcome.CREATED, SyncOutcome.UPDATED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "client_id": self.client_id,
            "missing_fields": self.missing_fields,
            "inserted_id": str(self.inserted_id) if self.inserted_id is not None else None,
            "error_code": self.error_code,
        }
