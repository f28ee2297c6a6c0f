"""
Template synchronizer: clientId 기준 create-or-reconcile.

규칙:
- 호출당 store write는 0 또는 1회
- 재시도 없음: store 실패는 잡아서 기록/표시 후 반환 (fail-soft)
- reconcile은 누락 필드만 채움 (기존 type/subject/countries 덮어쓰기 금지)
- 빈 입력값은 누락 필드를 채우지 않음
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from src.cli.prompts import Prompter
from src.core.codec import decode_from_storage, encode_for_storage, to_final_html, to_template
from src.core.logging import log_error, log_sync_result
from src.domain.constants import (
    COUNTRIES_DISPLAY_SEPARATOR,
    FIELD_COUNTRIES,
    FIELD_HTML,
    FIELD_SUBJECT,
    FIELD_TEMPLATE,
    FIELD_TYPE,
)
from src.domain.errors import (
    ErrorCodes,
    MailTemplateError,
    PersistenceError,
    ValidationError,
)
from src.domain.schemas import (
    Severity,
    SyncOutcome,
    SyncResult,
    TemplateRecord,
)
from src.store.base import TemplateStore

logger = logging.getLogger(__name__)

LABEL_CLIENT_ID = "Enter the template clientId: "
LABEL_TYPE = "Enter the template type: "
LABEL_SUBJECT = "Enter the email subject: "
LABEL_COUNTRIES = "Enter the countries (comma separated): "


def utc_now() -> str:
    return datetime.now(UTC).isoformat()


def validate_client_id(client_id: Any) -> str:
    """
    clientId 검증.

    Returns:
        앞뒤 공백 제거된 clientId

    Raises:
        ValidationError: EMPTY_CLIENT_ID
    """
    if not isinstance(client_id, str) or not client_id.strip():
        raise ValidationError(
            ErrorCodes.EMPTY_CLIENT_ID,
            "clientId must be a non-empty string",
        )
    return client_id.strip()


def format_record(record: TemplateRecord, index: int | None = None) -> list[str]:
    """
    레코드 표시용 텍스트 (결정론적).

    updatedAt은 있을 때만 포함.
    """
    header = f"ClientId: {record.client_id}"
    if index is not None:
        header = f"{index}. {header}"

    lines = [
        header,
        f"   Type: {record.type or '-'}",
        f"   Subject: {record.subject or '-'}",
        f"   Countries: {COUNTRIES_DISPLAY_SEPARATOR.join(record.countries) or '-'}",
        f"   Created: {record.created_at or '-'}",
    ]
    if record.updated_at:
        lines.append(f"   Updated: {record.updated_at}")
    return lines


class TemplateSynchronizer:
    """
    create-or-reconcile 워크플로우.

    Args:
        store: 레코드 store
        prompter: 사용자 입력/표시
        html_source: create branch에서만 호출되는 HTML 공급자
        encode_html: True면 template.html을 저장용 escape해서 저장
        clock: 타임스탬프 공급자 (테스트용)
    """

    def __init__(
        self,
        store: TemplateStore,
        prompter: Prompter,
        html_source: Callable[[], str],
        encode_html: bool = True,
        clock: Callable[[], str] = utc_now,
    ):
        self.store = store
        self.prompter = prompter
        self.html_source = html_source
        self.encode_html = encode_html
        self.clock = clock

    # =========================================================================
    # Synchronize
    # =========================================================================

    def synchronize(self, client_id: Any) -> SyncResult:
        """
        clientId 하나를 store 상태와 맞춤.

        - 없음 → create branch (insert 1회)
        - 있음 + 완전 → write 없음
        - 있음 + 누락 → 세 필드 모두 다시 묻고 누락분만 채워 update 1회
        """
        try:
            client_id = validate_client_id(client_id)
        except ValidationError as e:
            return self._fail(e, "synchronize", str(client_id or ""), SyncOutcome.INVALID)

        try:
            existing = self.store.find_by_key(client_id)
        except PersistenceError as e:
            return self._fail(e, "find_by_key", client_id, SyncOutcome.FAILED)

        if existing is None:
            result = self._create(client_id)
        else:
            result = self._reconcile(existing)

        log_sync_result(result)
        return result

    def _create(self, client_id: str) -> SyncResult:
        try:
            envelope = to_template(self.html_source())
        except ValidationError as e:
            return self._fail(e, "load_html", client_id, SyncOutcome.INVALID)

        self.prompter.show(
            Severity.INFO,
            f"No template found for clientId '{client_id}'. Creating a new one.",
        )
        self.prompter.show(Severity.INFO, "Enter the new template information:")
        template_type, subject, countries = self._ask_metadata()

        html = envelope[FIELD_TEMPLATE][FIELD_HTML]
        if self.encode_html:
            html = encode_for_storage(html)

        record = TemplateRecord(
            client_id=client_id,
            type=template_type,
            subject=subject,
            countries=countries,
            template={FIELD_HTML: html},
            created_at=self.clock(),
        )

        try:
            inserted_id = self.store.insert(record)
            if inserted_id is None:
                raise PersistenceError(
                    ErrorCodes.INSERT_FAILED,
                    f"Could not create template for clientId '{client_id}'",
                    client_id=client_id,
                )
        except PersistenceError as e:
            return self._fail(e, "insert", client_id, SyncOutcome.FAILED)

        self.prompter.show(
            Severity.SUCCESS,
            f"Template created for clientId '{client_id}' (id: {inserted_id})",
        )
        return SyncResult(
            outcome=SyncOutcome.CREATED,
            client_id=client_id,
            record=record,
            inserted_id=inserted_id,
        )

    def _reconcile(self, existing: TemplateRecord) -> SyncResult:
        client_id = existing.client_id
        missing = existing.missing_fields()

        self.prompter.show(Severity.INFO, "Existing template found:")
        for line in format_record(existing):
            self.prompter.show(Severity.INFO, line)

        if not missing:
            self.prompter.show(
                Severity.INFO,
                f"Template '{client_id}' is complete. Nothing to do.",
            )
            return SyncResult(
                outcome=SyncOutcome.UNCHANGED,
                client_id=client_id,
                record=existing,
            )

        self.prompter.show(Severity.INFO, f"Missing fields: {', '.join(missing)}")
        self.prompter.show(Severity.INFO, "Enter the missing information:")
        template_type, subject, countries = self._ask_metadata()

        answers: dict[str, Any] = {
            FIELD_TYPE: template_type,
            FIELD_SUBJECT: subject,
            FIELD_COUNTRIES: countries,
        }
        filled = {name: answers[name] for name in missing if answers[name]}

        if not filled:
            self.prompter.show(
                Severity.INFO,
                f"No values provided for missing fields. Template '{client_id}' unchanged.",
            )
            return SyncResult(
                outcome=SyncOutcome.UNCHANGED,
                client_id=client_id,
                record=existing,
                missing_fields=missing,
            )

        updated = replace(
            existing,
            type=filled.get(FIELD_TYPE, existing.type),
            subject=filled.get(FIELD_SUBJECT, existing.subject),
            countries=list(filled.get(FIELD_COUNTRIES, existing.countries)),
            updated_at=self.clock(),
        )

        try:
            if not self.store.update_by_key(client_id, updated):
                raise PersistenceError(
                    ErrorCodes.UPDATE_FAILED,
                    f"Could not update template for clientId '{client_id}'",
                    client_id=client_id,
                )
        except PersistenceError as e:
            return self._fail(e, "update_by_key", client_id, SyncOutcome.FAILED, missing)

        self.prompter.show(
            Severity.SUCCESS,
            f"Template '{client_id}' updated ({', '.join(filled)})",
        )
        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            client_id=client_id,
            record=updated,
            missing_fields=missing,
        )

    def _ask_metadata(self) -> tuple[str, str, list[str]]:
        template_type = self.prompter.ask(LABEL_TYPE).strip()
        subject = self.prompter.ask(LABEL_SUBJECT).strip()
        countries = self.prompter.ask_list(LABEL_COUNTRIES)
        return template_type, subject, countries

    # =========================================================================
    # List / Render
    # =========================================================================

    def list_all(self) -> list[TemplateRecord]:
        """전체 레코드 표시. 비어 있으면 info 메시지 (에러 아님)."""
        try:
            records = self.store.list_all()
        except PersistenceError as e:
            log_error(e, "list_all")
            self.prompter.show(Severity.ERROR, e.message)
            return []

        if not records:
            self.prompter.show(Severity.INFO, "No templates stored.")
            return []

        self.prompter.show(Severity.INFO, f"Stored templates ({len(records)}):")
        for index, record in enumerate(records, start=1):
            for line in format_record(record, index):
                self.prompter.show(Severity.INFO, line)
        return records

    def render_html(self, client_id: Any) -> str | None:
        """
        저장된 템플릿 → 바로 쓸 수 있는 최종 HTML (DOCTYPE 포함).

        Returns:
            최종 HTML (레코드/HTML 없으면 None)
        """
        try:
            client_id = validate_client_id(client_id)
            record = self.store.find_by_key(client_id)
            if record is None:
                self.prompter.show(Severity.INFO, f"No template found for clientId '{client_id}'.")
                return None

            html = record.html
            if self.encode_html:
                html = decode_from_storage(html)
            return to_final_html({FIELD_TEMPLATE: {FIELD_HTML: html}})
        except MailTemplateError as e:
            log_error(e, "render_html")
            self.prompter.show(Severity.ERROR, e.message)
            return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _fail(
        self,
        error: MailTemplateError,
        operation: str,
        client_id: str,
        outcome: SyncOutcome,
        missing: list[str] | None = None,
    ) -> SyncResult:
        log_error(error, operation)
        self.prompter.show(Severity.ERROR, error.message)
        return SyncResult(
            outcome=outcome,
            client_id=client_id,
            missing_fields=missing or [],
            error_code=error.code,
        )


# =============================================================================
# Functional API
# =============================================================================

def synchronize(
    client_id: Any,
    prompter: Prompter,
    store: TemplateStore,
    html_source: Callable[[], str],
    encode_html: bool = True,
) -> SyncResult:
    """TemplateSynchronizer(...).synchronize() 단축형."""
    return TemplateSynchronizer(store, prompter, html_source, encode_html).synchronize(client_id)


def list_all(store: TemplateStore, prompter: Prompter) -> list[TemplateRecord]:
    """TemplateSynchronizer(...).list_all() 단축형. HTML 소스 불필요."""
    return TemplateSynchronizer(store, prompter, html_source=_no_html_source).list_all()


def _no_html_source() -> str:
    raise ValidationError(ErrorCodes.HTML_SOURCE_NOT_FOUND, "No HTML source configured")
