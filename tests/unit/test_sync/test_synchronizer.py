"""
test_synchronizer.py - TemplateSynchronizer 테스트

검증:
- 빈/공백 clientId → store 호출 없음, ValidationError 표시
- create branch: insert 1회, update 0회
- reconcile branch: 완전 → write 0회, 누락 → 누락분만 채워 update 1회
- store 실패 → PersistenceError 표시, 재시도 없음, 예외 전파 없음
- list_all: 빈 결과 info, 순서 유지
"""

import pytest

from conftest import FakeStore, ScriptedPrompter
from src.core.codec import decode_from_storage
from src.domain.errors import ErrorCodes, ValidationError
from src.domain.schemas import Severity, SyncOutcome, TemplateRecord
from src.sync.synchronizer import (
    TemplateSynchronizer,
    format_record,
    list_all,
    synchronize,
    validate_client_id,
)

HTML = '<html>\n<body class="x">Hi</body>\n</html>'


def make_sync(
    store: FakeStore,
    prompter: ScriptedPrompter,
    clock,
    html: str = HTML,
    encode_html: bool = True,
) -> TemplateSynchronizer:
    return TemplateSynchronizer(
        store=store,
        prompter=prompter,
        html_source=lambda: html,
        encode_html=encode_html,
        clock=clock,
    )


# =============================================================================
# validate_client_id
# =============================================================================

class TestValidateClientId:
    """clientId 검증 테스트."""

    def test_strips(self):
        assert validate_client_id("  client-001 ") == "client-001"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None, 42])
    def test_rejects(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_client_id(value)

        assert exc_info.value.code == ErrorCodes.EMPTY_CLIENT_ID


# =============================================================================
# Validation branch
# =============================================================================

class TestInvalidClientId:
    """빈 clientId → store 접근 없음."""

    @pytest.mark.parametrize("value", ["", "   "])
    def test_no_store_calls(self, value, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter()

        result = make_sync(fake_store, prompter, fixed_clock).synchronize(value)

        assert result.outcome == SyncOutcome.INVALID
        assert result.error_code == ErrorCodes.EMPTY_CLIENT_ID
        assert fake_store.calls == []
        assert prompter.asked == []
        assert len(prompter.texts(Severity.ERROR)) == 1


# =============================================================================
# Create branch
# =============================================================================

class TestCreateBranch:
    """레코드 없음 → insert."""

    def test_inserts_once(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Argentina, Chile ,Uruguay"])

        result = make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.CREATED
        assert result.inserted_id == "id-1"
        assert fake_store.operations() == ["find_by_key", "insert"]
        assert fake_store.writes() == ["insert"]

        record = fake_store.records[0]
        assert record.client_id == "client-001"
        assert record.type == "welcome"
        assert record.subject == "Hello!"
        assert record.countries == ["Argentina", "Chile", "Uruguay"]
        assert record.created_at == "2024-02-01T10:00:00+00:00"
        assert record.updated_at is None
        assert prompter.texts(Severity.SUCCESS)

    def test_stores_encoded_html(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        stored = fake_store.records[0].html
        assert "\n" not in stored
        assert decode_from_storage(stored) == HTML

    def test_stores_raw_html_when_encoding_disabled(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        make_sync(fake_store, prompter, fixed_clock, encode_html=False).synchronize("client-001")

        assert fake_store.records[0].html == HTML

    def test_trims_client_id(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        make_sync(fake_store, prompter, fixed_clock).synchronize("  client-001  ")

        assert fake_store.calls[0] == ("find_by_key", "client-001")
        assert fake_store.records[0].client_id == "client-001"

    def test_empty_answers_accepted(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["", "", ""])

        result = make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.CREATED
        record = fake_store.records[0]
        assert record.type == ""
        assert record.subject == ""
        assert record.countries == []
        assert len(prompter.asked) == 3

    def test_html_source_failure(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        result = make_sync(fake_store, prompter, fixed_clock, html="").synchronize("client-001")

        assert result.outcome == SyncOutcome.INVALID
        assert result.error_code == ErrorCodes.INVALID_HTML
        assert fake_store.writes() == []
        assert prompter.asked == []

    def test_insert_returns_none(self, fake_store: FakeStore, fixed_clock):
        fake_store.insert_returns_none = True
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        result = make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.FAILED
        assert result.error_code == ErrorCodes.INSERT_FAILED
        assert fake_store.writes() == ["insert"]
        assert prompter.texts(Severity.ERROR)

    def test_insert_raises_no_retry(self, fake_store: FakeStore, fixed_clock):
        fake_store.fail_on.add("insert")
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        result = make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.FAILED
        assert result.error_code == ErrorCodes.STORE_OPERATION_FAILED
        assert fake_store.writes() == ["insert"]


# =============================================================================
# Reconcile branch
# =============================================================================

class TestReconcileBranch:
    """레코드 있음 → 누락 필드만 채움."""

    def test_complete_record_no_write(self, complete_record: TemplateRecord, fixed_clock):
        store = FakeStore([complete_record])
        prompter = ScriptedPrompter()

        result = make_sync(store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.UNCHANGED
        assert store.writes() == []
        assert prompter.asked == []
        assert any("Nothing to do" in m for m in prompter.texts(Severity.INFO))

    def test_reports_missing_set(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.missing_fields == ["type", "countries"]
        assert "Missing fields: type, countries" in prompter.texts(Severity.INFO)

    def test_asks_all_three_fields(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert len(prompter.asked) == 3

    def test_fills_missing_only(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "New subject", "Chile, Peru"])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.outcome == SyncOutcome.UPDATED
        assert store.writes() == ["update_by_key"]
        client_id, updated = store.calls[-1][1]
        assert client_id == "client-002"
        assert updated.type == "promo"
        assert updated.subject == "Existing subject"
        assert updated.countries == ["Chile", "Peru"]
        assert updated.updated_at == "2024-02-01T10:00:00+00:00"

    def test_immutable_fields_kept(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        make_sync(store, prompter, fixed_clock).synchronize("client-002")

        updated = store.records[0]
        assert updated.client_id == "client-002"
        assert updated.created_at == "2024-01-15T09:30:00+00:00"
        assert updated.template == incomplete_record.template

    def test_empty_answer_leaves_gap(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "", ""])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.outcome == SyncOutcome.UPDATED
        assert store.records[0].type == "promo"
        assert store.records[0].countries == []

    def test_no_values_no_write(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["", "ignored subject", " , "])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.outcome == SyncOutcome.UNCHANGED
        assert store.writes() == []
        assert store.records[0] is incomplete_record

    def test_update_returns_false(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        store.update_returns_false = True
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.outcome == SyncOutcome.FAILED
        assert result.error_code == ErrorCodes.UPDATE_FAILED
        assert store.records[0] is incomplete_record
        assert prompter.texts(Severity.ERROR)

    def test_update_raises(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        store.fail_on.add("update_by_key")
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        result = make_sync(store, prompter, fixed_clock).synchronize("client-002")

        assert result.outcome == SyncOutcome.FAILED
        assert store.writes() == ["update_by_key"]

    def test_html_source_not_used(self, incomplete_record: TemplateRecord, fixed_clock):
        store = FakeStore([incomplete_record])
        prompter = ScriptedPrompter(["promo", "", "Chile"])

        def failing_source() -> str:
            raise AssertionError("HTML source must not be read in reconcile branch")

        sync = TemplateSynchronizer(store, prompter, failing_source, clock=fixed_clock)

        assert sync.synchronize("client-002").outcome == SyncOutcome.UPDATED


class TestLookupFailure:
    """find_by_key 실패."""

    def test_reported_not_raised(self, fake_store: FakeStore, fixed_clock):
        fake_store.fail_on.add("find_by_key")
        prompter = ScriptedPrompter()

        result = make_sync(fake_store, prompter, fixed_clock).synchronize("client-001")

        assert result.outcome == SyncOutcome.FAILED
        assert fake_store.writes() == []
        assert prompter.texts(Severity.ERROR)


# =============================================================================
# list_all / format_record
# =============================================================================

class TestListAll:
    """목록 표시 테스트."""

    def test_empty_is_info(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter()

        records = make_sync(fake_store, prompter, fixed_clock).list_all()

        assert records == []
        assert prompter.texts(Severity.ERROR) == []
        assert "No templates stored." in prompter.texts(Severity.INFO)

    def test_lists_in_store_order(self, complete_record, incomplete_record, fixed_clock):
        store = FakeStore([incomplete_record, complete_record])
        prompter = ScriptedPrompter()

        records = make_sync(store, prompter, fixed_clock).list_all()

        assert [r.client_id for r in records] == ["client-002", "client-001"]
        texts = prompter.texts(Severity.INFO)
        assert texts.index("1. ClientId: client-002") < texts.index("2. ClientId: client-001")
        assert "   Countries: Argentina, Chile, Uruguay" in texts

    def test_store_failure(self, fake_store: FakeStore, fixed_clock):
        fake_store.fail_on.add("list_all")
        prompter = ScriptedPrompter()

        assert make_sync(fake_store, prompter, fixed_clock).list_all() == []
        assert prompter.texts(Severity.ERROR)

    def test_functional_api(self, complete_record):
        prompter = ScriptedPrompter()

        records = list_all(FakeStore([complete_record]), prompter)

        assert records == [complete_record]


class TestFormatRecord:
    """레코드 포맷 테스트."""

    def test_without_updated_at(self, complete_record):
        assert format_record(complete_record, 1) == [
            "1. ClientId: client-001",
            "   Type: welcome",
            "   Subject: Welcome to our service!",
            "   Countries: Argentina, Chile, Uruguay",
            "   Created: 2024-01-15T09:30:00+00:00",
        ]

    def test_with_updated_at(self, complete_record):
        complete_record.updated_at = "2024-02-01T10:00:00+00:00"

        lines = format_record(complete_record)

        assert lines[0] == "ClientId: client-001"
        assert lines[-1] == "   Updated: 2024-02-01T10:00:00+00:00"

    def test_missing_values_dash(self):
        lines = format_record(TemplateRecord(client_id="c1"))

        assert "   Type: -" in lines
        assert "   Countries: -" in lines


# =============================================================================
# render_html / functional synchronize
# =============================================================================

class TestRenderHtml:
    """저장된 템플릿 → 최종 HTML."""

    def test_decodes_and_adds_doctype(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])
        sync = make_sync(fake_store, prompter, fixed_clock)
        sync.synchronize("client-001")

        assert sync.render_html("client-001") == f"<!DOCTYPE html>\n{HTML}"

    def test_unknown_client(self, fake_store: FakeStore, fixed_clock):
        prompter = ScriptedPrompter()

        assert make_sync(fake_store, prompter, fixed_clock).render_html("nobody") is None
        assert prompter.texts(Severity.INFO)

    def test_record_without_html(self, fixed_clock):
        store = FakeStore([TemplateRecord(client_id="c1")])
        prompter = ScriptedPrompter()

        assert make_sync(store, prompter, fixed_clock).render_html("c1") is None
        assert prompter.texts(Severity.ERROR)


class TestFunctionalSynchronize:
    """synchronize() 단축형."""

    def test_create(self, fake_store: FakeStore):
        prompter = ScriptedPrompter(["welcome", "Hello!", "Chile"])

        result = synchronize("client-001", prompter, fake_store, lambda: HTML)

        assert result.outcome == SyncOutcome.CREATED
        assert fake_store.writes() == ["insert"]
