"""
Pytest fixtures for the mail template manager tests.

구성:
- FakeStore: in-memory TemplateStore (호출 기록)
- ScriptedPrompter: 미리 정한 답변을 순서대로 반환, 표시 메시지 기록
- 샘플 HTML / 레코드 / 파일
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pytest

from src.cli.prompts import Prompter
from src.domain.errors import ErrorCodes, PersistenceError
from src.domain.schemas import Severity, TemplateRecord
from src.store.base import TemplateStore

# =============================================================================
# Fakes
# =============================================================================

class FakeStore(TemplateStore):
    """
    in-memory store.

    calls: (연산명, 인자) 기록
    fail_on: 해당 연산에서 PersistenceError 발생
    insert_returns_none / update_returns_false: 실패 sentinel 흉내
    """

    def __init__(self, records: Iterable[TemplateRecord] = ()):
        self.records: list[TemplateRecord] = list(records)
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()
        self.insert_returns_none = False
        self.update_returns_false = False
        self.opened = False
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise PersistenceError(
                ErrorCodes.STORE_OPERATION_FAILED,
                f"Store operation '{operation}' failed: boom",
                operation=operation,
            )

    def find_by_key(self, client_id: str) -> TemplateRecord | None:
        self.calls.append(("find_by_key", client_id))
        self._maybe_fail("find_by_key")
        for record in self.records:
            if record.client_id == client_id:
                return record
        return None

    def insert(self, record: TemplateRecord) -> Any | None:
        self.calls.append(("insert", record))
        self._maybe_fail("insert")
        if self.insert_returns_none:
            return None
        self.records.append(record)
        return f"id-{len(self.records)}"

    def update_by_key(self, client_id: str, record: TemplateRecord) -> bool:
        self.calls.append(("update_by_key", (client_id, record)))
        self._maybe_fail("update_by_key")
        if self.update_returns_false:
            return False
        for i, existing in enumerate(self.records):
            if existing.client_id == client_id:
                self.records[i] = record
                return True
        return False

    def list_all(self) -> list[TemplateRecord]:
        self.calls.append(("list_all", None))
        self._maybe_fail("list_all")
        return list(self.records)

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]

    def writes(self) -> list[str]:
        return [name for name in self.operations() if name in ("insert", "update_by_key")]


class ScriptedPrompter(Prompter):
    """답변 목록을 순서대로 반환. 답변이 떨어지면 EOFError."""

    def __init__(self, answers: Iterable[str] = ()):
        self.answers = list(answers)
        self.asked: list[str] = []
        self.messages: list[tuple[Severity, str]] = []

    def ask(self, label: str) -> str:
        self.asked.append(label)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def show(self, severity: Severity, message: str) -> None:
        self.messages.append((severity, message))

    def texts(self, severity: Severity | None = None) -> list[str]:
        return [m for s, m in self.messages if severity is None or s == severity]


# =============================================================================
# Data Fixtures
# =============================================================================

SAMPLE_HTML = '<html>\n<body style="color: red">\n\t<p>Hola "amigo"</p>\n</body>\n</html>'


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def complete_record() -> TemplateRecord:
    """type/subject/countries 모두 채워진 레코드."""
    return TemplateRecord(
        client_id="client-001",
        type="welcome",
        subject="Welcome to our service!",
        countries=["Argentina", "Chile", "Uruguay"],
        template={"html": "<html><body>Hi</body></html>"},
        created_at="2024-01-15T09:30:00+00:00",
    )


@pytest.fixture
def incomplete_record() -> TemplateRecord:
    """type, countries 누락 레코드."""
    return TemplateRecord(
        client_id="client-002",
        type="",
        subject="Existing subject",
        countries=[],
        template={"html": "<html><body>Hi</body></html>"},
        created_at="2024-01-15T09:30:00+00:00",
    )


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def html_file(tmp_path: Path) -> Path:
    """index.html (앞뒤 공백 포함)."""
    path = tmp_path / "index.html"
    path.write_text(f"\n  {SAMPLE_HTML}  \n", encoding="utf-8")
    return path


@pytest.fixture
def fixed_clock():
    return lambda: "2024-02-01T10:00:00+00:00"
