"""
Record store 추상 인터페이스.

synchronizer가 요구하는 연산은 4개뿐:
- find_by_key / insert / update_by_key / list_all

구현체 교체 가능 (MongoDB, 테스트용 in-memory 등).
실패는 PersistenceError 예외 또는 실패 sentinel(None/False)로 표현.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.domain.schemas import TemplateRecord


class TemplateStore(ABC):
    """템플릿 레코드 store."""

    @abstractmethod
    def find_by_key(self, client_id: str) -> TemplateRecord | None:
        """clientId로 첫 번째 레코드 조회. 없으면 None."""

    @abstractmethod
    def insert(self, record: TemplateRecord) -> Any | None:
        """
        레코드 생성.

        Returns:
            생성된 ID (실패 시 None)
        """

    @abstractmethod
    def update_by_key(self, client_id: str, record: TemplateRecord) -> bool:
        """
        clientId 레코드 갱신.

        clientId, createdAt은 쓰지 않음.

        Returns:
            변경된 필드가 하나라도 있으면 True
        """

    @abstractmethod
    def list_all(self) -> list[TemplateRecord]:
        """전체 레코드 (저장 순서). 없으면 빈 리스트."""

    def open(self) -> None:
        """연결 획득 (필요한 구현체만)."""

    def close(self) -> None:
        """연결 해제 (필요한 구현체만)."""

    def __enter__(self) -> "TemplateStore":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
