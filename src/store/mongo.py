"""
MongoDB store 구현.

연결 수명:
- open(): MongoClient 생성 + ping (실패 → StoreConnectionError)
- close(): client.close()
- 프로세스 시작 시 한 번 open, 종료 시 한 번 close (with 블록)

에러 변환:
- PyMongoError, BSON 인코딩 에러(BSONError, UnicodeError) → PersistenceError (raise ... from e)
- DuplicateKeyError → PersistenceError(DUPLICATE_CLIENT_ID)
"""

import logging
from typing import Any

from bson.errors import BSONError
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.core.config import StoreConfig
from src.domain.constants import FIELD_CLIENT_ID, FIELD_ID, IMMUTABLE_FIELDS
from src.domain.errors import (
    ErrorCodes,
    PersistenceError,
    StoreConnectionError,
)
from src.domain.schemas import TemplateRecord
from src.store.base import TemplateStore

logger = logging.getLogger(__name__)

CLIENT_ID_INDEX_NAME = "clientId_unique"

# 문서 인코딩 실패(lone surrogate 등)는 PyMongoError가 아님
STORE_ERRORS = (PyMongoError, BSONError, UnicodeError)


class MongoTemplateStore(TemplateStore):
    """
    단일 collection 기반 템플릿 store.

    Usage:
        with MongoTemplateStore(config.store) as store:
            store.find_by_key("client-001")
    """

    def __init__(
        self,
        config: StoreConfig,
        client: MongoClient | None = None,
    ):
        """
        Args:
            config: 연결 설정
            client: 미리 생성된 client (테스트용, None이면 open()에서 생성)
        """
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._collection: Collection | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self) -> None:
        """
        연결 + collection 바인딩.

        Raises:
            StoreConnectionError: STORE_NOT_CONFIGURED, STORE_UNREACHABLE
        """
        if not self.config.is_configured:
            raise StoreConnectionError(
                ErrorCodes.STORE_NOT_CONFIGURED,
                "Database environment variables are not configured "
                "(MONGODB_URI, DB_NAME, COLLECTION_NAME)",
            )

        try:
            if self._client is None:
                self._client = MongoClient(
                    self.config.uri,
                    serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
                )
            self._client.admin.command("ping")

            db = self._client[self.config.database]
            self._collection = db[self.config.collection]

            if self.config.unique_client_id:
                self._collection.create_index(
                    [(FIELD_CLIENT_ID, ASCENDING)],
                    name=CLIENT_ID_INDEX_NAME,
                    unique=True,
                )
        except PyMongoError as e:
            self.close()
            raise StoreConnectionError(
                ErrorCodes.STORE_UNREACHABLE,
                f"Error connecting to MongoDB: {e}",
                database=self.config.database,
                collection=self.config.collection,
            ) from e

        logger.info(
            f"MongoDB connection established "
            f"({self.config.database}.{self.config.collection})"
        )

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            logger.info("MongoDB connection closed")
        if self._owns_client:
            self._client = None
        self._collection = None

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            raise PersistenceError(
                ErrorCodes.STORE_NOT_OPEN,
                "Store is not open",
            )
        return self._collection

    # =========================================================================
    # Operations
    # =========================================================================

    def find_by_key(self, client_id: str) -> TemplateRecord | None:
        try:
            doc = self.collection.find_one({FIELD_CLIENT_ID: client_id})
        except STORE_ERRORS as e:
            raise self._operation_error("find_by_key", e, client_id=client_id) from e

        return TemplateRecord.from_document(doc) if doc is not None else None

    def insert(self, record: TemplateRecord) -> Any | None:
        document = record.to_document()
        # _id는 MongoDB가 생성
        document.pop(FIELD_ID, None)

        try:
            result = self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise PersistenceError(
                ErrorCodes.DUPLICATE_CLIENT_ID,
                f"A template for clientId '{record.client_id}' already exists",
                client_id=record.client_id,
            ) from e
        except STORE_ERRORS as e:
            raise self._operation_error("insert", e, client_id=record.client_id) from e

        return result.inserted_id

    def update_by_key(self, client_id: str, record: TemplateRecord) -> bool:
        changes = {
            key: value
            for key, value in record.to_document().items()
            if key not in IMMUTABLE_FIELDS
        }

        try:
            result = self.collection.update_one(
                {FIELD_CLIENT_ID: client_id},
                {"$set": changes},
            )
        except STORE_ERRORS as e:
            raise self._operation_error("update_by_key", e, client_id=client_id) from e

        return result.modified_count > 0

    def list_all(self) -> list[TemplateRecord]:
        try:
            docs = list(self.collection.find({}))
        except STORE_ERRORS as e:
            raise self._operation_error("list_all", e) from e

        return [TemplateRecord.from_document(doc) for doc in docs]

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _operation_error(operation: str, error: Exception, **context: Any) -> PersistenceError:
        logger.error(f"MongoDB {operation} failed: {error}")
        return PersistenceError(
            ErrorCodes.STORE_OPERATION_FAILED,
            f"Store operation '{operation}' failed: {error}",
            operation=operation,
            **context,
        )
