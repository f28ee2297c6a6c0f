"""
설정 로드: default.yaml + 환경 변수 override.

우선순위: 환경 변수 > yaml > 기본값
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import (
    DEFAULT_ARTIFACT_PATH,
    DEFAULT_HTML_PATH,
    ENV_COLLECTION_NAME,
    ENV_DB_NAME,
    ENV_LOG_LEVEL,
    ENV_MONGODB_URI,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "default.yaml"


@dataclass
class StoreConfig:
    """MongoDB 연결 설정."""
    uri: str = ""
    database: str = ""
    collection: str = ""
    unique_client_id: bool = True
    server_selection_timeout_ms: int = 5000

    @property
    def is_configured(self) -> bool:
        return bool(self.uri and self.database and self.collection)


@dataclass
class SourceConfig:
    """HTML 소스 / JSON artifact 경로."""
    html_path: str = DEFAULT_HTML_PATH
    artifact_path: str = DEFAULT_ARTIFACT_PATH


@dataclass
class AppConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    encode_html: bool = True
    log_level: str = "INFO"


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    설정 파일 로드.

    Args:
        config_path: yaml 경로 (None이면 프로젝트 루트의 default.yaml)
        environ: 환경 변수 (테스트용, None이면 os.environ)

    Returns:
        AppConfig (파일 없으면 기본값 + 환경 변수)
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    if environ is None:
        environ = os.environ

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    store_data = data.get("store") or {}
    source_data = data.get("source") or {}
    sync_data = data.get("sync") or {}
    logging_data = data.get("logging") or {}

    store = StoreConfig(
        uri=environ.get(ENV_MONGODB_URI) or store_data.get("uri") or "",
        database=environ.get(ENV_DB_NAME) or store_data.get("database") or "",
        collection=environ.get(ENV_COLLECTION_NAME) or store_data.get("collection") or "",
        unique_client_id=bool(store_data.get("unique_client_id", True)),
        server_selection_timeout_ms=int(store_data.get("server_selection_timeout_ms", 5000)),
    )
    source = SourceConfig(
        html_path=source_data.get("html_path", DEFAULT_HTML_PATH),
        artifact_path=source_data.get("artifact_path", DEFAULT_ARTIFACT_PATH),
    )

    return AppConfig(
        store=store,
        source=source,
        encode_html=bool(sync_data.get("encode_html", True)),
        log_level=str(environ.get(ENV_LOG_LEVEL) or logging_data.get("level", "INFO")).upper(),
    )
