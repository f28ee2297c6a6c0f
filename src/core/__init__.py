"""
Core layer: codec, artifact I/O, 설정, 로깅.

역할:
- HTML envelope / 저장용 escape (codec)
- HTML → JSON artifact (artifact)
- default.yaml + 환경 변수 (config)
"""

from .artifact import (
    HtmlSource,
    atomic_write_json,
    generate_template_from_file,
    load_template_artifact,
)
from .codec import (
    decode_from_storage,
    encode_for_storage,
    to_final_html,
    to_template,
)
from .config import AppConfig, SourceConfig, StoreConfig, load_config
from .logging import configure_logging, log_error, log_sync_result

__all__ = [
    # codec
    "to_template",
    "to_final_html",
    "encode_for_storage",
    "decode_from_storage",
    # artifact
    "HtmlSource",
    "atomic_write_json",
    "generate_template_from_file",
    "load_template_artifact",
    # config
    "AppConfig",
    "SourceConfig",
    "StoreConfig",
    "load_config",
    # logging
    "configure_logging",
    "log_error",
    "log_sync_result",
]
