"""
Logging 설정 + sync 이벤트 기록.

콘솔 출력(사용자용)과 로그(운영용)는 분리:
- 사용자 메시지 → Prompter.show()
- 운영 로그 → logging (stderr)
"""

import logging

from src.domain.errors import MailTemplateError
from src.domain.schemas import SyncResult

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """
    root logger 설정. entry point에서 한 번만 호출.

    Args:
        level: 로그 레벨 이름 (알 수 없으면 INFO)
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        force=True,
    )
    # pymongo 내부 로그는 경고 이상만
    logging.getLogger("pymongo").setLevel(max(numeric, logging.WARNING))


def log_sync_result(result: SyncResult) -> None:
    """synchronize() 결과 기록."""
    logger.info(f"sync {result.outcome.value}: {result.to_dict()}")


def log_error(error: MailTemplateError, operation: str) -> None:
    """도메인 에러 기록 (code + context)."""
    logger.error(f"{operation} failed: {error.to_dict()}")
