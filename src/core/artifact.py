"""
JSON artifact I/O: HTML 파일 → mailTemplate.json.

동작:
- HTML 읽기 (UTF-8) → to_template → JSON (indent=2) 원자적 쓰기
- 동시 쓰기 방지: artifact 옆 .lock 파일 (filelock)
- create branch의 HTML 소스: artifact 우선, 없으면 HTML에서 생성
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.core.codec import to_template
from src.domain.constants import (
    ARTIFACT_INDENT,
    DEFAULT_ARTIFACT_PATH,
    DEFAULT_HTML_PATH,
    FIELD_HTML,
    FIELD_TEMPLATE,
)
from src.domain.errors import ErrorCodes, ValidationError

logger = logging.getLogger(__name__)

# 락 timeout (초)
LOCK_TIMEOUT = 10.0


# =============================================================================
# Atomic Write
# =============================================================================

def atomic_write_json(path: Path, data: dict) -> None:
    """artifact JSON 쓰기: 같은 디렉터리 temp 파일 → os.replace. 실패 시 기존 파일 유지."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as f:
        temp_path = Path(f.name)
        try:
            json.dump(data, f, indent=ARTIFACT_INDENT, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        except (TypeError, ValueError, OSError):
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    os.replace(temp_path, path)


# =============================================================================
# Generate / Load
# =============================================================================

def generate_template_from_file(
    html_path: Path | str = DEFAULT_HTML_PATH,
    artifact_path: Path | str = DEFAULT_ARTIFACT_PATH,
) -> dict[str, Any]:
    """
    HTML 파일을 읽어 envelope JSON 생성.

    Args:
        html_path: 원본 HTML 경로
        artifact_path: 출력 JSON 경로

    Returns:
        {"template": {"html": ...}}

    Raises:
        ValidationError: HTML_SOURCE_NOT_FOUND, INVALID_HTML
    """
    html_path = Path(html_path).resolve()
    artifact_path = Path(artifact_path).resolve()

    if not html_path.is_file():
        raise ValidationError(
            ErrorCodes.HTML_SOURCE_NOT_FOUND,
            f"HTML file not found: {html_path}",
            path=str(html_path),
        )

    try:
        html_content = html_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(
            ErrorCodes.HTML_SOURCE_NOT_FOUND,
            f"Cannot read HTML file: {html_path}",
            path=str(html_path),
            cause=str(e),
        ) from e

    template = to_template(html_content)

    lock = FileLock(f"{artifact_path}.lock", timeout=LOCK_TIMEOUT)
    try:
        with lock:
            atomic_write_json(artifact_path, template)
    except Timeout as e:
        raise ValidationError(
            ErrorCodes.INVALID_ARTIFACT,
            f"Failed to acquire lock for artifact '{artifact_path}'",
            path=str(artifact_path),
            timeout=LOCK_TIMEOUT,
        ) from e

    logger.info(
        f"Template JSON generated: {artifact_path} "
        f"(HTML size: {len(html_content) / 1024:.2f} KB)"
    )
    return template


def load_template_artifact(artifact_path: Path | str) -> dict[str, Any]:
    """
    mailTemplate.json 로드 + envelope 형태 검증.

    Raises:
        ValidationError: INVALID_ARTIFACT
    """
    artifact_path = Path(artifact_path)

    try:
        data = json.loads(artifact_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(
            ErrorCodes.INVALID_ARTIFACT,
            f"Cannot read template artifact: {artifact_path}",
            path=str(artifact_path),
            cause=str(e),
        ) from e

    inner = data.get(FIELD_TEMPLATE) if isinstance(data, dict) else None
    html = inner.get(FIELD_HTML) if isinstance(inner, dict) else None
    if not isinstance(html, str) or not html:
        raise ValidationError(
            ErrorCodes.INVALID_ARTIFACT,
            "Template artifact must have shape {\"template\": {\"html\": <string>}}",
            path=str(artifact_path),
        )

    return data


class HtmlSource:
    """
    create branch용 HTML 소스.

    artifact가 있으면 그대로 사용, 없으면 HTML 파일에서 생성.
    호출 시점에만 파일을 읽음 (reconcile branch는 파일 불필요).
    """

    def __init__(
        self,
        html_path: Path | str = DEFAULT_HTML_PATH,
        artifact_path: Path | str = DEFAULT_ARTIFACT_PATH,
    ):
        self.html_path = Path(html_path)
        self.artifact_path = Path(artifact_path)

    def __call__(self) -> str:
        if self.artifact_path.is_file():
            template = load_template_artifact(self.artifact_path)
            logger.info(f"Using template artifact: {self.artifact_path}")
        else:
            template = generate_template_from_file(self.html_path, self.artifact_path)

        html: str = template[FIELD_TEMPLATE][FIELD_HTML]
        return html
