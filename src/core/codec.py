"""
HTML codec: envelope 생성, 최종 HTML, 저장용 escape/unescape.

규칙:
- encode: 백슬래시를 가장 먼저 escape (이후 삽입된 백슬래시 이중 escape 방지)
- decode: 공백 escape(\\n, \\r, \\t) 먼저 복원 후 따옴표, 백슬래시 순
- 빈 입력은 그대로 반환 (identity)
"""

from typing import Any

from src.domain.constants import DEFAULT_DOCTYPE, DOCTYPE_PREFIX, FIELD_HTML, FIELD_TEMPLATE
from src.domain.errors import ErrorCodes, ValidationError

# 순서 중요: 튜플 순서대로 적용
_ENCODE_STEPS = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

_DECODE_STEPS = (
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ('\\"', '"'),
    ("\\\\", "\\"),
)


def to_template(html: Any) -> dict[str, dict[str, str]]:
    """
    HTML → envelope.

    Args:
        html: HTML 문자열

    Returns:
        {"template": {"html": <trimmed html>}}

    Raises:
        ValidationError: INVALID_HTML (빈 값 또는 str 아님)
    """
    if not html or not isinstance(html, str):
        raise ValidationError(
            ErrorCodes.INVALID_HTML,
            "HTML content must be a non-empty string",
            received_type=type(html).__name__,
        )

    return {FIELD_TEMPLATE: {FIELD_HTML: html.strip()}}


def to_final_html(template: Any) -> str:
    """
    envelope → 바로 사용 가능한 HTML.

    DOCTYPE 선언이 없으면 앞에 추가, 있으면 그대로.

    Raises:
        ValidationError: INVALID_TEMPLATE (template.html 없음 또는 str 아님)
    """
    inner = template.get(FIELD_TEMPLATE) if isinstance(template, dict) else None
    html = inner.get(FIELD_HTML) if isinstance(inner, dict) else None

    if not html or not isinstance(html, str):
        raise ValidationError(
            ErrorCodes.INVALID_TEMPLATE,
            "Invalid template structure: template.html is missing",
        )

    if not html.strip().startswith(DOCTYPE_PREFIX):
        html = f"{DEFAULT_DOCTYPE}\n{html}"

    return html


def encode_for_storage(html: str | None) -> str | None:
    """저장용 escape. 빈 입력은 그대로."""
    if not html or not isinstance(html, str):
        return html

    for raw, escaped in _ENCODE_STEPS:
        html = html.replace(raw, escaped)
    return html


def decode_from_storage(encoded: str | None) -> str | None:
    """encode_for_storage의 역변환. 빈 입력은 그대로."""
    if not encoded:
        return encoded

    for escaped, raw in _DECODE_STEPS:
        encoded = encoded.replace(escaped, raw)
    return encoded
