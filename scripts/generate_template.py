#!/usr/bin/env python3
"""
generate_template.py - HTML 파일 → mailTemplate.json 변환 스크립트

동작:
1. HTML 파일 읽기 (UTF-8)
2. 앞뒤 공백 제거 후 {"template": {"html": ...}} envelope 생성
3. JSON(indent=2)으로 원자적 저장

사용법:
    # 기본 (index.html → mailTemplate.json)
    uv run python scripts/generate_template.py

    # 경로 지정
    uv run python scripts/generate_template.py --html emails/welcome.html --out build/welcome.json

    # DOCTYPE 포함 최종 HTML도 stdout으로 출력
    uv run python scripts/generate_template.py --final
"""

import argparse
import logging
import sys
from pathlib import Path

# 프로젝트 루트 (src 패키지 import용)
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.artifact import generate_template_from_file  # noqa: E402
from src.core.codec import to_final_html  # noqa: E402
from src.domain.constants import DEFAULT_ARTIFACT_PATH, DEFAULT_HTML_PATH  # noqa: E402
from src.domain.errors import ValidationError  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="HTML → mail template JSON 변환",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--html",
        type=str,
        default=DEFAULT_HTML_PATH,
        help=f"원본 HTML 경로 (기본: {DEFAULT_HTML_PATH})",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=DEFAULT_ARTIFACT_PATH,
        help=f"출력 JSON 경로 (기본: {DEFAULT_ARTIFACT_PATH})",
    )
    parser.add_argument(
        "--final",
        action="store_true",
        help="DOCTYPE 포함 최종 HTML을 stdout으로 출력",
    )

    args = parser.parse_args(argv)

    logger.info(f"Generating mail template from {args.html}")

    try:
        template = generate_template_from_file(args.html, args.out)
    except ValidationError as e:
        logger.error(f"Template generation failed: {e}")
        return 1

    if args.final:
        sys.stdout.write(to_final_html(template) + "\n")

    logger.info("Done: template JSON generated, HTML ready to use")
    return 0


if __name__ == "__main__":
    sys.exit(main())
