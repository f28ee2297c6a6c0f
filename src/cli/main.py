"""
Entry point: 설정 로드 → store 연결 → 메뉴 루프.

Exit codes:
- 0: 메뉴 Exit 또는 정상 완료
- 1: 시작 시 store 연결 실패, 또는 실행 중 치명적 에러

사용법:
    # 대화형 메뉴
    MONGODB_URI=mongodb://localhost:27017 DB_NAME=mail COLLECTION_NAME=templates \\
        uv run mailtemplates

    # 다른 HTML 소스
    uv run mailtemplates --html emails/welcome.html --artifact build/welcome.json

    # 저장된 템플릿의 최종 HTML 출력
    uv run mailtemplates --export client-001 --out client-001.html
"""

import argparse
import logging
import sys
from pathlib import Path

from src.cli.menu import MenuLoop
from src.cli.prompts import ConsolePrompter
from src.core.artifact import HtmlSource
from src.core.config import AppConfig, load_config
from src.core.logging import configure_logging, log_error
from src.domain.errors import StoreConnectionError
from src.store.base import TemplateStore
from src.store.mongo import MongoTemplateStore
from src.sync.synchronizer import TemplateSynchronizer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailtemplates",
        description="Mail template manager (MongoDB)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="설정 yaml 경로 (기본: 프로젝트 루트 default.yaml)",
    )
    parser.add_argument(
        "--html",
        type=str,
        default=None,
        help="원본 HTML 경로 (기본: source.html_path)",
    )
    parser.add_argument(
        "--artifact",
        type=str,
        default=None,
        help="JSON artifact 경로 (기본: source.artifact_path)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="로그 레벨 (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--export",
        metavar="CLIENT_ID",
        type=str,
        default=None,
        help="메뉴 대신 해당 clientId의 최종 HTML 출력",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="--export 출력 파일 (기본: stdout)",
    )
    return parser


def build_synchronizer(
    config: AppConfig,
    store: TemplateStore,
    prompter: ConsolePrompter,
) -> TemplateSynchronizer:
    html_source = HtmlSource(config.source.html_path, config.source.artifact_path)
    return TemplateSynchronizer(
        store=store,
        prompter=prompter,
        html_source=html_source,
        encode_html=config.encode_html,
    )


def export_html(synchronizer: TemplateSynchronizer, client_id: str, out: Path | None) -> int:
    html = synchronizer.render_html(client_id)
    if html is None:
        return 1

    if out is None:
        sys.stdout.write(html + "\n")
    else:
        out.write_text(html, encoding="utf-8")
        logger.info(f"Final HTML written: {out}")
    return 0


def main(argv: list[str] | None = None, store: TemplateStore | None = None) -> int:
    """
    Args:
        argv: 명령행 인자 (None이면 sys.argv)
        store: 주입할 store (테스트용, None이면 MongoTemplateStore)

    Returns:
        exit code
    """
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.html:
        config.source.html_path = args.html
    if args.artifact:
        config.source.artifact_path = args.artifact
    configure_logging(args.log_level or config.log_level)

    if store is None:
        store = MongoTemplateStore(config.store)

    try:
        store.open()
    except StoreConnectionError as e:
        log_error(e, "connect")
        return 1

    prompter = ConsolePrompter()
    try:
        synchronizer = build_synchronizer(config, store, prompter)
        if args.export:
            return export_html(synchronizer, args.export, args.out)
        return MenuLoop(prompter, synchronizer).run()
    except Exception:
        logger.exception("Fatal error")
        return 1
    finally:
        store.close()


def run() -> None:
    """console script 진입점."""
    sys.exit(main())


if __name__ == "__main__":
    run()
