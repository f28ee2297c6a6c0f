"""
Prompt/Display adapter.

synchronizer는 Prompter 인터페이스에만 의존 → 테스트에서 스크립트된 fake로 교체.
ConsolePrompter: 표준 입출력 기반 구현 (input/print 주입 가능).
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from src.domain.constants import COUNTRIES_SEPARATOR
from src.domain.schemas import Severity

MENU_LINES = (
    "",
    "=== MAIL TEMPLATE MANAGER ===",
    "1. Create/Update template",
    "2. List templates",
    "3. Exit",
    "=============================",
    "",
)

SEVERITY_PREFIX = {
    Severity.INFO: "[i]",
    Severity.SUCCESS: "[ok]",
    Severity.ERROR: "[error]",
}


def split_list(raw: str, separator: str = COUNTRIES_SEPARATOR) -> list[str]:
    """
    쉼표 구분 입력 → 항목 리스트 (trim, 빈 항목 제거).

    빈 답변은 [] → countries 누락으로 취급.
    """
    return [item.strip() for item in raw.split(separator) if item.strip()]


class Prompter(ABC):
    """사용자 입력/표시 인터페이스."""

    @abstractmethod
    def ask(self, label: str) -> str:
        """라벨을 보여주고 한 줄 입력. 빈 문자열 허용."""

    def ask_list(self, label: str) -> list[str]:
        """쉼표 구분 목록 입력."""
        return split_list(self.ask(label))

    @abstractmethod
    def show(self, severity: Severity, message: str) -> None:
        """심각도별 메시지 표시."""

    def ask_menu_choice(self) -> str:
        return self.ask("Select an option (1-3): ").strip()

    def show_menu(self) -> None:
        for line in MENU_LINES:
            self.show(Severity.INFO, line)

    def wait_for_continue(self) -> None:
        self.ask("Press Enter to continue...")


class ConsolePrompter(Prompter):
    """
    콘솔 구현.

    EOFError / KeyboardInterrupt는 그대로 전파 (menu loop가 종료로 처리).
    """

    def __init__(
        self,
        input_func: Callable[[str], str] | None = None,
        output_func: Callable[[str], None] | None = None,
    ):
        self._input = input_func or input
        self._output = output_func or print

    def ask(self, label: str) -> str:
        return self._input(label)

    def show(self, severity: Severity, message: str) -> None:
        if not message:
            self._output("")
            return
        self._output(f"{SEVERITY_PREFIX[severity]} {message}")

    def show_menu(self) -> None:
        # 메뉴는 prefix 없이
        for line in MENU_LINES:
            self._output(line)
