"""
Menu loop: ShowMenu → {Synchronize, List, Exit}.

- Synchronize/List 후 계속 진행 확인을 받고 ShowMenu로 복귀
- 알 수 없는 입력 → 에러 표시 후 ShowMenu (부작용 없음)
- EOF / Ctrl-C → Exit와 동일하게 처리
"""

import logging

from src.cli.prompts import Prompter
from src.domain.constants import MENU_EXIT, MENU_LIST, MENU_SYNCHRONIZE
from src.domain.schemas import Severity
from src.sync.synchronizer import LABEL_CLIENT_ID, TemplateSynchronizer

logger = logging.getLogger(__name__)


class MenuLoop:
    """대화형 메뉴."""

    def __init__(self, prompter: Prompter, synchronizer: TemplateSynchronizer):
        self.prompter = prompter
        self.synchronizer = synchronizer

    def run(self) -> int:
        """
        Exit 선택까지 반복.

        Returns:
            프로세스 exit code (항상 0, 치명적 에러는 호출자가 처리)
        """
        try:
            while self.step():
                pass
        except (EOFError, KeyboardInterrupt):
            logger.info("Input closed, leaving menu")

        self.prompter.show(Severity.INFO, "Goodbye!")
        return 0

    def step(self) -> bool:
        """
        메뉴 한 번 처리.

        Returns:
            계속하면 True, Exit면 False
        """
        self.prompter.show_menu()
        choice = self.prompter.ask_menu_choice()

        if choice == MENU_SYNCHRONIZE:
            client_id = self.prompter.ask(LABEL_CLIENT_ID)
            self.synchronizer.synchronize(client_id)
        elif choice == MENU_LIST:
            self.synchronizer.list_all()
        elif choice == MENU_EXIT:
            return False
        else:
            self.prompter.show(Severity.ERROR, f"Invalid option: '{choice}'. Choose 1, 2 or 3.")
            return True

        self.prompter.wait_for_continue()
        return True
