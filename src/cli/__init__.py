"""
CLI layer: 콘솔 입출력, 메뉴, entry point.

주의: menu/main은 sync에 의존 → 여기서 import하지 않음 (순환 방지)
"""

from .prompts import ConsolePrompter, Prompter, split_list

__all__ = [
    "Prompter",
    "ConsolePrompter",
    "split_list",
]
