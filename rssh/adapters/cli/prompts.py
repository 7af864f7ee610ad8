"""
Rich-based user prompts
"""
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, Confirm

from ...core.interfaces import PromptProvider
from ...core.logging import get_stdout_console


class RichPromptProvider(PromptProvider):
    """Rich-based prompt provider"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_stdout_console()

    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input; masked when password is set"""
        if default is not None:
            value = Prompt.ask(message, password=password, default=default, console=self.console)
        else:
            value = Prompt.ask(message, password=password, console=self.console)
        return value or ""

    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt user for confirmation"""
        return Confirm.ask(message, default=default, console=self.console)

    def choose(self, message: str, choices: List[str]) -> str:
        """Prompt user to pick one of the choices"""
        for index, choice in enumerate(choices, 1):
            self.console.print(f"  [cyan]{index}[/cyan]. {escape(choice)}")
        numbers = [str(i) for i in range(1, len(choices) + 1)]
        answer = Prompt.ask(
            message,
            choices=numbers + choices,
            show_choices=False,
            default="1",
            console=self.console,
        )
        # Numbers always mean positions, even when an entry is itself numeric
        if answer in numbers:
            return choices[int(answer) - 1]
        return answer

    def info(self, message: str) -> None:
        """Display info message"""
        self.console.print(f"[cyan]ℹ[/cyan] {message}")
