"""Line-based question/answer prompts for the operator.

The engine is blocking and single-threaded: each call reads one line,
trims it, and falls back to the default when the answer is blank.  The
retrying helpers loop until they get an acceptable answer; there is no retry
limit because a human is at the keyboard.
"""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.markup import escape

from kickstart.utils import console as default_console

InputFn = Callable[[str], str]
Predicate = Callable[[str], bool]

_YES = ("y", "yes")
_NO = ("n", "no")


class Prompter:
    """Asks questions and returns trimmed answers.

    Args:
        input_fn: Reads one line given the rendered prompt.  Defaults to the
            shared Rich console's ``input``; tests inject a scripted reader.
        console: Where diagnostics for rejected answers are printed.
    """

    def __init__(
        self,
        input_fn: InputFn | None = None,
        console: Console | None = None,
    ) -> None:
        self.console = console or default_console
        self._input = input_fn or self.console.input

    def ask(self, question: str, default: str | None = None) -> str:
        suffix = f" [dim]({escape(default)})[/dim]" if default else ""
        answer = self._input(f"[bold]{escape(question)}[/bold]{suffix} ").strip()
        if not answer and default:
            return default
        return answer

    def ask_yes_no(self, question: str) -> bool:
        while True:
            answer = self.ask(f"{question} [y/n]").lower()
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            self.console.print("[yellow]Please answer y or n.[/yellow]")

    def ask_required(self, question: str, default: str | None = None) -> str:
        while True:
            answer = self.ask(question, default)
            if answer:
                return answer
            self.console.print("[yellow]Please enter a value.[/yellow]")

    def ask_validated(
        self,
        question: str,
        predicate: Predicate,
        default: str | None = None,
    ) -> str:
        """Ask until *predicate* accepts the answer.

        A default is only used when the operator leaves the answer blank, and
        it still has to pass *predicate*.
        """
        while True:
            answer = self.ask(question, default)
            if predicate(answer):
                return answer
            self.console.print("[yellow]Invalid value. Please try again.[/yellow]")

    def pause(self, message: str) -> None:
        """Wait for the operator to press Enter."""
        self._input(f"[bold]{escape(message)}[/bold] ")
