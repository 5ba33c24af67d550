"""
Interactive input capability.

The ledger code never reads the terminal itself. When it needs an answer
(a site name, a model, the table a file represents) it asks a Prompter that
the caller supplies: ConsolePrompter for the command line scripts, a stub in
tests.
"""

from typing import Callable, Optional, Protocol, Sequence


class Prompter(Protocol):
    """Anything that can answer a question, optionally from a fixed list."""

    def prompt(self, message: str, choices: Optional[Sequence[str]] = None) -> str:
        ...


class ConsolePrompter:
    """
    Prompter reading answers from standard input.

    With choices, the question is repeated until the answer matches one of
    them (case-insensitively). Answers are returned stripped but otherwise as
    typed; callers lower-case where the ledger requires it.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self._input = input_func
        self._output = output_func

    def prompt(self, message: str, choices: Optional[Sequence[str]] = None) -> str:
        allowed = {choice.lower() for choice in choices or []}

        while True:
            answer = self._input(f"Please provide {message}: ").strip()

            if not allowed or answer.lower() in allowed:
                return answer

            self._output(
                f"Invalid input, please choose from '{', '.join(choices)}'."
            )
