"""
Interactive prompts.

Free-text input and numbered single-choice selection on top of
``input()``. Both functions are injectable so commands can be driven by
scripted answers in tests.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from .errors import NoChoicesError


class Prompter:
    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self._input = input_func
        self._output = output_func

    def text(self, message: str, default: Optional[str] = None) -> str:
        """Ask until a non-empty answer (or a default) is given."""
        suffix = f" [{default}]" if default else ""
        while True:
            answer = self._input(f"{message}{suffix}: ").strip()
            if answer:
                return answer
            if default:
                return default
            self._output("  A value is required.")

    def select(self, message: str, choices: Sequence[str]) -> str:
        """
        Ask the user to pick one of ``choices`` by number or by name.

        Raises:
            NoChoicesError: if ``choices`` is empty
        """

        if not choices:
            raise NoChoicesError(f"Nothing to choose from: {message}")

        self._output(f"{message}:")
        for idx, choice in enumerate(choices, start=1):
            self._output(f"  {idx}) {choice}")

        while True:
            answer = self._input(f"Choose [1-{len(choices)}]: ").strip()
            if answer in choices:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            self._output(f"  Invalid choice: {answer!r}")
