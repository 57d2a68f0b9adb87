"""Console player — the terminal side of a DiceGame.

Input conventions at every prompt:
    X / x  abort the game (raises RoundAborted)
    ?      print the probability help table and ask again
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from fairdice.errors import InvalidArgument, RoundAborted
from fairdice.game.render import render_event, render_help_table
from fairdice.game.session import FIRST_MOVE
from fairdice.game.transcript import TranscriptEvent
from fairdice.models.die import Die
from fairdice.models.round import ContributionRequest


def _is_number(answer: str) -> bool:
    """ASCII digits only."""
    return answer.isascii() and answer.isdecimal()


class ConsolePlayer:
    """Reads choices from a line-input function and writes to an output function.

    Both functions are injectable; defaults are ``input`` and ``print``.
    """

    def __init__(
        self,
        dice: Sequence[Die],
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._dice = list(dice)
        self._input = input_fn or input
        self._output = output_fn or print

    def _ask(self, prompt: str) -> str:
        """Prompt until a non-help answer arrives."""
        while True:
            try:
                answer = self._input(prompt).strip()
            except EOFError:
                raise RoundAborted("Input closed") from None
            if answer.lower() == "x":
                raise RoundAborted("User exited")
            if answer == "?":
                self._output(render_help_table(self._dice))
                continue
            return answer

    def _options(self, pairs: Sequence[tuple[str, str]]) -> None:
        for key, text in pairs:
            self._output(f"{key} - {text}")
        self._output("X - exit")
        self._output("? - help")

    def next_contribution(self, request: ContributionRequest) -> int:
        if request.label == FIRST_MOVE:
            self._output("Try to guess my selection.")
        else:
            self._output(f"Add your number modulo {request.range}.")
        self._options([(str(i), str(i)) for i in range(request.range)])
        while True:
            answer = self._ask("Your selection: ")
            if _is_number(answer):
                return int(answer)
            self._output(f"Invalid input: {answer!r} is not a number. Try again.")

    def reject(self, request: ContributionRequest, error: InvalidArgument) -> None:
        self._output(f"Invalid input: {error}. Try again.")

    def choose_die(self, options: Sequence[Die]) -> int:
        self._output("Choose your dice:")
        self._options([(str(i), str(d)) for i, d in enumerate(options)])
        answer = self._ask("Your selection: ")
        return int(answer) if _is_number(answer) else -1

    def reject_choice(self, error: InvalidArgument) -> None:
        self._output(f"Invalid dice index: {error}. Try again.")

    def notify(self, event: TranscriptEvent) -> None:
        self._output(render_event(event))
