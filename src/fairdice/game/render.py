"""Plain-text rendering of the help table, transcript events, and outcome."""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from tabulate import tabulate

from fairdice.engine.probability import probability_table
from fairdice.game.session import GameOutcome, Winner, FIRST_MOVE
from fairdice.game.transcript import EventKind, TranscriptEvent
from fairdice.models.die import Die


CORNER = "User dice v"


def format_probability(p: Fraction) -> str:
    return f"{float(p):.4f}"


def render_help_table(dice: Sequence[Die]) -> str:
    """Box-drawn table of the user's win probability, row die vs column die."""
    headers = [str(d) for d in dice]
    table = probability_table(dice)
    rows = [
        [header, *(format_probability(p) for p in table[i])]
        for i, header in enumerate(headers)
    ]
    grid = tabulate(
        rows, headers=[CORNER, *headers], tablefmt="simple_grid", disable_numparse=True,
    )
    return "Probability of the win for the user:\n" + grid


def render_event(event: TranscriptEvent) -> str:
    """One or more console lines describing a transcript event."""
    p = event.payload
    if event.event_kind == EventKind.COMMITTED:
        return (
            f"I selected a random value in the range 0..{p['range'] - 1} "
            f"(HMAC={p['digest']})."
        )
    if event.event_kind == EventKind.CONTRIBUTION_ACCEPTED:
        return f"Your number: {p['contribution']}."
    if event.event_kind == EventKind.REVEALED:
        line = f"My number is {p['value_text']} (KEY={p['key_hex']})."
        if p["label"] == FIRST_MOVE:
            return line
        return (
            f"{line}\nThe fair number generation result is {p['value_text']} + "
            f"{p['contribution']} = {p['final_value']} (mod {p['range']})."
        )
    if event.event_kind == EventKind.DIE_CHOSEN:
        if p["side"] == "computer":
            return f"I choose the {p['die']} dice."
        return f"You choose the {p['die']} dice."
    if event.event_kind == EventKind.GAME_FINISHED:
        return f"Result: you {p['user_face']}, me {p['computer_face']}."
    return f"{event.event_kind.value}: {p}"


def render_outcome(outcome: GameOutcome) -> str:
    """Final result table."""
    verdict = {
        Winner.USER: "You win!",
        Winner.COMPUTER: "I win!",
        Winner.DRAW: "Draw",
    }[outcome.winner]
    cells = [str(outcome.user_face), str(outcome.computer_face), verdict]
    return tabulate(
        [cells], headers=["Player", "Computer", "Result"], tablefmt="grid",
        disable_numparse=True,
    )
