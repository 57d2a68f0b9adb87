"""Win probability — exact pairwise odds between dice.

For dice A and B, every ordered pair (x, y) of faces is equally likely.
A wins a pair when x > y; ties count as neither side winning. Values are
returned as Fractions so the identity

    P(A beats B) + P(B beats A) + P(tie) == 1

holds exactly.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from fairdice.errors import InvalidArgument
from fairdice.models.die import Die


def _pair_counts(a: Die, b: Die) -> tuple[int, int, int]:
    """Return (wins, ties, total) over all ordered face pairs."""
    wins = 0
    ties = 0
    for x in a.faces:
        for y in b.faces:
            if x > y:
                wins += 1
            elif x == y:
                ties += 1
    return wins, ties, a.face_count * b.face_count


def win_probability(a: Die, b: Die) -> Fraction:
    """Probability that a random face of *a* beats a random face of *b*."""
    wins, _, total = _pair_counts(a, b)
    return Fraction(wins, total)


def tie_probability(a: Die, b: Die) -> Fraction:
    _, ties, total = _pair_counts(a, b)
    return Fraction(ties, total)


def probability_table(dice: Sequence[Die]) -> list[list[Fraction]]:
    """Row die vs column die win probabilities.

    The diagonal is computed like every other cell. A die against itself
    is not 1/3 in general; it depends on how many faces repeat.
    """
    return [[win_probability(row, col) for col in dice] for row in dice]


def best_counter(target: Die, candidates: Sequence[Die]) -> int:
    """Index of the candidate with the highest win probability over *target*.

    Ties resolve to the lowest index.
    """
    if not candidates:
        raise InvalidArgument("No candidate dice to choose from")
    best_idx = 0
    best_p = Fraction(-1)
    for idx, die in enumerate(candidates):
        p = win_probability(die, target)
        if p > best_p:
            best_idx, best_p = idx, p
    return best_idx
