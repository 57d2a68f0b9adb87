"""Dice argument parsing — turns ``"2,2,4,4,9,9"`` strings into Dice.

Failures are raised as InvalidArgument naming the offending die (1-based)
so the caller can print usage and exit at its own boundary.
"""

from __future__ import annotations

from typing import Sequence

from fairdice.errors import InvalidArgument
from fairdice.models.die import Die


USAGE_EXAMPLE = "fairdice play 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"


def parse_die(text: str, position: int = 1, min_faces: int = 6) -> Die:
    """Parse one comma-separated die."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) < min_faces:
        raise InvalidArgument(
            f"Die #{position} must have at least {min_faces} faces "
            f"(found {len(parts)}): {text!r}"
        )
    faces: list[int] = []
    for part in parts:
        try:
            faces.append(int(part))
        except ValueError:
            raise InvalidArgument(
                f"Die #{position} contains a non-integer value: {part!r}"
            ) from None
    return Die(tuple(faces))


def parse_dice(
    args: Sequence[str],
    min_faces: int = 6,
    min_dice: int = 3,
) -> list[Die]:
    """Parse every die argument and check the set is playable.

    Raises:
        InvalidArgument: Too few dice, too few faces, non-integer faces,
            or dice with differing face counts.
    """
    if len(args) < min_dice:
        raise InvalidArgument(
            f"At least {min_dice} dice are required, got {len(args)}. "
            f"Example: {USAGE_EXAMPLE}"
        )
    dice = [parse_die(arg, i, min_faces) for i, arg in enumerate(args, 1)]
    counts = {d.face_count for d in dice}
    if len(counts) > 1:
        raise InvalidArgument(
            f"All dice must have the same number of faces, got {sorted(counts)}"
        )
    return dice
