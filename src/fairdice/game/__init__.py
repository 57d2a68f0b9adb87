"""Dice game orchestration — parsing, session, transcript, console I/O."""

from fairdice.game.parser import parse_dice
from fairdice.game.session import ComputerStrategy, DiceGame, GameOutcome, Winner
from fairdice.game.transcript import RoundTranscript

__all__ = [
    "parse_dice",
    "ComputerStrategy",
    "DiceGame",
    "GameOutcome",
    "Winner",
    "RoundTranscript",
]
