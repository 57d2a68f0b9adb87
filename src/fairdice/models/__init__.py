"""Core data models for fairdice."""

from fairdice.models.die import Die
from fairdice.models.round import (
    ContributionRequest,
    RevealPayload,
    RoundResult,
    RoundState,
)

__all__ = [
    "Die",
    "ContributionRequest",
    "RevealPayload",
    "RoundResult",
    "RoundState",
]
