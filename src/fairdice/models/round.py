"""Round models — lifecycle state, reveal payload, and round result.

Round lifecycle: CREATED → COMMITTED → CONTRIBUTION_RECEIVED → REVEALED

The result of a round is only meaningful once the digest has been
published and the contribution received, in that order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class RoundState(str, enum.Enum):
    """Lifecycle state of a fair value exchange round."""
    CREATED = "created"
    COMMITTED = "committed"
    CONTRIBUTION_RECEIVED = "contribution_received"
    REVEALED = "revealed"


@dataclass(frozen=True)
class RevealPayload:
    """Everything a verifier needs to recompute the published digest.

    ``value_text`` is the exact text that was hashed; ``key_hex`` is the
    lowercase hex encoding of the HMAC key.
    """
    secret_value: int
    value_text: str
    key_hex: str
    digest: str
    algorithm: str


@dataclass(frozen=True)
class ContributionRequest:
    """What the contributing party sees while the round waits on it.

    Only the digest is published; secret and key stay with the committer.
    """
    round_id: str
    range: int
    digest: str
    algorithm: str
    label: str = ""

    @property
    def max_value(self) -> int:
        return self.range - 1


@dataclass(frozen=True)
class RoundResult:
    """Final agreed value of one round."""
    round_id: str
    secret_value: int
    contribution: int
    range: int
    final_value: int
    reveal: RevealPayload

    @staticmethod
    def combine(secret_value: int, contribution: int, range_: int) -> int:
        """Additive combination modulo range."""
        return (secret_value + contribution) % range_
