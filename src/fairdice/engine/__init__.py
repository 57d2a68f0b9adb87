"""Protocol engine — the fair exchange round and win probabilities."""

from fairdice.engine.exchange import ContributionSource, FairValueExchange, run_round
from fairdice.engine.probability import (
    probability_table,
    tie_probability,
    win_probability,
)

__all__ = [
    "ContributionSource",
    "FairValueExchange",
    "run_round",
    "probability_table",
    "tie_probability",
    "win_probability",
]
