"""Fair value exchange — the commit → contribute → reveal round state machine.

Round lifecycle:
    CREATED → COMMITTED → CONTRIBUTION_RECEIVED → REVEALED

- CREATED: nothing drawn yet.
- COMMITTED: secret drawn, digest published. Secret and key stay private.
- CONTRIBUTION_RECEIVED: the other party's value is fixed.
- REVEALED: terminal. Secret and key are disclosed; final value is
  ``(secret + contribution) % range``.

Fail-closed: any transition not in the table raises ProtocolViolation.
A contribution must arrive strictly after the digest is published and
strictly before the reveal; that ordering is what makes the round fair.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional, Protocol

from fairdice.config import ProtocolConfig
from fairdice.crypto.commitment import Commitment, check_reveal
from fairdice.crypto.sampler import UnbiasedSampler, secure_bytes, ByteSource
from fairdice.errors import InvalidArgument, ProtocolViolation
from fairdice.models.round import (
    ContributionRequest,
    RoundResult,
    RoundState,
)


logger = logging.getLogger(__name__)


# Valid transitions: {from_state: {allowed_to_states}}
_TRANSITIONS: dict[RoundState, set[RoundState]] = {
    RoundState.CREATED: {RoundState.COMMITTED},
    RoundState.COMMITTED: {RoundState.CONTRIBUTION_RECEIVED},
    RoundState.CONTRIBUTION_RECEIVED: {RoundState.REVEALED},
    # Terminal
    RoundState.REVEALED: set(),
}


class ContributionSource(Protocol):
    """The party that supplies the contribution for a round.

    ``next_contribution`` may block on a human. Raising RoundAborted
    from it cancels the round; no result is produced.
    """

    def next_contribution(self, request: ContributionRequest) -> int: ...

    def reject(self, request: ContributionRequest, error: InvalidArgument) -> None: ...


class FairValueExchange:
    """One round of the provably-fair exchange, held by the committer.

    Usage:
        exchange = FairValueExchange(6)
        digest = exchange.commit()
        exchange.accept_contribution(user_value)
        result = exchange.reveal()
    """

    def __init__(
        self,
        range_: int,
        *,
        config: Optional[ProtocolConfig] = None,
        sampler: Optional[UnbiasedSampler] = None,
        key_source: ByteSource = secure_bytes,
        label: str = "",
    ) -> None:
        self._config = config or ProtocolConfig.default()
        self._sampler = sampler or UnbiasedSampler(self._config.sample_bits)
        if isinstance(range_, bool) or not isinstance(range_, int) or range_ <= 0:
            raise InvalidArgument(f"range must be a positive integer, got {range_!r}")
        self._range = range_
        self._key_source = key_source
        self._label = label
        self._round_id = str(uuid.uuid4())
        self._state = RoundState.CREATED
        self._commitment: Optional[Commitment] = None
        self._digest: Optional[str] = None
        self._key_fingerprint: Optional[str] = None
        self._contribution: Optional[int] = None
        self._result: Optional[RoundResult] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def round_id(self) -> str:
        return self._round_id

    @property
    def range(self) -> int:
        return self._range

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def digest(self) -> str:
        if self._digest is None:
            raise ProtocolViolation(f"Round {self._round_id}: no commitment yet")
        return self._digest

    @property
    def key_fingerprint(self) -> str:
        if self._key_fingerprint is None:
            raise ProtocolViolation(f"Round {self._round_id}: no commitment yet")
        return self._key_fingerprint

    @property
    def is_terminal(self) -> bool:
        return self._state == RoundState.REVEALED

    def request(self) -> ContributionRequest:
        """The public view handed to the contributing party."""
        if self._state != RoundState.COMMITTED:
            raise ProtocolViolation(
                f"Round {self._round_id}: contribution can only be requested "
                f"while committed (state={self._state.value})"
            )
        return ContributionRequest(
            round_id=self._round_id,
            range=self._range,
            digest=self.digest,
            algorithm=self._config.hash_algorithm,
            label=self._label,
        )

    def _advance(self, target: RoundState) -> None:
        allowed = _TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise ProtocolViolation(
                f"Invalid round transition: {self._state.value} → {target.value}"
            )
        logger.debug(
            "round %s: %s -> %s", self._round_id, self._state.value, target.value
        )
        self._state = target

    # ------------------------------------------------------------------
    # Protocol steps
    # ------------------------------------------------------------------

    def commit(self) -> str:
        """Draw the secret, commit to it, and return the digest to publish."""
        if self._state != RoundState.CREATED:
            raise ProtocolViolation(
                f"Round {self._round_id}: commitment already made "
                f"(state={self._state.value})"
            )
        secret = self._sampler.sample(self._range)
        self._commitment = Commitment.commit(
            secret,
            algorithm=self._config.hash_algorithm,
            key_bytes=self._config.key_bytes,
            source=self._key_source,
        )
        self._digest = self._commitment.digest
        self._key_fingerprint = self._commitment.key_fingerprint
        self._advance(RoundState.COMMITTED)
        logger.debug(
            "round %s: published digest %s (range %d)",
            self._round_id, self._commitment.digest, self._range,
        )
        return self._commitment.digest

    def accept_contribution(self, contribution: int) -> None:
        """Fix the other party's value.

        Raises:
            ProtocolViolation: Not committed yet, or already received/revealed.
            InvalidArgument: Value outside ``[0, range)``; state unchanged.
        """
        if self._state != RoundState.COMMITTED:
            raise ProtocolViolation(
                f"Round {self._round_id}: contribution not accepted in state "
                f"{self._state.value}"
            )
        if isinstance(contribution, bool) or not isinstance(contribution, int):
            raise InvalidArgument(
                f"Contribution must be an integer, got {contribution!r}"
            )
        if not 0 <= contribution < self._range:
            raise InvalidArgument(
                f"Contribution must be in 0..{self._range - 1}, got {contribution}"
            )
        self._contribution = contribution
        self._advance(RoundState.CONTRIBUTION_RECEIVED)

    def reveal(self) -> RoundResult:
        """Disclose secret and key and compute the final value.

        Idempotent once REVEALED.
        """
        if self._result is not None:
            return self._result
        if self._state != RoundState.CONTRIBUTION_RECEIVED:
            raise ProtocolViolation(
                f"Round {self._round_id}: cannot reveal before a contribution "
                f"is accepted (state={self._state.value})"
            )
        assert self._commitment is not None and self._contribution is not None
        payload = self._commitment.reveal()
        # Self-check: a mismatch here means the commitment was corrupted
        check_reveal(self._commitment.digest, payload)
        self._advance(RoundState.REVEALED)
        self._result = RoundResult(
            round_id=self._round_id,
            secret_value=payload.secret_value,
            contribution=self._contribution,
            range=self._range,
            final_value=RoundResult.combine(
                payload.secret_value, self._contribution, self._range
            ),
            reveal=payload,
        )
        # Drop the private state; the reveal payload now carries it
        self._commitment = None
        logger.debug(
            "round %s: revealed %s + %d = %d (mod %d)",
            self._round_id, payload.value_text, self._result.contribution,
            self._result.final_value, self._range,
        )
        return self._result


def run_round(
    range_: int,
    source: ContributionSource,
    *,
    config: Optional[ProtocolConfig] = None,
    sampler: Optional[UnbiasedSampler] = None,
    label: str = "",
    exchange: Optional[FairValueExchange] = None,
    on_commit: Optional[Callable[[FairValueExchange], None]] = None,
) -> RoundResult:
    """Drive one full round against a contribution source.

    ``on_commit`` runs after the digest exists and before the source is
    asked for anything, so the digest can be published first.

    Invalid contributions are reported back to the source through
    ``reject`` and requested again. RoundAborted raised by the source
    propagates; the round then never completes.
    """
    if exchange is None:
        exchange = FairValueExchange(range_, config=config, sampler=sampler, label=label)
    elif exchange.range != range_:
        raise InvalidArgument(
            f"Exchange range {exchange.range} does not match requested {range_}"
        )
    exchange.commit()
    if on_commit is not None:
        on_commit(exchange)
    request = exchange.request()
    while True:
        value = source.next_contribution(request)
        try:
            exchange.accept_contribution(value)
        except InvalidArgument as exc:
            source.reject(request, exc)
            continue
        break
    return exchange.reveal()
