"""Dice game session — sequences fair rounds into one game.

Game flow:
1. First move: a fair round over {0, 1}. The user guesses the computer's
   bit; a correct guess (final value 0) means the user moves first.
2. Dice selection: the first mover picks from all dice, the other side
   from the remaining ones.
3. Rolls: the computer's die is rolled first, then the user's. Each roll
   is a fair round over the die's face count; the final value indexes
   the face.
4. Higher face wins; equal faces are a draw.

All user interaction goes through the Player protocol. Every protocol
step is appended to the game's RoundTranscript and passed to the player.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from fairdice.config import ProtocolConfig
from fairdice.crypto.sampler import ByteSource, UnbiasedSampler, secure_bytes
from fairdice.engine.exchange import FairValueExchange, run_round
from fairdice.engine.probability import best_counter
from fairdice.errors import InvalidArgument
from fairdice.game.transcript import EventKind, RoundTranscript, TranscriptEvent
from fairdice.models.die import Die
from fairdice.models.round import ContributionRequest, RoundResult


FIRST_MOVE = "first_move"
COMPUTER_ROLL = "computer_roll"
USER_ROLL = "user_roll"


class Side(str, enum.Enum):
    USER = "user"
    COMPUTER = "computer"


class Winner(str, enum.Enum):
    USER = "user"
    COMPUTER = "computer"
    DRAW = "draw"


class ComputerStrategy(str, enum.Enum):
    """How the computer picks its die."""
    RANDOM = "random"    # uniform over the available dice
    COUNTER = "counter"  # when moving second, the die most likely to beat the user's


class Player(Protocol):
    """The human side of the game.

    ``next_contribution`` and ``choose_die`` may block on input and may
    raise RoundAborted to end the game.
    """

    def next_contribution(self, request: ContributionRequest) -> int: ...

    def reject(self, request: ContributionRequest, error: InvalidArgument) -> None: ...

    def choose_die(self, options: Sequence[Die]) -> int: ...

    def reject_choice(self, error: InvalidArgument) -> None: ...

    def notify(self, event: TranscriptEvent) -> None: ...


@dataclass(frozen=True)
class GameOutcome:
    """Result of a completed game."""
    first_mover: Side
    user_die: Die
    computer_die: Die
    computer_roll: RoundResult
    user_roll: RoundResult
    user_face: int
    computer_face: int
    winner: Winner


def decide_winner(user_face: int, computer_face: int) -> Winner:
    if user_face > computer_face:
        return Winner.USER
    if user_face < computer_face:
        return Winner.COMPUTER
    return Winner.DRAW


class DiceGame:
    """One game between the computer and a Player.

    Usage:
        game = DiceGame(dice, ConsolePlayer(dice))
        outcome = game.play()
    """

    def __init__(
        self,
        dice: Sequence[Die],
        player: Player,
        *,
        config: Optional[ProtocolConfig] = None,
        sampler: Optional[UnbiasedSampler] = None,
        key_source: ByteSource = secure_bytes,
        strategy: ComputerStrategy = ComputerStrategy.RANDOM,
    ) -> None:
        self._config = config or ProtocolConfig.default()
        if len(dice) < 2:
            raise InvalidArgument(f"A game needs at least 2 dice, got {len(dice)}")
        self._dice = list(dice)
        self._player = player
        self._sampler = sampler or UnbiasedSampler(self._config.sample_bits)
        self._key_source = key_source
        self._strategy = strategy
        self._transcript = RoundTranscript()

    @property
    def transcript(self) -> RoundTranscript:
        return self._transcript

    @property
    def dice(self) -> list[Die]:
        return list(self._dice)

    def play(self) -> GameOutcome:
        first = self._round(2, FIRST_MOVE)
        first_mover = Side.USER if first.final_value == 0 else Side.COMPUTER

        if first_mover == Side.COMPUTER:
            computer_idx = self._computer_pick(list(range(len(self._dice))), None)
            user_idx = self._user_pick(
                [i for i in range(len(self._dice)) if i != computer_idx]
            )
        else:
            user_idx = self._user_pick(list(range(len(self._dice))))
            computer_idx = self._computer_pick(
                [i for i in range(len(self._dice)) if i != user_idx],
                self._dice[user_idx],
            )

        user_die = self._dice[user_idx]
        computer_die = self._dice[computer_idx]

        computer_roll = self._round(computer_die.face_count, COMPUTER_ROLL)
        user_roll = self._round(user_die.face_count, USER_ROLL)
        computer_face = computer_die.face(computer_roll.final_value)
        user_face = user_die.face(user_roll.final_value)
        winner = decide_winner(user_face, computer_face)

        self._emit(TranscriptEvent.create(
            event_id="game:finished",
            event_kind=EventKind.GAME_FINISHED,
            actor="computer",
            payload={
                "user_face": user_face,
                "computer_face": computer_face,
                "winner": winner.value,
            },
        ))
        return GameOutcome(
            first_mover=first_mover,
            user_die=user_die,
            computer_die=computer_die,
            computer_roll=computer_roll,
            user_roll=user_roll,
            user_face=user_face,
            computer_face=computer_face,
            winner=winner,
        )

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def _round(self, range_: int, label: str) -> RoundResult:
        exchange = FairValueExchange(
            range_,
            config=self._config,
            sampler=self._sampler,
            key_source=self._key_source,
            label=label,
        )

        def publish(ex: FairValueExchange) -> None:
            event = self._transcript.record_commitment(
                ex.round_id, label, ex.digest, range_, ex.key_fingerprint,
            )
            self._player.notify(event)

        result = run_round(range_, self._player, exchange=exchange, on_commit=publish)

        self._emit(TranscriptEvent.create(
            event_id=f"{result.round_id}:contribution",
            event_kind=EventKind.CONTRIBUTION_ACCEPTED,
            actor="user",
            payload={"label": label, "contribution": result.contribution},
        ))
        self._emit(TranscriptEvent.create(
            event_id=f"{result.round_id}:revealed",
            event_kind=EventKind.REVEALED,
            actor="computer",
            payload={
                "label": label,
                "value_text": result.reveal.value_text,
                "key_hex": result.reveal.key_hex,
                "digest": result.reveal.digest,
                "algorithm": result.reveal.algorithm,
                "contribution": result.contribution,
                "range": result.range,
                "final_value": result.final_value,
            },
        ))
        return result

    # ------------------------------------------------------------------
    # Dice selection
    # ------------------------------------------------------------------

    def _computer_pick(self, available: list[int], user_die: Optional[Die]) -> int:
        if self._strategy == ComputerStrategy.COUNTER and user_die is not None:
            pos = best_counter(user_die, [self._dice[i] for i in available])
        else:
            pos = self._sampler.choice_index(len(available))
        idx = available[pos]
        self._announce_choice(Side.COMPUTER, idx)
        return idx

    def _user_pick(self, available: list[int]) -> int:
        options = [self._dice[i] for i in available]
        while True:
            pos = self._player.choose_die(options)
            if isinstance(pos, int) and not isinstance(pos, bool) and 0 <= pos < len(options):
                break
            self._player.reject_choice(InvalidArgument(
                f"Die selection must be in 0..{len(options) - 1}, got {pos!r}"
            ))
        idx = available[pos]
        self._announce_choice(Side.USER, idx)
        return idx

    def _announce_choice(self, side: Side, idx: int) -> None:
        self._emit(TranscriptEvent.create(
            event_id=f"choice:{side.value}",
            event_kind=EventKind.DIE_CHOSEN,
            actor=side.value,
            payload={"side": side.value, "index": idx, "die": str(self._dice[idx])},
        ))

    def _emit(self, event: TranscriptEvent) -> None:
        self._transcript.append(event)
        self._player.notify(event)
