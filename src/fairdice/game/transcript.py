"""Round transcript — append-only in-memory record of a game.

Every protocol step of a game (commitment published, contribution
accepted, reveal, die chosen, game finished) is appended as an immutable
event. The transcript lets a player re-check every reveal after the game
and rejects a commitment key seen in an earlier round.

The transcript lives only as long as the game; it is never written to disk.
"""

from __future__ import annotations

import enum
import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from fairdice.crypto.commitment import verify_reveal
from fairdice.errors import ProtocolViolation


class EventKind(str, enum.Enum):
    """Classification of transcript events."""
    COMMITTED = "committed"
    CONTRIBUTION_ACCEPTED = "contribution_accepted"
    REVEALED = "revealed"
    DIE_CHOSEN = "die_chosen"
    GAME_FINISHED = "game_finished"


@dataclass(frozen=True)
class TranscriptEvent:
    """A single immutable transcript entry.

    ``event_hash`` is SHA-256 over the canonical JSON of the other fields.
    """
    event_id: str
    event_kind: EventKind
    timestamp_utc: str
    actor: str
    payload: dict[str, Any]
    event_hash: str

    @staticmethod
    def create(
        event_id: str,
        event_kind: EventKind,
        actor: str,
        payload: dict[str, Any],
        timestamp_utc: Optional[datetime] = None,
    ) -> TranscriptEvent:
        ts = timestamp_utc or datetime.now(timezone.utc)
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%SZ")
        canonical = json.dumps(
            {
                "event_id": event_id,
                "event_kind": event_kind.value,
                "timestamp_utc": ts_str,
                "actor": actor,
                "payload": payload,
            },
            sort_keys=True,
            ensure_ascii=False,
        ).encode("utf-8")
        return TranscriptEvent(
            event_id=event_id,
            event_kind=event_kind,
            timestamp_utc=ts_str,
            actor=actor,
            payload=payload,
            event_hash=f"sha256:{hashlib.sha256(canonical).hexdigest()}",
        )


class RoundTranscript:
    """Append-only log of transcript events for one game."""

    def __init__(self) -> None:
        self._events: list[TranscriptEvent] = []
        self._event_ids: set[str] = set()
        self._key_fingerprints: set[str] = set()

    def append(self, event: TranscriptEvent) -> None:
        """Append an event.

        Raises ValueError on a duplicate event_id.
        """
        if event.event_id in self._event_ids:
            raise ValueError(f"Duplicate event ID: {event.event_id}")
        self._events.append(event)
        self._event_ids.add(event.event_id)

    def record_commitment(self, round_id: str, label: str, digest: str,
                          range_: int, key_fingerprint: str) -> TranscriptEvent:
        """Record a published digest.

        Raises ProtocolViolation if the key was already used in this game.
        """
        if key_fingerprint in self._key_fingerprints:
            raise ProtocolViolation(
                f"Round {round_id}: commitment key reused from an earlier round"
            )
        self._key_fingerprints.add(key_fingerprint)
        event = TranscriptEvent.create(
            event_id=f"{round_id}:committed",
            event_kind=EventKind.COMMITTED,
            actor="computer",
            payload={"label": label, "digest": digest, "range": range_},
        )
        self.append(event)
        return event

    def events(self, kind: Optional[EventKind] = None) -> list[TranscriptEvent]:
        """Return events, optionally filtered by kind."""
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.event_kind == kind]

    @property
    def count(self) -> int:
        return len(self._events)

    def verify(self) -> list[str]:
        """Re-check every reveal against the digest published for its round.

        Returns a list of problems. Empty list means every commitment held.
        """
        errors: list[str] = []
        published: dict[str, dict[str, Any]] = {}
        for event in self._events:
            round_id = event.event_id.split(":", 1)[0]
            if event.event_kind == EventKind.COMMITTED:
                published[round_id] = event.payload
            elif event.event_kind == EventKind.REVEALED:
                commit = published.get(round_id)
                if commit is None:
                    errors.append(f"{round_id}: reveal without a published digest")
                    continue
                p = event.payload
                if p["digest"] != commit["digest"]:
                    errors.append(f"{round_id}: revealed digest differs from published")
                    continue
                if not verify_reveal(commit["digest"], p["value_text"],
                                     p["key_hex"], p["algorithm"]):
                    errors.append(f"{round_id}: reveal does not match digest")
        return errors
