"""Typed failures for the fair exchange protocol and the dice game.

Nothing in the core terminates the process. Every failure is raised as one
of these types and travels up to a single boundary (``fairdice.cli.main``)
that decides whether to re-prompt, report, or exit.
"""

from __future__ import annotations


class FairDiceError(Exception):
    """Base class for all fairdice failures."""


class InvalidArgument(FairDiceError, ValueError):
    """A caller-supplied value is out of contract.

    Recoverable: the orchestration layer may re-prompt. Values are never
    silently coerced into range.
    """


class ProtocolViolation(FairDiceError):
    """The commit → contribute → reveal ordering was broken.

    Indicates a defect in the orchestrator, not user error. Fatal to the
    round and must not be swallowed.
    """


class EntropyFailure(FairDiceError):
    """The secure random source could not supply bytes.

    Fatal. There is no fallback to a non-cryptographic generator.
    """


class RoundAborted(FairDiceError):
    """The contributing party cancelled while the round was waiting.

    The round never completes; no final value exists.
    """
