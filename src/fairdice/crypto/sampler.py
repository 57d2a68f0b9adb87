"""Unbiased bounded sampling from the cryptographic random source.

A fixed-width unsigned integer is drawn from ``secrets`` and reduced
modulo ``range`` only if it falls below the largest multiple of ``range``
that fits in the width. Draws at or above that limit are discarded and
redrawn, so every residue keeps exactly the same probability.

Example (16-bit width, range 6):
    limit = (65536 // 6) * 6 = 65532
    draws in [65532, 65536) are rejected, never reduced.
"""

from __future__ import annotations

import secrets
from typing import Callable

from fairdice.errors import EntropyFailure, InvalidArgument


ByteSource = Callable[[int], bytes]

SUPPORTED_WIDTHS: tuple[int, ...] = (8, 16, 32, 64)


def secure_bytes(n: int) -> bytes:
    """Return *n* bytes from the OS cryptographic source.

    Raises:
        EntropyFailure: If the source is unavailable.
    """
    try:
        return secrets.token_bytes(n)
    except (OSError, NotImplementedError) as exc:
        raise EntropyFailure(f"Secure random source unavailable: {exc}") from exc


def rejection_limit(range_: int, bits: int) -> int:
    """Largest multiple of *range_* not exceeding ``2**bits``."""
    _check_range(range_, bits)
    space = 1 << bits
    return (space // range_) * range_


def _check_range(range_: int, bits: int) -> None:
    if isinstance(range_, bool) or not isinstance(range_, int):
        raise InvalidArgument(f"range must be an integer, got {range_!r}")
    if range_ <= 0:
        raise InvalidArgument(f"range must be positive, got {range_}")
    if range_ > (1 << bits):
        raise InvalidArgument(
            f"range {range_} exceeds the {bits}-bit sampling width"
        )


class UnbiasedSampler:
    """Draws uniform integers in ``[0, range)`` by rejection sampling.

    Usage:
        sampler = UnbiasedSampler()
        face_index = sampler.sample(6)

    The byte source is injectable so the rejection boundary can be
    exercised deterministically; production code uses ``secure_bytes``.
    """

    def __init__(self, bits: int = 16, source: ByteSource = secure_bytes) -> None:
        if bits not in SUPPORTED_WIDTHS:
            raise InvalidArgument(
                f"Sampling width must be one of {SUPPORTED_WIDTHS}, got {bits}"
            )
        self._bits = bits
        self._width = bits // 8
        self._source = source

    @property
    def bits(self) -> int:
        return self._bits

    def draw(self) -> int:
        """One raw big-endian draw of ``bits`` width."""
        raw = self._source(self._width)
        if len(raw) != self._width:
            raise EntropyFailure(
                f"Random source returned {len(raw)} bytes, expected {self._width}"
            )
        return int.from_bytes(raw, "big")

    def sample(self, range_: int) -> int:
        """Return a uniformly distributed integer in ``[0, range_)``.

        Raises:
            InvalidArgument: If range_ is not a positive integer that fits
                the sampling width.
            EntropyFailure: If the random source fails.
        """
        limit = rejection_limit(range_, self._bits)
        while True:
            value = self.draw()
            if value < limit:
                return value % range_

    def choice_index(self, count: int) -> int:
        """Uniform index into a sequence of *count* items."""
        return self.sample(count)
