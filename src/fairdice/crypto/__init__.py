"""Cryptographic primitives — unbiased sampling and HMAC commitments."""

from fairdice.crypto.sampler import UnbiasedSampler, rejection_limit, secure_bytes
from fairdice.crypto.commitment import (
    Commitment,
    check_reveal,
    compute_digest,
    verify_reveal,
)

__all__ = [
    "UnbiasedSampler",
    "rejection_limit",
    "secure_bytes",
    "Commitment",
    "check_reveal",
    "compute_digest",
    "verify_reveal",
]
