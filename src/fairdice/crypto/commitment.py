"""HMAC commitment — binds a secret value to a publishable digest.

The committer draws a fresh key for every commitment and publishes only
``HMAC(key, str(secret_value))``. After the other party has contributed,
the committer reveals the value text and the key; anyone can recompute
the digest and compare it to what was published.

Canonical encodings (stable so independent verifiers agree):
- message: decimal text of the secret value, UTF-8 encoded
- digest: lowercase hex
- key: lowercase hex in the reveal payload
"""

from __future__ import annotations

import hashlib
import hmac

from fairdice.crypto.sampler import ByteSource, secure_bytes
from fairdice.errors import EntropyFailure, InvalidArgument, ProtocolViolation
from fairdice.models.round import RevealPayload


DEFAULT_ALGORITHM = "sha256"
MIN_KEY_BYTES = 32
MIN_DIGEST_BITS = 256

# Digest algorithms with at least 256 bits of output
ALLOWED_ALGORITHMS: frozenset[str] = frozenset({
    "sha256",
    "sha384",
    "sha512",
    "sha3_256",
    "sha3_384",
    "sha3_512",
    "blake2b",
})


def check_algorithm(algorithm: str) -> str:
    """Normalise and validate a digest algorithm name."""
    name = algorithm.lower().replace("-", "_")
    if name not in ALLOWED_ALGORITHMS:
        raise InvalidArgument(
            f"Unsupported digest algorithm '{algorithm}'. "
            f"Allowed: {sorted(ALLOWED_ALGORITHMS)}"
        )
    if hashlib.new(name).digest_size * 8 < MIN_DIGEST_BITS:
        raise InvalidArgument(f"Digest algorithm '{algorithm}' is below 256 bits")
    return name


def value_text(secret_value: int) -> str:
    """Canonical decimal text of a committed value."""
    return str(int(secret_value))


def compute_digest(key: bytes, text: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """HMAC of *text* under *key*, as lowercase hex."""
    name = check_algorithm(algorithm)
    return hmac.new(key, text.encode("utf-8"), name).hexdigest()


def verify_reveal(
    digest: str,
    text: str,
    key_hex: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> bool:
    """Recompute the digest from a reveal and compare in constant time.

    Returns False for a mismatch, a digest that is not ASCII, a key that is
    not valid hex, or value text that cannot be encoded as UTF-8.
    """
    if not digest.isascii():
        return False
    try:
        key = bytes.fromhex(key_hex)
        text.encode("utf-8")
    except (ValueError, UnicodeEncodeError):
        return False
    expected = compute_digest(key, text, algorithm)
    return hmac.compare_digest(expected, digest.lower())


def check_reveal(published_digest: str, reveal: RevealPayload) -> None:
    """Raise ProtocolViolation if the reveal does not match the digest."""
    if not verify_reveal(
        published_digest, reveal.value_text, reveal.key_hex, reveal.algorithm
    ):
        raise ProtocolViolation(
            f"Commitment violated: reveal of {reveal.value_text!r} does not "
            f"match published digest {published_digest}"
        )


class Commitment:
    """A single commitment to a secret integer.

    Usage:
        c = Commitment.commit(4)
        publish(c.digest)
        ...  # other party contributes
        payload = c.reveal()

    The key and value are private until ``reveal()``. Revealing twice
    returns the same payload.
    """

    def __init__(self, secret_value: int, key: bytes, algorithm: str) -> None:
        self._secret_value = secret_value
        self._key = key
        self._algorithm = algorithm
        self._digest = compute_digest(key, value_text(secret_value), algorithm)
        self._revealed = False

    @classmethod
    def commit(
        cls,
        secret_value: int,
        *,
        algorithm: str = DEFAULT_ALGORITHM,
        key_bytes: int = MIN_KEY_BYTES,
        source: ByteSource = secure_bytes,
    ) -> Commitment:
        """Commit to *secret_value* under a freshly generated key.

        Raises:
            InvalidArgument: Non-integer value, short key, or weak algorithm.
            EntropyFailure: If no key can be drawn.
        """
        if isinstance(secret_value, bool) or not isinstance(secret_value, int):
            raise InvalidArgument(f"secret value must be an integer, got {secret_value!r}")
        if key_bytes < MIN_KEY_BYTES:
            raise InvalidArgument(
                f"Commitment key must be at least {MIN_KEY_BYTES} bytes, got {key_bytes}"
            )
        name = check_algorithm(algorithm)
        key = source(key_bytes)
        if len(key) != key_bytes:
            raise EntropyFailure(
                f"Random source returned {len(key)} key bytes, expected {key_bytes}"
            )
        return cls(secret_value, key, name)

    @property
    def digest(self) -> str:
        return self._digest

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_fingerprint(self) -> str:
        """SHA-256 of the key; identifies the key without exposing it."""
        return hashlib.sha256(self._key).hexdigest()

    @property
    def revealed(self) -> bool:
        return self._revealed

    def reveal(self) -> RevealPayload:
        """Expose the value text and key for verification."""
        self._revealed = True
        return RevealPayload(
            secret_value=self._secret_value,
            value_text=value_text(self._secret_value),
            key_hex=self._key.hex(),
            digest=self._digest,
            algorithm=self._algorithm,
        )

    def __repr__(self) -> str:
        return f"Commitment(digest={self._digest!r}, revealed={self._revealed})"
