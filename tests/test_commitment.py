"""Tests for HMAC commitments — binding, reveal, and independent verification."""

import hashlib
import hmac

import pytest

from fairdice.crypto.commitment import (
    Commitment,
    check_reveal,
    compute_digest,
    verify_reveal,
)
from fairdice.errors import EntropyFailure, InvalidArgument, ProtocolViolation
from fairdice.models.round import RevealPayload


FIXED_KEY = bytes(range(32))


class TestCommit:
    def test_digest_is_hmac_sha256_of_decimal_text(self) -> None:
        c = Commitment.commit(4, source=lambda n: FIXED_KEY)
        expected = hmac.new(FIXED_KEY, b"4", hashlib.sha256).hexdigest()
        assert c.digest == expected
        assert len(c.digest) == 64

    def test_fresh_key_per_commitment(self) -> None:
        a = Commitment.commit(1)
        b = Commitment.commit(1)
        assert a.reveal().key_hex != b.reveal().key_hex
        assert a.digest != b.digest

    def test_key_is_256_bits(self) -> None:
        payload = Commitment.commit(3).reveal()
        assert len(bytes.fromhex(payload.key_hex)) == 32

    def test_repr_does_not_expose_key(self) -> None:
        c = Commitment.commit(5)
        assert c.reveal().key_hex not in repr(c)

    def test_short_key_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            Commitment.commit(1, key_bytes=16)

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha224", "nope"])
    def test_weak_algorithm_rejected(self, algorithm: str) -> None:
        with pytest.raises(InvalidArgument):
            Commitment.commit(1, algorithm=algorithm)

    def test_sha3_allowed(self) -> None:
        c = Commitment.commit(2, algorithm="sha3-256", source=lambda n: FIXED_KEY)
        expected = hmac.new(FIXED_KEY, b"2", "sha3_256").hexdigest()
        assert c.digest == expected
        assert c.algorithm == "sha3_256"

    def test_short_key_from_source_is_entropy_failure(self) -> None:
        with pytest.raises(EntropyFailure):
            Commitment.commit(1, source=lambda n: b"\x00" * 8)

    def test_non_integer_value_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            Commitment.commit("3")  # type: ignore[arg-type]


class TestReveal:
    def test_reveal_round_trips_through_verifier(self) -> None:
        c = Commitment.commit(17)
        published = c.digest
        payload = c.reveal()
        assert payload.value_text == "17"
        assert payload.secret_value == 17
        assert verify_reveal(published, payload.value_text, payload.key_hex)
        check_reveal(published, payload)

    def test_reveal_is_idempotent(self) -> None:
        c = Commitment.commit(2)
        assert not c.revealed
        first = c.reveal()
        assert c.revealed
        assert c.reveal() == first

    def test_tampered_value_fails(self) -> None:
        c = Commitment.commit(2)
        payload = c.reveal()
        assert not verify_reveal(c.digest, "3", payload.key_hex)

    def test_tampered_key_fails(self) -> None:
        c = Commitment.commit(2)
        assert not verify_reveal(c.digest, "2", "00" * 32)

    def test_malformed_key_hex_fails(self) -> None:
        c = Commitment.commit(2)
        assert not verify_reveal(c.digest, "2", "not-hex")

    def test_check_reveal_raises_on_mismatch(self) -> None:
        c = Commitment.commit(2)
        good = c.reveal()
        forged = RevealPayload(
            secret_value=3,
            value_text="3",
            key_hex=good.key_hex,
            digest=good.digest,
            algorithm=good.algorithm,
        )
        with pytest.raises(ProtocolViolation):
            check_reveal(c.digest, forged)

    def test_uppercase_published_digest_accepted(self) -> None:
        c = Commitment.commit(9)
        payload = c.reveal()
        assert verify_reveal(c.digest.upper(), payload.value_text, payload.key_hex)

    def test_non_ascii_digest_fails(self) -> None:
        assert not verify_reveal("\u00e9" * 64, "3", "00" * 32)

    def test_unencodable_value_text_fails(self) -> None:
        c = Commitment.commit(3)
        payload = c.reveal()
        assert not verify_reveal(c.digest, "3\udcff", payload.key_hex)


class TestBinding:
    def test_no_collisions_same_key(self) -> None:
        """10,000 distinct values under one key give 10,000 distinct digests."""
        digests = {compute_digest(FIXED_KEY, str(v)) for v in range(10_000)}
        assert len(digests) == 10_000

    def test_deterministic(self) -> None:
        assert compute_digest(FIXED_KEY, "5") == compute_digest(FIXED_KEY, "5")
