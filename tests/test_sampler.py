"""Tests for unbiased sampling — proves rejection removes modulo bias."""

import pytest

from fairdice.crypto.sampler import UnbiasedSampler, rejection_limit, secure_bytes
from fairdice.errors import EntropyFailure, InvalidArgument


def _scripted(values: list[int]):
    """Byte source that returns each value big-endian at the requested width."""
    it = iter(values)

    def source(n: int) -> bytes:
        return next(it).to_bytes(n, "big")
    return source


class TestRejectionLimit:
    def test_range_six_sixteen_bits(self) -> None:
        assert rejection_limit(6, 16) == 65532

    def test_power_of_two_has_no_rejection(self) -> None:
        assert rejection_limit(2, 16) == 65536
        assert rejection_limit(256, 8) == 256

    def test_limit_is_multiple_of_range(self) -> None:
        for range_ in (3, 5, 6, 7, 10, 1000):
            limit = rejection_limit(range_, 16)
            assert limit % range_ == 0
            assert 65536 - limit < range_


class TestBoundary:
    def test_draws_at_or_above_limit_are_redrawn(self) -> None:
        """65532..65535 must be discarded for range 6, never reduced."""
        draws = [65532, 65533, 65534, 65535, 65531]
        sampler = UnbiasedSampler(16, source=_scripted(draws))
        assert sampler.sample(6) == 65531 % 6

    def test_draw_just_below_limit_is_accepted(self) -> None:
        sampler = UnbiasedSampler(16, source=_scripted([65531]))
        assert sampler.sample(6) == 5

    def test_zero_draw(self) -> None:
        sampler = UnbiasedSampler(16, source=_scripted([0]))
        assert sampler.sample(6) == 0

    def test_short_read_is_entropy_failure(self) -> None:
        sampler = UnbiasedSampler(16, source=lambda n: b"\x01")
        with pytest.raises(EntropyFailure):
            sampler.sample(6)


class TestUniformity:
    def test_frequencies_within_tolerance(self) -> None:
        sampler = UnbiasedSampler()
        n = 60_000
        counts = [0] * 6
        for _ in range(n):
            v = sampler.sample(6)
            assert 0 <= v < 6
            counts[v] += 1
        for c in counts:
            assert abs(c / n - 1 / 6) < 0.01

    def test_range_one_always_zero(self) -> None:
        sampler = UnbiasedSampler()
        assert all(sampler.sample(1) == 0 for _ in range(100))


class TestContract:
    @pytest.mark.parametrize("bad", [0, -1, -65536])
    def test_non_positive_range_rejected(self, bad: int) -> None:
        with pytest.raises(InvalidArgument):
            UnbiasedSampler().sample(bad)

    def test_non_integer_range_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            UnbiasedSampler().sample(2.5)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgument):
            UnbiasedSampler().sample(True)  # type: ignore[arg-type]

    def test_range_wider_than_width_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            UnbiasedSampler(8).sample(257)

    def test_unsupported_width_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            UnbiasedSampler(12)

    def test_invalid_argument_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            UnbiasedSampler().sample(0)


class TestSecureBytes:
    def test_length(self) -> None:
        assert len(secure_bytes(32)) == 32

    def test_os_failure_becomes_entropy_failure(self, monkeypatch) -> None:
        def broken(n: int) -> bytes:
            raise OSError("no entropy")
        monkeypatch.setattr("fairdice.crypto.sampler.secrets.token_bytes", broken)
        with pytest.raises(EntropyFailure):
            secure_bytes(4)
