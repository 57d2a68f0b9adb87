"""Tests for protocol configuration loading and env overrides."""

import json
from pathlib import Path

import pytest

from fairdice.config import PARAMS_FILE, ProtocolConfig
from fairdice.errors import InvalidArgument


REPO_CONFIG = Path(__file__).resolve().parents[1] / "config"


def _write(tmp_path: Path, data: object) -> Path:
    (tmp_path / PARAMS_FILE).write_text(json.dumps(data), encoding="utf-8")
    return tmp_path


class TestLoading:
    def test_repo_config_loads(self) -> None:
        config = ProtocolConfig.from_config_dir(REPO_CONFIG)
        assert config.hash_algorithm == "sha256"
        assert config.key_bytes == 32
        assert config.sample_bits == 16

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert ProtocolConfig.from_config_dir(tmp_path) == ProtocolConfig.default()

    def test_partial_file(self, tmp_path: Path) -> None:
        config = ProtocolConfig.from_config_dir(_write(tmp_path, {"sample_bits": 32}))
        assert config.sample_bits == 32
        assert config.key_bytes == 32

    def test_algorithm_normalised(self, tmp_path: Path) -> None:
        config = ProtocolConfig.from_config_dir(
            _write(tmp_path, {"hash_algorithm": "SHA3-256"})
        )
        assert config.hash_algorithm == "sha3_256"

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / PARAMS_FILE).write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidArgument):
            ProtocolConfig.from_config_dir(tmp_path)

    def test_non_object(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig.from_config_dir(_write(tmp_path, [1, 2]))

    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgument, match="Unknown config keys"):
            ProtocolConfig.from_config_dir(_write(tmp_path, {"salt": "x"}))


class TestValidation:
    def test_weak_algorithm(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig(hash_algorithm="md5")

    def test_short_key(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig(key_bytes=16)

    def test_bad_width(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig(sample_bits=24)

    def test_min_faces_floor(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig(min_faces=2)

    def test_malformed_value(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig.from_mapping({"key_bytes": "lots"})


class TestEnvOverrides:
    def test_overrides_applied(self) -> None:
        config = ProtocolConfig.default().with_env_overrides({
            "FAIRDICE_HASH_ALGORITHM": "sha512",
            "FAIRDICE_KEY_BYTES": "64",
            "FAIRDICE_SAMPLE_BITS": "32",
        })
        assert config.hash_algorithm == "sha512"
        assert config.key_bytes == 64
        assert config.sample_bits == 32

    def test_no_overrides_returns_same(self) -> None:
        config = ProtocolConfig.default()
        assert config.with_env_overrides({}) is config

    def test_non_integer_override(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig.default().with_env_overrides({"FAIRDICE_KEY_BYTES": "big"})

    def test_weak_override_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            ProtocolConfig.default().with_env_overrides({"FAIRDICE_HASH_ALGORITHM": "md5"})
