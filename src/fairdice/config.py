"""Protocol configuration — loaded from a config directory, overridable by env.

The config directory holds ``protocol_params.json``:

    {
      "hash_algorithm": "sha256",
      "key_bytes": 32,
      "sample_bits": 16,
      "min_faces": 6,
      "min_dice": 3
    }

Environment overrides (a ``.env`` file is honoured by the CLI):
    FAIRDICE_HASH_ALGORITHM, FAIRDICE_KEY_BYTES, FAIRDICE_SAMPLE_BITS
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from fairdice.crypto.commitment import MIN_KEY_BYTES, check_algorithm
from fairdice.crypto.sampler import SUPPORTED_WIDTHS
from fairdice.errors import InvalidArgument
from fairdice.models.die import MIN_FACES


PARAMS_FILE = "protocol_params.json"

_ENV_OVERRIDES: dict[str, str] = {
    "FAIRDICE_HASH_ALGORITHM": "hash_algorithm",
    "FAIRDICE_KEY_BYTES": "key_bytes",
    "FAIRDICE_SAMPLE_BITS": "sample_bits",
}


@dataclass(frozen=True)
class ProtocolConfig:
    """Validated protocol and game parameters."""
    hash_algorithm: str = "sha256"
    key_bytes: int = 32
    sample_bits: int = 16
    min_faces: int = 6
    min_dice: int = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash_algorithm", check_algorithm(self.hash_algorithm))
        if self.key_bytes < MIN_KEY_BYTES:
            raise InvalidArgument(
                f"key_bytes must be at least {MIN_KEY_BYTES}, got {self.key_bytes}"
            )
        if self.sample_bits not in SUPPORTED_WIDTHS:
            raise InvalidArgument(
                f"sample_bits must be one of {SUPPORTED_WIDTHS}, got {self.sample_bits}"
            )
        if self.min_faces < MIN_FACES:
            raise InvalidArgument(
                f"min_faces must be at least {MIN_FACES}, got {self.min_faces}"
            )
        if self.min_dice < 2:
            raise InvalidArgument(f"min_dice must be at least 2, got {self.min_dice}")

    @classmethod
    def default(cls) -> ProtocolConfig:
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ProtocolConfig:
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        unknown = set(data) - set(known)
        if unknown:
            raise InvalidArgument(f"Unknown config keys: {sorted(unknown)}")
        try:
            return cls(
                hash_algorithm=str(known.get("hash_algorithm", cls.hash_algorithm)),
                key_bytes=int(known.get("key_bytes", cls.key_bytes)),
                sample_bits=int(known.get("sample_bits", cls.sample_bits)),
                min_faces=int(known.get("min_faces", cls.min_faces)),
                min_dice=int(known.get("min_dice", cls.min_dice)),
            )
        except InvalidArgument:
            raise
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"Malformed config value: {exc}") from exc

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> ProtocolConfig:
        """Load ``protocol_params.json`` from *config_dir*.

        A missing file yields the built-in defaults.
        """
        path = Path(config_dir) / PARAMS_FILE
        if not path.exists():
            return cls.default()
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise InvalidArgument(f"{path}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise InvalidArgument(f"{path}: expected a JSON object")
        return cls.from_mapping(data)

    def with_env_overrides(
        self, environ: Optional[Mapping[str, str]] = None,
    ) -> ProtocolConfig:
        """Return a copy with FAIRDICE_* environment variables applied."""
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        for var, field_name in _ENV_OVERRIDES.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            if field_name == "hash_algorithm":
                changes[field_name] = raw
            else:
                try:
                    changes[field_name] = int(raw)
                except ValueError as exc:
                    raise InvalidArgument(f"{var} must be an integer, got {raw!r}") from exc
        if not changes:
            return self
        return replace(self, **changes)
