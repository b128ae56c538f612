from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional
import math
import os

DEFAULT_CALL_TIMEOUT_S = 30.0

ENV_PREFIX = "HOSTBRIDGE_"


@dataclass(frozen=True)
class BridgeConfig:
    call_timeout_s: float = DEFAULT_CALL_TIMEOUT_S   # reply window for calls that expect one
    host_workers: int = 4                            # loopback host: worker threads
    host_queue_size: int = 100                       # loopback host: queued jobs before rejecting

    def __post_init__(self):
        if isinstance(self.call_timeout_s, bool) or not isinstance(self.call_timeout_s, (int, float)):
            raise ValueError("Config field 'call_timeout_s' must be a number.")
        if not math.isfinite(self.call_timeout_s) or self.call_timeout_s <= 0:
            raise ValueError("Config field 'call_timeout_s' must be a finite number greater than 0.")
        for name in ("host_workers", "host_queue_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Config field '{name}' must be an integer.")
            if value <= 0:
                raise ValueError(f"Config field '{name}' must be greater than 0.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "BridgeConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
        return cls(**dict(payload))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        """
        Read HOSTBRIDGE_CALL_TIMEOUT_S, HOSTBRIDGE_HOST_WORKERS and
        HOSTBRIDGE_HOST_QUEUE_SIZE; unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        payload: dict = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            convert = float if f.name == "call_timeout_s" else int
            try:
                payload[f.name] = convert(raw.strip())
            except ValueError:
                raise ValueError(
                    f"Environment variable {ENV_PREFIX + f.name.upper()} must be a number, got {raw!r}."
                ) from None
        return cls(**payload)
