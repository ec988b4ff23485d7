# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Union

from pake.protocol.deadline import to_seconds

DEFAULT_CURVE = "siec"
DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class PakeConfig:
    """
    Engine defaults.

    curve            : name or Curve object used when the caller passes none
    timeout          : seconds (int/float) or timedelta, normalised to float seconds
    sliding_deadline : re-arm the deadline after every accepted peer message
    context          : application label mixed into the transcript (both sides must agree)
    """

    curve: Any = DEFAULT_CURVE
    timeout: Union[float, timedelta] = DEFAULT_TIMEOUT_SECONDS
    sliding_deadline: bool = False
    context: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "timeout", to_seconds(self.timeout))
        object.__setattr__(self, "sliding_deadline", bool(self.sliding_deadline))

        ctx = self.context
        if isinstance(ctx, str):
            ctx = ctx.encode("utf-8")
        if not isinstance(ctx, (bytes, bytearray)):
            raise TypeError("context must be bytes or str")
        object.__setattr__(self, "context", bytes(ctx))

        if isinstance(self.curve, str):
            object.__setattr__(self, "curve", self.curve.strip().lower())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PakeConfig":
        """
        Build from a plain dict (e.g. parsed JSON/YAML). Unknown keys are ignored.
        'timeout_ms' is accepted as an alternative to 'timeout'.
        """
        kw: dict[str, Any] = {}
        if data.get("curve") is not None:
            kw["curve"] = str(data["curve"])
        if data.get("timeout") is not None:
            kw["timeout"] = data["timeout"]
        elif data.get("timeout_ms") is not None:
            kw["timeout"] = float(data["timeout_ms"]) / 1000.0
        if data.get("sliding_deadline") is not None:
            kw["sliding_deadline"] = bool(data["sliding_deadline"])
        if data.get("context") is not None:
            kw["context"] = data["context"]
        return cls(**kw)
