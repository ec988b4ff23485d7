# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureLayer(str, Enum):
    PROTOCOL = "protocol"
    CRYPTO = "crypto"
    INPUT = "input"


class FailurePhase(str, Enum):
    CONSTRUCT = "construct"
    FIRST_MESSAGE = "first_message"
    CONFIRMATION = "confirmation"
    SESSION_KEY = "session_key"


class FailureCode(str, Enum):
    ERR_UNSUPPORTED_CURVE = "ERR_UNSUPPORTED_CURVE"
    ERR_MALFORMED_MESSAGE = "ERR_MALFORMED_MESSAGE"
    ERR_INVALID_POINT = "ERR_INVALID_POINT"
    ERR_AUTH_FAILED = "ERR_AUTH_FAILED"
    ERR_TIMEOUT = "ERR_TIMEOUT"
    ERR_NOT_READY = "ERR_NOT_READY"
    ERR_STATE_VIOLATION = "ERR_STATE_VIOLATION"
    ERR_RANDOM_SOURCE = "ERR_RANDOM_SOURCE"
    ERR_INTERNAL = "ERR_INTERNAL"


_LAYER_BY_CODE = {
    FailureCode.ERR_UNSUPPORTED_CURVE: FailureLayer.INPUT,
    FailureCode.ERR_MALFORMED_MESSAGE: FailureLayer.INPUT,
    FailureCode.ERR_INVALID_POINT: FailureLayer.CRYPTO,
    FailureCode.ERR_AUTH_FAILED: FailureLayer.CRYPTO,
    FailureCode.ERR_RANDOM_SOURCE: FailureLayer.CRYPTO,
}

# codes after which the attempt cannot be continued with the same instances
_FATAL_CODES = frozenset(
    {
        FailureCode.ERR_UNSUPPORTED_CURVE,
        FailureCode.ERR_RANDOM_SOURCE,
        FailureCode.ERR_AUTH_FAILED,
        FailureCode.ERR_TIMEOUT,
        FailureCode.ERR_MALFORMED_MESSAGE,
        FailureCode.ERR_INVALID_POINT,
    }
)


@dataclass(frozen=True)
class Failure:
    """
    Error carrier for HandshakeOutcome and other non-raising callers.
    detail is LOCAL-ONLY (never send it to the peer).
    """
    layer: FailureLayer
    phase: FailurePhase
    code: FailureCode
    fatal: bool
    detail: Optional[str] = None

    def redacted(self) -> "Failure":
        return Failure(
            layer=self.layer,
            phase=self.phase,
            code=self.code,
            fatal=self.fatal,
            detail=None,
        )

    @staticmethod
    def from_error(err: BaseException, phase: FailurePhase) -> "Failure":
        code = getattr(err, "code", None)
        if not isinstance(code, FailureCode):
            code = FailureCode.ERR_INTERNAL
        return Failure(
            layer=_LAYER_BY_CODE.get(code, FailureLayer.PROTOCOL),
            phase=phase,
            code=code,
            fatal=code in _FATAL_CODES,
            detail=f"{type(err).__name__}: {err}",
        )
