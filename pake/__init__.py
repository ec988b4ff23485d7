# MIT License © 2025 Motohiro Suzuki
"""
Balanced elliptic-curve PAKE (SPAKE2 blinding, explicit key confirmation).

    a = pake.init(b"secret", 0, "siec", 5.0)
    b = pake.init(b"secret", 1, "siec", 5.0)
    b.consume_message(a.current_message())
    a.consume_message(b.current_message())
    b.consume_message(a.current_message())
    assert a.session_key() == b.session_key()
"""

from pake.crypto.curves import CURVES, Curve, CurveParams, available_curves, get_curve
from pake.protocol.config import PakeConfig
from pake.protocol.engine import Pake, Role, State, init, init_curve
from pake.protocol.errors import (
    AuthenticationFailed,
    InvalidPoint,
    InvalidState,
    MalformedMessage,
    NotReady,
    PakeError,
    RandomSourceError,
    Timeout,
    UnsupportedCurve,
)
from pake.protocol.handshake import HandshakeOutcome, HandshakeResult, run_local_handshake

__version__ = "0.1.0"

__all__ = [
    "CURVES",
    "Curve",
    "CurveParams",
    "available_curves",
    "get_curve",
    "PakeConfig",
    "Pake",
    "Role",
    "State",
    "init",
    "init_curve",
    "PakeError",
    "UnsupportedCurve",
    "MalformedMessage",
    "InvalidPoint",
    "AuthenticationFailed",
    "Timeout",
    "NotReady",
    "InvalidState",
    "RandomSourceError",
    "HandshakeOutcome",
    "HandshakeResult",
    "run_local_handshake",
]
