# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

from pake.protocol.failure import FailureCode


class PakeError(Exception):
    code: FailureCode = FailureCode.ERR_INTERNAL


class UnsupportedCurve(PakeError):
    code = FailureCode.ERR_UNSUPPORTED_CURVE


class MalformedMessage(PakeError):
    """Wrong length or an undecodable point encoding."""
    code = FailureCode.ERR_MALFORMED_MESSAGE


class InvalidPoint(PakeError):
    """Well-formed encoding of an off-curve, identity or reflected element."""
    code = FailureCode.ERR_INVALID_POINT


class AuthenticationFailed(PakeError):
    code = FailureCode.ERR_AUTH_FAILED


class Timeout(PakeError, TimeoutError):
    code = FailureCode.ERR_TIMEOUT


class NotReady(PakeError):
    code = FailureCode.ERR_NOT_READY


class InvalidState(PakeError):
    code = FailureCode.ERR_STATE_VIOLATION


class RandomSourceError(PakeError):
    code = FailureCode.ERR_RANDOM_SOURCE
