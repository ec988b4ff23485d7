# MIT License © 2025 Motohiro Suzuki
"""
protocol/handshake.py

In-memory driver: runs an initiator and a responder engine through the three
messages and reports the outcome as a HandshakeOutcome.

    A.current_message()  -> X            -> B.consume_message
    B.current_message()  -> Y || tag_B   -> A.consume_message
    A.current_message()  -> X || tag_A   -> B.consume_message

A rejected confirmation on A's side does not stop the flow: A's confirmation
is still delivered so B reaches its own verdict, and the first failure wins.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from pake.crypto.curves import CurveSelection
from pake.protocol.config import PakeConfig
from pake.protocol.deadline import Clock, TimeoutSpec
from pake.protocol.engine import Pake, Role
from pake.protocol.errors import AuthenticationFailed, PakeError
from pake.protocol.failure import Failure, FailureCode, FailurePhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandshakeResult:
    curve: str
    session_key: bytes
    first_message_len: int
    reply_len: int
    confirmation_len: int

    def fingerprint_hex(self) -> str:
        return hashlib.sha256(self.session_key).hexdigest()


@dataclass(frozen=True)
class HandshakeOutcome:
    """
    Either a HandshakeResult (both engines VERIFIED) or the first Failure,
    which records the phase the handshake stopped in.
    """

    result: Optional[HandshakeResult] = None
    failure: Optional[Failure] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.failure is None):
            raise ValueError("exactly one of result / failure must be set")

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def phase(self) -> Optional[FailurePhase]:
        return None if self.failure is None else self.failure.phase

    @property
    def code(self) -> Optional[FailureCode]:
        return None if self.failure is None else self.failure.code

    def unwrap(self) -> HandshakeResult:
        if self.result is None:
            raise RuntimeError(f"handshake failed in {self.phase.value}: {self.code.value}")
        return self.result

    def unwrap_err(self) -> Failure:
        if self.failure is None:
            raise RuntimeError("handshake succeeded; no failure to unwrap")
        return self.failure

    def redacted(self) -> "HandshakeOutcome":
        """Copy safe to report beyond this process (no local failure detail)."""
        if self.failure is None:
            return self
        return HandshakeOutcome(failure=self.failure.redacted())


def _failed(err: PakeError, phase: FailurePhase) -> HandshakeOutcome:
    return HandshakeOutcome(failure=Failure.from_error(err, phase))


def run_local_handshake(
    secret_a: Union[bytes, str],
    secret_b: Optional[Union[bytes, str]] = None,
    curve: Optional[CurveSelection] = None,
    timeout: Optional[TimeoutSpec] = None,
    *,
    config: Optional[PakeConfig] = None,
    rng: Optional[Callable[[int], bytes]] = None,
    clock: Optional[Clock] = None,
) -> HandshakeOutcome:
    """secret_b defaults to secret_a (honest peers)."""
    if secret_b is None:
        secret_b = secret_a

    try:
        a = Pake(secret_a, Role.INITIATOR, curve, timeout, rng=rng, clock=clock, config=config)
        b = Pake(secret_b, Role.RESPONDER, curve, timeout, rng=rng, clock=clock, config=config)
    except PakeError as e:
        return _failed(e, FailurePhase.CONSTRUCT)

    with a, b:
        m1 = a.current_message()
        b.current_message()
        try:
            b.consume_message(m1)
        except PakeError as e:
            return _failed(e, FailurePhase.FIRST_MESSAGE)

        m2 = b.current_message()
        first_failure: Optional[Failure] = None
        try:
            a.consume_message(m2)
        except AuthenticationFailed as e:
            first_failure = Failure.from_error(e, FailurePhase.CONFIRMATION)
        except PakeError as e:
            return _failed(e, FailurePhase.FIRST_MESSAGE)

        m3 = a.current_message()
        try:
            b.consume_message(m3)
        except PakeError as e:
            if first_failure is None:
                first_failure = Failure.from_error(e, FailurePhase.CONFIRMATION)

        if first_failure is not None:
            logger.info("local handshake rejected: %s", first_failure.code.value)
            return HandshakeOutcome(failure=first_failure)

        try:
            key_a = a.session_key()
            key_b = b.session_key()
        except PakeError as e:
            return _failed(e, FailurePhase.SESSION_KEY)

        if not hmac.compare_digest(key_a, key_b):
            raise RuntimeError("verified engines disagree on the session key")

        return HandshakeOutcome(
            result=HandshakeResult(
                curve=a.curve.name,
                session_key=key_a,
                first_message_len=len(m1),
                reply_len=len(m2),
                confirmation_len=len(m3),
            )
        )
