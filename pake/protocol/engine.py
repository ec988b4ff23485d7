# MIT License © 2025 Motohiro Suzuki
"""
protocol/engine.py

Balanced PAKE engine: SPAKE2 blinding with explicit key confirmation.

    initiator -> responder : X                 first message
    responder -> initiator : Y || tag_B        first message + confirmation
    initiator -> responder : X || tag_A        confirmation

    X = x*G + w*M,  Y = y*G + w*N,  K = x*(Y - w*N) = y*(X - w*M)

Rules (fail-closed):
- one engine per handshake attempt; VERIFIED / FAILED are terminal
- each peer message is accepted exactly once, in role order
- deadline is checked before any secret-dependent work
- a bad tag or a bad peer element still produces this side's next message
  (same work as the success path), then the error is raised
- the session key exists only in VERIFIED
"""

from __future__ import annotations

import hmac
import logging
import secrets
from enum import Enum, IntEnum
from typing import Callable, Optional, Tuple, Union

from pake.crypto.curves import Curve, CurveSelection, Point, get_curve
from pake.crypto.kdf import KeySchedule, derive_keys, shared_element
from pake.crypto.mapper import blind, password_scalar
from pake.protocol.config import PakeConfig
from pake.protocol.deadline import Clock, Deadline, TimeoutSpec
from pake.protocol.errors import (
    AuthenticationFailed,
    InvalidPoint,
    InvalidState,
    MalformedMessage,
    NotReady,
    PakeError,
    RandomSourceError,
    Timeout,
)
from pake.protocol.transcript import handshake_transcript

logger = logging.getLogger(__name__)

RandomSource = Callable[[int], bytes]


class Role(IntEnum):
    INITIATOR = 0
    RESPONDER = 1

    @property
    def peer(self) -> "Role":
        return Role.RESPONDER if self is Role.INITIATOR else Role.INITIATOR


class State(str, Enum):
    CREATED = "CREATED"
    AWAITING_PEER_FIRST_MESSAGE = "AWAITING_PEER_FIRST_MESSAGE"
    AWAITING_PEER_CONFIRMATION = "AWAITING_PEER_CONFIRMATION"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"


TERMINAL_STATES = frozenset({State.VERIFIED, State.FAILED})

_STEP_RESPONDER_FIRST = "responder_first"
_STEP_INITIATOR_REPLY = "initiator_reply"
_STEP_RESPONDER_CONFIRMATION = "responder_confirmation"


def _coerce_role(role: Union[Role, int]) -> Role:
    if isinstance(role, bool) or not isinstance(role, int):
        raise ValueError(f"role must be 0 (initiator) or 1 (responder), got {role!r}")
    try:
        return Role(int(role))
    except ValueError:
        raise ValueError(f"role must be 0 (initiator) or 1 (responder), got {role!r}") from None


def _coerce_secret(weak_secret: Union[bytes, bytearray, memoryview, str]) -> bytes:
    if isinstance(weak_secret, str):
        return weak_secret.encode("utf-8")
    if isinstance(weak_secret, (bytes, bytearray, memoryview)):
        return bytes(weak_secret)
    raise TypeError("weak_secret must be bytes or str")


class Pake:
    """
    One party of one handshake.

    Pake(weak_secret, role, curve, timeout) samples the ephemeral scalar,
    derives the blinding point and arms the deadline. rng(n) must return n
    uniformly random bytes; clock() must be monotonic seconds.
    """

    def __init__(
        self,
        weak_secret: Union[bytes, str],
        role: Union[Role, int],
        curve: Optional[CurveSelection] = None,
        timeout: Optional[TimeoutSpec] = None,
        *,
        rng: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
        config: Optional[PakeConfig] = None,
    ) -> None:
        cfg = config or PakeConfig()
        self.role = _coerce_role(role)
        self.curve: Curve = get_curve(cfg.curve if curve is None else curve)
        self._context = cfg.context
        self._sliding = cfg.sliding_deadline
        self._rng: RandomSource = rng or secrets.token_bytes

        weak = _coerce_secret(weak_secret)
        self._w = password_scalar(weak, self.curve)
        self._w_bytes = self._w.to_bytes(self.curve.scalar_len, "big")

        self._scalar = self._sample_scalar()
        element = self.curve.add(self.curve.base_mul(self._scalar), blind(self.curve, self._w, self.role))
        if element is None:
            raise RandomSourceError("degenerate ephemeral element")
        self._element = self.curve.encode(element)

        self._deadline = Deadline(cfg.timeout if timeout is None else timeout, clock=clock)

        self._state = State.CREATED
        self._outgoing = self._element if self.role is Role.INITIATOR else b""
        self._peer_element: Optional[bytes] = None
        self._keys: Optional[KeySchedule] = None

        logger.debug(
            "pake created role=%s curve=%s timeout=%.3fs",
            self.role.name,
            self.curve.name,
            self._deadline.timeout,
        )

    # ---- public surface ----

    @property
    def state(self) -> State:
        return self._state

    @property
    def deadline(self) -> Deadline:
        return self._deadline

    def is_verified(self) -> bool:
        return self._state is State.VERIFIED

    def current_message(self) -> bytes:
        """
        What this party currently owes its peer (b"" for a responder that
        has not seen the initiator's element yet). Idempotent within a state.
        """
        if self._state is State.CREATED:
            self._transition(State.AWAITING_PEER_FIRST_MESSAGE)
        return self._outgoing

    def consume_message(self, data: bytes) -> None:
        """
        Accept the peer's next message.

        Checks run in this order: state, deadline, length, point decoding,
        then the key schedule. Any failure leaves the engine FAILED.
        """
        step = self._pending_step()

        try:
            self._deadline.check()
        except Timeout:
            self._fail("deadline exceeded")
            raise

        framing_error: Optional[MalformedMessage] = None
        try:
            element, tag = self._split(data, with_tag=step != _STEP_RESPONDER_FIRST)
        except MalformedMessage as e:
            framing_error = e
            element, tag = b"", b""

        if step == _STEP_RESPONDER_FIRST:
            self._on_initiator_element(element, framing_error)
        elif step == _STEP_INITIATOR_REPLY:
            self._on_responder_reply(element, tag, framing_error)
        else:
            self._on_initiator_confirmation(element, tag, framing_error)

        if self._sliding and self._state not in TERMINAL_STATES:
            self._deadline.rearm()

    # alias
    update = consume_message

    def session_key(self) -> bytes:
        if self._state is not State.VERIFIED or self._keys is None:
            raise NotReady(f"session key not available in state {self._state.value}")
        return self._keys.session_key.bytes()

    def close(self) -> None:
        """Wipe key material; the instance cannot be used afterwards."""
        if self._keys is not None:
            self._keys.wipe()
        self._scalar = 0
        if self._state is not State.FAILED:
            self._transition(State.FAILED)

    def __enter__(self) -> "Pake":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Pake(role={self.role.name}, curve={self.curve.name}, state={self._state.value})"

    # ---- steps ----

    def _pending_step(self) -> str:
        if self._state in TERMINAL_STATES:
            raise InvalidState(f"handshake already {self._state.value}")
        if self.role is Role.INITIATOR:
            if self._state is State.AWAITING_PEER_FIRST_MESSAGE:
                return _STEP_INITIATOR_REPLY
            raise InvalidState("initiator must send its first message before consuming")
        if self._state in (State.CREATED, State.AWAITING_PEER_FIRST_MESSAGE):
            return _STEP_RESPONDER_FIRST
        return _STEP_RESPONDER_CONFIRMATION

    def _on_initiator_element(self, element: bytes, error: Optional[PakeError]) -> None:
        peer, peer_bytes, error = self._peer_point(element, error)
        keys, degenerate = self._derive(peer, peer_bytes)
        error = error or degenerate

        self._outgoing = self._element + keys.tag(Role.RESPONDER)

        if error is not None:
            keys.wipe()
            self._fail(f"rejected initiator element: {error}")
            raise error
        self._keys = keys
        self._peer_element = peer_bytes
        self._transition(State.AWAITING_PEER_CONFIRMATION)

    def _on_responder_reply(self, element: bytes, tag: bytes, error: Optional[PakeError]) -> None:
        peer, peer_bytes, error = self._peer_point(element, error)
        keys, degenerate = self._derive(peer, peer_bytes)
        error = error or degenerate

        tag_ok = keys.check_tag(Role.RESPONDER, tag)
        self._outgoing = self._element + keys.tag(Role.INITIATOR)

        if error is not None:
            keys.wipe()
            self._fail(f"rejected responder element: {error}")
            raise error
        self._keys = keys
        self._peer_element = peer_bytes
        if not tag_ok:
            self._fail("responder confirmation tag mismatch")
            raise AuthenticationFailed("peer confirmation tag mismatch")
        self._transition(State.VERIFIED)

    def _on_initiator_confirmation(self, element: bytes, tag: bytes, error: Optional[PakeError]) -> None:
        if error is None:
            try:
                self._check_peer_element(element)
            except (MalformedMessage, InvalidPoint) as e:
                error = e
        if error is not None:
            self._fail(f"rejected initiator confirmation: {error}")
            raise error

        keys = self._keys
        if keys is None or self._peer_element is None:
            raise InvalidState("no key schedule for confirmation")

        same_element = hmac.compare_digest(element, self._peer_element)
        tag_ok = keys.check_tag(Role.INITIATOR, tag)
        if not (same_element and tag_ok):
            self._fail("initiator confirmation mismatch")
            raise AuthenticationFailed("peer confirmation tag mismatch")
        self._transition(State.VERIFIED)

    # ---- helpers ----

    def _sample_scalar(self) -> int:
        want = self.curve.scalar_seed_len
        try:
            raw = self._rng(want)
        except Exception as e:
            raise RandomSourceError(f"random source failed: {type(e).__name__}") from e
        if not isinstance(raw, (bytes, bytearray)) or len(raw) != want:
            raise RandomSourceError(f"random source must return {want} bytes")
        return self.curve.scalar_from_bytes(raw)

    def _split(self, data: bytes, *, with_tag: bool) -> Tuple[bytes, bytes]:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise MalformedMessage(f"message must be bytes, got {type(data).__name__}")
        raw = bytes(data)
        want = self.curve.confirmation_message_len if with_tag else self.curve.first_message_len
        if len(raw) != want:
            raise MalformedMessage(f"expected {want} bytes, got {len(raw)}")
        return raw[: self.curve.point_len], raw[self.curve.point_len :]

    def _check_peer_element(self, element: bytes) -> Point:
        point = self.curve.decode(element)
        if hmac.compare_digest(element, self._element):
            raise InvalidPoint("peer echoed our own element")
        return point

    def _peer_point(
        self, element: bytes, error: Optional[PakeError]
    ) -> Tuple[Point, bytes, Optional[PakeError]]:
        """
        Decoded peer element, or a random decoy when the message is unusable
        so the reply still costs the same work.
        """
        if error is None:
            try:
                return self._check_peer_element(element), element, None
            except (MalformedMessage, InvalidPoint) as e:
                error = e
        decoy = self.curve.base_mul(self._sample_scalar())
        if decoy is None:
            decoy = self.curve.G
        return decoy, self.curve.encode(decoy), error

    def _derive(self, peer: Point, peer_bytes: bytes) -> Tuple[KeySchedule, Optional[InvalidPoint]]:
        degenerate: Optional[InvalidPoint] = None
        k = shared_element(self.curve, self._scalar, peer, blind(self.curve, self._w, self.role.peer))
        if k is None:
            degenerate = InvalidPoint("peer element cancels the blinding point")
            k = self.curve.G

        if self.role is Role.INITIATOR:
            x_bytes, y_bytes = self._element, peer_bytes
        else:
            x_bytes, y_bytes = peer_bytes, self._element

        tt = handshake_transcript(
            self.curve.name,
            self._context,
            x_bytes,
            y_bytes,
            self.curve.encode(k),
            self._w_bytes,
        )
        return derive_keys(self.curve, tt), degenerate

    def _transition(self, new: State) -> None:
        logger.debug("pake %s %s -> %s", self.role.name, self._state.value, new.value)
        self._state = new

    def _fail(self, reason: str) -> None:
        logger.warning("pake %s failed (curve=%s): %s", self.role.name, self.curve.name, reason)
        if self._keys is not None:
            self._keys.wipe()
        self._transition(State.FAILED)

    # short alias
    bytes = current_message


def init(
    weak_secret: Union[bytes, str],
    role: Union[Role, int],
    curve: CurveSelection,
    timeout: TimeoutSpec,
    **kw,
) -> Pake:
    return Pake(weak_secret, role, curve, timeout, **kw)


def init_curve(
    weak_secret: Union[bytes, str],
    role: Union[Role, int],
    curve_name: str,
    timeout: TimeoutSpec,
    **kw,
) -> Pake:
    """Same as init() but only accepts a curve name ("siec", "p256", ...)."""
    if not isinstance(curve_name, str):
        raise TypeError("curve_name must be str")
    return Pake(weak_secret, role, curve_name, timeout, **kw)
