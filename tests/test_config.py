# MIT License © 2025 Motohiro Suzuki
from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from pake import PakeConfig


def test_defaults():
    cfg = PakeConfig()
    assert cfg.curve == "siec"
    assert cfg.timeout == 5.0
    assert cfg.sliding_deadline is False
    assert cfg.context == b""


def test_normalisation():
    cfg = PakeConfig(curve=" P-384 ", timeout=timedelta(seconds=2), context="app")
    assert cfg.curve == "p-384"
    assert cfg.timeout == 2.0
    assert cfg.context == b"app"


def test_from_mapping_ignores_unknown_keys():
    cfg = PakeConfig.from_mapping(
        {"curve": "p256", "timeout_ms": 1500, "sliding_deadline": 1, "context": "x", "colour": "blue"}
    )
    assert cfg == PakeConfig(curve="p256", timeout=1.5, sliding_deadline=True, context=b"x")


def test_from_mapping_prefers_timeout_over_timeout_ms():
    assert PakeConfig.from_mapping({"timeout": 3, "timeout_ms": 10}).timeout == 3.0


def test_rejects_bad_values():
    with pytest.raises(ValueError):
        PakeConfig(timeout=-1)
    with pytest.raises(TypeError):
        PakeConfig(context=123)


def test_frozen():
    with pytest.raises(FrozenInstanceError):
        PakeConfig().timeout = 1.0
