from __future__ import annotations

import pytest

from fakes import FakeUpstream, make_api_config
from slidesmith.core.rate_limit import limiter
from slidesmith.schemas.presentation import ApiConfig, ApiProtocol


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def vertex_config() -> ApiConfig:
    return make_api_config(ApiProtocol.VERTEX_AI)


@pytest.fixture
def openai_config() -> ApiConfig:
    return make_api_config(ApiProtocol.OPENAI)


@pytest.fixture(autouse=True)
def _disable_rate_limits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(limiter, "enabled", False)
