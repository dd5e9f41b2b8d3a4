from __future__ import annotations

import pytest

from hoststream.provider.metrics_provider import MetricsProvider
from tests.fakes import FakeSource, scenario_source


@pytest.fixture
def source() -> FakeSource:
    return scenario_source()


@pytest.fixture
def provider(source: FakeSource) -> MetricsProvider:
    return MetricsProvider(source)
