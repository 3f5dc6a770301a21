from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from zkattest.access import RoleTable
from zkattest.config import reset_settings_cache
from zkattest.ismp import IsmpAggregationReceiver
from zkattest.metrics import AttestationMetrics
from zkattest.registry import AttestationRegistry
from zkattest.tests import HOST, OPERATOR, OWNER


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Each test sees the default environment unless it sets ZKATTEST_* itself."""
    for key in (
        "ZKATTEST_SEQUENTIAL_START_ID",
        "ZKATTEST_ENFORCE_SEQUENTIAL",
        "ZKATTEST_LOG_LEVEL",
        "ZKATTEST_LOG_FORMAT",
        "ZKATTEST_METRICS_ENABLED",
        "ZKATTEST_EVENT_LOG_LIMIT",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def prom_registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(prom_registry) -> AttestationMetrics:
    return AttestationMetrics(prom_registry)


@pytest.fixture
def roles() -> RoleTable:
    return RoleTable(owner=OWNER, operator=OPERATOR)


@pytest.fixture
def registry(roles, metrics) -> AttestationRegistry:
    return AttestationRegistry(roles, metrics=metrics)


@pytest.fixture
def receiver(roles, metrics) -> IsmpAggregationReceiver:
    return IsmpAggregationReceiver(host=HOST, roles=roles, metrics=metrics)
