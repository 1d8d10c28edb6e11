"""Shared test fixtures for the onchain-ops test suite."""

from __future__ import annotations

import pytest

from onchain_ops.errors.chain_errors import DataSourceError
from tests.helpers import TX_HASH, FakeClock, ScriptedDataSource


@pytest.fixture
def app_config():
    """Provide an AppConfig with default networks and fast waits."""
    from onchain_ops.config.settings import AppConfig, NodeConfig, WaitConfig

    return AppConfig(
        node=NodeConfig(url="https://node.test"),
        wait=WaitConfig(interval_seconds=0.2, timeout_seconds=10.0),
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_source() -> ScriptedDataSource:
    return ScriptedDataSource()


@pytest.fixture
def failing_data_source() -> ScriptedDataSource:
    return ScriptedDataSource(transactions={TX_HASH: DataSourceError("node unreachable")})
