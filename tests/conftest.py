"""
Shared fixtures: injected settings, a TestClient bound to them and a mocked
promtool runner whose call count the tests can assert on.
"""
import pytest
from typing import Generator
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from promport.core.config import Settings, get_settings
from promport.main import app
from promport.utils.promtool import CommandResult

PROMTOOL = "/opt/prometheus/promtool"
PROMETHEUS_URL = "http://prometheus.local:9090"
TSDB_PATH = "/var/lib/prometheus/data"


def make_settings(**overrides) -> Settings:
    values = {
        "PROMTOOL_PATH": PROMTOOL,
        "PROMETHEUS_URL": PROMETHEUS_URL,
        "TSDB_PATH": TSDB_PATH,
        "MAX_OUTPUT_BYTES": 1024 * 1024,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """
    TestClient whose handlers see ``test_settings`` instead of the environment.
    """
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def mock_run() -> Generator[AsyncMock, None, None]:
    """Replace the subprocess runner; no promtool is ever started."""
    with patch("promport.utils.promtool.run_command", new_callable=AsyncMock) as mocked:
        mocked.return_value = CommandResult(argv=[], returncode=0)
        yield mocked
