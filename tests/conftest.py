"""Common test fixtures and utilities."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from gridflow.core.collaborators import LoggingNotifier


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Create sample grid rows."""
    return [
        {"id": 1, "name": "alpha", "amount": 10.5, "created": "2024-01-03", "state": "ca"},
        {"id": 2, "name": "Bravo", "amount": None, "created": "2024-01-01", "state": "az"},
        {"id": 3, "name": "charlie", "amount": 3, "created": "2024-02-10", "state": "ca"},
        {"id": 4, "name": "delta", "amount": 42, "created": "", "state": "nv"},
    ]


@pytest.fixture
def sample_columns() -> list[dict[str, Any]]:
    """Column definitions matching ``sample_rows``."""
    return [
        {"field": "id", "type": "number"},
        {"field": "name", "filter_type": "like"},
        {"field": "amount", "type": "number", "filter_type": ">="},
        {"field": "created", "type": "date", "filter_type": "equals"},
        {
            "field": "state",
            "filter_type": "equals",
            "filter_values": {"ca": "California", "az": "Arizona", "nv": "Nevada"},
        },
        {"label": "Actions"},
    ]


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for AsyncClients served by an in-process handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def sample_data_dir(tmp_path):
    """Create a temporary directory with sample data."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir
