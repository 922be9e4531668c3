"""
Shared pytest fixtures for BFF tests.

Key patterns:

1. Records Service replies come from httpx.MockTransport, never the network
2. GraphQL tests swap the records client via app.dependency_overrides
"""
import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Settings are read at import time, so the environment must be ready first
TEST_API_KEY = "test-api-key-for-testing-purposes-12345678"
TEST_BASE_URL = "http://records.test"
os.environ.setdefault("RECORDS_SVC_API_KEY", TEST_API_KEY)
os.environ.setdefault("RECORDS_SVC_URL", TEST_BASE_URL)
os.environ.setdefault("RECORDS_SVC_DB_DIR", tempfile.gettempdir())

from bff.clients.records_client import RecordsServiceClient, get_records_client
from bff.config import RECORDS_SVC_API_KEY
from bff.main import create_app


@pytest.fixture
def make_records_client():
    """Build a RecordsServiceClient whose requests are answered by `handler`."""
    def _make(handler):
        return RecordsServiceClient(
            base_url=TEST_BASE_URL,
            api_key=RECORDS_SVC_API_KEY,
            transport=httpx.MockTransport(handler),
        )
    return _make


@pytest.fixture
def fake_records_client():
    """Records client double; each remote call is an AsyncMock."""
    client = MagicMock(spec=RecordsServiceClient)
    client.base_url = TEST_BASE_URL
    for method in (
        "get_patient",
        "get_all_patients",
        "get_prescription",
        "get_reference",
        "update_patient_details",
        "check_health",
    ):
        setattr(client, method, AsyncMock())
    return client


@pytest.fixture
def bff_client(fake_records_client):
    """TestClient for a fresh BFF app wired to the fake records client."""
    app = create_app()
    app.dependency_overrides[get_records_client] = lambda: fake_records_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def run_graphql(bff_client):
    """POST a GraphQL document and return the decoded JSON reply."""
    def _run(query, variables=None):
        response = bff_client.post("/graphql", json={"query": query, "variables": variables or {}})
        assert response.status_code == 200, response.text
        return response.json()
    return _run
