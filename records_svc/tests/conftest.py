"""
Shared pytest fixtures for Records Service tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories

Fixture Hierarchy:
    temp_db → seeded_db → repositories → services → test_app → client
"""
import os
import tempfile

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Settings are read at import time, so the environment must be ready first
TEST_API_KEY = "test-api-key-for-testing-purposes-12345678"
os.environ.setdefault("RECORDS_SVC_API_KEY", TEST_API_KEY)
os.environ.setdefault("RECORDS_SVC_DB_DIR", tempfile.gettempdir())

from records_svc.repositories import Database, PatientRepository, PrescriptionRepository
from records_svc.services import PatientService, PrescriptionService
from records_svc.core.exceptions import setup_exception_handlers
from records_svc.core import dependencies as deps
from records_svc.core.auth import verify_api_key
from records_svc.manage_db import seed_database


@pytest.fixture
def temp_db():
    """Fresh SQLite database in a temp file, removed after the test."""
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def seeded_db(temp_db):
    """Temp database holding the demo prescriptions RX-1001..RX-1003 and RX-2001."""
    seed_database(temp_db)
    return temp_db


@pytest.fixture
def patient_repo(seeded_db):
    return PatientRepository(db=seeded_db)


@pytest.fixture
def prescription_repo(seeded_db):
    return PrescriptionRepository(db=seeded_db)


@pytest.fixture
def patient_service(patient_repo):
    return PatientService(patient_repository=patient_repo, default_page_size=10, max_page_size=100)


@pytest.fixture
def prescription_service(prescription_repo):
    return PrescriptionService(prescription_repository=prescription_repo)


@pytest.fixture
def test_app(seeded_db, patient_repo, prescription_repo, patient_service, prescription_service):
    """
    FastAPI app with the real routers and test dependencies injected.

    API key verification is overridden; tests that exercise auth remove
    the override themselves.
    """
    from records_svc.api.routers import (
        health_router,
        patients_router,
        prescriptions_router,
        search_router,
    )

    app = FastAPI(title="Records Service Test")
    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_database] = lambda: seeded_db
    app.dependency_overrides[deps.get_patient_repository] = lambda: patient_repo
    app.dependency_overrides[deps.get_prescription_repository] = lambda: prescription_repo
    app.dependency_overrides[deps.get_patient_service] = lambda: patient_service
    app.dependency_overrides[deps.get_prescription_service] = lambda: prescription_service

    async def skip_auth():
        return TEST_API_KEY
    app.dependency_overrides[verify_api_key] = skip_auth

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(prescriptions_router)
    app.include_router(search_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


@pytest.fixture
def fetch_row(seeded_db):
    """Read a single row straight from the database, bypassing repositories."""
    def _fetch(sql, params=()):
        conn = seeded_db.get_connection()
        try:
            return conn.execute(sql, params).fetchone()
        finally:
            conn.close()
    return _fetch
