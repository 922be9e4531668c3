"""
Cross-tier tests: the BFF's records client against the real Records Service app.

The Records Service runs in-process behind httpx.ASGITransport with a seeded
temporary database and its real API key check, so URLs, query parameter
names and request bodies are checked against the actual routers.
"""
import os
import tempfile

import httpx
import pytest
from fastapi.testclient import TestClient

from bff.clients.records_client import RecordsServiceCallError, RecordsServiceClient, get_records_client
from bff.main import create_app as create_bff_app
from records_svc.core import dependencies as records_deps
from records_svc.main import create_app as create_records_app
from records_svc.manage_db import seed_database
from records_svc.repositories import Database, PatientRepository, PrescriptionRepository
from records_svc.schemas import StatusCode
from records_svc.services import PatientService, PrescriptionService


SLASH_REFERENCE = "RX/2024/1"
SLASH_PATIENT = "A/B"


@pytest.fixture
def records_db():
    """Demo prescriptions plus one reference and patient name containing "/"."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    db = Database(db_path=db_path)
    seed_database(db)

    conn = db.get_connection()
    patient_id = conn.execute(
        "INSERT INTO patient (name, age, gender, contact) VALUES (?, ?, ?, ?)",
        (SLASH_PATIENT, 40, "Female", "0770000000")
    ).lastrowid
    doctor_id = conn.execute("INSERT INTO doctor (name) VALUES (?)", ("Dr. Slash",)).lastrowid
    medicine_id = conn.execute("INSERT INTO medicine (name) VALUES (?)", ("Aspirin",)).lastrowid
    conn.execute(
        "INSERT INTO prescription_reference (reference_number, patient_id, doctor_id, medicine_id) "
        "VALUES (?, ?, ?, ?)",
        (SLASH_REFERENCE, patient_id, doctor_id, medicine_id)
    )
    conn.commit()
    conn.close()

    yield db

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def records_app(records_db):
    """The Records Service app wired to the temp database; API key check stays on."""
    app = create_records_app()
    app.dependency_overrides[records_deps.get_database] = lambda: records_db
    app.dependency_overrides[records_deps.get_patient_service] = lambda: PatientService(
        patient_repository=PatientRepository(db=records_db)
    )
    app.dependency_overrides[records_deps.get_prescription_service] = lambda: PrescriptionService(
        prescription_repository=PrescriptionRepository(db=records_db)
    )
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def records_client(records_app):
    return RecordsServiceClient(
        base_url="http://records.test",
        transport=httpx.ASGITransport(app=records_app),
    )


# =============================================================================
# LOOKUPS
# =============================================================================

@pytest.mark.asyncio
async def test_get_patient(records_client):
    patient = await records_client.get_patient("Nimal Perera")
    assert (patient.name, patient.age, patient.contact) == ("Nimal Perera", 54, "0712345678")


@pytest.mark.asyncio
async def test_get_patient_with_slash_in_name(records_client):
    patient = await records_client.get_patient(SLASH_PATIENT)
    assert patient.name == SLASH_PATIENT
    assert patient.age == 40


@pytest.mark.asyncio
async def test_get_patient_empty_name_is_not_found(records_client):
    with pytest.raises(RecordsServiceCallError) as exc_info:
        await records_client.get_patient("")

    assert exc_info.value.code == StatusCode.NOT_FOUND
    assert exc_info.value.message == "Patient not found"


@pytest.mark.asyncio
async def test_get_prescription_with_slash_in_reference(records_client):
    prescription = await records_client.get_prescription(SLASH_REFERENCE)
    assert prescription.reference_number == SLASH_REFERENCE
    assert prescription.patient_name == SLASH_PATIENT
    assert prescription.medicine_name == "Aspirin"


@pytest.mark.asyncio
async def test_get_prescription_empty_reference_is_not_found(records_client):
    with pytest.raises(RecordsServiceCallError) as exc_info:
        await records_client.get_prescription("")

    assert exc_info.value.code == StatusCode.NOT_FOUND
    assert exc_info.value.message == "Prescription not found"


@pytest.mark.asyncio
async def test_search_results_are_all_fetchable(records_client):
    """Every reference returned by the search can be fetched by its number."""
    search = await records_client.get_reference("1")
    assert SLASH_REFERENCE in search.reference

    for reference_number in search.reference:
        prescription = await records_client.get_prescription(reference_number)
        assert prescription.reference_number == reference_number


@pytest.mark.asyncio
async def test_get_reference_no_match(records_client):
    with pytest.raises(RecordsServiceCallError) as exc_info:
        await records_client.get_reference("ZZ")

    assert exc_info.value.code == StatusCode.NOT_FOUND
    assert exc_info.value.message == "No reference found"


# =============================================================================
# PAGING
# =============================================================================

@pytest.mark.asyncio
async def test_get_all_patients_paging(records_client):
    reply = await records_client.get_all_patients(page=2, page_size=2)

    assert [row.reference_number for row in reply.patients] == ["RX-1003", "RX-2001"]
    assert reply.patients[0].total_count == 5
    assert reply.patients[0].total_pages == 3


@pytest.mark.asyncio
async def test_get_all_patients_defaults(records_client):
    reply = await records_client.get_all_patients()

    assert len(reply.patients) == 5
    assert reply.patients[-1].reference_number == SLASH_REFERENCE


@pytest.mark.asyncio
async def test_get_all_patients_page_past_end(records_client):
    reply = await records_client.get_all_patients(page=9, page_size=2)
    assert reply.patients == []


# =============================================================================
# UPDATE
# =============================================================================

@pytest.mark.asyncio
async def test_update_reference_with_slash(records_client):
    reply = await records_client.update_patient_details(
        SLASH_REFERENCE, contact="0711111111", medicine_name="Clopidogrel", description="75mg daily"
    )
    assert reply.success is True

    prescription = await records_client.get_prescription(SLASH_REFERENCE)
    assert prescription.contact == "0711111111"
    assert prescription.medicine_name == "Clopidogrel"
    assert prescription.description == "75mg daily"
    assert prescription.patient_name == SLASH_PATIENT


@pytest.mark.asyncio
async def test_update_unknown_reference(records_client):
    with pytest.raises(RecordsServiceCallError) as exc_info:
        await records_client.update_patient_details("RX-0000", name="Ghost")

    assert exc_info.value.code == StatusCode.NOT_FOUND
    assert exc_info.value.message == "Patient not found"


@pytest.mark.asyncio
async def test_update_with_invalid_age(records_client):
    with pytest.raises(RecordsServiceCallError) as exc_info:
        await records_client.update_patient_details("RX-1001", age=-3)

    assert exc_info.value.code == StatusCode.INTERNAL
    assert exc_info.value.message.startswith("Invalid request: age:")


# =============================================================================
# AUTH AND END TO END
# =============================================================================

@pytest.mark.asyncio
async def test_wrong_api_key_is_internal(records_app):
    client = RecordsServiceClient(
        base_url="http://records.test",
        api_key="not-the-shared-key-not-the-shared-key",
        transport=httpx.ASGITransport(app=records_app),
    )

    with pytest.raises(RecordsServiceCallError) as exc_info:
        await client.get_patient("Nimal Perera")

    assert exc_info.value.code == StatusCode.INTERNAL
    assert exc_info.value.message == "Invalid API key"


def test_graphql_to_records_service(records_client):
    """A GraphQL query travels through the BFF into the Records Service and back."""
    bff_app = create_bff_app()
    bff_app.dependency_overrides[get_records_client] = lambda: records_client
    client = TestClient(bff_app)

    response = client.post("/graphql", json={
        "query": "query Get($ref: String!) { getPrescription(ref_no: $ref) { patient_name medicine_name } }",
        "variables": {"ref": SLASH_REFERENCE},
    })

    assert response.status_code == 200
    assert response.json() == {
        "data": {"getPrescription": {"patient_name": SLASH_PATIENT, "medicine_name": "Aspirin"}}
    }
