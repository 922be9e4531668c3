"""
Tests for the GraphQL API.

The records client is replaced with a fake, so these tests cover the schema
shape, argument forwarding and error relaying of each resolver.
"""
from bff.clients.records_client import RecordsServiceCallError
from bff.gql import schema
from records_svc.schemas import (
    PatientListResponse,
    PatientResponse,
    PrescriptionResponse,
    ReferenceSearchResponse,
    StatusCode,
    UpdatePatientDetailsResponse,
)


# =============================================================================
# SCHEMA SHAPE
# =============================================================================

def test_schema_keeps_field_names():
    sdl = schema.as_str()

    assert "getPatient(name: String!): Patient" in sdl
    assert "getAllPatients(page: Int" in sdl
    assert "pageSize: Int" in sdl
    assert "[PatientWithDetails]" in sdl
    assert "getPrescription(ref_no: String!): Prescription" in sdl
    assert "getReference(ref_no: String!): Search" in sdl
    assert "updatePatientDetails(reference_number: String!" in sdl
    assert "totalCount: Int" in sdl
    assert "totalPages: Int" in sdl
    assert "doctor_name: String" in sdl


# =============================================================================
# QUERIES
# =============================================================================

def test_get_patient(run_graphql, fake_records_client):
    fake_records_client.get_patient.return_value = PatientResponse(
        name="Nimal Perera", age=54, gender="Male", contact="0712345678"
    )

    result = run_graphql('{ getPatient(name: "Nimal Perera") { name age gender contact } }')

    assert "errors" not in result
    assert result["data"]["getPatient"] == {
        "name": "Nimal Perera", "age": 54, "gender": "Male", "contact": "0712345678"
    }
    fake_records_client.get_patient.assert_awaited_once_with("Nimal Perera")


def test_get_patient_not_found(run_graphql, fake_records_client):
    fake_records_client.get_patient.side_effect = RecordsServiceCallError(
        StatusCode.NOT_FOUND, "Patient not found"
    )

    result = run_graphql('{ getPatient(name: "Nobody") { name } }')

    assert result["data"]["getPatient"] is None
    error = result["errors"][0]
    assert error["message"] == "Patient not found"
    assert error["extensions"]["code"] == "NOT_FOUND"
    assert error["path"] == ["getPatient"]


def test_get_all_patients_forwards_paging(run_graphql, fake_records_client):
    fake_records_client.get_all_patients.return_value = PatientListResponse.model_validate({
        "patients": [{
            "reference_number": "RX-1003",
            "name": "Ruwan Dias",
            "age": 29,
            "gender": "Male",
            "contact": "0701122334",
            "doctor_name": "Dr. Silva",
            "medicine_name": "Paracetamol",
            "description": "As needed for fever",
            "totalCount": 4,
            "totalPages": 2,
        }]
    })

    result = run_graphql("""
        query Page($page: Int, $pageSize: Int) {
            getAllPatients(page: $page, pageSize: $pageSize) {
                reference_number name doctor_name medicine_name description totalCount totalPages
            }
        }
    """, {"page": 2, "pageSize": 2})

    assert "errors" not in result
    assert result["data"]["getAllPatients"] == [{
        "reference_number": "RX-1003",
        "name": "Ruwan Dias",
        "doctor_name": "Dr. Silva",
        "medicine_name": "Paracetamol",
        "description": "As needed for fever",
        "totalCount": 4,
        "totalPages": 2,
    }]
    fake_records_client.get_all_patients.assert_awaited_once_with(page=2, page_size=2)


def test_get_all_patients_without_arguments(run_graphql, fake_records_client):
    fake_records_client.get_all_patients.return_value = PatientListResponse()

    result = run_graphql("{ getAllPatients { name } }")

    assert result["data"]["getAllPatients"] == []
    fake_records_client.get_all_patients.assert_awaited_once_with(page=None, page_size=None)


def test_get_prescription(run_graphql, fake_records_client):
    fake_records_client.get_prescription.return_value = PrescriptionResponse(
        reference_number="RX-1002",
        patient_name="Kamala Fernando",
        age=37,
        gender="Female",
        contact="0778765432",
        doctor_name="Dr. Jayawardena",
        medicine_name="Amoxicillin",
        description="250mg three times daily for 7 days",
    )

    result = run_graphql("""
        { getPrescription(ref_no: "RX-1002") {
            reference_number patient_name age doctor_name medicine_name description
        } }
    """)

    assert result["data"]["getPrescription"] == {
        "reference_number": "RX-1002",
        "patient_name": "Kamala Fernando",
        "age": 37,
        "doctor_name": "Dr. Jayawardena",
        "medicine_name": "Amoxicillin",
        "description": "250mg three times daily for 7 days",
    }
    fake_records_client.get_prescription.assert_awaited_once_with("RX-1002")


def test_get_reference(run_graphql, fake_records_client):
    fake_records_client.get_reference.return_value = ReferenceSearchResponse(
        reference=["RX-1001", "RX-2001"]
    )

    result = run_graphql('{ getReference(ref_no: "001") { reference } }')

    assert result["data"]["getReference"] == {"reference": ["RX-1001", "RX-2001"]}
    fake_records_client.get_reference.assert_awaited_once_with("001")


def test_get_reference_no_match(run_graphql, fake_records_client):
    fake_records_client.get_reference.side_effect = RecordsServiceCallError(
        StatusCode.NOT_FOUND, "No reference found"
    )

    result = run_graphql('{ getReference(ref_no: "ZZ") { reference } }')

    assert result["data"]["getReference"] is None
    assert result["errors"][0]["extensions"]["code"] == "NOT_FOUND"


# =============================================================================
# MUTATION
# =============================================================================

UPDATE_MUTATION = """
    mutation Update($ref: String!, $contact: String, $medicine: String) {
        updatePatientDetails(reference_number: $ref, contact: $contact, medicine_name: $medicine)
    }
"""


def test_update_patient_details(run_graphql, fake_records_client):
    fake_records_client.update_patient_details.return_value = UpdatePatientDetailsResponse(success=True)

    result = run_graphql(UPDATE_MUTATION, {"ref": "RX-1001", "contact": "0700000000", "medicine": "Insulin"})

    assert result["data"] == {"updatePatientDetails": True}
    fake_records_client.update_patient_details.assert_awaited_once_with(
        "RX-1001",
        name=None,
        age=None,
        gender=None,
        contact="0700000000",
        doctor_name=None,
        medicine_name="Insulin",
        description=None,
    )


def test_update_patient_details_internal_error(run_graphql, fake_records_client):
    fake_records_client.update_patient_details.side_effect = RecordsServiceCallError(
        StatusCode.INTERNAL, "Database error: disk I/O error"
    )

    result = run_graphql(UPDATE_MUTATION, {"ref": "RX-1001", "contact": "0700000000"})

    assert result["data"]["updatePatientDetails"] is None
    assert result["errors"][0]["message"] == "Database error: disk I/O error"
    assert result["errors"][0]["extensions"]["code"] == "INTERNAL"


def test_unexpected_failure_is_reported_as_internal(run_graphql, fake_records_client):
    fake_records_client.get_patient.side_effect = RuntimeError("boom")

    result = run_graphql('{ getPatient(name: "Nimal Perera") { name } }')

    assert result["data"]["getPatient"] is None
    error = result["errors"][0]
    assert error["extensions"]["code"] == "INTERNAL"
    assert "boom" not in error["message"]


# =============================================================================
# HEALTH
# =============================================================================

def test_health(bff_client):
    response = bff_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_when_records_service_is_up(bff_client, fake_records_client):
    fake_records_client.check_health.return_value = {"status": "healthy"}

    response = bff_client.get("/ready")
    assert response.status_code == 200
    assert response.json()["dependencies"][0]["name"] == "records_service"


def test_ready_when_records_service_is_down(bff_client, fake_records_client):
    fake_records_client.check_health.side_effect = RecordsServiceCallError(
        StatusCode.INTERNAL, "Request error: Connection refused"
    )

    response = bff_client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["dependencies"][0]["status"] == "unavailable"


def test_request_id_is_echoed(bff_client):
    response = bff_client.get("/health", headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"
