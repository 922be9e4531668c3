"""
Pydantic schemas for the Records Service wire contract.

These models are the schema files shared with the BFF: every remote call takes
and returns one of them.
"""
from records_svc.schemas.common import (
    StatusCode,
    ErrorResponse,
    HealthResponse,
    DependencyStatus,
    ReadyResponse,
)
from records_svc.schemas.patient import (
    PatientResponse,
    PatientWithDetails,
    PatientListResponse,
    UpdatePatientDetailsRequest,
    UpdatePatientDetailsResponse,
)
from records_svc.schemas.prescription import (
    PrescriptionResponse,
    ReferenceSearchResponse,
)

__all__ = [
    # Common
    "StatusCode",
    "ErrorResponse",
    "HealthResponse",
    "DependencyStatus",
    "ReadyResponse",
    # Patient schemas
    "PatientResponse",
    "PatientWithDetails",
    "PatientListResponse",
    "UpdatePatientDetailsRequest",
    "UpdatePatientDetailsResponse",
    # Prescription schemas
    "PrescriptionResponse",
    "ReferenceSearchResponse",
]
