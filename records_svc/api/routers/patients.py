"""
Patients router - PatientService remote calls.

    GET  /api/v1/patients/lookup?name=...   GetPatient
    GET  /api/v1/patients                   GetAllPatients (page, pageSize)

Keys travel as query parameters so names containing "/" or empty names
reach the service unchanged.

UpdatePatientDetails is keyed by reference number and lives in the
prescriptions router. All endpoints require API key authentication.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from records_svc.schemas import ErrorResponse, PatientResponse, PatientListResponse
from records_svc.services import PatientService
from records_svc.core.auth import verify_api_key
from records_svc.core.dependencies import get_patient_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/patients",
    tags=["Patients"],
    dependencies=[Depends(verify_api_key)],
    responses={500: {"model": ErrorResponse, "description": "INTERNAL"}},
)


@router.get(
    "",
    response_model=PatientListResponse,
    summary="List patients with prescription details",
    description="One row per prescription reference, ordered by reference number, "
                "with totalCount and totalPages repeated on every row."
)
async def get_all_patients(
    page: Optional[int] = Query(None, description="1-based page number (defaults to 1)", examples=[1]),
    page_size: Optional[int] = Query(
        None,
        alias="pageSize",
        description="Rows per page (defaults to 10, capped at the configured maximum)",
        examples=[10],
    ),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Get one page of patients.

    A page past the end returns an empty ``patients`` list.
    """
    return patient_service.get_all_patients(page=page, page_size=page_size)


@router.get(
    "/lookup",
    response_model=PatientResponse,
    responses={404: {"model": ErrorResponse, "description": "NOT_FOUND"}},
    summary="Get a patient by name",
)
async def get_patient(
    name: str = Query(..., description="Exact patient name", examples=["Nimal Perera"]),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Get a patient's basic details by exact name.

    Raises 404 NOT_FOUND if no patient has this name.
    """
    return patient_service.get_patient(name)
