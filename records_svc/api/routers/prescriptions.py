"""
Prescriptions router - PrescriptionService and SearchService remote calls.

    GET   /api/v1/prescriptions?ref_no=...             GetPrescription
    PATCH /api/v1/prescriptions?reference_number=...   UpdatePatientDetails
    GET   /api/v1/references?ref_no=...                GetReference

Reference numbers are query parameters, never path segments, so values
containing "/" stay addressable.

All endpoints require API key authentication.
"""
import logging

from fastapi import APIRouter, Depends, Query

from records_svc.schemas import (
    ErrorResponse,
    PrescriptionResponse,
    ReferenceSearchResponse,
    UpdatePatientDetailsRequest,
    UpdatePatientDetailsResponse,
)
from records_svc.services import PatientService, PrescriptionService
from records_svc.core.auth import verify_api_key
from records_svc.core.dependencies import get_patient_service, get_prescription_service

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "NOT_FOUND"},
    500: {"model": ErrorResponse, "description": "INTERNAL"},
}

router = APIRouter(
    prefix="/api/v1/prescriptions",
    tags=["Prescriptions"],
    dependencies=[Depends(verify_api_key)],
    responses=ERROR_RESPONSES,
)

search_router = APIRouter(
    prefix="/api/v1/references",
    tags=["Search"],
    dependencies=[Depends(verify_api_key)],
    responses=ERROR_RESPONSES,
)


@router.get(
    "",
    response_model=PrescriptionResponse,
    summary="Get a prescription by reference number",
)
async def get_prescription(
    ref_no: str = Query(..., description="Prescription reference number", examples=["RX-1001"]),
    prescription_service: PrescriptionService = Depends(get_prescription_service)
):
    """
    Get the prescription, patient, doctor and medicine behind a reference number.

    Raises 404 NOT_FOUND if the reference does not exist.
    """
    return prescription_service.get_prescription(ref_no)


@router.patch(
    "",
    response_model=UpdatePatientDetailsResponse,
    summary="Update patient, doctor and medicine details for a reference",
    description="Partial update in one transaction. Missing, null or empty fields keep "
                "their stored values. Any failure rolls the whole update back."
)
async def update_patient_details(
    changes: UpdatePatientDetailsRequest,
    reference_number: str = Query(..., description="Reference whose linked rows change", examples=["RX-1001"]),
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Update the rows linked to a prescription reference.

    Raises 404 NOT_FOUND if the reference does not exist and 500 INTERNAL if the
    transaction fails.
    """
    return patient_service.update_patient_details(reference_number, changes)


@search_router.get(
    "",
    response_model=ReferenceSearchResponse,
    summary="Search reference numbers",
)
async def get_reference(
    ref_no: str = Query(..., description="Text the reference number must contain", examples=["RX-10"]),
    prescription_service: PrescriptionService = Depends(get_prescription_service)
):
    """
    Get every reference number containing ``ref_no``.

    Raises 404 NOT_FOUND if nothing matches.
    """
    return prescription_service.search_references(ref_no)
