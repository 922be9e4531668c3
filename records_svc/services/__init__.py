"""
Service layer for business logic.

This module contains all business logic and orchestration services.
"""
from records_svc.services.patient_service import PatientService
from records_svc.services.prescription_service import PrescriptionService

__all__ = [
    "PatientService",
    "PrescriptionService",
]
