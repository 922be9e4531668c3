"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from records_svc.repositories.base import Database
from records_svc.repositories.patient_repository import PatientRepository
from records_svc.repositories.prescription_repository import PrescriptionRepository

__all__ = [
    "Database",
    "PatientRepository",
    "PrescriptionRepository",
]
