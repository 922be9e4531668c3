"""
Pydantic schemas for prescription and reference-search remote calls.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class PrescriptionResponse(BaseModel):
    """Reply of GetPrescription: a reference joined with its patient, doctor and medicine."""

    reference_number: str = Field(..., description="Prescription reference number", examples=["RX-1001"])
    patient_name: str = Field(..., description="Patient full name", examples=["John Doe"])
    age: Optional[int] = Field(None, description="Patient age in years")
    gender: Optional[str] = Field(None, description="Patient gender")
    contact: Optional[str] = Field(None, description="Patient contact")
    doctor_name: Optional[str] = Field(None, description="Prescribing doctor")
    medicine_name: Optional[str] = Field(None, description="Prescribed medicine")
    description: Optional[str] = Field(None, description="Prescription notes")


class ReferenceSearchResponse(BaseModel):
    """Reply of GetReference: every reference number containing the search text."""

    reference: List[str] = Field(default_factory=list, examples=[["RX-1001", "RX-1002"]])
