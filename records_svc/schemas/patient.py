"""
Pydantic schemas for patient-related remote calls.

Field names on the wire follow the shared contract with the BFF
(``pageSize``, ``totalCount``, ``totalPages``); Python attributes stay snake_case.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PatientResponse(BaseModel):
    """Reply of GetPatient: the patient's basic details."""

    name: str = Field(..., description="Patient full name", examples=["John Doe"])
    age: Optional[int] = Field(None, description="Age in years", examples=[42])
    gender: Optional[str] = Field(None, description="Gender", examples=["Male"])
    contact: Optional[str] = Field(None, description="Contact number or e-mail", examples=["0712345678"])

    model_config = ConfigDict(from_attributes=True)


class PatientWithDetails(BaseModel):
    """One row of the paged patient listing, one per prescription reference."""

    reference_number: str = Field(..., description="Prescription reference number", examples=["RX-1001"])
    name: str = Field(..., description="Patient full name", examples=["John Doe"])
    age: Optional[int] = Field(None, description="Age in years")
    gender: Optional[str] = Field(None, description="Gender")
    contact: Optional[str] = Field(None, description="Contact number or e-mail")
    doctor_name: Optional[str] = Field(None, description="Prescribing doctor", examples=["Dr. Perera"])
    medicine_name: Optional[str] = Field(None, description="Prescribed medicine", examples=["Amoxicillin"])
    description: Optional[str] = Field(None, description="Prescription notes")
    total_count: int = Field(..., alias="totalCount", description="Total number of references")
    total_pages: int = Field(..., alias="totalPages", description="Number of pages at the requested page size")

    model_config = ConfigDict(populate_by_name=True)


class PatientListResponse(BaseModel):
    """Reply of GetAllPatients."""

    patients: List[PatientWithDetails] = Field(default_factory=list)


class UpdatePatientDetailsRequest(BaseModel):
    """Request body of UpdatePatientDetails.

    Every field is optional. A field that is missing, null or empty leaves the
    stored value unchanged.
    """

    name: Optional[str] = Field(None, max_length=200, examples=["Jane Doe"])
    age: Optional[int] = Field(None, ge=0, le=150, examples=[37])
    gender: Optional[str] = Field(None, max_length=50)
    contact: Optional[str] = Field(None, max_length=200)
    doctor_name: Optional[str] = Field(None, max_length=200)
    medicine_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "contact": "0771234567",
                "medicine_name": "Paracetamol"
            }
        }
    )


class UpdatePatientDetailsResponse(BaseModel):
    """Reply of UpdatePatientDetails."""

    success: bool = Field(..., description="True once the transaction committed")
