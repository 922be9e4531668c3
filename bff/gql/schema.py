"""
GraphQL schema for the prescription BFF.

Field and argument names are published exactly as written here
(auto camel-casing is off), so clients see `reference_number`, `ref_no`,
`pageSize`, `totalCount` and `totalPages`.

Every resolver makes exactly one Records Service call and relays the reply.
A failed call becomes a GraphQL error whose `extensions.code` is the remote
status code, and the field resolves to null.
"""

import logging
from typing import Annotated, List, Optional

import strawberry
from fastapi import Depends
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info

from bff.clients.records_client import RecordsServiceClient, get_records_client
from bff.utils.error_handler import to_graphql_error
from records_svc.schemas import (
    PatientResponse,
    PatientWithDetails as PatientWithDetailsReply,
    PrescriptionResponse,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TYPES
# =============================================================================

@strawberry.type
class Patient:
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    contact: Optional[str] = None

    @classmethod
    def from_reply(cls, reply: PatientResponse) -> "Patient":
        return cls(name=reply.name, age=reply.age, gender=reply.gender, contact=reply.contact)


@strawberry.type
class PatientWithDetails:
    """One row of the paged listing, one per prescription reference."""

    reference_number: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    contact: Optional[str] = None
    doctor_name: Optional[str] = None
    medicine_name: Optional[str] = None
    description: Optional[str] = None
    total_count: Optional[int] = strawberry.field(name="totalCount", default=None)
    total_pages: Optional[int] = strawberry.field(name="totalPages", default=None)

    @classmethod
    def from_reply(cls, reply: PatientWithDetailsReply) -> "PatientWithDetails":
        return cls(
            reference_number=reply.reference_number,
            name=reply.name,
            age=reply.age,
            gender=reply.gender,
            contact=reply.contact,
            doctor_name=reply.doctor_name,
            medicine_name=reply.medicine_name,
            description=reply.description,
            total_count=reply.total_count,
            total_pages=reply.total_pages,
        )


@strawberry.type
class Prescription:
    reference_number: Optional[str] = None
    patient_name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    contact: Optional[str] = None
    doctor_name: Optional[str] = None
    medicine_name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_reply(cls, reply: PrescriptionResponse) -> "Prescription":
        return cls(**reply.model_dump())


@strawberry.type
class Search:
    reference: Optional[List[Optional[str]]] = None


# =============================================================================
# CONTEXT
# =============================================================================

async def get_context(
    records_client: RecordsServiceClient = Depends(get_records_client),
) -> dict:
    """Expose the records client to resolvers as info.context["records_client"]."""
    return {"records_client": records_client}


def _client(info: Info) -> RecordsServiceClient:
    return info.context["records_client"]


# =============================================================================
# QUERIES
# =============================================================================

@strawberry.type
class Query:

    @strawberry.field(name="getPatient")
    async def get_patient(self, info: Info, name: str) -> Optional[Patient]:
        try:
            reply = await _client(info).get_patient(name)
        except Exception as e:
            raise to_graphql_error(e, context="getPatient") from e
        return Patient.from_reply(reply)

    @strawberry.field(name="getAllPatients")
    async def get_all_patients(
        self,
        info: Info,
        page: Optional[int] = None,
        page_size: Annotated[Optional[int], strawberry.argument(name="pageSize")] = None,
    ) -> Optional[List[Optional[PatientWithDetails]]]:
        try:
            reply = await _client(info).get_all_patients(page=page, page_size=page_size)
        except Exception as e:
            raise to_graphql_error(e, context="getAllPatients") from e
        return [PatientWithDetails.from_reply(row) for row in reply.patients]

    @strawberry.field(name="getPrescription")
    async def get_prescription(self, info: Info, ref_no: str) -> Optional[Prescription]:
        try:
            reply = await _client(info).get_prescription(ref_no)
        except Exception as e:
            raise to_graphql_error(e, context="getPrescription") from e
        return Prescription.from_reply(reply)

    @strawberry.field(name="getReference")
    async def get_reference(self, info: Info, ref_no: str) -> Optional[Search]:
        try:
            reply = await _client(info).get_reference(ref_no)
        except Exception as e:
            raise to_graphql_error(e, context="getReference") from e
        return Search(reference=list(reply.reference))


# =============================================================================
# MUTATIONS
# =============================================================================

@strawberry.type
class Mutation:

    @strawberry.mutation(name="updatePatientDetails")
    async def update_patient_details(
        self,
        info: Info,
        reference_number: str,
        name: Optional[str] = None,
        age: Optional[int] = None,
        gender: Optional[str] = None,
        contact: Optional[str] = None,
        doctor_name: Optional[str] = None,
        medicine_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[bool]:
        """Update the patient, doctor and medicine linked to a reference in one transaction."""
        changes = {
            "name": name,
            "age": age,
            "gender": gender,
            "contact": contact,
            "doctor_name": doctor_name,
            "medicine_name": medicine_name,
            "description": description,
        }
        logger.info(
            f"updatePatientDetails received for {reference_number}",
            extra={"reference_number": reference_number, "changes": changes}
        )

        try:
            reply = await _client(info).update_patient_details(reference_number, **changes)
        except Exception as e:
            logger.warning(
                f"updatePatientDetails failed for {reference_number}",
                extra={"reference_number": reference_number}
            )
            raise to_graphql_error(e, context="updatePatientDetails") from e

        logger.info(
            f"updatePatientDetails succeeded for {reference_number}",
            extra={"reference_number": reference_number, "success": reply.success}
        )
        return reply.success


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(auto_camel_case=False),
)
