"""
HTTP client for the Records Service API.
Provides a clean interface for the GraphQL resolvers to reach records_svc.

Each method maps to exactly one Records Service operation. Failures are
raised as RecordsServiceCallError carrying the remote status code
(NOT_FOUND or INTERNAL) so resolvers can surface it unchanged.
"""
import httpx
import logging
from typing import Optional, Dict, Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from bff.config import RECORDS_SVC_API_KEY, RECORDS_SVC_TIMEOUT, RECORDS_SVC_URL
from records_svc.core.logging_config import REQUEST_ID_HEADER, get_request_id
from records_svc.schemas import (
    PatientListResponse,
    PatientResponse,
    PrescriptionResponse,
    ReferenceSearchResponse,
    StatusCode,
    UpdatePatientDetailsResponse,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _summarize_validation_errors(errors: list) -> str:
    """Turn a FastAPI 422 error list into one short line, e.g. "Invalid request: age: ..."."""
    parts = []
    for error in errors:
        if not isinstance(error, dict):
            continue
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "Invalid request: " + ("; ".join(parts) or "validation failed")


class RecordsServiceCallError(Exception):
    """A Records Service call failed; `code` is NOT_FOUND or INTERNAL."""

    def __init__(self, code: StatusCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class RecordsServiceClient:
    """Client for Records Service REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or RECORDS_SVC_URL
        if not self.base_url:
            raise ValueError("RECORDS_SVC_URL must be set in config")

        # Remove trailing slash
        self.base_url = self.base_url.rstrip("/")
        self.api_key = api_key or RECORDS_SVC_API_KEY
        self.timeout = timeout or RECORDS_SVC_TIMEOUT
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"X-API-Key": self.api_key}
        request_id = get_request_id()
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Any:
        """
        Make HTTP request to the Records Service.

        Raises:
            RecordsServiceCallError: NOT_FOUND for a missing record, INTERNAL
                for every other failure (HTTP errors, timeouts, bad JSON)
        """
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=self._headers(), **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            code, detail = self._parse_error(e.response)
            logger.error(
                f"Records Service error {e.response.status_code}: {detail}",
                extra={"endpoint": endpoint, "code": code.value}
            )
            raise RecordsServiceCallError(code, detail) from e
        except httpx.RequestError as e:
            error_msg = f"Request error: {e}"
            logger.error(error_msg, extra={"endpoint": endpoint})
            raise RecordsServiceCallError(StatusCode.INTERNAL, error_msg) from e
        except ValueError as e:
            error_msg = f"Invalid response from Records Service: {e}"
            logger.error(error_msg, extra={"endpoint": endpoint})
            raise RecordsServiceCallError(StatusCode.INTERNAL, error_msg) from e

    @staticmethod
    def _parse_error(response: httpx.Response) -> tuple:
        """Read the {"code", "detail"} error body, falling back on the HTTP status."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        detail = body.get("detail")
        if isinstance(detail, list):
            detail = _summarize_validation_errors(detail)
        elif not isinstance(detail, str):
            # Plain-text bodies are kept, JSON bodies without a usable detail are not
            detail = (response.text if not body else "") or f"HTTP {response.status_code}"

        try:
            code = StatusCode(body.get("code"))
        except ValueError:
            code = StatusCode.NOT_FOUND if response.status_code == 404 else StatusCode.INTERNAL
        return code, detail

    @staticmethod
    def _parse_reply(model: Type[ModelT], data: Any, endpoint: str) -> ModelT:
        """Validate a reply against the shared schema; a mismatch is INTERNAL."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            error_msg = f"Unexpected reply shape from Records Service: {e.error_count()} error(s)"
            logger.error(error_msg, extra={"endpoint": endpoint, "model": model.__name__})
            raise RecordsServiceCallError(StatusCode.INTERNAL, error_msg) from e

    # Patient methods
    async def get_patient(self, name: str) -> PatientResponse:
        """
        Get a patient by exact name.

        Returns:
            PatientResponse with name, age, gender, contact

        Raises:
            RecordsServiceCallError: NOT_FOUND if no patient has this name
        """
        endpoint = "/api/v1/patients/lookup"
        data = await self._request("GET", endpoint, params={"name": name})
        return self._parse_reply(PatientResponse, data, endpoint)

    async def get_all_patients(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None
    ) -> PatientListResponse:
        """
        Get one page of patient/prescription rows.

        Paging arguments that are not given are left to the Records Service defaults.

        Returns:
            PatientListResponse; every row carries totalCount and totalPages
        """
        params = {}
        if page is not None:
            params["page"] = page
        if page_size is not None:
            params["pageSize"] = page_size
        endpoint = "/api/v1/patients"
        data = await self._request("GET", endpoint, params=params)
        return self._parse_reply(PatientListResponse, data, endpoint)

    # Prescription methods
    async def get_prescription(self, ref_no: str) -> PrescriptionResponse:
        """Get the prescription joined with its patient, doctor and medicine."""
        endpoint = "/api/v1/prescriptions"
        data = await self._request("GET", endpoint, params={"ref_no": ref_no})
        return self._parse_reply(PrescriptionResponse, data, endpoint)

    async def get_reference(self, ref_no: str) -> ReferenceSearchResponse:
        """
        Search reference numbers containing `ref_no`.

        Raises:
            RecordsServiceCallError: NOT_FOUND if nothing matches
        """
        endpoint = "/api/v1/references"
        data = await self._request("GET", endpoint, params={"ref_no": ref_no})
        return self._parse_reply(ReferenceSearchResponse, data, endpoint)

    async def update_patient_details(
        self,
        reference_number: str,
        name: Optional[str] = None,
        age: Optional[int] = None,
        gender: Optional[str] = None,
        contact: Optional[str] = None,
        doctor_name: Optional[str] = None,
        medicine_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> UpdatePatientDetailsResponse:
        """
        Update the patient, doctor and medicine linked to a reference number.

        Only fields that are given are sent; the Records Service leaves the rest unchanged.

        Raises:
            RecordsServiceCallError: NOT_FOUND for an unknown reference,
                INTERNAL if the transaction was rolled back
        """
        fields = {
            "name": name,
            "age": age,
            "gender": gender,
            "contact": contact,
            "doctor_name": doctor_name,
            "medicine_name": medicine_name,
            "description": description,
        }
        payload = {key: value for key, value in fields.items() if value is not None}
        endpoint = "/api/v1/prescriptions"
        data = await self._request(
            "PATCH", endpoint, params={"reference_number": reference_number}, json=payload
        )
        return self._parse_reply(UpdatePatientDetailsResponse, data, endpoint)

    async def check_health(self) -> Dict[str, Any]:
        """Call the Records Service liveness endpoint."""
        return await self._request("GET", "/health")


# Global client instance
_client_instance: Optional[RecordsServiceClient] = None


def get_records_client() -> RecordsServiceClient:
    """Get or create the global Records Service client instance."""
    global _client_instance
    if _client_instance is None:
        _client_instance = RecordsServiceClient()
    return _client_instance
