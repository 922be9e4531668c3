from bff.clients.records_client import (
    RecordsServiceCallError,
    RecordsServiceClient,
    get_records_client,
)

__all__ = ["RecordsServiceCallError", "RecordsServiceClient", "get_records_client"]
