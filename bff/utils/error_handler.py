"""
Error handling utilities for the GraphQL layer.

This module provides:
- Conversion of Records Service failures into GraphQL errors
- A stable `extensions.code` (NOT_FOUND or INTERNAL) on every error
- Logging of full details while keeping messages short

Usage:
    from bff.utils.error_handler import to_graphql_error

    try:
        return await client.get_patient(name)
    except Exception as e:
        raise to_graphql_error(e, context="getPatient") from e
"""

import logging
from typing import Optional

from graphql import GraphQLError

from bff.clients.records_client import RecordsServiceCallError
from records_svc.schemas import StatusCode

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR MESSAGES
# =============================================================================

# Shown instead of the raw exception text for failures outside the Records Service
UNEXPECTED_ERROR_MESSAGE = "Internal error while calling the Records Service"


def classify_error(error: Exception) -> StatusCode:
    """
    Classify an error into the status code reported to GraphQL clients.

    Args:
        error: The exception to classify.

    Returns:
        StatusCode: NOT_FOUND only for a Records Service NOT_FOUND, otherwise INTERNAL.
    """
    if isinstance(error, RecordsServiceCallError):
        return error.code
    return StatusCode.INTERNAL


def to_graphql_error(error: Exception, context: Optional[str] = None) -> GraphQLError:
    """
    Build the GraphQL error for a failed remote call.

    Args:
        error: The exception raised by the records client.
        context: Name of the GraphQL operation (for logging).

    Returns:
        GraphQLError: Message from the Records Service and extensions.code.
    """
    code = classify_error(error)

    if isinstance(error, RecordsServiceCallError):
        message = error.message
        log_level = logging.INFO if code == StatusCode.NOT_FOUND else logging.ERROR
        logger.log(log_level, f"{context or 'operation'} failed: {message}", extra={"code": code.value})
    else:
        message = UNEXPECTED_ERROR_MESSAGE
        logger.error(f"{context or 'operation'} failed unexpectedly", exc_info=error)

    return GraphQLError(message, extensions={"code": code.value})
