"""Interface layer errors.

Maps domain and adapter failures to the rejection a caller sees. The
transport layer (HTTP or otherwise) renders a Rejection; it never inspects
exception classes itself.
"""

import logfire
from pydantic import BaseModel

from circle.adapter.error import AdapterError
from circle.domain.error import ConsistencyError, DomainError


class Rejection(BaseModel):
    """Caller-facing description of a failed operation."""

    code: str
    kind: str
    message: str


INTERNAL_ERROR = Rejection(
    code="internal_error", kind="internal", message="Internal error"
)


def to_rejection(error: Exception) -> Rejection:
    """Convert an exception raised by the engine into a Rejection.

    Domain errors keep their code, kind and message. Consistency errors,
    adapter failures and anything unexpected become a generic internal
    error; their details are logged, not returned.

    Args:
        error: Exception raised by a service call

    Returns:
        Rejection to hand to the caller
    """
    if isinstance(error, ConsistencyError):
        logfire.error(
            "Invariant violation surfaced to caller",
            error=str(error),
            error_type=type(error).__name__,
        )
        return INTERNAL_ERROR

    if isinstance(error, DomainError):
        return Rejection(code=error.code, kind=error.kind, message=str(error))

    if isinstance(error, AdapterError):
        logfire.error(
            "Graph store failure surfaced to caller",
            error=str(error),
            error_type=type(error).__name__,
        )
        return INTERNAL_ERROR

    logfire.error(
        "Unexpected error surfaced to caller",
        error=str(error),
        error_type=type(error).__name__,
    )
    return INTERNAL_ERROR
