"""Error taxonomy shared by services and routers.

Services raise these; ``main.create_app`` registers a handler that turns them
into ``{"detail": ...}`` responses with the matching status code.
"""

from typing import Optional

from fastapi import status


class BudgetPayError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BudgetPayError):
    """A required field is missing or malformed. Not retryable."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class NotFoundError(BudgetPayError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(BudgetPayError):
    """Duplicate budget category or duplicate user on sign-up."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class TransactionError(BudgetPayError):
    """An atomic write failed and was rolled back; safe to retry."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Write failed, please retry"


class UpstreamStoreUnavailable(BudgetPayError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Database unavailable"
