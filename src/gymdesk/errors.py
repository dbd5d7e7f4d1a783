"""Exception hierarchy for gymdesk."""

from typing import Any


class GymdeskError(Exception):
    """Base class for all gymdesk errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message}


class DatabaseError(GymdeskError):
    """A database operation failed."""

    status_code = 500

    def __init__(self, message: str, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.code = code
        self.details = details


class NotFoundError(GymdeskError):
    """A requested record does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(GymdeskError):
    """Input failed validation.

    ``errors`` maps field names to messages.
    """

    status_code = 422

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = self.errors
        return data


class RefundError(GymdeskError):
    """A refund request violates the refund rules."""

    status_code = 409


class SessionLimitError(GymdeskError):
    """A booking would exceed a weekly session limit."""

    status_code = 409

    def __init__(self, message: str, limit: Any = None):
        super().__init__(message)
        self.limit = limit

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.limit is not None:
            data["limit"] = self.limit.to_dict()
        return data
