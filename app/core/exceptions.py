"""Domain errors raised by the service layer and rendered by the API."""

from typing import Dict, List, Optional


class LeaveServiceError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(LeaveServiceError):
    """Bad or missing input. Carries one entry per violated field."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class ForbiddenError(LeaveServiceError):
    status_code = 403


class NotFoundError(LeaveServiceError):
    status_code = 404


class ConflictError(LeaveServiceError):
    status_code = 409


class InvalidStateError(ConflictError):
    """The record exists but its current status does not allow the operation."""

    status_code = 400
