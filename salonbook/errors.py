# salonbook/errors.py

from typing import Any, Dict, List, Optional


class SalonBookError(Exception):
    """Base class for every failure the booking core reports to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message}


class ValidationError(SalonBookError):
    status_code = 422

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        # [{"field": "appointment_data.total_price", "message": "..."}]
        self.errors = errors or []

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "errors": self.errors}


class InvalidTransitionError(ValidationError):
    pass


class NotFoundError(SalonBookError):
    status_code = 404


class AuthorizationError(SalonBookError):
    status_code = 403


class UnauthenticatedError(SalonBookError):
    status_code = 401


class PersistenceError(SalonBookError):
    status_code = 500

    def to_dict(self) -> Dict[str, Any]:
        # never leak driver messages to clients
        return {"detail": "Internal storage failure"}
