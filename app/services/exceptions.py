# app/services/exceptions.py
"""
Workflow errors raised by the services and mapped to HTTP responses in app.main.
"""


class GateEntryError(Exception):
    """Base class for all workflow errors."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GateEntryError):
    """Missing or invalid input. Raised before any store call."""
    status_code = 422


class NotFoundError(GateEntryError):
    status_code = 404


class InvalidTransitionError(GateEntryError):
    """Requested status change is not allowed from the record's current state."""
    status_code = 409


class StoreWriteError(GateEntryError):
    """Primary insert/update was rejected by the database."""
    status_code = 500
