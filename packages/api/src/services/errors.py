# This project was developed with assistance from AI tools.
"""Orchestrator error type.

One exception class carries an explicit ``kind`` so callers (the HTTP layer,
tests) branch on the kind instead of on a family of exception subclasses.
"""

import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PRECONDITION = "precondition"


class ApplicationOrchestratorError(Exception):
    """Raised when an application operation cannot be carried out."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.PRECONDITION) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
