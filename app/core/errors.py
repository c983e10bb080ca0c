"""Error kinds surfaced by the review and audit engine.

Every engine failure carries an ``ErrorKind`` so the HTTP layer can pick a
status code without inspecting messages.
"""
from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    INVALID_INPUT = "invalid_input"


class ReviewError(Exception):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ReviewError, LookupError):
    kind = ErrorKind.NOT_FOUND


class InvalidStateError(ReviewError, ValueError):
    kind = ErrorKind.INVALID_STATE


class InvalidInputError(ReviewError, ValueError):
    kind = ErrorKind.INVALID_INPUT
