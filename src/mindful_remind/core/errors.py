# src/mindful_remind/core/errors.py

from __future__ import annotations


class RemindError(Exception):
    """Base class for all domain errors."""


class RemoteUnavailable(RemindError):
    """
    The authoritative store could not be used right now.

    Transport failures and non-2xx answers are deliberately collapsed into this one
    condition; `status_code` is None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Forbidden(RemoteUnavailable):
    """The record store refused the operation (root admin deletion)."""

    def __init__(self, message: str = "Root admin locked", status_code: int | None = 403) -> None:
        super().__init__(message, status_code)


class ValidationError(RemindError):
    """Rejected input (empty title, duplicate username). Raised before any write."""


class InvalidCredentials(ValidationError):
    pass
