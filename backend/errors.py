# backend/errors.py
"""Errors raised by the repositories and the stock protocol.

Every error carries the HTTP status the API answers with, so routes can let
them propagate to the single handler registered in ``main.py``.
"""
from typing import Optional


class RepositoryError(Exception):
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Entity failed a domain rule before any storage access
class ValidationError(RepositoryError):
    http_status = 400


# Identifier supplied but no matching record
class NotFoundError(RepositoryError):
    http_status = 404


# Unique constraint violated (product name)
class DuplicateError(RepositoryError):
    http_status = 409


# Connection or statement failure, wraps the driver message
class StorageError(RepositoryError):
    http_status = 500


class StockAdjustmentError(RepositoryError):
    """A step of a multi-step write failed and the whole transaction was rolled back.

    ``step`` names the step that failed (``product_insert``,
    ``initial_movement_insert``, ``movement_insert``, ``product_update`` or
    ``commit``).
    Nothing from the earlier steps was kept, so the call can simply be retried.
    """

    def __init__(self, step: str, cause: Optional[RepositoryError] = None):
        detail = cause.message if cause is not None else "unknown error"
        super().__init__(f"Step '{step}' failed, changes rolled back: {detail}")
        self.step = step
        self.cause = cause
        if cause is not None:
            self.http_status = cause.http_status
