"""
Error taxonomy shared by the services and the store.

Services raise these; ``wctips.main`` renders them as
``{"ok": false, "error": <message>}`` with the class' HTTP status.
"""

from typing import Optional


class AppError(Exception):
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(AppError):
    status_code = 401
    default_message = "You must be signed in."


class Forbidden(AppError):
    status_code = 403
    default_message = "You are not allowed to do that."


class ValidationError(AppError):
    status_code = 422
    default_message = "Invalid input."


class NotFound(AppError):
    status_code = 404
    default_message = "Not found."


class GroupNotFound(NotFound):
    default_message = "Group not found."


class InviteNotFound(NotFound):
    default_message = "Invalid invite."


class InviteExpired(AppError):
    status_code = 410
    default_message = "This invite has expired."


class InviteExhausted(AppError):
    status_code = 410
    default_message = "This invite cannot be used any more."


class StoreError(AppError):
    """Opaque passthrough of a backing store failure."""
    status_code = 500
    default_message = "Database error."


class DuplicateRowError(StoreError):
    """Raised when an insert violates a unique constraint (SQLSTATE 23505)."""
    status_code = 409
    default_message = "Row already exists."
