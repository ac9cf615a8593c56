# gsm_pos/utils/errors.py
"""
Error types shared by repositories and controllers.

Nothing here is fatal: controllers catch these and surface the message to
the user (inline error map, notice or alert) and leave the stored
collections untouched.
"""


class DomainError(Exception):
    """Domain-level error raised for validation issues."""
    pass


class PaymentRejected(DomainError):
    """A credit payment was refused; the sale was not changed."""
    pass


class PermissionDenied(DomainError):
    """The current user's role does not allow the action."""
    pass


class ImportFailed(DomainError):
    """A workbook could not be read or has none of the expected sheets."""

    DEFAULT_MESSAGE = "The file is corrupted or in an unexpected format."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)
