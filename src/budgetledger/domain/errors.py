"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PreconditionError(DomainError):
    """A required collaborator or input was not supplied."""


class InvalidStateError(DomainError):
    """Operation is not allowed in the object's current state."""


def account_not_found(name: str) -> str:
    """Return message for missing account."""
    return f"Account '{name}' not found"


def bucket_not_found(code: str) -> str:
    """Return message for missing budget bucket."""
    return f"Budget bucket '{code}' not found"


def bucket_not_tracked(code: str) -> str:
    """Return message for a bucket code absent from the ledger book."""
    return f"Budget bucket '{code}' is not tracked by the ledger book"


def line_is_sealed(line_date: date) -> str:
    """Return message when a committed line is modified."""
    return (
        f"The reconciliation line dated {line_date} has been committed; "
        "only new lines can be modified."
    )


def reconciliation_not_newer(new_date: date, latest_date: date) -> str:
    """Return message when a reconciliation would not be the newest line."""
    return (
        f"Reconciliation date {new_date} must be after the most recent "
        f"reconciliation dated {latest_date}"
    )


def invalid_amount_for_kind(kind: str, amount: Decimal) -> str:
    """Return message for a transaction amount with the wrong sign."""
    return f"Amount {amount} is not valid for a {kind} transaction"
