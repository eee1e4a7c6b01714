"""Ledger validation utilities."""
from typing import Optional

from app.models.ledger import Ledger, LedgerStatus


class LedgerError(Exception):
    """Base class for ledger errors."""
    pass


class LedgerValidationError(LedgerError):
    """User input violates a ledger invariant. Raised before any write."""
    pass


class LedgerStateError(LedgerValidationError):
    """Operation not allowed in the ledger's current status."""
    pass


class LedgerNotFoundError(LedgerError):
    """Unknown or malformed ledger, item or payment id."""
    pass


def require_open(ledger: Ledger) -> None:
    if ledger.status != LedgerStatus.OPEN:
        raise LedgerStateError(
            f"Ledger '{ledger.name}' is {ledger.status.value}; only open ledgers can change"
        )


def validate_name(name: Optional[str], what: str = "Name") -> str:
    """Trim and require a non-empty name."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise LedgerValidationError(f"{what} is required")
    return cleaned


def validate_item_amount(amount: float) -> None:
    if amount < 0:
        raise LedgerValidationError(f"Item amount must be non-negative: {amount}")


def validate_payment_amount(amount: float, pending: float) -> None:
    """
    Validate a regular payment against the pending balance.

    Rules:
    - amount must be positive
    - ledger must still owe something
    - amount must not exceed what is pending
    """
    pending = round(pending, 2)
    if amount <= 0:
        raise LedgerValidationError(f"Payment amount must be positive: {amount}")
    if pending <= 0:
        raise LedgerValidationError("Ledger has no pending balance")
    if amount > pending:
        raise LedgerValidationError(
            f"Payment ({amount:.2f}) exceeds pending balance ({pending:.2f})"
        )


def validate_closing_amount(amount: float, pending: float) -> None:
    """A closing payment may be zero but never more than what is pending."""
    pending = round(pending, 2)
    if amount < 0:
        raise LedgerValidationError(f"Closing amount must be non-negative: {amount}")
    if amount > pending:
        raise LedgerValidationError(
            f"Closing amount ({amount:.2f}) exceeds pending balance ({pending:.2f})"
        )
