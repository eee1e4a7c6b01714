import pytest

from app.models.ledger import Client, Ledger, LedgerStatus
from app.utils.ledger_validation import (
    LedgerStateError,
    LedgerValidationError,
    require_open,
    validate_closing_amount,
    validate_item_amount,
    validate_name,
    validate_payment_amount,
)


def test_validate_name_trims():
    assert validate_name("  Enero 2026 ") == "Enero 2026"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_validate_name_rejects_blank(name):
    with pytest.raises(LedgerValidationError):
        validate_name(name)


def test_require_open_rejects_terminal_states():
    for status in (LedgerStatus.CLOSED, LedgerStatus.PAID):
        ledger = Ledger(client=Client.DEEP_BLUE, name="Marzo", status=status)
        with pytest.raises(LedgerStateError):
            require_open(ledger)

    require_open(Ledger(client=Client.DEEP_BLUE, name="Abril"))


def test_item_amount_must_be_non_negative():
    validate_item_amount(0)
    with pytest.raises(LedgerValidationError):
        validate_item_amount(-0.01)


def test_payment_amount_rules():
    validate_payment_amount(70, 70)

    with pytest.raises(LedgerValidationError):
        validate_payment_amount(0, 70)
    with pytest.raises(LedgerValidationError):
        validate_payment_amount(71, 70)
    with pytest.raises(LedgerValidationError, match="no pending"):
        validate_payment_amount(10, 0)


def test_closing_amount_rules():
    validate_closing_amount(0, 70)
    validate_closing_amount(70, 70)

    with pytest.raises(LedgerValidationError):
        validate_closing_amount(71, 70)
    with pytest.raises(LedgerValidationError):
        validate_closing_amount(-1, 70)
