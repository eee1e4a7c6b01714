"""
Statement builder.

Turns a ledger detail into the display-ready structure the print,
spreadsheet and PDF exports render: money as two-decimal strings and,
for Galakiwi, each guide's share of the general total.
"""
from typing import Iterable, List

from app.models.item import Item
from app.schemas.ledger import (
    StatementGuide,
    StatementLine,
    StatementPayment,
    StatementResponse,
)
from app.services.ledger_service import LedgerDetail
from app.utils.money import format_currency
from app.utils.responses import to_ledger_response


def _lines(items: Iterable[Item]) -> List[StatementLine]:
    return [
        StatementLine(
            date=item.date,
            description=item.description,
            amount=format_currency(item.amount),
            final_amount=format_currency(item.final_amount),
            surcharge=item.surcharge
        )
        for item in items
    ]


def build_statement(detail: LedgerDetail) -> StatementResponse:
    guides = [
        StatementGuide(
            name=guide.ledger.name,
            total=format_currency(guide.charged),
            percentage=f"{guide.share * 100:.1f}%",
            lines=_lines(guide.items)
        )
        for guide in detail.guides
    ]

    payments = [
        StatementPayment(
            paid_at=payment.paid_at,
            method=payment.method,
            note=payment.note,
            amount=format_currency(payment.amount)
        )
        for payment in detail.payments
    ]

    return StatementResponse(
        ledger=to_ledger_response(detail.ledger),
        lines=_lines(detail.items),
        guides=guides,
        payments=payments,
        total_charged=format_currency(detail.balance.charged),
        total_paid=format_currency(detail.balance.paid),
        pending=format_currency(detail.balance.pending)
    )
