"""Convert models and service results to response schemas."""
from app.models.item import Item
from app.models.ledger import Ledger
from app.models.payment import Payment
from app.schemas.item import ItemResponse
from app.schemas.ledger import (
    BalanceResponse,
    GuideResponse,
    LedgerCloseResponse,
    LedgerDetailResponse,
    LedgerResponse,
    LedgerSummaryResponse,
)
from app.schemas.payment import PaymentResponse
from app.services.ledger_service import CloseResult, GuideDetail, LedgerDetail
from app.utils.money import Balance


def to_balance_response(balance: Balance) -> BalanceResponse:
    return BalanceResponse(
        charged=balance.charged,
        paid=balance.paid,
        pending=balance.pending,
        is_settled=balance.is_settled
    )


def _ledger_fields(ledger: Ledger) -> dict:
    return {
        "id": str(ledger.id),
        "client": ledger.client,
        "parent_id": str(ledger.parent_id) if ledger.parent_id else None,
        "invoice_number": ledger.invoice_number,
        "name": ledger.name,
        "status": ledger.status,
        "created_at": ledger.created_at
    }


def to_ledger_response(ledger: Ledger) -> LedgerResponse:
    return LedgerResponse(**_ledger_fields(ledger))


def to_ledger_summary(ledger: Ledger, balance: Balance) -> LedgerSummaryResponse:
    return LedgerSummaryResponse(**_ledger_fields(ledger), balance=to_balance_response(balance))


def to_item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=str(item.id),
        ledger_id=str(item.ledger_id),
        date=item.date,
        description=item.description,
        amount=item.amount,
        surcharge=item.surcharge,
        final_amount=item.final_amount,
        is_carry_forward=item.is_carry_forward,
        created_at=item.created_at
    )


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=str(payment.id),
        ledger_id=str(payment.ledger_id),
        paid_at=payment.paid_at,
        amount=payment.amount,
        method=payment.method,
        note=payment.note,
        created_at=payment.created_at
    )


def to_guide_response(guide: GuideDetail) -> GuideResponse:
    return GuideResponse(
        **_ledger_fields(guide.ledger),
        items=[to_item_response(item) for item in guide.items],
        charged=guide.charged,
        share=guide.share
    )


def to_detail_response(detail: LedgerDetail) -> LedgerDetailResponse:
    return LedgerDetailResponse(
        **_ledger_fields(detail.ledger),
        items=[to_item_response(item) for item in detail.items],
        payments=[to_payment_response(payment) for payment in detail.payments],
        guides=[to_guide_response(guide) for guide in detail.guides],
        balance=to_balance_response(detail.balance)
    )


def to_close_response(result: CloseResult) -> LedgerCloseResponse:
    return LedgerCloseResponse(
        ledger=to_ledger_response(result.ledger),
        payment=to_payment_response(result.payment) if result.payment else None,
        successor=to_ledger_response(result.successor) if result.successor else None,
        carry_item=to_item_response(result.carry_item) if result.carry_item else None,
        remainder=result.remainder
    )
