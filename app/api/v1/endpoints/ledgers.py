from typing import List
from fastapi import APIRouter, Depends, status

from app.api.deps import get_ledger_service, http_error
from app.models.ledger import Client
from app.schemas.item import ItemCreate, ItemResponse
from app.schemas.ledger import (
    GuideCreate,
    GuideResponse,
    LedgerCloseRequest,
    LedgerCloseResponse,
    LedgerCreate,
    LedgerDeleteResponse,
    LedgerDetailResponse,
    LedgerResponse,
    LedgerSummaryResponse,
    StatementResponse,
)
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.services.ledger_service import LedgerService
from app.utils.ledger_validation import LedgerError
from app.utils.responses import (
    to_close_response,
    to_detail_response,
    to_guide_response,
    to_item_response,
    to_ledger_response,
    to_ledger_summary,
    to_payment_response,
)
from app.utils.statement import build_statement

router = APIRouter()


@router.get("", response_model=List[LedgerSummaryResponse])
async def list_ledgers(
    client: Client,
    service: LedgerService = Depends(get_ledger_service)
):
    """List top-level ledgers of a client, newest first."""
    rows = await service.list_ledgers(client)
    return [to_ledger_summary(ledger, balance) for ledger, balance in rows]


@router.post("", response_model=LedgerResponse, status_code=status.HTTP_201_CREATED)
async def create_ledger(
    ledger_in: LedgerCreate,
    service: LedgerService = Depends(get_ledger_service)
):
    """Open a new ledger. Deep Blue allows only one open ledger at a time."""
    try:
        ledger = await service.create_ledger(ledger_in)
    except LedgerError as exc:
        raise http_error(exc)
    return to_ledger_response(ledger)


@router.get("/{ledger_id}", response_model=LedgerDetailResponse)
async def get_ledger(
    ledger_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    """Ledger with items, payments, guides and balance."""
    try:
        detail = await service.get_ledger_detail(ledger_id)
    except LedgerError as exc:
        raise http_error(exc)
    return to_detail_response(detail)


@router.get("/{ledger_id}/statement", response_model=StatementResponse)
async def get_statement(
    ledger_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    """Display-ready statement used by the exports."""
    try:
        detail = await service.get_ledger_detail(ledger_id)
    except LedgerError as exc:
        raise http_error(exc)
    return build_statement(detail)


@router.delete("/{ledger_id}", response_model=LedgerDeleteResponse)
async def delete_ledger(
    ledger_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    """Delete a ledger with its guides, items and payments."""
    try:
        counts = await service.delete_ledger(ledger_id)
    except LedgerError as exc:
        raise http_error(exc)
    return LedgerDeleteResponse(**counts)


@router.post("/{ledger_id}/close", response_model=LedgerCloseResponse)
async def close_ledger(
    ledger_id: str,
    payload: LedgerCloseRequest,
    service: LedgerService = Depends(get_ledger_service)
):
    """Close a Deep Blue ledger, carrying any remainder to a new ledger."""
    try:
        result = await service.close_ledger(ledger_id, payload)
    except LedgerError as exc:
        raise http_error(exc)
    return to_close_response(result)


@router.get("/{ledger_id}/guides", response_model=List[GuideResponse])
async def list_guides(
    ledger_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    try:
        guides = await service.list_guides(ledger_id)
    except LedgerError as exc:
        raise http_error(exc)
    return [to_guide_response(guide) for guide in guides]


@router.post("/{ledger_id}/guides", response_model=LedgerResponse, status_code=status.HTTP_201_CREATED)
async def create_guide(
    ledger_id: str,
    guide_in: GuideCreate,
    service: LedgerService = Depends(get_ledger_service)
):
    """Add a guide under a Galakiwi ledger."""
    try:
        guide = await service.create_guide(ledger_id, guide_in)
    except LedgerError as exc:
        raise http_error(exc)
    return to_ledger_response(guide)


@router.post("/{ledger_id}/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    ledger_id: str,
    item_in: ItemCreate,
    service: LedgerService = Depends(get_ledger_service)
):
    try:
        item = await service.add_item(ledger_id, item_in)
    except LedgerError as exc:
        raise http_error(exc)
    return to_item_response(item)


@router.post("/{ledger_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def add_payment(
    ledger_id: str,
    payment_in: PaymentCreate,
    service: LedgerService = Depends(get_ledger_service)
):
    """Record a payment; it may not exceed the pending balance."""
    try:
        payment, _ = await service.add_payment(ledger_id, payment_in)
    except LedgerError as exc:
        raise http_error(exc)
    return to_payment_response(payment)
