from fastapi import APIRouter, Depends, status

from app.api.deps import get_ledger_service, http_error
from app.services.ledger_service import LedgerService
from app.utils.ledger_validation import LedgerError

router = APIRouter()


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    """Delete a payment from an open ledger."""
    try:
        await service.delete_payment(payment_id)
    except LedgerError as exc:
        raise http_error(exc)
