from fastapi import APIRouter, Depends, status

from app.api.deps import get_ledger_service, http_error
from app.services.ledger_service import LedgerService
from app.utils.ledger_validation import LedgerError

router = APIRouter()


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    service: LedgerService = Depends(get_ledger_service)
):
    """Delete an item from an open ledger."""
    try:
        await service.delete_item(item_id)
    except LedgerError as exc:
        raise http_error(exc)
