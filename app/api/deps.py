from fastapi import Depends, HTTPException, status

from app.db.mongo import get_db
from app.services.ledger_service import LedgerService
from app.utils.ledger_validation import (
    LedgerError,
    LedgerNotFoundError,
    LedgerStateError,
)


def get_ledger_service(db = Depends(get_db)) -> LedgerService:
    return LedgerService(db)


def http_error(exc: LedgerError) -> HTTPException:
    """Map a ledger error to the HTTP status the client sees."""
    if isinstance(exc, LedgerNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, LedgerStateError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))
