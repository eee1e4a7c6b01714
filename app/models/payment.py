from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field

from app.models.base import MongoModel, PyObjectId, _utcnow


class PaymentMethod(str, Enum):
    TRANSFER = "transferencia"
    CASH = "efectivo"
    CHECK = "cheque"
    DEPOSIT = "deposito"


class Payment(MongoModel):
    ledger_id: PyObjectId
    paid_at: datetime = Field(default_factory=_utcnow)
    amount: float = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.TRANSFER
    note: Optional[str] = None
