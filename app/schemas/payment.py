from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.payment import PaymentMethod


class PaymentCreate(BaseModel):
    """Request body to record a payment against a ledger."""
    amount: float = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.TRANSFER
    note: Optional[str] = Field(None, max_length=500)
    paid_at: Optional[datetime] = None


class PaymentResponse(BaseModel):
    id: str
    ledger_id: str
    paid_at: datetime
    amount: float
    method: PaymentMethod
    note: Optional[str] = None
    created_at: datetime
