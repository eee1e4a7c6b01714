from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    """Request body to add a line item."""
    date: Optional[date_type] = None
    description: str = Field(..., min_length=1, max_length=500)
    amount: float = Field(..., ge=0)
    surcharge: bool = False


class ItemResponse(BaseModel):
    id: str
    ledger_id: str
    date: Optional[datetime] = None
    description: str
    amount: float
    surcharge: bool
    final_amount: float
    is_carry_forward: bool
    created_at: datetime
