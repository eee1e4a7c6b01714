from datetime import datetime
from typing import Optional
from pydantic import Field

from app.models.base import MongoModel, PyObjectId
from app.utils.money import apply_surcharge


class Item(MongoModel):
    """Billable line on a ledger. Immutable; delete and re-add to change."""
    ledger_id: PyObjectId
    date: Optional[datetime] = None
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    surcharge: bool = False
    is_carry_forward: bool = False

    @property
    def final_amount(self) -> float:
        return apply_surcharge(self.amount, self.surcharge)
