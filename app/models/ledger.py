"""
Ledger model - one billing cycle for a client.

Design principles:
- Deep Blue ledgers are flat; at most one is open at a time
- Galakiwi ledgers own guides (sub-ledgers) exactly one level deep
- Status: abierto → cerrado | pagado, both terminal
- Totals are never stored; they are derived from items and payments
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from app.models.base import MongoModel, PyObjectId


class Client(str, Enum):
    DEEP_BLUE = "deep_blue"
    GALAKIWI = "galakiwi"


class LedgerStatus(str, Enum):
    OPEN = "abierto"
    CLOSED = "cerrado"
    PAID = "pagado"


class Ledger(MongoModel):
    """
    Billing cycle for one client.

    Invariants:
    - parent_id is set only on Galakiwi guides, and guides never have children
    - a paid ledger has nothing pending
    - a closed ledger was closed with a remainder carried to a successor
    """
    client: Client
    parent_id: Optional[PyObjectId] = None
    invoice_number: Optional[str] = None
    name: str = Field(..., min_length=1)
    status: LedgerStatus = LedgerStatus.OPEN

    @property
    def is_guide(self) -> bool:
        return self.parent_id is not None
