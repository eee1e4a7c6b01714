from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from app.models.ledger import Client, LedgerStatus
from app.models.payment import PaymentMethod
from app.schemas.item import ItemResponse
from app.schemas.payment import PaymentResponse


class LedgerCreate(BaseModel):
    """Request body to open a new top-level ledger."""
    client: Client
    name: str = Field(..., min_length=1, max_length=200)
    invoice_number: Optional[str] = Field(None, max_length=100)


class GuideCreate(BaseModel):
    """Request body to add a guide under a Galakiwi ledger."""
    name: str = Field(..., min_length=1, max_length=200)


class LedgerCloseRequest(BaseModel):
    """Closing payment; zero closes without paying anything."""
    amount: float = Field(0, ge=0)
    method: PaymentMethod = PaymentMethod.TRANSFER
    note: Optional[str] = None


class BalanceResponse(BaseModel):
    charged: float
    paid: float
    pending: float
    is_settled: bool


class LedgerResponse(BaseModel):
    id: str
    client: Client
    parent_id: Optional[str] = None
    invoice_number: Optional[str] = None
    name: str
    status: LedgerStatus
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True)


class LedgerSummaryResponse(LedgerResponse):
    """Ledger row for listings, with its derived balance."""
    balance: BalanceResponse


class GuideResponse(LedgerResponse):
    items: List[ItemResponse] = []
    charged: float
    share: float = 0.0  # fraction of the parent's general total


class LedgerDetailResponse(LedgerResponse):
    items: List[ItemResponse] = []
    payments: List[PaymentResponse] = []
    guides: List[GuideResponse] = []
    balance: BalanceResponse


class LedgerCloseResponse(BaseModel):
    ledger: LedgerResponse
    payment: Optional[PaymentResponse] = None
    successor: Optional[LedgerResponse] = None
    carry_item: Optional[ItemResponse] = None
    remainder: float


class LedgerDeleteResponse(BaseModel):
    ledgers: int
    items: int
    payments: int


class StatementLine(BaseModel):
    date: Optional[datetime] = None
    description: str
    amount: str
    final_amount: str
    surcharge: bool


class StatementPayment(BaseModel):
    paid_at: datetime
    method: PaymentMethod
    note: Optional[str] = None
    amount: str


class StatementGuide(BaseModel):
    name: str
    total: str
    percentage: str
    lines: List[StatementLine] = []


class StatementResponse(BaseModel):
    """Printable view of a ledger with display-formatted money."""
    ledger: LedgerResponse
    lines: List[StatementLine] = []
    guides: List[StatementGuide] = []
    payments: List[StatementPayment] = []
    total_charged: str
    total_paid: str
    pending: str
