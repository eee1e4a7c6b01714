"""
Money arithmetic for ledgers.

All amounts are plain floats. Sums and the surcharge never round;
only the settled check and format_currency work at cent precision.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping

from app.core.config import settings
from app.models.ledger import Client

SURCHARGE_RATE = settings.SURCHARGE_RATE


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


def apply_surcharge(base_amount: float, applies: bool, rate: float = SURCHARGE_RATE) -> float:
    """Return base_amount with the flat surcharge added when it applies."""
    if applies:
        return base_amount * (1 + rate)
    return base_amount


def final_amount(item: Any) -> float:
    """Post-surcharge amount of a single item (model or raw document)."""
    if isinstance(item, Mapping):
        return apply_surcharge(item["amount"], item.get("surcharge", False))
    return item.final_amount


def sum_item_amounts(items: Iterable[Any]) -> float:
    """Sum of base amounts. Deep Blue "total services"."""
    return sum((_field(item, "amount") for item in items), 0.0)


def sum_final_amounts(items: Iterable[Any]) -> float:
    """Sum of post-surcharge amounts. Galakiwi totals."""
    return sum((final_amount(item) for item in items), 0.0)


def sum_payments(payments: Iterable[Any]) -> float:
    return sum((_field(payment, "amount") for payment in payments), 0.0)


@dataclass(frozen=True)
class Balance:
    charged: float = 0.0
    paid: float = 0.0

    @property
    def pending(self) -> float:
        return self.charged - self.paid

    @property
    def is_settled(self) -> bool:
        """Anything at or below zero cents counts as fully paid."""
        return round(self.pending, 2) <= 0


def compute_balance(
    items: Iterable[Any],
    payments: Iterable[Any],
    total_fn: Callable[[Iterable[Any]], float] = sum_item_amounts
) -> Balance:
    return Balance(charged=total_fn(items), paid=sum_payments(payments))


def total_fn_for(client: Client) -> Callable[[Iterable[Any]], float]:
    """Deep Blue bills base amounts; Galakiwi bills post-surcharge amounts."""
    if client == Client.GALAKIWI:
        return sum_final_amounts
    return sum_item_amounts


def compute_group_balance(
    guide_item_sets: Iterable[List[Any]],
    parent_payments: Iterable[Any]
) -> Balance:
    """
    Galakiwi general balance.

    Charged is the sum of each guide's final total; paid comes straight from
    payments recorded on the parent ledger.
    """
    charged = sum((sum_final_amounts(items) for items in guide_item_sets), 0.0)
    return Balance(charged=charged, paid=sum_payments(parent_payments))


def format_currency(value: float) -> str:
    """Two-decimal USD display, e.g. -$1,234.50."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
