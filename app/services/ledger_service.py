import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from typing import Dict, List, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.config import settings
from app.models.item import Item
from app.models.ledger import Client, Ledger, LedgerStatus
from app.models.payment import Payment
from app.repositories.item_repo import ItemRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.payment_repo import PaymentRepository
from app.schemas.item import ItemCreate
from app.schemas.ledger import GuideCreate, LedgerCloseRequest, LedgerCreate
from app.schemas.payment import PaymentCreate
from app.utils.ledger_validation import (
    LedgerNotFoundError,
    LedgerValidationError,
    require_open,
    validate_closing_amount,
    validate_item_amount,
    validate_name,
    validate_payment_amount,
)
from app.utils.money import (
    Balance,
    compute_balance,
    compute_group_balance,
    sum_final_amounts,
    total_fn_for,
)

logger = logging.getLogger(__name__)


@dataclass
class GuideDetail:
    ledger: Ledger
    items: List[Item]
    charged: float
    share: float = 0.0


@dataclass
class LedgerDetail:
    ledger: Ledger
    balance: Balance
    items: List[Item] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    guides: List[GuideDetail] = field(default_factory=list)


@dataclass
class CloseResult:
    ledger: Ledger
    remainder: float
    payment: Optional[Payment] = None
    successor: Optional[Ledger] = None
    carry_item: Optional[Item] = None


class LedgerService:
    """
    Ledger lifecycle and grouping.

    abierto → pagado when a payment (or closing payment) clears the balance.
    abierto → cerrado when a Deep Blue ledger is closed with a remainder,
    which moves to a new open successor ledger.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.ledgers = LedgerRepository(db)
        self.items = ItemRepository(db)
        self.payments = PaymentRepository(db)

    @asynccontextmanager
    async def _transaction(self):
        """Yield a session inside a transaction, or None when disabled."""
        if not settings.USE_TRANSACTIONS:
            yield None
            return

        async with await self.db.client.start_session() as session:
            async with session.start_transaction():
                yield session

    async def _get_ledger(self, ledger_id: str | ObjectId) -> Ledger:
        ledger = await self.ledgers.get_ledger(ledger_id)
        if ledger is None:
            raise LedgerNotFoundError(f"Ledger {ledger_id} not found")
        return ledger

    async def _require_writable(self, ledger: Ledger) -> None:
        """The ledger, and for a guide its parent too, must be open."""
        require_open(ledger)
        if ledger.is_guide:
            parent = await self._get_ledger(ledger.parent_id)
            require_open(parent)

    # ===== CREATION =====

    async def create_ledger(self, data: LedgerCreate) -> Ledger:
        name = validate_name(data.name, "Ledger name")

        if data.client == Client.DEEP_BLUE:
            open_ledgers = await self.ledgers.find_open_top_level(Client.DEEP_BLUE)
            if open_ledgers:
                logger.warning(
                    "Rejected new Deep Blue ledger %r: %s is still open",
                    name, open_ledgers[0].id
                )
                raise LedgerValidationError(
                    "An open Deep Blue ledger already exists; close it before creating a new one"
                )

        ledger = Ledger(
            client=data.client,
            name=name,
            invoice_number=(data.invoice_number or "").strip() or None
        )
        try:
            await self.ledgers.create_ledger(ledger)
        except DuplicateKeyError:
            # Lost the race against a concurrent create
            raise LedgerValidationError(
                "An open Deep Blue ledger already exists; close it before creating a new one"
            )

        logger.info("Created %s ledger %s (%s)", ledger.client.value, ledger.id, ledger.name)
        return ledger

    async def create_guide(self, parent_id: str, data: GuideCreate) -> Ledger:
        parent = await self._get_ledger(parent_id)
        if parent.client != Client.GALAKIWI:
            raise LedgerValidationError("Only Galakiwi ledgers have guides")
        if parent.is_guide:
            raise LedgerValidationError("Guides cannot have guides of their own")
        require_open(parent)

        guide = Ledger(
            client=Client.GALAKIWI,
            parent_id=parent.id,
            name=validate_name(data.name, "Guide name")
        )
        await self.ledgers.create_ledger(guide)
        logger.info("Created guide %s (%s) under %s", guide.id, guide.name, parent.id)
        return guide

    # ===== ITEMS =====

    async def add_item(self, ledger_id: str, data: ItemCreate) -> Item:
        ledger = await self._get_ledger(ledger_id)
        await self._require_writable(ledger)

        if ledger.client == Client.GALAKIWI and not ledger.is_guide:
            raise LedgerValidationError("Galakiwi items are added to a guide, not the parent ledger")

        validate_item_amount(data.amount)
        item = Item(
            ledger_id=ledger.id,
            date=datetime.combine(data.date, time.min, tzinfo=timezone.utc) if data.date else None,
            description=validate_name(data.description, "Description"),
            amount=data.amount,
            surcharge=data.surcharge if ledger.client == Client.GALAKIWI else False
        )
        return await self.items.create_item(item)

    async def delete_item(self, item_id: str) -> None:
        item = await self.items.get_item(item_id)
        if item is None:
            raise LedgerNotFoundError(f"Item {item_id} not found")

        ledger = await self._get_ledger(item.ledger_id)
        await self._require_writable(ledger)

        # Payments must stay covered by what is charged
        billed = await self._get_ledger(ledger.parent_id) if ledger.is_guide else ledger
        balance = await self.get_balance(billed)
        if round(balance.charged - item.final_amount - balance.paid, 2) < 0:
            raise LedgerValidationError(
                "Cannot delete item: payments would exceed the charged total"
            )

        await self.items.delete_item(item.id)

    # ===== PAYMENTS =====

    async def add_payment(self, ledger_id: str, data: PaymentCreate) -> Tuple[Payment, Ledger]:
        """Record a payment; marks the ledger paid once nothing is pending."""
        ledger = await self._get_ledger(ledger_id)
        require_open(ledger)
        if ledger.is_guide:
            raise LedgerValidationError("Galakiwi payments are recorded on the parent ledger")

        balance = await self.get_balance(ledger)
        try:
            validate_payment_amount(data.amount, balance.pending)
        except LedgerValidationError:
            logger.warning(
                "Rejected payment of %.2f on ledger %s (pending %.2f)",
                data.amount, ledger.id, balance.pending
            )
            raise

        fields = {"paid_at": data.paid_at} if data.paid_at is not None else {}
        payment = Payment(
            ledger_id=ledger.id,
            amount=data.amount,
            method=data.method,
            note=(data.note or "").strip() or None,
            **fields
        )

        async with self._transaction() as session:
            await self.payments.create_payment(payment, session=session)
            if Balance(charged=balance.charged, paid=balance.paid + data.amount).is_settled:
                await self.ledgers.update_status(ledger.id, LedgerStatus.PAID, session=session)
                ledger = ledger.model_copy(update={"status": LedgerStatus.PAID})
                logger.info("Ledger %s paid in full", ledger.id)

        return payment, ledger

    async def delete_payment(self, payment_id: str) -> None:
        payment = await self.payments.get_payment(payment_id)
        if payment is None:
            raise LedgerNotFoundError(f"Payment {payment_id} not found")

        ledger = await self._get_ledger(payment.ledger_id)
        require_open(ledger)
        await self.payments.delete_payment(payment.id)

    # ===== CLOSING =====

    async def close_ledger(self, ledger_id: str, data: LedgerCloseRequest) -> CloseResult:
        """
        Close a Deep Blue ledger, carrying any remainder forward.

        Steps:
        1. Record the closing payment when amount > 0
        2. remainder = pending - amount
        3. remainder > 0: mark closed, open a successor seeded with one
           carry-forward item for the remainder
        4. Otherwise mark paid

        All writes share one transaction.
        """
        ledger = await self._get_ledger(ledger_id)
        if ledger.client != Client.DEEP_BLUE or ledger.is_guide:
            raise LedgerValidationError("Only Deep Blue ledgers can be closed")
        require_open(ledger)

        balance = await self.get_balance(ledger)
        validate_closing_amount(data.amount, balance.pending)

        remainder = round(balance.pending - data.amount, 2)
        result = CloseResult(ledger=ledger, remainder=max(remainder, 0.0))

        async with self._transaction() as session:
            if data.amount > 0:
                result.payment = Payment(
                    ledger_id=ledger.id,
                    amount=data.amount,
                    method=data.method,
                    note=(data.note or "").strip() or settings.CLOSING_PAYMENT_NOTE
                )
                await self.payments.create_payment(result.payment, session=session)

            if remainder > 0:
                # Status goes first: the successor would otherwise be a
                # second open Deep Blue ledger
                await self.ledgers.update_status(ledger.id, LedgerStatus.CLOSED, session=session)
                result.successor = Ledger(
                    client=ledger.client,
                    name=f"{ledger.name}{settings.CARRY_FORWARD_SUFFIX}"
                )
                await self.ledgers.create_ledger(result.successor, session=session)
                result.carry_item = Item(
                    ledger_id=result.successor.id,
                    description=f"Saldo pendiente de {ledger.name}",
                    amount=remainder,
                    is_carry_forward=True
                )
                await self.items.create_item(result.carry_item, session=session)
                result.ledger = ledger.model_copy(update={"status": LedgerStatus.CLOSED})
            else:
                await self.ledgers.update_status(ledger.id, LedgerStatus.PAID, session=session)
                result.ledger = ledger.model_copy(update={"status": LedgerStatus.PAID})

        if result.successor is not None:
            logger.info(
                "Closed ledger %s carrying %.2f to %s",
                ledger.id, remainder, result.successor.id
            )
        else:
            logger.info("Closed ledger %s as paid", ledger.id)
        return result

    # ===== DELETION =====

    async def delete_ledger(self, ledger_id: str) -> Dict[str, int]:
        """Delete a ledger, its guides, and all their items and payments."""
        ledger = await self._get_ledger(ledger_id)
        async with self._transaction() as session:
            counts = await self.ledgers.delete_cascade(ledger.id, session=session)
        logger.info("Deleted ledger %s: %s", ledger.id, counts)
        return counts

    # ===== BALANCES & GROUPING =====

    async def get_balance(self, ledger: Ledger) -> Balance:
        if ledger.client == Client.GALAKIWI:
            if ledger.is_guide:
                return Balance(charged=sum_final_amounts(await self.items.list_items(ledger.id)))
            guides = await self.ledgers.list_guides(ledger.id)
            item_sets = [await self.items.list_items(guide.id) for guide in guides]
            return compute_group_balance(item_sets, await self.payments.list_payments(ledger.id))

        return compute_balance(
            await self.items.list_items(ledger.id),
            await self.payments.list_payments(ledger.id),
            total_fn_for(ledger.client)
        )

    async def list_ledgers(self, client: Client) -> List[Tuple[Ledger, Balance]]:
        """Top-level ledgers of one client, newest first, with balances."""
        ledgers = await self.ledgers.list_top_level(client)
        return [(ledger, await self.get_balance(ledger)) for ledger in ledgers]

    async def list_guides(self, parent_id: str) -> List[GuideDetail]:
        parent = await self._get_ledger(parent_id)
        if parent.client != Client.GALAKIWI or parent.is_guide:
            raise LedgerValidationError("Only top-level Galakiwi ledgers have guides")

        guides = []
        for guide in await self.ledgers.list_guides(parent.id):
            items = await self.items.list_items(guide.id)
            guides.append(GuideDetail(ledger=guide, items=items, charged=sum_final_amounts(items)))

        general = sum(guide.charged for guide in guides)
        for guide in guides:
            guide.share = guide.charged / general if general > 0 else 0.0
        return guides

    async def get_ledger_detail(self, ledger_id: str) -> LedgerDetail:
        ledger = await self._get_ledger(ledger_id)
        items = await self.items.list_items(ledger.id)
        payments = await self.payments.list_payments(ledger.id)

        if ledger.client == Client.GALAKIWI and not ledger.is_guide:
            guides = await self.list_guides(str(ledger.id))
            balance = compute_group_balance([guide.items for guide in guides], payments)
            return LedgerDetail(
                ledger=ledger, balance=balance, items=items, payments=payments, guides=guides
            )

        if ledger.is_guide:
            balance = Balance(charged=sum_final_amounts(items))
        else:
            balance = compute_balance(items, payments, total_fn_for(ledger.client))
        return LedgerDetail(ledger=ledger, balance=balance, items=items, payments=payments)
