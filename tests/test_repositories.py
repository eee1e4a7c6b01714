"""Tests for ledger, item and payment repositories."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from app.models.item import Item
from app.models.ledger import Client, Ledger, LedgerStatus
from app.repositories.item_repo import ItemRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.payment_repo import PaymentRepository


def _cursor(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def _guide_doc(parent_id, name):
    return {
        "_id": ObjectId(),
        "client": "galakiwi",
        "parent_id": parent_id,
        "name": name,
        "status": "abierto",
        "created_at": datetime.now(timezone.utc)
    }


@pytest.mark.asyncio
class TestLedgerRepository:
    """LedgerRepository against a mocked database."""

    async def test_create_ledger_stores_enum_values(self, mock_db):
        repo = LedgerRepository(mock_db)
        ledger = Ledger(client=Client.DEEP_BLUE, name="Enero 2026")

        await repo.create_ledger(ledger)

        doc = mock_db["ledgers"].insert_one.call_args[0][0]
        assert doc["_id"] == ledger.id
        assert doc["client"] == "deep_blue"
        assert doc["status"] == "abierto"
        assert doc["parent_id"] is None

    async def test_get_ledger_malformed_id(self, mock_db):
        repo = LedgerRepository(mock_db)

        assert await repo.get_ledger("not-an-id") is None
        mock_db["ledgers"].find_one.assert_not_awaited()

    async def test_get_ledger_parses_document(self, mock_db):
        parent_id = ObjectId()
        doc = _guide_doc(parent_id, "Carlos")
        mock_db["ledgers"].find_one.return_value = doc
        repo = LedgerRepository(mock_db)

        ledger = await repo.get_ledger(str(doc["_id"]))

        assert ledger.id == doc["_id"]
        assert ledger.is_guide
        assert ledger.status == LedgerStatus.OPEN

    async def test_open_top_level_query(self, mock_db):
        mock_db["ledgers"].find.return_value = _cursor([])
        repo = LedgerRepository(mock_db)

        await repo.find_open_top_level(Client.DEEP_BLUE)

        mock_db["ledgers"].find.assert_called_once_with({
            "client": "deep_blue",
            "status": "abierto",
            "parent_id": None
        })

    async def test_delete_cascade_removes_guides_items_and_payments(self, mock_db):
        parent_id = ObjectId()
        guides = [_guide_doc(parent_id, "Ana"), _guide_doc(parent_id, "Carlos")]
        mock_db["ledgers"].find.return_value = _cursor(guides)
        mock_db["ledgers"].delete_many.return_value = MagicMock(deleted_count=3)
        mock_db["items"].delete_many.return_value = MagicMock(deleted_count=5)
        mock_db["payments"].delete_many.return_value = MagicMock(deleted_count=2)
        repo = LedgerRepository(mock_db)

        counts = await repo.delete_cascade(parent_id)

        expected = {"$in": [parent_id, guides[0]["_id"], guides[1]["_id"]]}
        mock_db["items"].delete_many.assert_awaited_once_with({"ledger_id": expected}, session=None)
        mock_db["payments"].delete_many.assert_awaited_once_with({"ledger_id": expected}, session=None)
        mock_db["ledgers"].delete_many.assert_awaited_once_with({"_id": expected}, session=None)
        assert counts == {"ledgers": 3, "items": 5, "payments": 2}


@pytest.mark.asyncio
async def test_item_document_has_no_final_amount(mock_db):
    repo = ItemRepository(mock_db)
    item = Item(ledger_id=ObjectId(), description="Tour", amount=100, surcharge=True)

    await repo.create_item(item)

    doc = mock_db["items"].insert_one.call_args[0][0]
    assert doc["amount"] == 100
    assert doc["surcharge"] is True
    assert "final_amount" not in doc


@pytest.mark.asyncio
async def test_payments_listed_by_date(mock_db):
    ledger_id = ObjectId()
    mock_db["payments"].find.return_value = _cursor([
        {"_id": ObjectId(), "ledger_id": ledger_id, "amount": 10.0, "method": "efectivo",
         "paid_at": datetime(2026, 1, 2), "created_at": datetime(2026, 1, 2)}
    ])
    repo = PaymentRepository(mock_db)

    payments = await repo.list_payments(ledger_id)

    mock_db["payments"].find.return_value.sort.assert_called_once_with("paid_at", 1)
    assert payments[0].amount == 10.0
    assert payments[0].method.value == "efectivo"
