import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from main import app
from app.api.deps import get_ledger_service
from app.core import config
from app.models.item import Item
from app.models.ledger import Client, Ledger
from app.models.payment import Payment
from app.services.ledger_service import LedgerService


@pytest.fixture(autouse=True)
def no_transactions(monkeypatch):
    """Service tests run without a replica set; sessions are mocked where needed."""
    monkeypatch.setattr(config.settings, "USE_TRANSACTIONS", False)


@pytest.fixture
def mock_db():
    """MagicMock database whose collections have async write methods."""
    collections = {}
    for name in ("ledgers", "items", "payments"):
        collection = MagicMock()
        collection.insert_one = AsyncMock()
        collection.find_one = AsyncMock(return_value=None)
        collection.update_one = AsyncMock()
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
        collections[name] = collection

    db = MagicMock()
    db.__getitem__.side_effect = collections.__getitem__
    return db


@pytest.fixture
def service():
    """LedgerService with mocked repositories."""
    svc = LedgerService(MagicMock())
    svc.ledgers = AsyncMock()
    svc.items = AsyncMock()
    svc.payments = AsyncMock()

    svc.ledgers.create_ledger.side_effect = lambda ledger, session=None: ledger
    svc.items.create_item.side_effect = lambda item, session=None: item
    svc.payments.create_payment.side_effect = lambda payment, session=None: payment
    svc.ledgers.find_open_top_level.return_value = []
    svc.ledgers.list_guides.return_value = []
    svc.items.list_items.return_value = []
    svc.payments.list_payments.return_value = []
    return svc


@pytest.fixture
def deep_blue_ledger():
    return Ledger(client=Client.DEEP_BLUE, name="Enero 2026")


@pytest.fixture
def galakiwi_ledger():
    return Ledger(client=Client.GALAKIWI, name="Febrero 2026", invoice_number="FAC-002-2026")


@pytest.fixture
def charged_100_paid_30(service, deep_blue_ledger):
    """Deep Blue ledger with 100 charged and 30 paid (70 pending)."""
    service.ledgers.get_ledger.return_value = deep_blue_ledger
    service.items.list_items.return_value = [
        Item(ledger_id=deep_blue_ledger.id, description="Mantenimiento", amount=60.0),
        Item(ledger_id=deep_blue_ledger.id, description="Soporte", amount=40.0),
    ]
    service.payments.list_payments.return_value = [
        Payment(ledger_id=deep_blue_ledger.id, amount=30.0),
    ]
    return deep_blue_ledger


@pytest.fixture
def mock_service():
    return AsyncMock(spec=LedgerService)


@pytest.fixture
def test_client(mock_service):
    """FastAPI test client backed by a mocked LedgerService."""
    app.dependency_overrides[get_ledger_service] = lambda: mock_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
