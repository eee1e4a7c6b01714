from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId

from app.models.base import to_object_id
from app.models.payment import Payment


class PaymentRepository:
    """Payment database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["payments"]

    async def create_payment(self, payment: Payment, session=None) -> Payment:
        await self.collection.insert_one(payment.to_document(), session=session)
        return payment

    async def get_payment(self, payment_id: str) -> Optional[Payment]:
        oid = to_object_id(payment_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid})
        if doc:
            return Payment(**doc)
        return None

    async def list_payments(self, ledger_id: ObjectId) -> List[Payment]:
        """Payments of one ledger in the order they were received."""
        docs = await self.collection.find(
            {"ledger_id": ledger_id}
        ).sort("paid_at", 1).to_list(None)
        return [Payment(**doc) for doc in docs]

    async def delete_payment(self, payment_id: ObjectId) -> bool:
        result = await self.collection.delete_one({"_id": payment_id})
        return result.deleted_count > 0
