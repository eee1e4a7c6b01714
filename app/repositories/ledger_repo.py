"""
LedgerRepository - Manages ledger documents.

MongoDB has no foreign keys, so deleting a ledger cascades here:
guides first, then every item and payment pointing at any of them.
"""

from typing import Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId

from app.models.base import to_object_id
from app.models.ledger import Client, Ledger, LedgerStatus


class LedgerRepository:
    """Repository for ledgers and guides."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ledgers"]

    async def create_ledger(self, ledger: Ledger, session=None) -> Ledger:
        await self.collection.insert_one(ledger.to_document(), session=session)
        return ledger

    async def get_ledger(self, ledger_id: str | ObjectId, session=None) -> Optional[Ledger]:
        """Get a ledger by id. Malformed ids behave like missing ones."""
        oid = to_object_id(ledger_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid}, session=session)
        if doc:
            return Ledger(**doc)
        return None

    async def find_open_top_level(self, client: Client) -> List[Ledger]:
        """Open ledgers of a client that are not guides."""
        docs = await self.collection.find({
            "client": client.value,
            "status": LedgerStatus.OPEN.value,
            "parent_id": None
        }).to_list(None)
        return [Ledger(**doc) for doc in docs]

    async def list_top_level(self, client: Client) -> List[Ledger]:
        """Top-level ledgers of a client, newest first."""
        docs = await self.collection.find({
            "client": client.value,
            "parent_id": None
        }).sort("created_at", -1).to_list(None)
        return [Ledger(**doc) for doc in docs]

    async def list_guides(self, parent_id: ObjectId, session=None) -> List[Ledger]:
        """Guides under a parent ledger, by name."""
        docs = await self.collection.find(
            {"parent_id": parent_id},
            session=session
        ).sort("name", 1).to_list(None)
        return [Ledger(**doc) for doc in docs]

    async def update_status(self, ledger_id: ObjectId, status: LedgerStatus, session=None) -> None:
        await self.collection.update_one(
            {"_id": ledger_id},
            {"$set": {"status": status.value}},
            session=session
        )

    async def delete_cascade(self, ledger_id: ObjectId, session=None) -> Dict[str, int]:
        """
        Delete a ledger with its guides and everything that references them.

        Returns deleted counts per collection.
        """
        guides = await self.list_guides(ledger_id, session=session)
        ledger_ids = [ledger_id] + [guide.id for guide in guides]

        items = await self.db["items"].delete_many(
            {"ledger_id": {"$in": ledger_ids}}, session=session
        )
        payments = await self.db["payments"].delete_many(
            {"ledger_id": {"$in": ledger_ids}}, session=session
        )
        ledgers = await self.collection.delete_many(
            {"_id": {"$in": ledger_ids}}, session=session
        )

        return {
            "ledgers": ledgers.deleted_count,
            "items": items.deleted_count,
            "payments": payments.deleted_count
        }
