from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId

from app.models.base import to_object_id
from app.models.item import Item


class ItemRepository:
    """Item database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["items"]

    async def create_item(self, item: Item, session=None) -> Item:
        await self.collection.insert_one(item.to_document(), session=session)
        return item

    async def get_item(self, item_id: str) -> Optional[Item]:
        oid = to_object_id(item_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid})
        if doc:
            return Item(**doc)
        return None

    async def list_items(self, ledger_id: ObjectId) -> List[Item]:
        """Items of one ledger, oldest date first."""
        docs = await self.collection.find(
            {"ledger_id": ledger_id}
        ).sort("date", 1).to_list(None)
        return [Item(**doc) for doc in docs]

    async def delete_item(self, item_id: ObjectId) -> bool:
        result = await self.collection.delete_one({"_id": item_id})
        return result.deleted_count > 0
