import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URI)
    mongodb.db = mongodb.client[settings.MONGODB_DB]

    # Create indexes
    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB)

async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    # Ledger indexes
    await mongodb.db["ledgers"].create_index([("client", 1), ("created_at", -1)])
    await mongodb.db["ledgers"].create_index("parent_id")

    # At most one open Deep Blue ledger; Deep Blue never has guides
    await mongodb.db["ledgers"].create_index(
        "client",
        name="one_open_deep_blue",
        unique=True,
        partialFilterExpression={"client": "deep_blue", "status": "abierto"}
    )

    # Item and payment indexes
    await mongodb.db["items"].create_index([("ledger_id", 1), ("date", 1)])
    await mongodb.db["payments"].create_index([("ledger_id", 1), ("paid_at", 1)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
