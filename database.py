# database.py
import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from fastapi import HTTPException

from config import MONGODB_URI, MONGODB_DB_NAME

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

client: Optional[AsyncIOMotorClient] = None
db: Optional[AsyncIOMotorDatabase] = None


def connect() -> AsyncIOMotorDatabase:
    """Open the process-wide MongoDB client. Owned by the app lifecycle."""
    global client, db
    client = AsyncIOMotorClient(MONGODB_URI)
    db = client[MONGODB_DB_NAME]
    logger.info(f"MongoDB client created for database: {MONGODB_DB_NAME}")
    return db


async def init_db(database: AsyncIOMotorDatabase):
    await database.students.create_index("studentTag", unique=True)


def close():
    global client, db
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")
    client = None
    db = None


async def get_database() -> AsyncIOMotorDatabase:
    if db is None:
        logger.error("Database requested before connect() was called")
        raise HTTPException(status_code=503, detail="Database not connected")
    return db
