import logging
import os

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient


load_dotenv()

logger = logging.getLogger(__name__)

# Defaults work for local MongoDB.
MONGODB_URL = os.getenv("MONGODB_URL") or os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "exercise_tracker")

client = AsyncIOMotorClient(MONGODB_URL)
db = client[DB_NAME]


def get_db():
    """Request dependency handing the database to route handlers."""
    return db


async def check_db() -> None:
    """Fail-fast check so you instantly know Mongo is reachable."""
    await client.admin.command("ping")
    logger.info("MongoDB connection successful (db=%s)", DB_NAME)


async def create_indexes(database=None) -> None:
    """Unique usernames and the per-user exercise lookup."""
    database = db if database is None else database
    await database.users.create_index("username", unique=True)
    await database.exercises.create_index([("userId", 1), ("_id", 1)])
    logger.info("Indexes created.")


def close_db() -> None:
    client.close()
    logger.info("MongoDB connection closed.")
