# database.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
import logging

import config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(config.MONGODB_URI)
db = client[config.MONGODB_DB]

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return db

async def init_db():
    await db.users.create_index("id", unique=True)
    await db.users.create_index("email", unique=True)
    await db.courses.create_index("id", unique=True)
    await db.lessons.create_index("id", unique=True)
    await db.lessons.create_index([("course", 1), ("order", 1)])
    await db.quizzes.create_index("id", unique=True)
    await db.quiz_results.create_index([("user", 1), ("quiz", 1)])
    await db.submissions.create_index([("user", 1), ("course", 1), ("lesson", 1)])
    await db.submissions.create_index("status")
    await db.progress.create_index([("user", 1), ("course", 1), ("lesson", 1)], unique=True)
    logger.info("MongoDB indexes created")
