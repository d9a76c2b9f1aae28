# app/database.py
import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import settings

_client_kwargs = {"tlsCAFile": certifi.where()} if settings.MONGO_TLS else {}

mongo_client = AsyncIOMotorClient(settings.MONGO_URL, **_client_kwargs)
db = mongo_client[settings.MONGO_DB_NAME]
user_collection = db["users"]


async def ping() -> dict:
    return await mongo_client.admin.command("ping")
