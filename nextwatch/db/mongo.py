# nextwatch/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from nextwatch.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_client() -> AsyncIOMotorClient:
    assert _client is not None, "Mongo client not initialized"
    return _client


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


def _client_options(uri: str, use_tls: bool) -> dict:
    opts = {
        "uuidRepresentation": "standard",
        "tz_aware": True,                   # createdAt/timestamp come back as UTC
        "serverSelectionTimeoutMS": 6000,
        "connectTimeoutMS": 6000,
    }
    # SRV implies TLS; local instances usually run without it
    if use_tls or uri.startswith("mongodb+srv://"):
        opts["tls"] = True
        opts["tlsCAFile"] = certifi.where()
    return opts


async def connect():
    """
    Create the process-wide Motor client.
    A failed ping is logged but not fatal: Motor connects lazily, so the
    first real query will try again once the server is reachable.
    """
    global _client, _db
    settings = get_settings()

    _client = AsyncIOMotorClient(settings.MONGO_URI, **_client_options(settings.MONGO_URI, settings.MONGO_TLS))
    _db = _client[settings.MONGO_DB]
    try:
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok) db=%s", settings.MONGO_DB)
    except Exception as e:
        logger.warning("Mongo ping at startup failed, will connect lazily on first query: %s", e)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
