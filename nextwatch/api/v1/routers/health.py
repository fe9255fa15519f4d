# nextwatch/api/v1/routers/health.py
from datetime import datetime, timezone
from fastapi import APIRouter
from nextwatch.core.config import get_settings
from nextwatch.db import mongo
from nextwatch.db.redis import get_redis  # returns Redis instance or None

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """
    Liveness check. Always answers OK; `checks` reports the backing
    services without affecting the status:
    - ping Mongo via Motor
    - Redis 'skipped' if not configured
    - OpenAI: only whether a key is set
    """
    settings = get_settings()
    checks: dict[str, object] = {}

    # --- Mongo ---
    try:
        db = mongo.get_db()
        await db.command("ping")
        checks["mongodb"] = "ok"
    except Exception as e:
        checks["mongodb"] = f"error: {e}"

    # --- Redis ---
    try:
        r = get_redis()
        if r:
            await r.ping()
            checks["redis"] = "ok"
        else:
            checks["redis"] = "skipped"
    except Exception as e:
        checks["redis"] = f"error: {e}"

    checks["openai_api_key_set"] = bool(settings.OPENAI_API_KEY)

    return {
        "status": "OK",
        "message": "Next Watch API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
