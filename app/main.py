from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from app.config import settings
from app.routers import admin
from app.routers import auth_proxy
from app.routers import popups
from app.routers import properties
from app.scheduler import scheduler
from app.services.listings import dispose_engine, get_property_stats
from structlog import get_logger

logger = get_logger()

app = FastAPI(title="Properti Pro Moderation Service")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

redis_client: Redis | None = None

async def refresh_stats_cache():
    try:
        await get_property_stats(refresh=True)
    except Exception as e:
        logger.warning("Property stats refresh failed", error=str(e))

@app.on_event("startup")
async def startup_event():
    global redis_client
    redis_client = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    await FastAPILimiter.init(redis_client)
    # Run once immediately on startup
    await refresh_stats_cache()
    scheduler.add_job(refresh_stats_cache, "interval", seconds=settings.STATS_CACHE_SECONDS)
    scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    scheduler.shutdown()
    await FastAPILimiter.close()
    if redis_client:
        await redis_client.close()
    await dispose_engine()

app.include_router(admin.router)
app.include_router(auth_proxy.router)
app.include_router(properties.router)
app.include_router(popups.router)

@app.get("/health")
async def root_health():
    return "ok"
