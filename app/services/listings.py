from httpx import AsyncClient
from app.config import settings
from structlog import get_logger
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy import insert, select
from app.exceptions import UpstreamError
from app.models.moderation_log import ModerationLog
from app.schemas.api import Pagination
from app.schemas.property import PropertyStatus
from app.services.filters import PropertyFilters
from app.services.moderation import ensure_transition
from app.services.stats import PropertyStats
from redis.asyncio import Redis
from datetime import datetime, timezone
import json

logger = get_logger()

STATS_CACHE_KEY = "cached_property_stats"
FETCH_ALL_PAGE_SIZE = 1000

# One pool for the whole process, disposed on shutdown
engine = create_async_engine(settings.DATABASE_URL)
async_session = async_sessionmaker(engine, expire_on_commit=False)

async def dispose_engine():
    await engine.dispose()

redis_client: Redis | None = None

async def get_redis_client():
    global redis_client
    if redis_client is None:
        redis_client = Redis.from_url(settings.REDIS_URL)
    return redis_client

# Normalize base and prefix from environment
_prop_base = settings.PROPERTY_LISTING_URL.rstrip("/")
# A lot of gateways expose docs at /docs; ensure we don't keep that in API base
if "/docs" in _prop_base:
    _prop_base = _prop_base.replace("/docs", "")
_prop_has_v1 = _prop_base.endswith("/api/v1")
_prop_prefix = "" if _prop_has_v1 else "/api/v1"

def _headers() -> dict:
    if not settings.PROPERTY_TOKEN:
        return {}
    return {"Authorization": f"Bearer {settings.PROPERTY_TOKEN}"}

def normalize_listing(item: dict) -> dict | None:
    """Map an upstream listing onto our field names.

    Returns None for payloads whose status is not a moderation status or
    that lack a title or a numeric price.
    """
    if not isinstance(item, dict):
        return None
    status = str(item.get("status", "")).lower()
    try:
        PropertyStatus(status)
    except ValueError:
        logger.warning("Skipping listing with unknown status", property_id=item.get("id"), status=status)
        return None
    try:
        price = float(item["price"])
    except (KeyError, TypeError, ValueError):
        price = None
    if not item.get("title") or price is None:
        logger.warning("Skipping incomplete listing", property_id=item.get("id"),
                       has_title=bool(item.get("title")), price=item.get("price"))
        return None
    listing = dict(item)
    listing["id"] = str(item.get("id") or item.get("_id") or "")
    listing["status"] = status
    listing["price"] = price
    listing["type"] = item.get("type") or item.get("property_type")
    listing["price_unit"] = item.get("price_unit") or item.get("priceUnit")
    listing["views"] = int(item.get("views") or item.get("view_count") or 0)
    listing["inquiries"] = int(item.get("inquiries") or item.get("inquiry_count") or 0)
    listing["created_at"] = item.get("created_at") or item.get("createdAt")
    return listing

def _unwrap(data) -> tuple[list, int]:
    """Accept `{items, total}`, `{data, count}` or a bare list from upstream."""
    if isinstance(data, dict) and "items" in data:
        items = data["items"]
        total = data.get("total", len(items))
    elif isinstance(data, dict) and isinstance(data.get("data"), list):
        items = data["data"]
        total = data.get("count", len(items))
    elif isinstance(data, list):
        items = data
        total = len(data)  # Fallback if upstream doesn't provide total
    else:
        items = []
        total = 0
    return items, int(total or 0)

async def get_listings(
    filters: PropertyFilters | None = None,
    page: int = 1,
    page_size: int | None = None,
    extra: dict | None = None,
) -> dict:
    page_size = page_size or settings.DEFAULT_PAGE_SIZE
    params = (filters or PropertyFilters()).to_query()
    params.update({k: v for k, v in (extra or {}).items() if v is not None})
    params["offset"] = (page - 1) * page_size
    params["limit"] = page_size
    async with AsyncClient(timeout=30.0) as client:
        response = await client.get(
            f"{_prop_base}{_prop_prefix}/properties",
            headers=_headers(),
            params=params,
        )
        response.raise_for_status()
        items, total = _unwrap(response.json())
    listings = [listing for listing in (normalize_listing(i) for i in items) if listing]
    # Only this page's skips are known; earlier pages are assumed clean
    skipped = len(items) - len(listings)
    total = max(total - skipped, 0)
    logger.info("Fetched listings", total=total, skipped=skipped, page=page, filters=params)
    return {
        "items": listings,
        "total": total,
        "pagination": Pagination.from_counts(page, page_size, total),
    }

async def get_listing(property_id: str) -> dict:
    async with AsyncClient(timeout=30.0) as client:
        response = await client.get(
            f"{_prop_base}{_prop_prefix}/properties/{property_id}",
            headers=_headers(),
        )
        response.raise_for_status()
        payload = response.json()
    listing = normalize_listing(payload.get("data", payload) if isinstance(payload, dict) else payload)
    if listing is None:
        raise UpstreamError(f"Listing {property_id} has an unusable payload")
    return listing

async def _log_action(admin_id: str, action: str, entity_id: str, previous_status: str | None = None,
                      new_status: str | None = None, details: dict | None = None):
    async with async_session() as session:
        stmt = insert(ModerationLog).values(
            admin_id=admin_id,
            action=action,
            entity_id=entity_id,
            previous_status=previous_status,
            new_status=new_status,
            details=details,
        )
        await session.execute(stmt)
        await session.commit()

async def update_listing_status(property_id: str, status: PropertyStatus | str, admin_id: str, reason: str | None = None) -> dict:
    """Move a listing to `status` if a quick action allows it, then record the moderation."""
    target = PropertyStatus(status)
    current = await get_listing(property_id)
    ensure_transition(current["status"], target)
    async with AsyncClient(timeout=30.0) as client:
        response = await client.patch(
            f"{_prop_base}{_prop_prefix}/properties/{property_id}",
            headers=_headers(),
            json={"status": target.value, "updated_at": datetime.now(timezone.utc).isoformat()},
        )
        response.raise_for_status()
    await _log_action(
        admin_id,
        f"property_{target.value}",
        property_id,
        previous_status=current["status"],
        new_status=target.value,
        details={"reason": reason} if reason else None,
    )
    await invalidate_stats_cache()
    return {**current, "status": target.value}

async def delete_listing(property_id: str, admin_id: str):
    async with AsyncClient(timeout=30.0) as client:
        # Media rows reference the listing, so they go first
        response = await client.delete(
            f"{_prop_base}{_prop_prefix}/properties/{property_id}/media",
            headers=_headers(),
        )
        if response.status_code != 404:
            response.raise_for_status()
        response = await client.delete(
            f"{_prop_base}{_prop_prefix}/properties/{property_id}",
            headers=_headers(),
        )
        response.raise_for_status()
    await _log_action(admin_id, "property_deleted", property_id)
    await invalidate_stats_cache()

async def get_moderation_history(entity_id: str | None = None, offset: int = 0, limit: int = 50) -> list[dict]:
    async with async_session() as session:
        stmt = select(ModerationLog).order_by(ModerationLog.created_at.desc()).offset(offset).limit(limit)
        if entity_id:
            stmt = stmt.where(ModerationLog.entity_id == entity_id)
        result = await session.execute(stmt)
        return [row.as_dict() for row in result.scalars().all()]

async def fetch_all_listings() -> list:
    """Page through the listing service until its reported total is reached.

    Returns the raw upstream items.
    """
    items: list = []
    async with AsyncClient(timeout=30.0) as client:
        while True:
            response = await client.get(
                f"{_prop_base}{_prop_prefix}/properties",
                headers=_headers(),
                params={"offset": len(items), "limit": FETCH_ALL_PAGE_SIZE},
            )
            response.raise_for_status()
            page, total = _unwrap(response.json())
            items.extend(page)
            if not page or len(items) >= total:
                break
    logger.info("Fetched all listings", count=len(items))
    return items

async def compute_property_stats() -> PropertyStats:
    return PropertyStats.from_listings(await fetch_all_listings())

async def get_property_stats(refresh: bool = False) -> PropertyStats:
    redis = await get_redis_client()
    if not refresh:
        cached = await redis.get(STATS_CACHE_KEY)
        if cached:
            logger.info("Returning cached property stats")
            return PropertyStats(**json.loads(cached))
    stats = await compute_property_stats()
    await redis.setex(STATS_CACHE_KEY, settings.STATS_CACHE_SECONDS, json.dumps(stats.as_dict()))
    return stats

async def invalidate_stats_cache():
    redis = await get_redis_client()
    await redis.delete(STATS_CACHE_KEY)
