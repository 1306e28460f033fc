from fastapi import APIRouter, Depends, HTTPException, Query
from httpx import HTTPStatusError
from app.schemas.admin import (
    FilterOptionsResponse,
    ModerationLogResponse,
    PropertyStatsResponse,
    QuickActionsResponse,
    StatusBadgeResponse,
)
from app.schemas.api import ApiResponse
from app.schemas.property import PropertyResponse, StatusChangeRequest
from app.services.listings import (
    delete_listing,
    get_listing,
    get_listings,
    get_moderation_history,
    get_property_stats,
    update_listing_status,
)
from app.services.filters import FILTER_OPTIONS, FilterState
from app.services.moderation import QuickActionsPanel, badge_for
from app.services.reporting import export_report, generate_listing_report
from app.services.stats import stat_cards
from app.dependencies.auth import get_current_admin
from app.dependencies.rate_limit import admin_list_limiter
from app.exceptions import ActionNotAllowedError, InvalidFilterError, UpstreamError
from structlog import get_logger
from typing import List, Optional

logger = get_logger()
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

def _upstream_failure(e: Exception, **context) -> HTTPException:
    if isinstance(e, HTTPStatusError) and e.response.status_code == 404:
        return HTTPException(status_code=404, detail="Property not found")
    logger.error("Listing service call failed", error=str(e), **context)
    return HTTPException(status_code=502, detail=f"Listing service error: {e}")

@router.get("/properties", response_model=ApiResponse[List[PropertyResponse]], dependencies=[Depends(admin_list_limiter)])
async def list_properties(
    status: str = "all",
    type: str = "all",
    purpose: str = "all",
    agent: str = "all",
    date_range: str = Query("all", alias="dateRange"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    admin: dict = Depends(get_current_admin),
):
    state = FilterState()
    panel = state.panel()
    try:
        for key, value in (("status", status), ("type", type), ("purpose", purpose), ("agent", agent), ("date_range", date_range)):
            panel.change(key, value)
    except InvalidFilterError as e:
        raise HTTPException(status_code=422, detail=str(e))
    filters = state.filters
    try:
        result = await get_listings(filters, page=page, page_size=page_size)
    except Exception as e:
        raise _upstream_failure(e, filters=filters.to_query())
    logger.info("Fetched admin properties", admin_id=admin["id"], total=result["total"])
    return {"success": True, "data": result["items"], "pagination": result["pagination"]}

@router.get("/properties/stats", response_model=PropertyStatsResponse)
async def properties_stats(refresh: bool = False, admin: dict = Depends(get_current_admin)):
    try:
        stats = await get_property_stats(refresh=refresh)
    except Exception as e:
        raise _upstream_failure(e)
    logger.info("Fetched property stats", admin_id=admin["id"], refresh=refresh)
    return {**stats.as_dict(), "cards": stat_cards(stats)}

@router.get("/properties/{property_id}/actions", response_model=QuickActionsResponse)
async def property_actions(property_id: str, compact: bool = False, admin: dict = Depends(get_current_admin)):
    try:
        listing = await get_listing(property_id)
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)
    panel = QuickActionsPanel(property_id, listing["status"], on_status_change=update_listing_status, compact=compact)
    return {
        "property_id": property_id,
        "current_status": listing["status"],
        "actions": [action.as_dict() for action in panel.actions()],
    }

@router.post("/properties/{property_id}/actions/{action_key}", response_model=PropertyResponse)
async def trigger_property_action(property_id: str, action_key: str, admin: dict = Depends(get_current_admin)):
    try:
        listing = await get_listing(property_id)
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)

    async def on_status_change(pid, target):
        return await update_listing_status(pid, target, admin["id"])

    panel = QuickActionsPanel(property_id, listing["status"], on_status_change=on_status_change)
    try:
        updated = await panel.trigger(action_key)
    except ActionNotAllowedError as e:
        logger.warning("Rejected quick action", property_id=property_id, action=action_key, admin_id=admin["id"])
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)
    logger.info("Applied quick action", property_id=property_id, action=action_key, admin_id=admin["id"])
    return updated

@router.get("/properties/{property_id}/badge", response_model=StatusBadgeResponse)
async def property_badge(property_id: str, size: str = Query("md", pattern="^(sm|md|lg)$"), admin: dict = Depends(get_current_admin)):
    try:
        listing = await get_listing(property_id)
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)
    return badge_for(listing["status"], size)

@router.post("/properties/{property_id}/status", response_model=PropertyResponse)
async def change_property_status(property_id: str, data: StatusChangeRequest, admin: dict = Depends(get_current_admin)):
    try:
        listing = await update_listing_status(property_id, data.status, admin["id"], reason=data.reason)
    except ActionNotAllowedError as e:
        logger.warning("Rejected status change", property_id=property_id, admin_id=admin["id"], error=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)
    logger.info("Updated listing status", property_id=property_id, status=data.status.value, admin_id=admin["id"])
    return listing

@router.delete("/properties/{property_id}")
async def delete_property(property_id: str, admin: dict = Depends(get_current_admin)):
    try:
        await delete_listing(property_id, admin["id"])
    except Exception as e:
        raise _upstream_failure(e, property_id=property_id)
    logger.info("Deleted listing", property_id=property_id, admin_id=admin["id"])
    return {"status": "success"}

@router.get("/moderation/history", response_model=List[ModerationLogResponse])
async def moderation_history(
    property_id: Optional[str] = None,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    admin: dict = Depends(get_current_admin),
):
    history = await get_moderation_history(entity_id=property_id, offset=offset, limit=limit)
    logger.info("Fetched moderation history", admin_id=admin["id"], count=len(history))
    return history

@router.get("/filters/options", response_model=FilterOptionsResponse)
async def filter_options():
    return {"options": FILTER_OPTIONS}

@router.get("/reports/listings")
async def listing_report(lang: str = "en", admin: dict = Depends(get_current_admin)):
    try:
        report = await generate_listing_report(lang)
    except (HTTPStatusError, UpstreamError) as e:
        raise _upstream_failure(e)
    logger.info("Generated listing report", lang=lang, admin_id=admin["id"])
    title = report.get("title", "Listing Report")
    return {"title": title, "data": {k: v for k, v in report.items() if k != "title"}}

@router.get("/reports/export/{fmt}")
async def export_report_endpoint(fmt: str, lang: str = "en", admin: dict = Depends(get_current_admin)):
    try:
        file_url = await export_report(fmt, lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Exported report", format=fmt, lang=lang, admin_id=admin["id"])
    return {"file_url": file_url}
