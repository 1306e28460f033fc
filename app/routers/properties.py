from fastapi import APIRouter, HTTPException, Query
from typing import Optional
from httpx import HTTPStatusError
from app.schemas.api import ApiResponse
from app.schemas.property import PropertyListResponse, PropertyResponse, PropertyStatus
from app.services.filters import PropertyFilters
from app.services.listings import get_listing, get_listings
from app.exceptions import InvalidFilterError, UpstreamError
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

@router.get("/public", response_model=ApiResponse[PropertyListResponse])
async def get_all_properties_public(
    type: str = "all",
    purpose: str = "all",
    location: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
):
    """
    Public list endpoint: only published listings, with filtering and pagination.
    """
    try:
        filters = PropertyFilters().with_value("type", type).with_value("purpose", purpose)
    except InvalidFilterError as e:
        raise HTTPException(status_code=422, detail=str(e))
    # Only published listings are visible to the public
    filters = filters.with_value("status", PropertyStatus.PUBLISHED.value)
    extra = {"location": location, "min_price": min_price, "max_price": max_price, "search": search}
    try:
        result = await get_listings(filters, page=page, page_size=page_size, extra=extra)
    except Exception as e:
        logger.error("Error fetching public properties from upstream", error=str(e))
        raise HTTPException(status_code=502, detail=f"Error fetching properties: {e}")

    items = [item for item in result["items"] if item["status"] == PropertyStatus.PUBLISHED.value]
    logger.info("Fetched public properties", total_properties=result["total"])
    return {
        "success": True,
        "data": {"total": result["total"], "items": items},
        "pagination": result["pagination"],
    }

@router.get("/public/{property_id}", response_model=PropertyResponse)
async def get_property_public(property_id: str):
    """
    Public endpoint to get full details for a single published property by ID.
    """
    try:
        listing = await get_listing(property_id)
    except HTTPStatusError as e:
        if e.response.status_code == 404:
            raise HTTPException(status_code=404, detail="Property not found")
        logger.error("Error fetching public property from upstream", property_id=property_id, error=str(e))
        raise HTTPException(status_code=502, detail=f"Error fetching property details: {e}")
    except UpstreamError as e:
        logger.error("Error fetching public property from upstream", property_id=property_id, error=str(e))
        raise HTTPException(status_code=e.status_code, detail=str(e))

    if listing["status"] != PropertyStatus.PUBLISHED.value:
        raise HTTPException(status_code=404, detail="Property not found or not published")
    logger.info("Fetched public property details", property_id=property_id)
    return listing
