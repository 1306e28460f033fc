import httpx
import pytest
from unittest.mock import AsyncMock
from app.schemas.api import Pagination
from app.services.listings import normalize_listing

@pytest.mark.asyncio
async def test_public_list_only_published(client, monkeypatch, listing):
    published = normalize_listing({**listing, "id": "prop-2", "status": "published"})
    pending = normalize_listing(listing)
    mock_get_listings = AsyncMock(return_value={
        "items": [published, pending],
        "total": 2,
        "pagination": Pagination.from_counts(1, 10, 2),
    })
    monkeypatch.setattr("app.routers.properties.get_listings", mock_get_listings)

    response = await client.get("/api/v1/properties/public", params={"purpose": "jual", "location": "Jakarta"})
    assert response.status_code == 200
    items = response.json()["data"]["items"]
    assert [i["id"] for i in items] == ["prop-2"]
    filters = mock_get_listings.call_args.args[0]
    assert filters.to_query() == {"status": "published", "purpose": "jual"}
    assert mock_get_listings.call_args.kwargs["extra"]["location"] == "Jakarta"

@pytest.mark.asyncio
async def test_public_detail_hides_unpublished(client, monkeypatch, listing):
    monkeypatch.setattr("app.routers.properties.get_listing", AsyncMock(return_value=normalize_listing(listing)))
    response = await client.get("/api/v1/properties/public/prop-1")
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_public_detail_published(client, monkeypatch, listing):
    listing["status"] = "published"
    monkeypatch.setattr("app.routers.properties.get_listing", AsyncMock(return_value=normalize_listing(listing)))
    response = await client.get("/api/v1/properties/public/prop-1")
    assert response.status_code == 200
    assert response.json()["title"] == "Rumah Minimalis di Kemang"

@pytest.mark.asyncio
async def test_public_detail_upstream_missing(client, monkeypatch):
    request = httpx.Request("GET", "http://listing.local/api/v1/properties/nope")
    error = httpx.HTTPStatusError("not found", request=request, response=httpx.Response(404, request=request))
    monkeypatch.setattr("app.routers.properties.get_listing", AsyncMock(side_effect=error))
    response = await client.get("/api/v1/properties/public/nope")
    assert response.status_code == 404
