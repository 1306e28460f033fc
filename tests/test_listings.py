import json
from contextlib import asynccontextmanager
import httpx
import pytest
from unittest.mock import AsyncMock
from app.exceptions import ActionNotAllowedError
from app.schemas.api import Pagination
from app.services import listings
from app.services.filters import PropertyFilters

def test_normalize_listing_maps_upstream_fields(listing):
    normalized = listings.normalize_listing({**listing, "status": "PENDING", "views": None, "view_count": 7})
    assert normalized["status"] == "pending"
    assert normalized["type"] == "rumah"
    assert normalized["views"] == 7

def test_normalize_listing_skips_unknown_status(listing):
    assert listings.normalize_listing({**listing, "status": "sold"}) is None
    assert listings.normalize_listing("garbage") is None

@pytest.mark.parametrize(
    "payload,expected_total",
    [
        ({"items": [{"id": 1}], "total": 40}, 40),
        ({"data": [{"id": 1}, {"id": 2}], "count": 12}, 12),
        ([{"id": 1}, {"id": 2}, {"id": 3}], 3),
        ({"unexpected": True}, 0),
    ],
)
def test_unwrap_shapes(payload, expected_total):
    _, total = listings._unwrap(payload)
    assert total == expected_total

def test_pagination_from_counts():
    page = Pagination.from_counts(page=2, page_size=10, total=25)
    assert page.total_pages == 3
    assert page.has_next and page.has_prev
    last = Pagination.from_counts(page=3, page_size=10, total=25)
    assert not last.has_next
    empty = Pagination.from_counts(page=1, page_size=10, total=0)
    assert empty.total_pages == 0 and not empty.has_next and not empty.has_prev

@pytest.mark.asyncio
async def test_get_listings_sends_only_active_filters(mock_upstream, listing):
    def handler(request):
        return httpx.Response(200, json={"items": [listing], "total": 21})

    calls = mock_upstream("app.services.listings", handler)
    result = await listings.get_listings(PropertyFilters(status="pending", type="all"), page=3, page_size=10)

    params = calls[0].url.params
    assert params["status"] == "pending"
    assert "type" not in params
    assert params["offset"] == "20"
    assert params["limit"] == "10"
    assert result["total"] == 21
    assert result["pagination"].has_prev and not result["pagination"].has_next

@pytest.mark.asyncio
async def test_update_listing_status_refuses_illegal_move(monkeypatch, listing):
    monkeypatch.setattr(listings, "get_listing", AsyncMock(return_value={**listing, "status": "published"}))
    log_action = AsyncMock()
    monkeypatch.setattr(listings, "_log_action", log_action)

    with pytest.raises(ActionNotAllowedError):
        await listings.update_listing_status("prop-1", "approved", "admin-1")
    log_action.assert_not_awaited()

@pytest.mark.asyncio
async def test_update_listing_status_patches_and_logs(monkeypatch, mock_upstream, listing):
    monkeypatch.setattr(listings, "get_listing", AsyncMock(return_value=listings.normalize_listing(listing)))
    log_action = AsyncMock()
    invalidate = AsyncMock()
    monkeypatch.setattr(listings, "_log_action", log_action)
    monkeypatch.setattr(listings, "invalidate_stats_cache", invalidate)
    calls = mock_upstream("app.services.listings", lambda request: httpx.Response(200, json={}))

    updated = await listings.update_listing_status("prop-1", "rejected", "admin-1", reason="Blurry photos")

    assert updated["status"] == "rejected"
    assert calls[0].method == "PATCH"
    assert json.loads(calls[0].content)["status"] == "rejected"
    log_action.assert_awaited_once_with(
        "admin-1",
        "property_rejected",
        "prop-1",
        previous_status="pending",
        new_status="rejected",
        details={"reason": "Blurry photos"},
    )
    invalidate.assert_awaited_once()

@pytest.mark.asyncio
async def test_update_listing_status_surfaces_upstream_error(monkeypatch, mock_upstream, listing):
    monkeypatch.setattr(listings, "get_listing", AsyncMock(return_value=listings.normalize_listing(listing)))
    log_action = AsyncMock()
    monkeypatch.setattr(listings, "_log_action", log_action)
    mock_upstream("app.services.listings", lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(httpx.HTTPStatusError):
        await listings.update_listing_status("prop-1", "approved", "admin-1")
    log_action.assert_not_awaited()

@pytest.mark.asyncio
async def test_delete_listing_removes_media_first(monkeypatch, mock_upstream):
    monkeypatch.setattr(listings, "_log_action", AsyncMock())
    monkeypatch.setattr(listings, "invalidate_stats_cache", AsyncMock())
    calls = mock_upstream("app.services.listings", lambda request: httpx.Response(204))

    await listings.delete_listing("prop-1", "admin-1")

    assert [c.method for c in calls] == ["DELETE", "DELETE"]
    assert calls[0].url.path.endswith("/properties/prop-1/media")
    assert calls[1].url.path.endswith("/properties/prop-1")

@pytest.mark.asyncio
async def test_property_stats_uses_cache(monkeypatch):
    redis = AsyncMock()
    redis.get.return_value = json.dumps({"total": 2, "pending": 2, "approved": 0, "published": 0,
                                         "rejected": 0, "total_views": 0, "total_inquiries": 0})
    monkeypatch.setattr(listings, "get_redis_client", AsyncMock(return_value=redis))
    compute = AsyncMock()
    monkeypatch.setattr(listings, "compute_property_stats", compute)

    stats = await listings.get_property_stats()
    assert stats.pending == 2
    compute.assert_not_awaited()

@pytest.mark.asyncio
async def test_property_stats_refresh_recomputes(monkeypatch, mock_upstream, listing):
    redis = AsyncMock()
    monkeypatch.setattr(listings, "get_redis_client", AsyncMock(return_value=redis))
    mock_upstream("app.services.listings", lambda request: httpx.Response(200, json=[listing, {**listing, "status": "published"}]))

    stats = await listings.get_property_stats(refresh=True)
    assert stats.total == 2
    assert stats.published == 1
    redis.get.assert_not_awaited()
    redis.setex.assert_awaited_once()

def test_normalize_listing_skips_incomplete(listing):
    assert listings.normalize_listing({"id": "prop-2", "status": "pending", "title": "Tanah"}) is None
    assert listings.normalize_listing({**listing, "title": ""}) is None
    assert listings.normalize_listing({**listing, "price": "nego"}) is None
    assert listings.normalize_listing({**listing, "price": "850"})["price"] == 850.0

@pytest.mark.asyncio
async def test_get_listings_total_excludes_skipped_items(mock_upstream, listing):
    payload = {"items": [listing, {**listing, "id": "prop-2", "status": "sold"}, {"id": "prop-3", "status": "pending"}], "total": 3}
    mock_upstream("app.services.listings", lambda request: httpx.Response(200, json=payload))

    result = await listings.get_listings(page=1, page_size=10)
    assert [item["id"] for item in result["items"]] == ["prop-1"]
    assert result["total"] == 1
    assert result["pagination"].total_pages == 1

@pytest.mark.asyncio
async def test_compute_property_stats_pages_past_first_batch(mock_upstream):
    def handler(request):
        offset = int(request.url.params["offset"])
        size = 1000 if offset == 0 else 500
        return httpx.Response(200, json={"items": [{"status": "pending", "views": 1}] * size, "total": 1500})

    calls = mock_upstream("app.services.listings", handler)
    stats = await listings.compute_property_stats()

    assert stats.total == 1500
    assert stats.pending == 1500
    assert stats.total_views == 1500
    assert [c.url.params["offset"] for c in calls] == ["0", "1000"]

@pytest.mark.asyncio
async def test_fetch_all_listings_stops_on_empty_page(mock_upstream):
    calls = mock_upstream("app.services.listings", lambda request: httpx.Response(200, json={"items": [], "total": 40}))
    assert await listings.fetch_all_listings() == []
    assert len(calls) == 1

@pytest.mark.asyncio
async def test_log_action_reuses_shared_session_factory(monkeypatch):
    session = AsyncMock()
    opened = []

    @asynccontextmanager
    async def factory():
        opened.append(session)
        yield session

    def no_new_engine(*args, **kwargs):
        raise AssertionError("engine created per call")

    monkeypatch.setattr(listings, "async_session", factory)
    monkeypatch.setattr(listings, "create_async_engine", no_new_engine)

    await listings._log_action("admin-1", "property_approved", "prop-1")
    await listings._log_action("admin-1", "property_deleted", "prop-2")

    assert len(opened) == 2
    assert session.execute.await_count == 2
    assert session.commit.await_count == 2

@pytest.mark.asyncio
async def test_dispose_engine(monkeypatch):
    engine = AsyncMock()
    monkeypatch.setattr(listings, "engine", engine)
    await listings.dispose_engine()
    engine.dispose.assert_awaited_once()
