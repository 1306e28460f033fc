import httpx
import pytest
import pytest_asyncio
from apscheduler.jobstores.base import JobLookupError
from httpx import ASGITransport, AsyncClient
from app.dependencies.auth import get_current_admin
from app.dependencies.rate_limit import admin_list_limiter, login_limiter, register_limiter
from app.main import app

async def _no_limit():
    return None

@pytest.fixture
def admin_user():
    return {"id": "admin-1", "email": "admin@propertipro.id", "role": "admin"}

@pytest_asyncio.fixture
async def client(admin_user):
    app.dependency_overrides[get_current_admin] = lambda: admin_user
    for limiter in (admin_list_limiter, login_limiter, register_limiter):
        app.dependency_overrides[limiter] = _no_limit
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def mock_upstream(monkeypatch):
    """Route a module's httpx.AsyncClient through a MockTransport handler.

    Usage: calls = mock_upstream("app.services.listings", handler)
    """
    def install(module: str, handler):
        calls = []

        def recording_handler(request: httpx.Request):
            calls.append(request)
            return handler(request)

        def factory(**kwargs):
            return httpx.AsyncClient(transport=httpx.MockTransport(recording_handler), **kwargs)

        monkeypatch.setattr(f"{module}.AsyncClient", factory)
        return calls

    return install

class FakeScheduler:
    """Stands in for AsyncIOScheduler; jobs only run when fired by the test."""

    def __init__(self):
        self.jobs = {}

    def add_job(self, func, trigger, run_date=None, args=None, id=None, replace_existing=False):
        self.jobs[id] = {"func": func, "trigger": trigger, "run_date": run_date, "args": args or []}

    def remove_job(self, job_id):
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]

    def fire(self, job_id):
        job = self.jobs.pop(job_id)
        return job["func"](*job["args"])

@pytest.fixture
def fake_scheduler():
    return FakeScheduler()

@pytest.fixture
def listing():
    return {
        "id": "prop-1",
        "title": "Rumah Minimalis di Kemang",
        "property_type": "rumah",
        "purpose": "jual",
        "status": "pending",
        "price": 2.5,
        "price_unit": "miliar",
        "location": {"city": "Jakarta Selatan", "province": "DKI Jakarta"},
        "agent": {"id": "agent-1", "name": "Budi Santoso"},
        "views": 120,
        "inquiries": 4,
        "created_at": "2024-05-01T08:00:00Z",
    }
