# tests/conftest.py
"""Shared fixtures: in-memory database, fake upstreams and an API client."""

import json
from typing import Callable, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from leadgen.database import create_engine, create_session_factory, init_db
from leadgen.main import create_app
from leadgen.models import Prospect, Source, utcnow
from leadgen.services.normalization import normalization_service


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "api: tests that drive the HTTP app")


# ============================================================================
# FAKES
# ============================================================================

class FakeUpstream:
    """Records outbound requests and answers them with a configurable handler."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, text="<html><body><h1>Acme</h1><p>We build widgets.</p></body></html>"
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def json_bodies(self):
        return [json.loads(r.content) for r in self.requests if r.content]


class FakeLLM:
    """Stands in for LLMClient; replies with canned text or raises."""

    def __init__(self, reply: str = "", image_url: Optional[str] = "https://img.example/1.png"):
        self.reply = reply
        self.image_url = image_url
        self.error: Optional[Exception] = None
        self.prompts: List[tuple] = []

    async def complete(self, system_prompt, user_prompt):
        self.prompts.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.reply

    async def generate_image(self, prompt):
        self.prompts.append((None, prompt))
        if self.error:
            raise self.error
        return self.image_url

    async def close(self):
        pass


# ============================================================================
# DATABASE
# ============================================================================

@pytest_asyncio.fixture
async def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_source():
    async def _make(db, name="Purchased list", **fields):
        source = Source(name=name, **fields)
        db.add(source)
        await db.commit()
        return source
    return _make


@pytest.fixture
def make_prospect():
    """Insert a prospect directly, bypassing the dedupe checks."""
    async def _make(db, suppressed=False, archived=False, **fields):
        keys = normalization_service.identity_keys(
            email=fields.get("email"),
            website=fields.get("website"),
            contact_name=fields.get("contact_name"),
        )
        prospect = Prospect(
            normalized_email=keys.email,
            normalized_domain=keys.domain,
            normalized_contact_name=keys.contact_name,
            **fields,
        )
        if suppressed:
            prospect.suppressed_at = utcnow()
        if archived:
            prospect.archived_at = utcnow()
        db.add(prospect)
        await db.commit()
        return prospect
    return _make


# ============================================================================
# APP
# ============================================================================

@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest_asyncio.fixture
async def app(session_factory, upstream):
    app = create_app()
    app.state.session_factory = session_factory
    app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app.state.llm_client = None
    yield app
    await app.state.http_client.aclose()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
