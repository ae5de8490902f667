"""Shared test fixtures and configuration."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from cedoi.api.deps import get_now
from cedoi.core.config import Settings
from cedoi.core.enums import Role
from cedoi.core.security import create_session_token
from cedoi.db import Base, make_engine
from cedoi.main import create_app
from cedoi.storage import MemoryStore, SqlStore
from tests.utils import NOW, make_meeting, make_user


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from cedoi.core.rate_limit import limiter

    # Check if this is a rate limiting test (marked with @pytest.mark.rate_limit)
    if "rate_limit" in request.keywords:
        limiter.enabled = True
        limiter.reset()
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True


@pytest.fixture
def memory_store():
    # Meetings and users appear to have been created an hour before NOW
    return MemoryStore(clock=lambda: NOW - timedelta(hours=1))


@pytest.fixture
def sql_store():
    """A fresh in-memory SQLite database for each test."""
    engine = make_engine("sqlite:///:memory:")
    store = SqlStore(engine)
    yield store
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def chairman(store):
    return make_user(store, "chairman@cedoi.com", "Chairman", Role.CHAIRMAN, "CEDOI Board", "chairman_qr_456")


@pytest.fixture
def sonai(store):
    return make_user(store, "sonai@cedoi.com", "Sonai", Role.SONAI, "CEDOI Administration", "sonai_qr_123")


@pytest.fixture
def members(store):
    return [
        make_user(store, "andrew.ananth@cedoi.com", "Andrew Ananth", company="Godivatech", qr_code="andrew_qr_789"),
        make_user(store, "imran@cedoi.com", "Imran", company="MK Trading", qr_code="imran_qr_104"),
        make_user(store, "jaffer@cedoi.com", "Jaffer", company="Spice King", qr_code="jaffer_qr_110"),
    ]


@pytest.fixture
def meeting(store, chairman):
    """A meeting starting ten minutes after NOW, so attendance is open."""
    return make_meeting(store, NOW + timedelta(minutes=10), chairman.id, agenda="Monthly networking")


@pytest.fixture
def test_settings():
    return Settings(SEED_DEFAULT_USERS=False, ENVIRONMENT="testing", LOG_LEVEL="WARNING")


@pytest.fixture
def app(store, test_settings):
    app = create_app(store=store, settings=test_settings)
    app.dependency_overrides[get_now] = lambda: NOW
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(user):
    return {"Authorization": f"Bearer {create_session_token(user.id, user.role.value)}"}


@pytest.fixture
def chairman_headers(chairman):
    return auth_headers(chairman)


@pytest.fixture
def sonai_headers(sonai):
    return auth_headers(sonai)


@pytest.fixture
def member_headers(members):
    return auth_headers(members[0])
