import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx
import pytest

from helpdesk_bridge.core.config import get_settings
from helpdesk_bridge.db.base import init_db
from helpdesk_bridge.helpdesk.session_token import WidgetTokenIssuer
from helpdesk_bridge.helpdesk.signing import AdminRequestSigner
from helpdesk_bridge.main import create_app
from helpdesk_bridge.repos.user_repo import UserRepo

ADMIN_SECRET = "test-admin-secret-0123456789abcdef0123"
WIDGET_SECRET = "test-widget-secret-0123456789abcdef012"
API_BASE_URL = "https://api.helpdesk.test"
WIDGET_HOST = "https://widget.helpdesk.test"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def app(tmp_path, monkeypatch):
    db_path = tmp_path / "test_helpdesk_bridge.db"
    monkeypatch.setenv("DB_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("HELPDESK_SECRET_KEY", ADMIN_SECRET)
    monkeypatch.setenv("HELPDESK_WIDGET_SECRET", WIDGET_SECRET)
    monkeypatch.setenv("HELPDESK_API_BASE_URL", API_BASE_URL)
    monkeypatch.setenv("HELPDESK_WIDGET_HOST", WIDGET_HOST)
    monkeypatch.setenv("CUSTOMER_INFO_HOST", "https://support.example.com")
    get_settings.cache_clear()
    app = create_app()
    yield app
    get_settings.cache_clear()


@pytest.fixture
async def sessionmaker(app):
    await init_db(app.state.engine)
    yield app.state.sessionmaker
    await app.state.engine.dispose()


@pytest.fixture
async def client(app, sessionmaker):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def signer():
    return AdminRequestSigner(ADMIN_SECRET)


@pytest.fixture
def token_issuer():
    return WidgetTokenIssuer(WIDGET_SECRET, title="Test Support")


async def seed_user(sessionmaker, email: str, name: str | None = "Known User", user_id: str = "u-1"):
    async with sessionmaker() as db:
        async with db.begin():
            return await UserRepo(db).create_user(user_id, email, name)


class RecordingReporter:
    """Error reporter that keeps notifications for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def notify(self, event: str, /, **context) -> None:
        self.events.append((event, context))
