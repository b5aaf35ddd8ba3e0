"""Pytest configuration and fixtures for Menu Icons tests."""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from menu_icons.config import Settings
from menu_icons.database import Database
from menu_icons.icon_types import IconTypeRegistry
from menu_icons.main import create_app
from menu_icons.picker import NONCE_ACTION, Picker
from menu_icons.security import NonceManager
from menu_icons.settings import SettingsStore
from menu_icons.stores import MenuItemMetaStore, MenuStore, OptionStore

TEST_SECRET = "test-secret"


@pytest.fixture
async def db(tmp_path):
    """Fresh sqlite database per test."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init()
    yield database
    await database.dispose()


@pytest.fixture
def icon_types():
    return IconTypeRegistry.with_defaults()


@pytest.fixture
def option_store(db):
    return OptionStore(db)


@pytest.fixture
def meta_store(db):
    return MenuItemMetaStore(db)


@pytest.fixture
def menu_store(db):
    return MenuStore(db)


@pytest.fixture
def nonces():
    return NonceManager(TEST_SECRET, lifetime=timedelta(hours=1))


@pytest.fixture
def nonce(nonces):
    """Valid token for the nav-menu save action."""
    return nonces.create(NONCE_ACTION)


@pytest.fixture
async def settings_store(option_store, icon_types):
    store = SettingsStore(option_store, icon_types, option_name="menu-icons", version="0.3.0")
    await store.load()
    return store


@pytest.fixture
def picker(settings_store, meta_store, nonces):
    return Picker(settings_store, meta_store, nonces=nonces, version="0.3.0")


@pytest.fixture
def menu_item():
    return SimpleNamespace(id=12, title="Home")


@pytest.fixture
async def app(tmp_path):
    """Application wired to a temporary database."""
    config = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
        secret_key=TEST_SECRET,
        log_dir=tmp_path / "logs",
    )
    application = create_app(config)
    # ASGITransport does not run the lifespan
    await application.state.db.init()
    yield application
    await application.state.db.dispose()


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
