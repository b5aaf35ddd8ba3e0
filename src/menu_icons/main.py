"""FastAPI application for the Menu Icons admin screens."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from .config import PROJECT_ROOT, Settings
from .database import Database
from .form_fields import FieldRegistry
from .icon_types import IconTypeRegistry
from .logging_config import configure_logging
from .picker import Picker
from .routers import nav_menus_router
from .security import NonceManager
from .settings import SettingsStore
from .stores import MenuItemMetaStore, MenuStore, OptionStore

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Settings] = None,
    icon_types: Optional[IconTypeRegistry] = None,
    field_registry: Optional[FieldRegistry] = None,
) -> FastAPI:
    """Build the application and wire its components.

    Args:
        config: Application settings; read from the environment when omitted.
        icon_types: Registered icon types; loaded from ``config.icon_types_file``
            (or the built-in set) when omitted.
        field_registry: Field types available to the forms.

    Returns:
        The FastAPI application. Components live on ``app.state``.
    """
    config = config or Settings()
    db = Database(config.database_url, echo=config.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Tests configure logging through pytest
        if "pytest" not in sys.modules:
            log_file = configure_logging(
                config.log_dir,
                config.log_max_bytes,
                config.log_retention_days,
                config.debug,
                config.uvicorn_log_level,
            )
            logger.info("Logging to %s", log_file)
        logger.info("Initializing database...")
        await db.init()
        await app.state.settings_store.load()
        logger.info("Menu Icons admin ready")

        yield

        try:
            await db.dispose()
        except Exception:
            logger.exception("Error while disposing database engine")

    app = FastAPI(
        title="Menu Icons",
        description="Nav menu icon picker and settings",
        version=config.version,
        lifespan=lifespan,
    )

    icon_types = icon_types or IconTypeRegistry.from_yaml(config.icon_types_file)
    field_registry = field_registry or FieldRegistry()
    nonces = NonceManager(
        config.secret_key, lifetime=timedelta(minutes=config.nonce_lifetime_minutes)
    )
    options = OptionStore(db)
    item_meta = MenuItemMetaStore(db)
    settings_store = SettingsStore(
        options,
        icon_types,
        option_name=config.option_name,
        assets_url=config.assets_url,
        version=config.version,
        debug=config.debug,
    )

    app.state.config = config
    app.state.db = db
    app.state.menus = MenuStore(db)
    app.state.options = options
    app.state.item_meta = item_meta
    app.state.icon_types = icon_types
    app.state.field_registry = field_registry
    app.state.nonces = nonces
    app.state.settings_store = settings_store
    app.state.picker = Picker(
        settings_store,
        item_meta,
        nonces=nonces,
        field_registry=field_registry,
        assets_url=config.assets_url,
        version=config.version,
        meta_key=config.meta_key,
    )

    app.include_router(nav_menus_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def main():
    """Run the server."""
    load_dotenv(PROJECT_ROOT / ".env", override=False)
    config = Settings()
    print(f"Starting Menu Icons admin on {config.host}:{config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
