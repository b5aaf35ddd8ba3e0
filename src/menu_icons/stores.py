"""Key-value stores backed by the database.

``OptionStore`` holds named blobs, ``MenuItemMetaStore`` per-item metadata
and ``MenuStore`` the menus being edited.
"""

import copy
import logging
from typing import Any, List, Optional

from sqlalchemy import delete, select

from .database import Database, MenuItem, MenuItemMeta, NavMenu, Option

logger = logging.getLogger(__name__)


class OptionStore:
    """Named option records."""

    def __init__(self, db: Database):
        self._db = db

    async def get_option(self, name: str, default: Any = None) -> Any:
        async with self._db.session() as session:
            option = await session.get(Option, name)
            if option is None:
                return default
            return copy.deepcopy(option.value)

    async def update_option(self, name: str, value: Any) -> bool:
        """Store ``value`` under ``name``.

        Returns:
            True if the stored value changed.
        """
        async with self._db.session() as session:
            option = await session.get(Option, name)
            if option is None:
                session.add(Option(name=name, value=value))
            elif option.value == value:
                return False
            else:
                option.value = value
            await session.commit()
        logger.debug("Updated option %s", name)
        return True

    async def delete_option(self, name: str) -> bool:
        async with self._db.session() as session:
            result = await session.execute(delete(Option).where(Option.name == name))
            await session.commit()
            return result.rowcount > 0


class MenuItemMetaStore:
    """Per-item metadata records."""

    def __init__(self, db: Database):
        self._db = db

    async def _find(self, session, item_id: int, key: str) -> Optional[MenuItemMeta]:
        result = await session.execute(
            select(MenuItemMeta).where(
                MenuItemMeta.item_id == item_id, MenuItemMeta.meta_key == key
            )
        )
        return result.scalar_one_or_none()

    async def get_meta(self, item_id: int, key: str, default: Any = None) -> Any:
        async with self._db.session() as session:
            meta = await self._find(session, item_id, key)
            if meta is None:
                return default
            return copy.deepcopy(meta.meta_value)

    async def update_meta(self, item_id: int, key: str, value: Any) -> None:
        async with self._db.session() as session:
            meta = await self._find(session, item_id, key)
            if meta is None:
                session.add(MenuItemMeta(item_id=item_id, meta_key=key, meta_value=value))
            else:
                meta.meta_value = value
            await session.commit()

    async def delete_meta(self, item_id: int, key: str) -> bool:
        async with self._db.session() as session:
            result = await session.execute(
                delete(MenuItemMeta).where(
                    MenuItemMeta.item_id == item_id, MenuItemMeta.meta_key == key
                )
            )
            await session.commit()
            return result.rowcount > 0


class MenuStore:
    """Menus and their items."""

    def __init__(self, db: Database):
        self._db = db

    async def create_menu(self, name: str) -> NavMenu:
        async with self._db.session() as session:
            menu = NavMenu(name=name)
            session.add(menu)
            await session.commit()
            return menu

    async def list_menus(self) -> List[NavMenu]:
        async with self._db.session() as session:
            result = await session.execute(select(NavMenu).order_by(NavMenu.id))
            return list(result.scalars().all())

    async def get_menu(self, menu_id: int) -> Optional[NavMenu]:
        async with self._db.session() as session:
            return await session.get(NavMenu, menu_id)

    async def add_item(self, menu_id: int, title: str, url: str = "") -> MenuItem:
        async with self._db.session() as session:
            count = len(
                (await session.execute(select(MenuItem.id).where(MenuItem.menu_id == menu_id)))
                .scalars()
                .all()
            )
            item = MenuItem(menu_id=menu_id, title=title, url=url, position=count)
            session.add(item)
            await session.commit()
            return item

    async def list_items(self, menu_id: int) -> List[MenuItem]:
        async with self._db.session() as session:
            result = await session.execute(
                select(MenuItem)
                .where(MenuItem.menu_id == menu_id)
                .order_by(MenuItem.position, MenuItem.id)
            )
            return list(result.scalars().all())

    async def get_item(self, item_id: int) -> Optional[MenuItem]:
        async with self._db.session() as session:
            return await session.get(MenuItem, item_id)
