"""Icon picker integration for the nav-menu editor.

Injects an icon control into every menu item, hands the browser picker its
payload and persists each item's selection as item metadata.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from markupsafe import Markup, escape

from .assets import Asset
from .form_fields import FieldArgs, FieldDescriptor, FieldRegistry, create_field
from .security import NonceManager
from .settings import SettingsStore
from .stores import MenuItemMetaStore
from .templating import render_template
from .utils import sanitize_text

logger = logging.getLogger(__name__)


NAV_MENUS_SCREEN = "nav-menus"
NONCE_ACTION = "update-nav_menu"
NONCE_FIELD = "update-nav-menu-nonce"

# (item, depth, args, menu_id) -> extra markup
FieldsHook = Callable[[Any, int, Mapping[str, Any], int], Any]
# (value, item_id) -> value
ValueFilter = Callable[[Dict[str, str], int], Dict[str, str]]


@dataclass(frozen=True)
class Screen:
    """The admin screen a request was made from."""

    id: str
    is_ajax: bool = False


class Picker:
    """Nav-menu editor glue.

    Example:
        picker = Picker(settings_store, MenuItemMetaStore(db), nonces=nonces)
        if picker.enabled:
            html = await picker.render_fields(item, menu_id=menu.id)
    """

    def __init__(
        self,
        settings: SettingsStore,
        meta: MenuItemMetaStore,
        nonces: NonceManager,
        field_registry: Optional[FieldRegistry] = None,
        assets_url: str = "/static/menu-icons/",
        version: str = "",
        meta_key: str = "menu-icons",
    ):
        self._settings = settings
        self._meta = meta
        self._nonces = nonces
        self._field_registry = field_registry or FieldRegistry()
        self._assets_url = assets_url
        self._version = version
        self._meta_key = meta_key

        # Extension points
        self.before_fields: List[FieldsHook] = []
        self.after_fields: List[FieldsHook] = []
        self.value_filters: List[ValueFilter] = []

    @property
    def enabled(self) -> bool:
        return bool(self._settings.active_icon_types())

    @property
    def form_prefix(self) -> str:
        return self._settings.option_name

    # ─────────────────────────────────────────────────────────────────
    # Screen integration
    # ─────────────────────────────────────────────────────────────────

    def columns(self, columns: Mapping[str, str]) -> Dict[str, str]:
        """Add the icon column to the screen options toggle."""
        result = dict(columns)
        result["icon"] = "Icon"
        return result

    def assets(self) -> List[Asset]:
        return [
            Asset(
                handle="menu-icons-picker",
                kind="script",
                src=f"{self._assets_url}js/picker.js",
                deps=["icon-picker"],
                version=self._version,
                in_footer=True,
            ),
            self._settings.stylesheet(),
        ]

    def get_fields(self, values: Optional[Mapping[str, Any]] = None) -> List[FieldDescriptor]:
        """Per-item setting descriptors, tagged for the browser picker."""
        fields = self._settings.get_item_fields(values)
        for descriptor in fields:
            descriptor.attributes = {
                "class": "_setting",
                "data-key": descriptor.id,
                **descriptor.attributes,
            }
        return fields

    def script_data(self) -> Dict[str, Any]:
        """Payload for the browser-side picker."""
        settings_info = Markup(
            "Please note that the actual look of the icons on the front-end will also "
            "be affected by your active theme's style. You can use {} if you need to "
            "override it."
        ).format(
            Markup(
                '<a target="_blank" href="http://wordpress.org/plugins/simple-custom-css/">'
                "Simple Custom CSS</a>"
            )
        )
        return {
            "text": {
                "title": "Select Icon",
                "select": "Select",
                "all": "All",
                "preview": "Preview",
                "settingsInfo": str(settings_info),
            },
            "settingsFields": [descriptor.to_dict() for descriptor in self.get_fields()],
            "activeTypes": self._settings.active_icon_types(),
        }

    def media_templates(self) -> Markup:
        templates = [
            Markup('<script type="text/html" id="tmpl-menu-icons-{}">{}</script>').format(
                type_id, Markup(template)
            )
            for type_id, template in self._settings.icon_types.templates().items()
        ]
        return Markup("\n").join(templates)

    # ─────────────────────────────────────────────────────────────────
    # Per-item control
    # ─────────────────────────────────────────────────────────────────

    async def get_item_values(self, item_id: int) -> Dict[str, Any]:
        """Item selection layered over the menu-level defaults."""
        stored = await self._meta.get_meta(item_id, self._meta_key)
        values: Dict[str, Any] = {
            "type": "",
            "icon": "",
            "position": self._settings.get("position"),
        }
        if isinstance(stored, Mapping):
            values.update(stored)
        return values

    def _run_hooks(self, hooks: Sequence[FieldsHook], item, depth, args, menu_id) -> Markup:
        return Markup("").join(
            Markup(hook(item, depth, args, menu_id) or "") for hook in hooks
        )

    def _preview(self, values: Mapping[str, Any]) -> Markup:
        if values.get("type") and values.get("icon"):
            return Markup('<i class="_icon {} {}"></i>').format(values["type"], values["icon"])
        return escape("Select")

    async def render_fields(
        self,
        item: Any,
        depth: int = 0,
        args: Optional[Mapping[str, Any]] = None,
        menu_id: int = 0,
    ) -> Markup:
        """Markup injected into one menu item's edit panel."""
        args = args or {}
        values = await self.get_item_values(item.id)
        field_args = FieldArgs(prefix=self.form_prefix, section=str(item.id))
        fields = [
            (descriptor.label, create_field(descriptor, field_args, self._field_registry))
            for descriptor in self.get_fields(values)
        ]
        return render_template(
            "picker_fields.html",
            item_id=item.id,
            prefix=self.form_prefix,
            values=values,
            preview=self._preview(values),
            fields=fields,
            before=self._run_hooks(self.before_fields, item, depth, args, menu_id),
            after=self._run_hooks(self.after_fields, item, depth, args, menu_id),
        )

    # ─────────────────────────────────────────────────────────────────
    # Saving
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def sanitize_selection(submitted: Any) -> Dict[str, str]:
        """Clean a submitted selection.

        Blank values are dropped; a selection without an icon is empty.
        """
        if isinstance(submitted, Mapping):
            pairs = submitted.items()
        elif isinstance(submitted, list):
            pairs = enumerate(submitted)
        elif submitted in (None, ""):
            pairs = []
        else:
            pairs = [(0, submitted)]

        value: Dict[str, str] = {}
        for key, raw in pairs:
            if isinstance(raw, (Mapping, list)):
                continue
            cleaned = sanitize_text(raw)
            if cleaned:
                value[str(key)] = cleaned

        if not value.get("icon"):
            return {}
        return value

    async def save(
        self,
        menu_id: int,
        item_id: int,
        form: Mapping[str, Any],
        screen: Screen,
        nonce: Optional[str],
    ) -> bool:
        """Persist one item's selection from a nav-menu form submission.

        Args:
            menu_id: Menu being saved.
            item_id: Menu item being saved.
            form: Nested form data (see ``parse_nested_form``).
            screen: Screen the request came from.
            nonce: Anti-forgery token submitted with the form.

        Returns:
            True if the selection was written or deleted, False if the
            request was ignored.
        """
        if screen.is_ajax or screen.id != NAV_MENUS_SCREEN:
            return False

        if not self._nonces.verify(nonce, NONCE_ACTION):
            logger.warning("Ignoring menu item %s save: nonce check failed", item_id)
            return False

        section = form.get(self.form_prefix)
        submitted = section.get(str(item_id)) if isinstance(section, Mapping) else None
        await self.save_menu_item_meta(item_id, self.sanitize_selection(submitted))
        logger.debug("Saved icon selection for menu %s item %s", menu_id, item_id)
        return True

    async def save_menu_item_meta(self, item_id: int, value: Dict[str, str]) -> None:
        """Store the selection, or delete it when empty."""
        for value_filter in self.value_filters:
            value = value_filter(value, item_id)

        if value:
            await self._meta.update_meta(item_id, self._meta_key, value)
        else:
            await self._meta.delete_meta(item_id, self._meta_key)
