"""Plugin settings persisted as a single option blob.

The blob is read once per request (``load()``), defaults fill in anything
missing, and icon types that are no longer registered are pruned. When
pruning changes the list the blob is written back.
"""

import copy
import logging
from typing import Any, Dict, List, Literal, Mapping, Optional

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .assets import Asset, script_suffix
from .form_fields import FieldArgs, FieldDescriptor, FieldRegistry, FieldType, create_field
from .icon_types import IconTypeRegistry
from .stores import OptionStore
from .templating import render_template

logger = logging.getLogger(__name__)


POSITION_CHOICES = {"before": "Before", "after": "After"}


class SettingsBlob(BaseModel):
    """Shape of the persisted settings record."""

    model_config = ConfigDict(extra="ignore")

    icon_types: List[str] = Field(default_factory=list)
    extra_css: bool = True
    position: Literal["before", "after"] = "before"

    @field_validator("icon_types", mode="before")
    @classmethod
    def normalize_icon_types(cls, value: Any) -> List[str]:
        """Accept a single id or any iterable; drop blanks and duplicates."""
        if value is None or value == "":
            return []
        if isinstance(value, str):
            value = [value]
        if isinstance(value, Mapping):
            value = list(value.values())
        seen: List[str] = []
        for item in value:
            item = str(item).strip()
            if item and item not in seen:
                seen.append(item)
        return seen


class SettingsStore:
    """Reads, repairs and updates the settings blob.

    Example:
        store = SettingsStore(OptionStore(db), IconTypeRegistry.with_defaults())
        await store.load()
        store.get("icon_types")  # ["dashicons", ...]
        store.get("position")    # "before"
    """

    def __init__(
        self,
        options: OptionStore,
        icon_types: IconTypeRegistry,
        option_name: str = "menu-icons",
        assets_url: str = "/static/menu-icons/",
        version: str = "",
        debug: bool = False,
    ):
        self._options = options
        self._icon_types = icon_types
        self._option_name = option_name
        self._assets_url = assets_url
        self._version = version
        self._debug = debug
        self._settings: Dict[str, Any] = self.defaults()

    @property
    def option_name(self) -> str:
        return self._option_name

    @property
    def icon_types(self) -> IconTypeRegistry:
        return self._icon_types

    def defaults(self) -> Dict[str, Any]:
        return SettingsBlob(icon_types=self._icon_types.ids()).model_dump()

    def _parse(self, stored: Any) -> Dict[str, Any]:
        if not isinstance(stored, Mapping):
            if stored is not None:
                logger.debug("Settings %s is not a mapping, using defaults", self._option_name)
            return self.defaults()
        try:
            return SettingsBlob.model_validate({**self.defaults(), **stored}).model_dump()
        except ValidationError as e:
            logger.debug("Settings %s are malformed, using defaults: %s", self._option_name, e)
            return self.defaults()

    async def load(self) -> Dict[str, Any]:
        """Read the blob, prune stale icon types and cache the result.

        Returns:
            A copy of the cached settings.
        """
        stored = await self._options.get_option(self._option_name)
        settings = self._parse(stored)

        # A type can be enabled here but unregistered elsewhere.
        if settings["icon_types"]:
            active = [type_id for type_id in settings["icon_types"] if type_id in self._icon_types]
            if active != settings["icon_types"]:
                logger.info(
                    "Pruning inactive icon types from settings: %s",
                    ", ".join(t for t in settings["icon_types"] if t not in active),
                )
                settings["icon_types"] = active
                await self._options.update_option(self._option_name, settings)

        self._settings = settings
        return self.get()

    def get(self, *path: Any) -> Any:
        """Deep lookup into the cached settings.

        Args:
            *path: Keys to follow, e.g. ``get("icon_types", 0)``.

        Returns:
            The value (a copy), the whole blob when no path is given, or
            None if any key is missing.
        """
        value: Any = self._settings
        for key in path:
            if isinstance(value, Mapping) and key in value:
                value = value[key]
            elif isinstance(value, list) and isinstance(key, int) and -len(value) <= key < len(value):
                value = value[key]
            else:
                return None
        return copy.deepcopy(value)

    async def update(self, values: Mapping[str, Any]) -> bool:
        """Replace the settings with a submitted form section.

        Unchecked checkbox groups are not submitted, so a missing
        ``icon_types`` means none selected.

        Returns:
            False if the submission was invalid and nothing was written.
        """
        data = dict(values)
        data.setdefault("icon_types", [])
        try:
            blob = SettingsBlob.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring invalid settings submission: %s", e)
            return False

        await self._options.update_option(self._option_name, blob.model_dump())
        await self.load()
        return True

    def active_icon_types(self) -> List[str]:
        return self.get("icon_types") or []

    def field_args(self) -> FieldArgs:
        return FieldArgs(prefix=self._option_name, section="settings")

    def get_settings_fields(self) -> List[FieldDescriptor]:
        """Descriptors for the settings meta box, filled with current values."""
        return [
            FieldDescriptor(
                id="icon_types",
                type=FieldType.CHECKBOX,
                label="Icon Types",
                choices=self._icon_types.labels(),
                value=self.get("icon_types"),
            ),
            FieldDescriptor(
                id="extra_css",
                type=FieldType.SELECT,
                label="Extra Stylesheet",
                choices={"1": "Enable", "0": "Disable"},
                value="1" if self.get("extra_css") else "0",
            ),
            FieldDescriptor(
                id="position",
                type=FieldType.SELECT,
                label="Default Icon Position",
                choices=dict(POSITION_CHOICES),
                value=self.get("position"),
            ),
        ]

    def get_item_fields(self, values: Optional[Mapping[str, Any]] = None) -> List[FieldDescriptor]:
        """Descriptors for the per-item settings shown by the picker."""
        values = values or {}
        return [
            FieldDescriptor(
                id="position",
                type=FieldType.SELECT,
                label="Position",
                choices=dict(POSITION_CHOICES),
                value=values.get("position", self.get("position")),
            ),
        ]

    def render_meta_box(self, registry: Optional[FieldRegistry] = None) -> Markup:
        fields = [
            (descriptor.label, create_field(descriptor, self.field_args(), registry))
            for descriptor in self.get_settings_fields()
        ]
        return render_template("meta_box.html", fields=fields)

    def stylesheet(self) -> Asset:
        return Asset(
            handle="menu-icons",
            kind="style",
            src=f"{self._assets_url}css/admin{script_suffix(self._debug)}.css",
            version=self._version,
        )
