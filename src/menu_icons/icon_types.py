"""Registry of icon types available to the picker.

Icon types are listed in a YAML file:

    icon_types:
      - id: dashicons
        label: Dashicons
      - id: svg
        label: SVG
        template: '<img src="{{ data.url }}" />'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IconType:
    """One icon type.

    Attributes:
        id: Identifier stored in settings and item meta (e.g. "dashicons").
        label: Human-readable name for the settings form.
        template: Optional media template for the browser picker.
    """

    id: str
    label: str
    template: Optional[str] = None


DEFAULT_ICON_TYPES = (
    IconType("dashicons", "Dashicons"),
    IconType("elusive", "Elusive"),
    IconType("fa", "Font Awesome"),
    IconType("foundation-icons", "Foundation"),
    IconType("genericon", "Genericons"),
    IconType("image", "Image"),
    IconType("svg", "SVG"),
)


class IconTypeRegistry:
    """Ordered set of registered icon types."""

    def __init__(self, icon_types: Iterable[IconType] = ()):
        self._types: Dict[str, IconType] = {}
        for icon_type in icon_types:
            self.register(icon_type)

    @classmethod
    def with_defaults(cls) -> "IconTypeRegistry":
        return cls(DEFAULT_ICON_TYPES)

    @classmethod
    def from_yaml(cls, path: Optional[Path]) -> "IconTypeRegistry":
        """Load icon types from a YAML file.

        Falls back to the built-in types when the file is missing or unusable.
        """
        if path is None:
            return cls.with_defaults()
        if not path.exists():
            logger.warning("Icon types file %s not found, using defaults", path)
            return cls.with_defaults()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load icon types from {path}: {e}")
            return cls.with_defaults()

        entries = data.get("icon_types") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("Icon types file %s has no 'icon_types' list, using defaults", path)
            return cls.with_defaults()

        registry = cls()
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning("Skipping malformed icon type entry: %r", entry)
                continue
            type_id = str(entry["id"])
            if type_id in registry:
                logger.warning("Skipping duplicate icon type entry: %s", type_id)
                continue
            registry.register(
                IconType(
                    id=type_id,
                    label=str(entry.get("label") or type_id),
                    template=entry.get("template"),
                )
            )
        return registry

    def register(self, icon_type: IconType) -> None:
        """Register an icon type.

        Raises:
            ValueError: If the id is already registered.
        """
        if icon_type.id in self._types:
            raise ValueError(f"Icon type '{icon_type.id}' already registered")
        self._types[icon_type.id] = icon_type

    def unregister(self, type_id: str) -> None:
        """Disable a type; settings referring to it get pruned on next load."""
        self._types.pop(type_id, None)

    def get(self, type_id: str) -> Optional[IconType]:
        return self._types.get(type_id)

    def ids(self) -> List[str]:
        return list(self._types)

    def labels(self) -> Dict[str, str]:
        return {type_id: icon_type.label for type_id, icon_type in self._types.items()}

    def templates(self) -> Dict[str, str]:
        return {
            type_id: icon_type.template
            for type_id, icon_type in self._types.items()
            if icon_type.template
        }

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def __iter__(self) -> Iterator[IconType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
