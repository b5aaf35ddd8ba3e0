"""Field descriptors and the base field class.

A field is built fresh for every render pass from a declarative
``FieldDescriptor`` plus the ``FieldArgs`` that place it inside a form
(``prefix[section][id]``). Nothing here is persisted.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional, Union

from markupsafe import Markup, escape


class FieldType(Enum):
    """Built-in field variants.

    Attributes:
        TEXT: Single line ``<input type="text">``.
        TEXTAREA: Multi-line ``<textarea>``.
        CHECKBOX: Group of checkboxes, one per choice (multi-value).
        RADIO: Group of radio buttons, one per choice.
        SELECT: Dropdown with a single selected choice.
        SELECT_MULTIPLE: ``<select multiple>`` (multi-value).
        SPECIAL: Markup produced by a render callback.
    """

    TEXT = "text"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    SELECT_MULTIPLE = "select_multiple"
    SPECIAL = "special"


# Always computed by the field itself, never taken from a descriptor.
FORBIDDEN_ATTRIBUTES = ("id", "name", "value", "checked", "multiple")


@dataclass
class FieldDescriptor:
    """Declarative description of one form control.

    Attributes:
        id: Field identifier, the last segment of the id/name path.
        type: Variant tag (see ``FieldType``); unknown tags degrade to text.
        value: Current value.
        default: Used when ``value`` is ``None``.
        attributes: Extra HTML attributes for the control.
        description: Help text shown under the control.
        choices: Ordered ``value -> label`` mapping for choice variants.
        label: Human-readable label used by the surrounding form.
        render_cb: Callback for the ``special`` variant.
    """

    id: str = ""
    type: str = FieldType.TEXT.value
    value: Any = None
    default: Any = ""
    attributes: Dict[str, Any] = field(default_factory=dict)
    description: Union[str, Markup] = ""
    choices: Dict[Any, str] = field(default_factory=dict)
    label: str = ""
    render_cb: Optional[Callable[["BaseField"], Any]] = field(default=None, repr=False)

    def __post_init__(self):
        if isinstance(self.type, FieldType):
            self.type = self.type.value
        self.attributes = dict(self.attributes or {})
        self.choices = dict(self.choices or {})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FieldDescriptor":
        """Build a descriptor from a mapping, filling missing keys with defaults.

        Unknown keys are ignored.
        """
        names = {f.name for f in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})

    @classmethod
    def coerce(cls, data: Union["FieldDescriptor", Mapping[str, Any]]) -> "FieldDescriptor":
        """Return a private copy of ``data`` as a descriptor."""
        if isinstance(data, cls):
            return dataclasses.replace(data)
        return cls.from_mapping(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view, without the render callback."""
        return {
            "id": self.id,
            "type": self.type,
            "value": self.value,
            "default": self.default,
            "attributes": dict(self.attributes),
            "description": str(self.description),
            "choices": {str(key): label for key, label in self.choices.items()},
            "label": self.label,
        }


@dataclass
class FieldArgs:
    """Where a field lives inside a form.

    Only used to compose the ``id``/``name`` attributes.
    """

    prefix: str = ""
    section: str = ""
    mode: str = "plugin"

    @classmethod
    def coerce(cls, data: Union["FieldArgs", Mapping[str, Any], None]) -> "FieldArgs":
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        return cls(
            prefix=data.get("prefix", ""),
            section=data.get("section", ""),
            mode=data.get("mode", "plugin"),
        )


def as_text(value: Any) -> str:
    """String form used for attribute values and choice matching."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


class BaseField(ABC):
    """Base class for all field variants.

    Subclasses set ``field_type`` and ``default_attributes``, may normalize
    the value in ``set_properties()`` and must implement ``render()``.
    """

    field_type: ClassVar[FieldType]
    default_attributes: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, descriptor: FieldDescriptor, args: FieldArgs):
        self._descriptor = descriptor
        self._args = args
        self._value = descriptor.default if descriptor.value is None else descriptor.value
        self.keys = [
            text
            for text in (as_text(key) for key in (args.prefix, args.section, descriptor.id))
            if text
        ]

        attributes: Dict[str, Any] = dict(self.default_attributes)
        attributes.update(descriptor.attributes)
        attributes["id"] = self.create_id()
        attributes["name"] = self.create_name()
        self._attributes = attributes

        self.set_properties()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._attributes["id"]

    @property
    def name(self) -> str:
        return self._attributes["name"]

    @property
    def type(self) -> str:
        return self._descriptor.type

    @property
    def value(self) -> Any:
        return self._value

    @property
    def default(self) -> Any:
        return self._descriptor.default

    @property
    def label(self) -> str:
        return self._descriptor.label

    @property
    def choices(self) -> Dict[Any, str]:
        return self._descriptor.choices

    @property
    def description_text(self) -> Union[str, Markup]:
        return self._descriptor.description

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    @property
    def field_args(self) -> FieldArgs:
        return self._args

    @property
    def descriptor(self) -> FieldDescriptor:
        return self._descriptor

    def get(self, key: str) -> Any:
        """Look up ``key`` in the attributes, then in the descriptor."""
        if key in self._attributes:
            return self._attributes[key]
        if key == "value":
            return self._value
        return getattr(self._descriptor, key, None)

    # ------------------------------------------------------------------
    # id / name
    # ------------------------------------------------------------------

    def create_id(self) -> str:
        return "-".join(self.keys)

    def create_name(self) -> str:
        if not self.keys:
            return ""
        first, *rest = self.keys
        return first + "".join(f"[{key}]" for key in rest)

    def set_properties(self) -> None:
        """Normalize the value and attributes for this variant."""

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def build_attributes(self, exclude: Iterable[str] = ()) -> Markup:
        """Render the attributes as `` key="value"`` pairs.

        Args:
            exclude: Attribute names to leave out, e.g. ``id`` on repeated inputs.
        """
        excluded = {key for key in exclude if key}
        parts = []
        for key, value in self._attributes.items():
            if key in excluded or value is None or value is False:
                continue
            if value is True:
                parts.append(Markup(" {}").format(key))
                continue
            if key == "class":
                value = " ".join(as_text(item) for item in as_list(value))
            parts.append(Markup(' {}="{}"').format(key, as_text(value)))
        return Markup("").join(parts)

    def description(self) -> Markup:
        text = self._descriptor.description
        if not text:
            return Markup("")
        return Markup('<p class="description">{}</p>').format(escape(text))

    @abstractmethod
    def render(self) -> Markup:
        """Return the field markup."""

    def __html__(self) -> str:
        return str(self.render())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"
