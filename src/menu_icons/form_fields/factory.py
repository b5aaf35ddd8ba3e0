"""Field factory: maps a type tag to a field variant and builds it."""

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional, Type, Union

from .base import FORBIDDEN_ATTRIBUTES, BaseField, FieldArgs, FieldDescriptor, FieldType
from .fields import (
    CheckboxField,
    RadioField,
    SelectField,
    SelectMultipleField,
    SpecialField,
    TextareaField,
    TextField,
)

logger = logging.getLogger(__name__)


BUILTIN_FIELD_TYPES: Dict[str, Type[BaseField]] = {
    FieldType.TEXT.value: TextField,
    FieldType.TEXTAREA.value: TextareaField,
    FieldType.CHECKBOX.value: CheckboxField,
    FieldType.RADIO.value: RadioField,
    FieldType.SELECT.value: SelectField,
    FieldType.SELECT_MULTIPLE.value: SelectMultipleField,
    FieldType.SPECIAL.value: SpecialField,
}


class FieldRegistry:
    """Lookup table of field variants.

    Starts with the built-in variants; extra types can be registered by
    whoever owns the registry instance.

    Example:
        registry = FieldRegistry()
        registry.register("color", ColorField)
        field = create_field({"id": "tint", "type": "color"}, registry=registry)
    """

    def __init__(self, extra_types: Optional[Mapping[str, Type[BaseField]]] = None):
        self._types: Dict[str, Type[BaseField]] = dict(BUILTIN_FIELD_TYPES)
        for type_name, field_class in (extra_types or {}).items():
            self.register(type_name, field_class)

    def register(self, type_name: str, field_class: Type[BaseField]) -> None:
        """Register an additional field type.

        Raises:
            ValueError: If the type is taken or the class is not a field.
        """
        if type_name in self._types:
            raise ValueError(f"Field type '{type_name}' already registered")
        if not (isinstance(field_class, type) and issubclass(field_class, BaseField)):
            raise ValueError(f"Field type '{type_name}' must map to a BaseField subclass")
        self._types[type_name] = field_class
        logger.debug("Registered field type: %s", type_name)

    def resolve(self, type_name: str) -> Optional[Type[BaseField]]:
        return self._types.get(type_name)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types


def create_field(
    descriptor: Union[FieldDescriptor, Mapping[str, Any]],
    args: Union[FieldArgs, Mapping[str, Any], None] = None,
    registry: Optional[FieldRegistry] = None,
) -> BaseField:
    """Create a field from a descriptor.

    Args:
        descriptor: Field descriptor or a mapping with descriptor keys.
        args: Form placement (prefix/section) used for the id/name path.
        registry: Field types to resolve against; built-ins when omitted.

    Returns:
        The field instance. Unknown types fall back to a text field.
    """
    descriptor = FieldDescriptor.coerce(descriptor)
    field_args = FieldArgs.coerce(args)
    registry = registry or FieldRegistry()

    field_class = None
    if isinstance(descriptor.type, str):
        field_class = registry.resolve(descriptor.type)
    if field_class is None:
        logger.warning(
            "Field '%s': type %r is not supported, reverting to text.",
            descriptor.id,
            descriptor.type,
        )
        descriptor.type = FieldType.TEXT.value
        field_class = TextField

    descriptor = dataclasses.replace(
        descriptor,
        attributes={
            key: value
            for key, value in descriptor.attributes.items()
            if key not in FORBIDDEN_ATTRIBUTES
        },
    )
    return field_class(descriptor, field_args)
