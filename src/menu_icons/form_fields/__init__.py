"""Form field library.

Renders HTML form controls from declarative descriptors.

Example usage:
    from menu_icons.form_fields import create_field

    field = create_field(
        {"id": "position", "type": "select", "value": "after",
         "choices": {"before": "Before", "after": "After"}},
        {"prefix": "menu-icons", "section": "settings"},
    )
    field.name      # "menu-icons[settings][position]"
    field.render()  # Markup('<select ...>...</select>')
"""

from .base import (
    FORBIDDEN_ATTRIBUTES,
    BaseField,
    FieldArgs,
    FieldDescriptor,
    FieldType,
)
from .factory import BUILTIN_FIELD_TYPES, FieldRegistry, create_field
from .fields import (
    CheckboxField,
    RadioField,
    SelectField,
    SelectMultipleField,
    SpecialField,
    TextareaField,
    TextField,
)

__all__ = [
    # Descriptors
    "FieldType",
    "FieldDescriptor",
    "FieldArgs",
    "FORBIDDEN_ATTRIBUTES",
    # Factory
    "FieldRegistry",
    "BUILTIN_FIELD_TYPES",
    "create_field",
    # Variants
    "BaseField",
    "TextField",
    "TextareaField",
    "CheckboxField",
    "RadioField",
    "SelectField",
    "SelectMultipleField",
    "SpecialField",
]
