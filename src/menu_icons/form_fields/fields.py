"""Concrete field variants.

Covers: text, textarea, checkbox, radio, select, select_multiple, special.
Single-value variants match choices by equality, multi-value variants
(checkbox group, multiple select) by membership and post an array
(``name[]``).
"""

from typing import Any

from markupsafe import Markup

from ..errors import FieldConfigurationError
from .base import BaseField, FieldType, as_list, as_text


CHECKED = Markup(' checked="checked"')
SELECTED = Markup(' selected="selected"')


class TextField(BaseField):
    """Single line text input."""

    field_type = FieldType.TEXT
    default_attributes = {"class": "regular-text"}

    def render(self) -> Markup:
        control = Markup('<input type="text" value="{}"{} />').format(
            as_text(self.value), self.build_attributes()
        )
        return control + self.description()


class TextareaField(BaseField):
    """Multi-line text input."""

    field_type = FieldType.TEXTAREA
    default_attributes = {"class": "widefat", "cols": 50, "rows": 5}

    def render(self) -> Markup:
        control = Markup("<textarea{}>{}</textarea>").format(
            self.build_attributes(), as_text(self.value)
        )
        return control + self.description()


class CheckboxField(BaseField):
    """One checkbox per choice; the value is the list of checked choices."""

    field_type = FieldType.CHECKBOX
    input_type = "checkbox"
    item_format = Markup('<label><input type="{}" value="{}"{}{} /> {}</label><br />')

    def set_properties(self) -> None:
        self._value = [item for item in as_list(self._value) if item not in (None, "", False)]
        self._attributes["name"] += "[]"

    def is_checked(self, choice: Any) -> bool:
        return as_text(choice) in {as_text(item) for item in self._value}

    def render(self) -> Markup:
        # Inputs repeat once per choice, so the shared id is left out.
        attributes = self.build_attributes(exclude=("id",))
        items = [
            self.item_format.format(
                self.input_type,
                as_text(choice),
                CHECKED if self.is_checked(choice) else "",
                attributes,
                label,
            )
            for choice, label in self.choices.items()
        ]
        return Markup("").join(items) + self.description()


class RadioField(CheckboxField):
    """One radio button per choice; the value is a single string."""

    field_type = FieldType.RADIO
    input_type = "radio"

    def set_properties(self) -> None:
        if not isinstance(self._value, str):
            self._value = ""

    def is_checked(self, choice: Any) -> bool:
        return as_text(choice) == self._value


class SelectField(BaseField):
    """Dropdown with a single selected choice."""

    field_type = FieldType.SELECT
    option_format = Markup('<option value="{}"{}>{}</option>')

    def set_properties(self) -> None:
        if not isinstance(self._value, str):
            self._value = ""

    def is_selected(self, choice: Any) -> bool:
        return as_text(choice) == self._value

    def render(self) -> Markup:
        options = Markup("").join(
            self.option_format.format(
                as_text(choice),
                SELECTED if self.is_selected(choice) else "",
                label,
            )
            for choice, label in self.choices.items()
        )
        control = Markup("<select{}>{}</select>").format(self.build_attributes(), options)
        return control + self.description()


class SelectMultipleField(SelectField):
    """``<select multiple>``; the value is the list of selected choices."""

    field_type = FieldType.SELECT_MULTIPLE

    def set_properties(self) -> None:
        self._value = [item for item in as_list(self._value) if item not in (None, "", False)]
        self._attributes["name"] += "[]"
        self._attributes["multiple"] = "multiple"

    def is_selected(self, choice: Any) -> bool:
        return as_text(choice) in {as_text(item) for item in self._value}


class SpecialField(BaseField):
    """Delegates rendering to the descriptor's ``render_cb``.

    The callback receives the field and returns trusted markup.
    """

    field_type = FieldType.SPECIAL

    def render(self) -> Markup:
        callback = self.descriptor.render_cb
        if callback is None:
            raise FieldConfigurationError(self.id, "special fields need a render_cb")
        return Markup(callback(self) or "")
