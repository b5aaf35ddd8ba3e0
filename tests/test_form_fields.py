"""Tests for the form field factory and variants."""

import logging

import pytest
from markupsafe import Markup

from menu_icons.errors import FieldConfigurationError
from menu_icons.form_fields import (
    BaseField,
    CheckboxField,
    FieldArgs,
    FieldDescriptor,
    FieldRegistry,
    SelectMultipleField,
    TextField,
    create_field,
)

SETTINGS_ARGS = {"prefix": "menu-icons", "section": "settings"}


def test_select_renders_selected_option_and_nested_name():
    """The position select marks the current value and nests its name."""
    field = create_field(
        {
            "id": "position",
            "type": "select",
            "choices": {"before": "Before", "after": "After"},
            "value": "after",
        },
        SETTINGS_ARGS,
    )

    html = str(field.render())

    assert html == (
        '<select id="menu-icons-settings-position" name="menu-icons[settings][position]">'
        '<option value="before">Before</option>'
        '<option value="after" selected="selected">After</option>'
        "</select>"
    )


def test_unknown_type_falls_back_to_text(caplog):
    """Unsupported types degrade to text with a warning."""
    with caplog.at_level(logging.WARNING, logger="menu_icons.form_fields.factory"):
        field = create_field({"id": "tint", "type": "colorwheel"})

    assert isinstance(field, TextField)
    assert field.type == "text"
    assert "not supported" in caplog.text
    assert "colorwheel" in caplog.text


@pytest.mark.parametrize(
    "prefix, section, field_id, expected_name, expected_id",
    [
        ("menu-icons", "settings", "position", "menu-icons[settings][position]", "menu-icons-settings-position"),
        ("menu-icons", "", "position", "menu-icons[position]", "menu-icons-position"),
        ("", "settings", "position", "settings[position]", "settings-position"),
        ("", "", "position", "position", "position"),
    ],
)
def test_name_nests_one_bracket_level_per_ancestor(prefix, section, field_id, expected_name, expected_id):
    field = create_field({"id": field_id}, FieldArgs(prefix=prefix, section=section))

    assert field.name == expected_name
    assert field.id == expected_id
    assert field.name.count("[") == len(field.keys) - 1


@pytest.mark.parametrize("field_type", ["checkbox", "select_multiple"])
def test_multi_value_names_end_with_brackets(field_type):
    field = create_field({"id": "icon_types", "type": field_type}, SETTINGS_ARGS)
    assert field.name == "menu-icons[settings][icon_types][]"


@pytest.mark.parametrize("field_type", ["radio", "select"])
def test_single_value_names_have_no_trailing_brackets(field_type):
    field = create_field({"id": "position", "type": field_type}, SETTINGS_ARGS)
    assert field.name == "menu-icons[settings][position]"
    assert not field.name.endswith("[]")


def test_forbidden_attributes_are_stripped():
    field = create_field(
        {
            "id": "label",
            "attributes": {
                "id": "evil",
                "name": "evil",
                "value": "x",
                "checked": "checked",
                "multiple": "multiple",
                "data-key": "label",
            },
        },
        SETTINGS_ARGS,
    )

    attributes = field.attributes
    assert attributes["id"] == "menu-icons-settings-label"
    assert attributes["name"] == "menu-icons[settings][label]"
    assert attributes["data-key"] == "label"
    for key in ("value", "checked", "multiple"):
        assert key not in attributes


def test_text_field_escapes_value_and_appends_description():
    field = create_field(
        {"id": "title", "value": 'a "b" <c>', "description": "Plain & simple"}
    )

    assert str(field.render()) == (
        '<input type="text" value="a &#34;b&#34; &lt;c&gt;" class="regular-text" id="title" name="title" />'
        '<p class="description">Plain &amp; simple</p>'
    )


def test_trusted_description_markup_is_kept():
    field = create_field({"id": "title", "description": Markup("See <code>docs</code>")})
    assert '<p class="description">See <code>docs</code></p>' in str(field.render())


def test_default_used_when_value_missing():
    field = create_field({"id": "title", "default": "Untitled"})
    assert field.value == "Untitled"
    assert 'value="Untitled"' in str(field.render())


def test_user_attributes_override_variant_defaults():
    field = create_field({"id": "title", "attributes": {"class": ["_setting", "wide"]}})
    assert ' class="_setting wide"' in str(field.render())


def test_boolean_attributes():
    field = create_field({"id": "title", "attributes": {"disabled": True, "hidden": False}})
    html = str(field.render())
    assert " disabled" in html
    assert "hidden" not in html


def test_textarea_renders_escaped_content():
    field = create_field({"id": "notes", "type": "textarea", "value": "hi & bye"})
    assert str(field.render()) == (
        '<textarea class="widefat" cols="50" rows="5" id="notes" name="notes">hi &amp; bye</textarea>'
    )


def test_checkbox_group_checks_by_membership_and_omits_id():
    field = create_field(
        {
            "id": "icon_types",
            "type": "checkbox",
            "choices": {"dashicons": "Dashicons", "fa": "Font Awesome"},
            "value": ["fa", ""],
        },
        {"prefix": "menu-icons"},
    )

    assert isinstance(field, CheckboxField)
    assert field.value == ["fa"]
    assert str(field.render()) == (
        '<label><input type="checkbox" value="dashicons" name="menu-icons[icon_types][]" /> Dashicons</label><br />'
        '<label><input type="checkbox" value="fa" checked="checked" name="menu-icons[icon_types][]" /> Font Awesome</label><br />'
    )


def test_checkbox_scalar_value_becomes_list():
    field = create_field({"id": "flags", "type": "checkbox", "value": "1", "choices": {1: "On"}})
    assert field.value == ["1"]
    assert 'checked="checked"' in str(field.render())


def test_radio_checks_by_equality():
    field = create_field(
        {
            "id": "position",
            "type": "radio",
            "choices": {"before": "Before", "after": "After"},
            "value": "before",
        },
        SETTINGS_ARGS,
    )

    html = str(field.render())
    assert '<input type="radio" value="before" checked="checked" name="menu-icons[settings][position]" />' in html
    assert '<input type="radio" value="after" name="menu-icons[settings][position]" />' in html


def test_radio_non_string_value_is_cleared():
    field = create_field({"id": "position", "type": "radio", "value": ["before"]})
    assert field.value == ""


def test_select_multiple_uses_membership():
    field = create_field(
        {
            "id": "sizes",
            "type": "select_multiple",
            "choices": {"1": "Small", "2": "Medium", "3": "Large"},
            "value": [1, "3"],
        }
    )

    assert isinstance(field, SelectMultipleField)
    html = str(field.render())
    assert html.startswith('<select id="sizes" name="sizes[]" multiple="multiple">')
    assert '<option value="1" selected="selected">Small</option>' in html
    assert '<option value="2">Medium</option>' in html
    assert '<option value="3" selected="selected">Large</option>' in html


def test_choice_labels_are_escaped():
    field = create_field({"id": "x", "type": "select", "choices": {"a": "<b>A</b>"}})
    assert "&lt;b&gt;A&lt;/b&gt;" in str(field.render())


def test_special_field_delegates_to_callback():
    field = create_field(
        {
            "id": "preview",
            "type": "special",
            "render_cb": lambda f: f'<div id="{f.id}">custom</div>',
        },
        SETTINGS_ARGS,
    )

    assert str(field.render()) == '<div id="menu-icons-settings-preview">custom</div>'


def test_special_field_without_callback_raises():
    field = create_field({"id": "preview", "type": "special"})
    with pytest.raises(FieldConfigurationError):
        field.render()


def test_get_reads_attributes_then_descriptor():
    field = create_field({"id": "title", "label": "Title", "value": "Home"})
    assert field.get("class") == "regular-text"
    assert field.get("label") == "Title"
    assert field.get("value") == "Home"
    assert field.get("nonexistent") is None


def test_descriptor_from_mapping_ignores_unknown_keys():
    descriptor = FieldDescriptor.from_mapping({"id": "x", "type": "select", "priority": 5})
    assert descriptor.id == "x"
    assert descriptor.type == "select"
    assert descriptor.choices == {}


def test_create_field_does_not_mutate_descriptor():
    descriptor = FieldDescriptor(id="x", type="bogus", attributes={"id": "evil"})
    create_field(descriptor)
    assert descriptor.type == "bogus"
    assert descriptor.attributes == {"id": "evil"}


class ColorField(BaseField):
    def render(self) -> Markup:
        return Markup('<input type="color"{} />').format(self.build_attributes())


def test_registry_accepts_extra_types():
    registry = FieldRegistry({"color": ColorField})

    field = create_field({"id": "tint", "type": "color"}, registry=registry)

    assert isinstance(field, ColorField)
    assert str(field.render()) == '<input type="color" id="tint" name="tint" />'


def test_registry_rejects_duplicates_and_non_fields():
    registry = FieldRegistry()
    with pytest.raises(ValueError):
        registry.register("text", ColorField)
    with pytest.raises(ValueError):
        registry.register("thing", dict)


def test_numeric_section_and_id_are_used_as_text():
    field = create_field(
        {"id": "position", "type": "select"}, {"prefix": "menu-icons", "section": 12}
    )
    assert field.id == "menu-icons-12-position"
    assert field.name == "menu-icons[12][position]"

    field = create_field({"id": 3, "type": "checkbox"}, SETTINGS_ARGS)
    assert field.id == "menu-icons-settings-3"
    assert field.name == "menu-icons[settings][3][]"


def test_zero_key_is_kept():
    field = create_field({"id": "icon"}, {"prefix": "menu-icons", "section": 0})
    assert field.name == "menu-icons[0][icon]"


@pytest.mark.parametrize("bad_type", [["select"], {"type": "select"}, None, 7])
def test_non_string_type_falls_back_to_text(caplog, bad_type):
    with caplog.at_level(logging.WARNING, logger="menu_icons.form_fields.factory"):
        field = create_field({"id": "tint", "type": bad_type})

    assert isinstance(field, TextField)
    assert field.type == "text"
    assert "not supported" in caplog.text


def test_checkbox_mapping_value_matches_by_values():
    field = create_field(
        {
            "id": "icon_types",
            "type": "checkbox",
            "choices": {"dashicons": "Dashicons", "fa": "Font Awesome"},
            "value": {"0": "fa"},
        }
    )

    assert field.value == ["fa"]
    html = str(field.render())
    assert 'value="fa" checked="checked"' in html
    assert 'value="dashicons" checked' not in html


def test_field_renders_inside_markup_and_templates():
    field = create_field({"id": "title", "value": "Home"})
    assert Markup("<td>{}</td>").format(field) == Markup("<td>") + field.render() + Markup("</td>")
