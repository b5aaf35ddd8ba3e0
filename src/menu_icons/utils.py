"""Request helpers: text sanitization and nested form parsing."""

import re
import unicodedata
from typing import Any, Dict, Iterable, Tuple


_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"\s+")

_FORM_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_FORM_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def sanitize_text(value: Any) -> str:
    """Sanitize a value submitted through a text field.

    Transforms the value into a plain single-line string:
    - Tags removed (including script/style contents)
    - Percent-encoded octets removed
    - Control characters dropped
    - Whitespace runs collapsed and the ends trimmed

    Examples:
        "  <b>fa-home</b>\\n" -> "fa-home"
        "dash%20icons" -> "dashicons"

    Args:
        value: Raw submitted value.

    Returns:
        The sanitized string.
    """
    if value is None:
        return ""

    text = unicodedata.normalize("NFC", str(value))
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _OCTET_RE.sub("", text)

    # Keep whitespace controls so they collapse into single spaces below
    text = "".join(
        ch for ch in text if ch in "\t\n\r" or not unicodedata.category(ch).startswith("C")
    )

    return _WHITESPACE_RE.sub(" ", text).strip()


def parse_nested_form(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Nest bracketed form field names.

    ``menu-icons[settings][position]=after`` becomes
    ``{"menu-icons": {"settings": {"position": "after"}}}`` and
    ``menu-icons[settings][icon_types][]`` collects a list. For repeated
    scalar keys the last value wins.

    Args:
        items: ``(name, value)`` pairs in submission order.

    Returns:
        Nested dictionary of the submitted values.
    """
    result: Dict[str, Any] = {}

    for raw_key, value in items:
        match = _FORM_KEY_RE.match(raw_key)
        if not match:
            result[raw_key] = value
            continue

        segments = [match.group(1)] + _FORM_SEGMENT_RE.findall(match.group(2))
        container: Any = result
        for segment, next_segment in zip(segments, segments[1:]):
            child_type = list if next_segment == "" else dict
            if segment == "":
                child = child_type()
                container.append(child)
            else:
                child = container.get(segment)
                if not isinstance(child, child_type):
                    child = child_type()
                    container[segment] = child
            container = child

        last = segments[-1]
        if last == "":
            container.append(value)
        else:
            container[last] = value

    return result


__all__ = ["sanitize_text", "parse_nested_form"]
