"""
Tag Renderer
============

Serialize a tag name, an attribute mapping and optional content into HTML.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from markupsafe import escape

from amp_story.core.rendering.css import render_declarations

# Elements that never take a closing tag. Custom elements (amp-*) are never void.
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

ATTRIBUTE_NAME_ALIASES = {
    "className": "class",
    "htmlFor": "for",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def attribute_name(key: str) -> str:
    """Translate a property name into an HTML attribute name."""
    if key in ATTRIBUTE_NAME_ALIASES:
        return ATTRIBUTE_NAME_ALIASES[key]
    return _CAMEL_BOUNDARY.sub(r"-\1", key).lower()


def attribute_value(key: str, value: Any) -> str:
    """Stringify an attribute value (without escaping)."""
    if key == "style" and isinstance(value, Mapping):
        return render_declarations(value)
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def build_attributes(attributes: Optional[Mapping[str, Any]]) -> str:
    """
    Build the attribute part of an opening tag.

    None and False values are skipped, True renders as a bare attribute and
    everything else as name="value" with the value HTML-escaped.

    Returns:
        Attribute string with a leading space, or "" when nothing renders
    """
    if not attributes:
        return ""

    attr_pairs: List[str] = []
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        name = attribute_name(key)
        if value is True:
            attr_pairs.append(name)
        else:
            attr_pairs.append(f'{name}="{escape(attribute_value(key, value))}"')

    return " " + " ".join(attr_pairs) if attr_pairs else ""


def render_tag(
    tag_name: str, attributes: Optional[Dict[str, Any]] = None, content: Optional[str] = None
) -> str:
    """
    Render a single HTML tag.

    Args:
        tag_name: Markup tag name
        attributes: Attribute mapping, rendered in order
        content: Inner HTML, inserted verbatim

    Returns:
        "<tag attrs>content</tag>", or "<tag attrs>" for void elements
        rendered without content

    Raises:
        ValueError: If tag_name is empty
    """
    if not tag_name:
        raise ValueError("Tag name must not be empty")

    opening = f"<{tag_name}{build_attributes(attributes)}>"
    if content is None and tag_name.lower() in VOID_ELEMENTS:
        return opening
    return f"{opening}{'' if content is None else content}</{tag_name}>"
