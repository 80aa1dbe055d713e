"""
CSS Renderer
============

Convert style mappings into CSS text, both stylesheets and inline declarations.
"""

import re
from typing import Any, List, Mapping, Optional

# Properties whose bare numbers must not get a px unit
UNITLESS_PROPERTIES = frozenset(
    {
        "animation-iteration-count",
        "column-count",
        "flex",
        "flex-grow",
        "flex-shrink",
        "font-weight",
        "line-height",
        "opacity",
        "order",
        "orphans",
        "widows",
        "z-index",
        "zoom",
    }
)

VENDOR_PREFIXES = ("webkit", "moz", "ms", "o")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def css_property_name(name: str) -> str:
    """Convert a camelCase property name to CSS (fontSize -> font-size, WebkitX -> -webkit-x)."""
    if "-" in name:
        return name.lower()
    kebab = _CAMEL_BOUNDARY.sub(r"-\1", name).lower()
    prefix = kebab.split("-", 1)[0]
    if prefix in VENDOR_PREFIXES and "-" in kebab and (name[0].isupper() or prefix == "ms"):
        return f"-{kebab}"
    return kebab


def css_value(prop: str, value: Any) -> str:
    """Format a CSS value, adding px to non-zero integers where a unit is expected."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)) and value != 0 and prop not in UNITLESS_PROPERTIES:
        return f"{value}px"
    if isinstance(value, (list, tuple)):
        return " ".join(css_value(prop, item) for item in value)
    return str(value)


def render_declarations(properties: Optional[Mapping[str, Any]], separator: str = " ") -> str:
    """
    Render property/value pairs as CSS declarations.

    Args:
        properties: Mapping of property names to values; None values are dropped
        separator: Text placed between declarations

    Returns:
        "prop: value;" declarations joined by separator
    """
    if not properties:
        return ""

    declarations: List[str] = []
    for name, value in properties.items():
        if value is None:
            continue
        prop = css_property_name(name)
        declarations.append(f"{prop}: {css_value(prop, value)};")
    return separator.join(declarations)


def _render_block(selector: str, body: Mapping[str, Any], indent: str, level: int) -> List[str]:
    pad = indent * level
    lines = [f"{pad}{selector} {{"]
    scalars = {k: v for k, v in body.items() if not isinstance(v, Mapping)}
    for declaration in render_declarations(scalars, separator="\n").splitlines():
        lines.append(f"{pad}{indent}{declaration}")
    for nested_selector, nested_body in body.items():
        if isinstance(nested_body, Mapping):
            lines.extend(_render_block(nested_selector, nested_body, indent, level + 1))
    lines.append(f"{pad}}}")
    return lines


def render_css(styles: Optional[Mapping[str, Any]], indent: str = "  ") -> str:
    """
    Render a stylesheet mapping to CSS text.

    Mapping values become rule blocks keyed by selector (nested mappings nest,
    which covers @media blocks); scalar values become bare declarations.

    Example:
        {"body": {"fontSize": 16}} -> "body {\\n  font-size: 16px;\\n}"
    """
    if not styles:
        return ""

    lines: List[str] = []
    scalars = {k: v for k, v in styles.items() if not isinstance(v, Mapping)}
    if scalars:
        lines.extend(render_declarations(scalars, separator="\n").splitlines())
    for selector, body in styles.items():
        if isinstance(body, Mapping):
            lines.extend(_render_block(selector, body, indent, 0))
    return "\n".join(lines)
