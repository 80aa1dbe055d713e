"""
HTML Formatter
==============

Re-indent generated markup: one block tag per line, nesting shown by
indentation. Runs of text and phrasing tags (<b>, <sub>, <a>, ...) are kept
together on one line, so elements holding such content stay on one line,
and raw text inside <style>/<script> keeps its relative indentation. Text
is never rewritten beyond trimming whitespace around a run.
"""

import re
import textwrap
from typing import Iterator, List, Optional, Tuple

from amp_story.core.rendering.tag import VOID_ELEMENTS

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# Phrasing content: kept inside the surrounding text run
INLINE_ELEMENTS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "br",
        "cite",
        "code",
        "data",
        "del",
        "dfn",
        "em",
        "i",
        "ins",
        "kbd",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
        "wbr",
    }
)

TOKEN_PATTERN = re.compile(r"(<!--.*?-->|<[^>]+>)", re.DOTALL)
TAG_NAME_PATTERN = re.compile(r"</?\s*([a-zA-Z][a-zA-Z0-9-]*)")


def _tag_name(token: str) -> str:
    match = TAG_NAME_PATTERN.match(token)
    return match.group(1).lower() if match else ""


def _is_inline(token: str) -> bool:
    if not token.startswith("<"):
        return True
    return not token.startswith("<!") and _tag_name(token) in INLINE_ELEMENTS


def _tokens(html: str) -> Iterator[Tuple[str, bool]]:
    """Yield (token, is_tag) pairs, merging text and inline tags into single text runs."""
    run: List[str] = []
    for token in TOKEN_PATTERN.split(html):
        if not token:
            continue
        if _is_inline(token):
            run.append(token)
            continue
        if run:
            yield "".join(run), False
            run = []
        yield token, True
    if run:
        yield "".join(run), False


def _raw_lines(raw: str, pad: str) -> List[str]:
    text = textwrap.dedent(raw.strip("\n")).strip("\n")
    return [f"{pad}{line.rstrip()}" for line in text.splitlines() if line.strip()]


def format_html(html: str, indent_size: int = 2) -> str:
    """
    Pretty-print an HTML string.

    Args:
        html: Markup to format
        indent_size: Spaces per nesting level

    Returns:
        Formatted markup ending with a newline
    """
    indent = " " * indent_size
    lines: List[str] = []
    depth = 0
    # True while the last line ends with an opening tag that may absorb text and its close
    inline_open = False
    raw_tag: Optional[str] = None
    raw_buffer: List[str] = []

    for token, is_tag in _tokens(html):
        if raw_tag is not None:
            if is_tag and token.startswith("</") and _tag_name(token) == raw_tag:
                raw = "".join(raw_buffer)
                depth = max(depth - 1, 0)
                if raw.strip():
                    lines.extend(_raw_lines(raw, indent * (depth + 1)))
                    lines.append(f"{indent * depth}{token}")
                else:
                    lines[-1] += token
                raw_tag = None
                raw_buffer = []
            else:
                raw_buffer.append(token)
            continue

        if not is_tag:
            text = token.strip()
            if not text:
                continue
            if inline_open:
                lines[-1] += text
            else:
                lines.append(f"{indent * depth}{text}")
            continue

        if token.startswith("<!"):
            lines.append(f"{indent * depth}{token}")
            inline_open = False
            continue

        if token.startswith("</"):
            depth = max(depth - 1, 0)
            if inline_open:
                lines[-1] += token
            else:
                lines.append(f"{indent * depth}{token}")
            inline_open = False
            continue

        name = _tag_name(token)
        lines.append(f"{indent * depth}{token}")
        if name in VOID_ELEMENTS or token.endswith("/>"):
            inline_open = False
            continue

        depth += 1
        if name in RAW_TEXT_ELEMENTS:
            raw_tag = name
            inline_open = False
        else:
            inline_open = True

    return "\n".join(lines) + "\n"
