"""String helpers shared by the documentation synthesizer and renderers."""

from __future__ import annotations

import re
from typing import Iterable, Optional

_GENERIC_RE = re.compile(r"^(?P<outer>[^<>]+)<(?P<args>.+)>$")


def to_single_line(value: Optional[str], replacer: str = " ") -> str:
    """Collapse ``<br>`` markers and line breaks in *value* into *replacer*."""
    if value is None:
        return ""
    return value.replace("<br>", replacer).replace("\r\n", replacer).replace("\n", replacer)


def to_string_literal(value: Optional[str]) -> str:
    """Escape *value* for a single-quoted literal on one line.

    Straight and typographic single quotes become a doubled straight quote.
    """
    if value is None:
        return ""
    escaped = value.replace("'", "''").replace("‘", "''").replace("’", "''")
    return to_single_line(escaped)


def join_ignore_empty(values: Optional[Iterable[Optional[str]]], separator: str) -> str:
    """Join the non-empty entries of *values* with *separator*."""
    if values is None:
        return ""
    return separator.join(v for v in values if v)


def syntax_type_name(type_tag: str) -> str:
    """Return the display name of a type tag in syntax lines.

    Nullable tags keep their ``?`` suffix, generic tags render their
    arguments recursively, and qualified names are shortened to the last
    segment.

    Example::

        >>> syntax_type_name("System.Nullable<System.Int32>")
        'Int32?'
        >>> syntax_type_name("System.Collections.Generic.List<System.String>")
        'List<String>'
    """
    tag = type_tag.strip()
    match = _GENERIC_RE.match(tag)
    if match:
        outer = _short_name(match.group("outer"))
        args = [syntax_type_name(a) for a in _split_generic_args(match.group("args"))]
        if outer == "Nullable" and len(args) == 1:
            return f"{args[0]}?"
        return f"{outer}<{', '.join(args)}>"
    if tag.endswith("?"):
        return f"{syntax_type_name(tag[:-1])}?"
    if tag.endswith("[]"):
        return f"{syntax_type_name(tag[:-2])}[]"
    return _short_name(tag)


def _short_name(name: str) -> str:
    return name.rsplit(".", 1)[-1]


def _split_generic_args(args: str) -> list[str]:
    """Split ``"A, B<C, D>"`` on top-level commas only."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in args:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts
