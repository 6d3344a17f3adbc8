"""Renderer-agnostic emit directives and the bundled text renderer.

Generators in this package never build target syntax directly.  They return
an ordered list of directives:

* :class:`Literal` -- one line of text, emitted as-is at the current depth.
* :class:`Attribute` -- a metadata attribute described by an
  :class:`AttributeSpec` (name plus the options that are present).
* :class:`Block` -- a header line, indented children and a footer line.

A :class:`Renderer` turns directives into text.  :class:`TextRenderer` is the
generic implementation shipped with variantcli; target-specific renderers
subclass it and override the ``format_*`` hooks.  Keeping layout in the
renderer means indentation and ordering rules can be tested on the
directives alone.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional, Union

from variantcli.docs.text import join_ignore_empty, to_string_literal


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeRef:
    """A type used as an attribute value (rendered ``[name]``)."""

    name: str


@dataclass(frozen=True)
class ScriptBlock:
    """An executable snippet used as an attribute value (rendered ``{...}``)."""

    text: str


AttributeValue = Union[str, bool, int, TypeRef, ScriptBlock, tuple]


@dataclass(frozen=True)
class AttributeOption:
    """One recognised option of an attribute.

    Attributes:
        name: Option name, or ``None`` for a positional argument.
        value: Option value.  ``None`` with a *name* means a bare flag such as
            ``Mandatory``.
        present: Presence condition; options evaluated to ``False`` stay in
            the :class:`AttributeSpec` but are never rendered.
    """

    name: Optional[str]
    value: Any = None
    present: bool = True


@dataclass(frozen=True)
class AttributeSpec:
    """An attribute and the options it recognises.

    Attributes:
        name: Attribute name (``"Parameter"``, ``"Alias"``, ...).
        options: Every recognised option in emission order.
        bare: Render as a plain type annotation (``[name]``) without an
            argument list.
    """

    name: str
    options: tuple[AttributeOption, ...] = ()
    bare: bool = False

    @property
    def present_options(self) -> tuple[AttributeOption, ...]:
        return tuple(o for o in self.options if o.present)

    def option(self, name: str) -> Optional[AttributeOption]:
        """Return the recognised option called *name*, present or not."""
        for opt in self.options:
            if opt.name == name:
                return opt
        return None


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    text: str = ""


@dataclass(frozen=True)
class Attribute:
    spec: AttributeSpec


@dataclass(frozen=True)
class Block:
    """A header line, children indented one level, and a footer line."""

    header: str
    children: tuple[Directive, ...] = field(default_factory=tuple)
    footer: str = "}"


Directive = Union[Literal, Attribute, Block]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class Renderer:
    """Base class for directive renderers.

    Subclasses implement :meth:`render_attribute`; :meth:`render` walks the
    directive tree and handles indentation.

    Args:
        half_indent: Spaces per half indent.  Blocks indent their children by
            one full indent (two half indents).
        item_separator: Separator placed between rendered attribute options.
    """

    def __init__(self, half_indent: int = 2, item_separator: str = ", ") -> None:
        self.half_indent = " " * half_indent
        self.indent = self.half_indent * 2
        self.item_separator = item_separator

    def render(self, directives: Iterable[Directive]) -> str:
        """Render *directives* to text, one line per literal or attribute."""
        lines: list[str] = []
        self._render_into(lines, directives, depth=0)
        return "\n".join(lines) + "\n" if lines else ""

    def _render_into(self, lines: list[str], directives: Iterable[Directive], depth: int) -> None:
        prefix = self.indent * depth
        for directive in directives:
            if isinstance(directive, Literal):
                lines.append(f"{prefix}{directive.text}" if directive.text else "")
            elif isinstance(directive, Attribute):
                lines.append(f"{prefix}{self.render_attribute(directive.spec)}")
            elif isinstance(directive, Block):
                lines.append(f"{prefix}{directive.header}")
                self._render_into(lines, directive.children, depth + 1)
                lines.append(f"{prefix}{directive.footer}")
            else:
                raise TypeError(f"Unknown directive: {directive!r}")

    def render_attribute(self, spec: AttributeSpec) -> str:
        raise NotImplementedError


class TextRenderer(Renderer):
    """Generic renderer: ``[Name(Positional, Option=value, Flag)]``."""

    def render_attribute(self, spec: AttributeSpec) -> str:
        if spec.bare:
            return f"[{spec.name}]"
        items = [self.format_option(o) for o in spec.present_options]
        return f"[{spec.name}({join_ignore_empty(items, self.item_separator)})]"

    def format_option(self, option: AttributeOption) -> str:
        if option.name is None:
            return self.format_value(option.value)
        if option.value is None:
            return option.name
        return f"{option.name}={self.format_value(option.value)}"

    def format_value(self, value: Any) -> str:
        if isinstance(value, bool):
            return self.format_bool(value)
        if isinstance(value, int):
            return str(value)
        if isinstance(value, TypeRef):
            return f"[{value.name}]"
        if isinstance(value, ScriptBlock):
            return f"{{{value.text}}}"
        if isinstance(value, tuple):
            return f"({join_ignore_empty([self.format_value(v) for v in value], self.item_separator)})"
        return self.format_string(str(value))

    def format_bool(self, value: bool) -> str:
        return f"${str(value).lower()}"

    def format_string(self, value: str) -> str:
        return f"'{to_string_literal(value)}'"


def directive_to_dict(directive: Directive) -> dict[str, Any]:
    """JSON-ready form of a directive, tagged with its ``kind``.

    Attribute options that are not present are dropped.
    """
    if isinstance(directive, Literal):
        return {"kind": "literal", "text": directive.text}
    if isinstance(directive, Attribute):
        spec = directive.spec
        return {
            "kind": "attribute",
            "name": spec.name,
            "bare": spec.bare,
            "options": [asdict(o) for o in spec.present_options],
        }
    if isinstance(directive, Block):
        return {
            "kind": "block",
            "header": directive.header,
            "children": [directive_to_dict(c) for c in directive.children],
            "footer": directive.footer,
        }
    raise TypeError(f"Unknown directive: {directive!r}")
