"""Read an existing help object into typed help models.

Help systems emit help as loosely shaped nested objects (usually serialised
to JSON): property names vary in case, some values are nested one level
deeper than others, booleans arrive as ``"true"``/``"false"`` strings and
lists arrive as ``", "``-joined strings.  :func:`parse_help_info` normalises
such an object into :class:`HelpInfo` for callers that read the help an
implementation already ships.  Nothing in the generator consumes it.

Lookups are case-insensitive.  Missing properties yield ``None`` or empty
values; nothing here raises for an incomplete help object.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

ONLINE_VERSION_PREFIX = "online version:"


class HelpTypeInfo(BaseModel):
    name: str = ""
    description: Optional[str] = None


class HelpLinkInfo(BaseModel):
    uri: Optional[str] = None
    text: Optional[str] = None


class HelpExampleInfo(BaseModel):
    title: Optional[str] = None
    code: Optional[str] = None
    remarks: Optional[str] = None


class ParameterHelpInfo(BaseModel):
    """Help of one parameter as recorded by the help system."""

    name: Optional[str] = None
    type_name: Optional[str] = None
    description: Optional[str] = None
    default_value: Optional[str] = None
    supports_pipeline_input: Optional[str] = None
    position: Optional[str] = None
    parameter_set_names: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    supports_globbing: Optional[bool] = None
    is_required: Optional[bool] = None
    is_variable_length: Optional[bool] = None
    is_dynamic: Optional[bool] = None


class HelpSyntaxInfo(BaseModel):
    command_name: Optional[str] = None
    parameters: list[ParameterHelpInfo] = Field(default_factory=list)


class HelpInfo(BaseModel):
    """Typed view of a command's help object."""

    command_name: Optional[str] = None
    module_name: Optional[str] = None
    synopsis: Optional[str] = None
    description: Optional[str] = None
    alert_text: Optional[str] = None
    category: Optional[str] = None
    online_version: Optional[HelpLinkInfo] = None
    related_links: list[HelpLinkInfo] = Field(default_factory=list)
    has_common_parameters: Optional[bool] = None
    input_types: list[HelpTypeInfo] = Field(default_factory=list)
    output_types: list[HelpTypeInfo] = Field(default_factory=list)
    examples: list[HelpExampleInfo] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    parameters: list[ParameterHelpInfo] = Field(default_factory=list)
    syntax: list[HelpSyntaxInfo] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_help_info(obj: dict[str, Any]) -> HelpInfo:
    """Normalise a raw help object into :class:`HelpInfo`.

    The command name falls back from ``Name`` to ``details.name`` and the
    description from ``description`` to ``details.description``.  The link
    whose text starts with ``online version:`` (or the only link, when its
    text is empty) becomes :attr:`HelpInfo.online_version`; the others are
    related links.

    Example::

        info = parse_help_info(json.loads(raw))
        info.parameters[0].parameter_set_names   # ['ByName', 'ByTag']
    """
    links = [_link(item) for item in _as_list(_nested(obj, "relatedLinks", "navigationLink"))]
    online, related = _split_links(links)

    return HelpInfo(
        command_name=_non_empty(_get(obj, "Name")) or _nested(obj, "details", "name"),
        module_name=_get(obj, "ModuleName"),
        synopsis=_get(obj, "Synopsis"),
        description=_description_text(_get(obj, "description"))
        or _description_text(_nested(obj, "details", "description")),
        alert_text=_description_text(_nested(obj, "alertSet", "alert")),
        category=_get(obj, "Category"),
        online_version=online,
        related_links=related,
        has_common_parameters=to_nullable_bool(_get(obj, "CommonParameters")),
        input_types=[_type(item) for item in _as_list(_nested(obj, "inputTypes", "inputType"))],
        output_types=[_type(item) for item in _as_list(_nested(obj, "returnValues", "returnValue"))],
        examples=[_example(item) for item in _as_list(_nested(obj, "examples", "example"))],
        aliases=[a for a in (_get(obj, "aliases") or "").splitlines() if a],
        parameters=[
            parse_parameter_help(item) for item in _as_list(_nested(obj, "parameters", "parameter"))
        ],
        syntax=[_syntax(item) for item in _as_list(_nested(obj, "syntax", "syntaxItem"))],
    )


def parse_parameter_help(obj: dict[str, Any]) -> ParameterHelpInfo:
    """Normalise one parameter entry of a help object."""
    return ParameterHelpInfo(
        name=_get(obj, "name"),
        type_name=_non_empty(_get(obj, "parameterValue")) or _nested(obj, "type", "name"),
        description=_description_text(_get(obj, "Description")),
        default_value=_get(obj, "defaultValue"),
        supports_pipeline_input=_get(obj, "pipelineInput"),
        position=_get(obj, "position"),
        parameter_set_names=_split_list(_get(obj, "parameterSetName")),
        aliases=_split_list(_get(obj, "aliases")),
        supports_globbing=to_nullable_bool(_get(obj, "globbing")),
        is_required=to_nullable_bool(_get(obj, "required")),
        is_variable_length=to_nullable_bool(_get(obj, "variableLength")),
        is_dynamic=to_nullable_bool(_get(obj, "isDynamic")),
    )


def to_nullable_bool(value: Any) -> Optional[bool]:
    """``True``/``False`` for boolean-like values, ``None`` for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get(obj: Any, name: str) -> Any:
    if not isinstance(obj, dict):
        return None
    if name in obj:
        return obj[name]
    wanted = name.lower()
    for key, value in obj.items():
        if isinstance(key, str) and key.lower() == wanted:
            return value
    return None


def _nested(obj: Any, *names: str) -> Any:
    current = obj
    for name in names:
        current = _get(current, name)
        if current is None:
            return None
    return current


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _non_empty(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _split_list(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    return [item for item in value.split(", ") if item]


def _description_text(value: Any) -> Optional[str]:
    """Join description paragraphs (``{"Text": ...}`` entries or strings) with newlines."""
    if value is None:
        return None
    texts = []
    for item in _as_list(value):
        text = item if isinstance(item, str) else _get(item, "Text")
        texts.append(text or "")
    joined = "\n".join(texts)
    return joined if joined.strip() else None


def _link(obj: Any) -> HelpLinkInfo:
    return HelpLinkInfo(uri=_get(obj, "uri"), text=_get(obj, "linkText"))


def _split_links(links: list[HelpLinkInfo]) -> tuple[Optional[HelpLinkInfo], list[HelpLinkInfo]]:
    def is_online(link: HelpLinkInfo) -> bool:
        if link.text is None:
            return len(links) == 1
        return link.text.lower().startswith(ONLINE_VERSION_PREFIX)

    online = next((link for link in links if is_online(link)), None)
    related = [link for link in links if not is_online(link)]
    return online, related


def _type(obj: Any) -> HelpTypeInfo:
    return HelpTypeInfo(
        name=_nested(obj, "type", "name") or "",
        description=_description_text(_get(obj, "description")),
    )


def _example(obj: Any) -> HelpExampleInfo:
    return HelpExampleInfo(
        title=_get(obj, "title"),
        code=_get(obj, "code"),
        remarks=_description_text(_get(obj, "remarks")),
    )


def _syntax(obj: Any) -> HelpSyntaxInfo:
    return HelpSyntaxInfo(
        command_name=_get(obj, "name"),
        parameters=[parse_parameter_help(p) for p in _as_list(_get(obj, "parameter"))],
    )
