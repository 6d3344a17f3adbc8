"""Canonical Pydantic models shared across all variantcli modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`GenerationConfig` and :class:`GlobalConfig`.

**Variant models** -- the immutable input supplied by the upstream schema
collaborator: :class:`ParameterCategory`, :class:`ValidationFlags`,
:class:`CompleterInfo`, :class:`PropertyInfo`, :class:`Parameter`,
:class:`Variant`, :class:`TypeProperty`, :class:`TypeSchema`,
:class:`CommandSpec` and :class:`VariantDocument`.

**Derived models** -- computed once by the generator and consumed by the
renderers: :class:`ParameterMember`, :class:`ParameterGroup`,
:class:`VariantGroup` and :class:`ComplexInterfaceInfo`.

Variant and derived models are frozen.  Structured parameter shapes are kept
in a flat type arena (``dict[str, TypeSchema]``) and referenced by
identifier, so the model graph never holds object back-references even when
the schema is self-referential.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


ALL_PARAMETER_SETS = "__AllParameterSets"
"""Default parameter-set sentinel meaning "every parameter set applies"."""

NO_PARAMETERS = "__NoParameters"
"""Placeholder parameter-set name used by upstream tools for parameterless variants."""

NO_PROFILES = "__NoProfiles"
"""Profile sentinel meaning the variant is not bound to an API profile."""


# --- Configuration ---


class OutputConfig(BaseModel):
    """Output formatting preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, or rich"
    )


class GenerationConfig(BaseModel):
    """Layout settings applied when rendering generated proxies.

    The settings only affect text rendering; the merged variant model and the
    emit directives are identical for every configuration.
    """

    half_indent: int = Field(
        default=2, ge=1, description="Spaces per half indent (one nesting step of a note)"
    )
    item_separator: str = Field(
        default=", ", description="Separator between attribute options"
    )
    confirm_impact: str = Field(
        default="Medium", description="Impact level paired with SupportsShouldProcess"
    )
    include_complex_notes: bool = Field(
        default=True, description="Render complex parameter notes in help output"
    )
    backticks: bool = Field(
        default=False, description="Wrap nested note entries in backticks"
    )


class GlobalConfig(BaseModel):
    """Top-level user configuration persisted by :func:`~variantcli.config.save_global_config`."""

    output: OutputConfig = Field(default_factory=OutputConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)


# --- Variant input model ---

SWITCH_TYPES = frozenset({"switch", "switchparameter"})
"""Type tags (lower-cased) of boolean flags rendered without a value."""


def is_switch_type(type_tag: str) -> bool:
    return type_tag.lower() in SWITCH_TYPES



class ParameterCategory(str, enum.Enum):
    """Where a parameter's value ends up in the underlying request."""

    PATH = "Path"
    QUERY = "Query"
    HEADER = "Header"
    BODY = "Body"
    URI = "Uri"
    RUNTIME = "Runtime"


class ValidationFlags(BaseModel):
    """Validation markers carried by a parameter."""

    model_config = ConfigDict(frozen=True)

    not_null: bool = False
    globbing: bool = False
    dynamic: bool = False


class CompleterInfo(BaseModel):
    """Argument completer attached to a parameter.

    When ``script`` is empty the completer falls back to completing values of
    the parameter's type.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    script: str = ""


class PropertyInfo(BaseModel):
    """Serialisation metadata of a body property exposed as a parameter."""

    model_config = ConfigDict(frozen=True)

    serialized_name: Optional[str] = None
    required: bool = False
    read_only: bool = False
    possible_types: tuple[str, ...] = ()
    description: str = ""


class Parameter(BaseModel):
    """One parameter of a :class:`Variant`.

    ``type`` is a semantic type tag such as ``"string"``, ``"int?"``,
    ``"string[]"``, ``"List<string>"`` or ``"switch"``.  Structured
    parameters additionally point at a :class:`TypeSchema` through
    ``complex_type``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "string"
    mandatory: bool = False
    position: Optional[int] = Field(default=None, ge=0)
    value_from_pipeline: bool = False
    default_value: Any = None
    help_message: str = ""
    aliases: tuple[str, ...] = ()
    validation: ValidationFlags = Field(default_factory=ValidationFlags)
    dont_show: bool = False
    category: ParameterCategory = ParameterCategory.BODY
    complex_type: Optional[str] = None
    completer: Optional[CompleterInfo] = None
    info: Optional[PropertyInfo] = None

    @property
    def identity(self) -> tuple[str, str]:
        """The ``(name, type)`` pair parameters are merged on across variants.

        Names bind case-insensitively, so ``Name`` and ``name`` share an
        identity.
        """
        return (self.name.lower(), self.type)

    @property
    def is_switch(self) -> bool:
        """Whether the parameter is a boolean flag rendered without a value."""
        return is_switch_type(self.type)


class Variant(BaseModel):
    """One concrete parameter signature of an external command."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: tuple[Parameter, ...] = ()
    is_default: bool = False
    supports_should_process: bool = False
    description: str = ""
    link: str = ""
    implementation: Optional[str] = None
    output_types: tuple[str, ...] = ()
    profile: Optional[str] = None

    @property
    def implementation_id(self) -> str:
        """Identifier of the implementation this variant forwards to."""
        return self.implementation or self.name


class TypeProperty(BaseModel):
    """A property of a :class:`TypeSchema`; ``type_id`` links nested shapes."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "string"
    required: bool = False
    description: str = ""
    type_id: Optional[str] = None


class TypeSchema(BaseModel):
    """Shape of a structured parameter type, stored in the type arena."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    properties: tuple[TypeProperty, ...] = ()


TypeRegistry = dict[str, TypeSchema]
"""Type arena: schema identifier -> :class:`TypeSchema`."""


class CommandSpec(BaseModel):
    """All variants sharing one external command name."""

    model_config = ConfigDict(frozen=True)

    name: str
    variants: tuple[Variant, ...]


class VariantDocument(BaseModel):
    """A loaded variant document: commands plus the type arena they reference."""

    commands: list[CommandSpec] = Field(default_factory=list)
    types: dict[str, TypeSchema] = Field(default_factory=dict)

    def command(self, name: str) -> Optional[CommandSpec]:
        """Return the command named *name* (case-insensitive), or ``None``."""
        wanted = name.lower()
        for spec in self.commands:
            if spec.name.lower() == wanted:
                return spec
        return None


# --- Derived model ---


class ParameterMember(BaseModel):
    """A parameter as declared by one specific variant."""

    model_config = ConfigDict(frozen=True)

    variant_name: str
    parameter: Parameter


class ParameterGroup(BaseModel):
    """A parameter identity merged across the variants that declare it.

    Presentation fields (``help_message``, ``aliases``, ...) are merged
    deterministically by the builder: scalar texts come from the first member
    in variant input order, flags and alias lists are combined.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    members: tuple[ParameterMember, ...]
    has_all_variants_in_parameter_group: bool
    parameter_set_name: Optional[str] = None
    help_message: str = ""
    aliases: tuple[str, ...] = ()
    has_validate_not_null: bool = False
    dont_show: bool = False
    value_from_pipeline: bool = False
    category: ParameterCategory = ParameterCategory.BODY
    complex_type: Optional[str] = None
    completer: Optional[CompleterInfo] = None
    default_value: Any = None

    @property
    def variant_names(self) -> tuple[str, ...]:
        """Names of the member variants in input order."""
        return tuple(m.variant_name for m in self.members)

    @property
    def is_common(self) -> bool:
        """Whether every variant of the group declares this parameter."""
        return self.has_all_variants_in_parameter_group

    @property
    def is_complex_interface(self) -> bool:
        """Whether the parameter has a structured shape documented as a note."""
        return self.complex_type is not None

    @property
    def is_switch(self) -> bool:
        return self.members[0].parameter.is_switch


class VariantGroup(BaseModel):
    """The merged surface of one external command.

    Built by :func:`~variantcli.generator.builder.build_variant_group`; every
    derived field is computed once at construction and never changes.
    """

    model_config = ConfigDict(frozen=True)

    command_name: str
    variants: tuple[Variant, ...]
    parameter_groups: tuple[ParameterGroup, ...]
    default_parameter_set_name: Optional[str] = None
    supports_should_process: bool = False
    description: str = ""
    link: str = ""
    output_types: tuple[str, ...] = ()
    profiles: tuple[str, ...] = ()
    diagnostics: tuple[str, ...] = ()

    @property
    def has_multiple_variants(self) -> bool:
        return len(self.variants) > 1

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    def variant(self, name: str) -> Optional[Variant]:
        """Return the variant named *name*, or ``None``."""
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    def parameter_group(self, name: str) -> Optional[ParameterGroup]:
        """Return the first parameter group named *name*, or ``None``."""
        for group in self.parameter_groups:
            if group.name == name:
                return group
        return None


class ComplexInterfaceInfo(BaseModel):
    """Recursive description of a structured parameter's shape.

    Leaf (scalar) properties have no ``nested`` entries.  A property whose
    type was already visited on the current traversal path is kept as a leaf
    so that self-referential schemas terminate.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    required: bool = False
    description: str = ""
    type_id: Optional[str] = None
    nested: tuple[ComplexInterfaceInfo, ...] = ()

    @property
    def is_complex_interface(self) -> bool:
        return bool(self.nested)
