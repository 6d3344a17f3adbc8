"""Proxy generator -- merge variants and emit the forwarding proxy.

This sub-package holds the generation-time half of variantcli: it merges
the variants of one external command into a
:class:`~variantcli.models.VariantGroup`, resolves parameter sets to
implementations, and emits the proxy as renderer-agnostic directives.

Typical usage::

    from variantcli.generator import build_variant_group, build_surface

    group = build_variant_group("Get-Widget", variants)
    surface = build_surface(group, registry)
    print(surface.render())

Sub-modules:

* :mod:`~variantcli.generator.builder` -- parameter grouping, default
  parameter set and aggregate flags.
* :mod:`~variantcli.generator.resolver` -- parameter set to implementation
  lookup.
* :mod:`~variantcli.generator.forwarder` -- the begin/process/end protocol,
  both emitted and in-process.
* :mod:`~variantcli.generator.attributes` -- attribute structs.
* :mod:`~variantcli.generator.emit` -- directives and the text renderer.
* :mod:`~variantcli.generator.surface` -- assembly of a whole proxy and
  batch generation.
"""

from variantcli.generator.builder import build_variant_group
from variantcli.generator.forwarder import ProxyForwarder
from variantcli.generator.resolver import ParameterSetResolver
from variantcli.generator.surface import GeneratedSurface, build_surface, generate_all

__all__ = [
    "GeneratedSurface",
    "ParameterSetResolver",
    "ProxyForwarder",
    "build_surface",
    "build_variant_group",
    "generate_all",
]
