"""variantcli -- Merge API operation variants into one proxy command surface.

An external command often exists as several *variants*: one parameter
signature per API operation (get by name, get by tag, list all, ...).
variantcli merges them into a single command whose parameter sets select
the variant, resolves each parameter set to its implementation, forwards
invocations through a begin/process/end protocol, and synthesizes the
command's help.

Typical workflow::

    variantcli inspect groups widgets.yaml      # check the merged surface
    variantcli generate widgets.yaml -d out/    # write proxies and help

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
    generator: Variant merging, resolution, forwarding and proxy emission.
    docs: Help synthesis and rendering.
    parser: Variant document loading.
"""

__version__ = "0.1.0"
