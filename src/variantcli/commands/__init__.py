"""Built-in CLI sub-commands for variantcli.

* :mod:`~variantcli.commands.inspect` -- examine merged variant groups and
  parameter-set resolution.
* :mod:`~variantcli.commands.generate` -- render proxies for the commands of
  a variant document.
* :mod:`~variantcli.commands.docs` -- print the synthesized help of one
  command.
* :mod:`~variantcli.commands.config` -- view and modify global settings.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands export a plain callback registered on the root app.
"""
