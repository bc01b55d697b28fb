"""Built-in CLI sub-commands for specwright.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~specwright.commands.document` -- ``render``, ``merge`` and
  ``resolve``, registered directly on the root app.
* :mod:`~specwright.commands.inspect` -- the ``inspect`` group (info, paths,
  components, security).
"""
