"""Built-in CLI sub-commands for restdoc.

* :mod:`~restdoc.commands.inspect` -- ``probe``, ``inspect`` and
  ``diagnostics``: read-only views of API description files.
* :mod:`~restdoc.commands.build` -- ``build``: write the documentation
  model of each file.

Each module exports plain callback functions registered directly on the
root app.
"""
