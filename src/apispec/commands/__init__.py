"""Built-in CLI sub-commands for apispec.

* :mod:`~apispec.commands.extract` -- ``fetch``, ``local`` and ``stdin``:
  load an API description, select a sub-tree, dereference it, and print it.

Each command is a plain callback function registered directly on the root
app in :mod:`apispec.app`.
"""
