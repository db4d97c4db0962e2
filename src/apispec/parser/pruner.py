"""Strip documentation, examples, and vendor extensions from a sub-tree.

Dereferenced OpenAPI fragments are often fed to code generators or LLM
prompts where prose and samples are noise.  :func:`prune` removes, in
place and recursively:

* **docs** -- string ``description`` / ``summary`` values and
  ``externalDocs`` objects;
* **examples** -- ``example`` and ``examples`` entries;
* **extensions** -- every ``x-*`` key.

Keys of a schema's ``properties`` map are property *names*, not keywords,
so a property called ``description`` or ``example`` is never removed; only
the property schemas underneath are pruned.
"""

from __future__ import annotations

from typing import Any

from apispec.models import NodeKind, node_kind

_PROPERTIES_KEY = "properties"
_DOC_KEYS = frozenset({"description", "summary"})
_EXAMPLE_KEYS = frozenset({"example", "examples"})


def prune(
    node: Any,
    docs: bool = False,
    examples: bool = False,
    extensions: bool = False,
) -> None:
    """Remove the selected kinds of keys from *node*, in place.

    Args:
        node: The document sub-tree to prune.
        docs: Remove descriptions, summaries, and ``externalDocs``.
        examples: Remove ``example`` and ``examples``.
        extensions: Remove ``x-`` vendor extension keys.
    """
    if not (docs or examples or extensions):
        return
    _prune(node, docs, examples, extensions, names_only=False)


def _prune(
    node: Any, docs: bool, examples: bool, extensions: bool, names_only: bool
) -> None:
    kind = node_kind(node)
    if kind is NodeKind.SEQUENCE:
        for item in node:
            _prune(item, docs, examples, extensions, names_only=False)
        return
    if kind is not NodeKind.OBJECT:
        return

    for key in list(node):
        value = node[key]
        if not names_only and _should_drop(key, value, docs, examples, extensions):
            del node[key]
            continue
        _prune(
            value, docs, examples, extensions,
            names_only=(key == _PROPERTIES_KEY and not names_only),
        )


def _should_drop(
    key: str, value: Any, docs: bool, examples: bool, extensions: bool
) -> bool:
    if extensions and isinstance(key, str) and key.startswith("x-"):
        return True
    if docs:
        if key in _DOC_KEYS and isinstance(value, str):
            return True
        if key == "externalDocs" and isinstance(value, dict):
            return True
    if examples and key in _EXAMPLE_KEYS:
        return True
    return False
