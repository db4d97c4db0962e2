"""API description parser -- load, validate, query, dereference, and prune.

This sub-package turns a raw OpenAPI / Swagger document (JSON or YAML, local
file, remote URL, or stdin) into the self-contained sub-tree that the CLI
prints.

Typical usage::

    from apispec.parser import evaluate, load_document, resolve_refs

    loaded = load_document("https://petstore3.swagger.io/api/v3/openapi.json")
    subtree = copy.deepcopy(evaluate('paths."/pet".post', loaded.data))
    unresolved = resolve_refs(subtree, loaded.data)

Sub-modules:

* :mod:`~apispec.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection.
* :mod:`~apispec.parser.validator` -- OpenAPI schema validation.
* :mod:`~apispec.parser.query` -- JMESPath evaluation and ``$ref`` pointer
  translation.
* :mod:`~apispec.parser.resolver` -- In-place ``$ref`` resolution.
* :mod:`~apispec.parser.pruner` -- Optional removal of docs, examples, and
  extensions.
"""

from apispec.parser.loader import load_document
from apispec.parser.pruner import prune
from apispec.parser.query import (
    evaluate,
    path_to_expression,
    pointer_to_expression,
    pointer_to_index_expression,
)
from apispec.parser.resolver import ReferenceResolver, resolve_refs
from apispec.parser.validator import validate_document

__all__ = [
    "load_document",
    "validate_document",
    "evaluate",
    "pointer_to_expression",
    "pointer_to_index_expression",
    "path_to_expression",
    "ReferenceResolver",
    "resolve_refs",
    "prune",
]
