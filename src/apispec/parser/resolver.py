"""Inline ``$ref`` JSON Reference pointers in an extracted document sub-tree.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  After the
user's query has selected a sub-tree, this module walks that sub-tree and
replaces every internal reference with the object it points to, looked up
in the *full* document, so the printed result is self-contained.

Resolution works **in place**: a reference object loses its ``$ref`` key
and gains every key of the target object (target keys win over any
siblings already present).  Targets are deep-copied before they are merged,
so the full document is never modified through the result.  The ``$ref``
of an object is inlined before its siblings are walked, and siblings the
merge replaced are skipped.

Pointer segments such as ``0`` are looked up as member names first and, if
that matches nothing, as list indexes (``#/x/0`` selects ``x[0]``).

A reference that cannot be inlined is left exactly as written and recorded
as an :class:`~apispec.models.UnresolvedReference`:

* the pointer's query fails or matches nothing (``UNRESOLVABLE``);
* the pointer designates a scalar or a list (``UNEXPECTED_SHAPE``);
* in recursive mode, the pointer is already being resolved further up the
  stack (``CIRCULAR``).

None of these stop the traversal; sibling references are still resolved.

By default, content merged from a target is not scanned again, so nested
references inside it survive and the walk always terminates.  With
``recursive=True`` the target copy is resolved before it is merged, using a
per-branch set of pointers to break cycles the same way a self-referencing
schema is left with its ``$ref`` at the cycle point.

Typical usage::

    subtree = copy.deepcopy(evaluate(pattern, document))
    unresolved = resolve_refs(subtree, document)
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from apispec.exceptions import QueryError
from apispec.models import IssueKind, NodeKind, UnresolvedReference, node_kind
from apispec.parser.query import (
    evaluate,
    pointer_to_expression,
    pointer_to_index_expression,
)

logger = logging.getLogger(__name__)

REF_KEY = "$ref"
"""Key whose string value marks an object as a reference."""

ITEMS_KEY = "items"
"""Array item definition; its value is often a reference on its own."""

RESPONSES_KEY = "responses"
"""Map of named (status-code) responses, each commonly a reference."""


class ReferenceResolver:
    """Resolve ``$ref`` pointers against a fixed full document.

    Args:
        document: The root of the full parsed document.  Only read.
        recursive: Also resolve references found inside inlined content.

    Attributes:
        unresolved: Every reference left in place so far, in the order the
            traversal met them.

    Example::

        resolver = ReferenceResolver(document)
        resolver.resolve(subtree)
        for issue in resolver.unresolved:
            print(issue.pointer, issue.reason)
    """

    def __init__(self, document: Any, recursive: bool = False) -> None:
        self._document = document
        self._recursive = recursive
        self.unresolved: list[UnresolvedReference] = []

    def resolve(self, node: Any) -> None:
        """Resolve every reference inside *node*, mutating it in place.

        Raises:
            TypeError: If the tree holds a value that is not a dict, a list,
                or a JSON/YAML scalar.
        """
        self._walk(node, frozenset())

    # ------------------------------------------------------------------ #
    # Traversal
    # ------------------------------------------------------------------ #

    def _walk(self, node: Any, seen: frozenset[str]) -> None:
        kind = node_kind(node)
        if kind is NodeKind.OBJECT:
            self._walk_object(node, seen)
        elif kind is NodeKind.SEQUENCE:
            for item in node:
                self._walk(item, seen)
        else:
            # Scalars hold nothing to resolve
            return

    def _walk_object(self, node: dict[str, Any], seen: frozenset[str]) -> None:
        # Snapshot taken before the merge; merged values are not walked again.
        items = list(node.items())
        ref = node.get(REF_KEY)
        if isinstance(ref, str):
            self._inline(node, ref, seen)

        for key, value in items:
            if key == REF_KEY and isinstance(value, str):
                continue
            if node.get(key) is not value:
                # Overwritten by the target's content
                continue
            if key == ITEMS_KEY and value is not None:
                if isinstance(value, dict) and REF_KEY in value:
                    logger.debug("Resolving array items reference %s", value[REF_KEY])
                self._walk(value, seen)
            elif key == RESPONSES_KEY and isinstance(value, dict):
                for name, response in value.items():
                    logger.debug("Resolving response %s", name)
                    self._walk(response, seen)
            else:
                self._walk(value, seen)

    # ------------------------------------------------------------------ #
    # Single reference
    # ------------------------------------------------------------------ #

    def _inline(self, node: dict[str, Any], pointer: str, seen: frozenset[str]) -> None:
        """Replace the ``$ref`` in *node* with the keys of its target."""
        expression = pointer_to_expression(pointer)

        if pointer in seen:
            self._record(
                pointer, expression, IssueKind.CIRCULAR,
                "reference cycle; left in place",
            )
            return

        try:
            target = evaluate(expression, self._document)
            if target is None:
                # Numeric segments may address list elements instead
                index_expression = pointer_to_index_expression(pointer)
                if index_expression is not None:
                    target = evaluate(index_expression, self._document)
                    if target is not None:
                        expression = index_expression
        except QueryError as exc:
            self._record(pointer, expression, IssueKind.UNRESOLVABLE, str(exc))
            return

        if target is None:
            self._record(
                pointer, expression, IssueKind.UNRESOLVABLE,
                "pointer does not match anything in the document",
            )
            return

        if not isinstance(target, dict):
            self._record(
                pointer, expression, IssueKind.UNEXPECTED_SHAPE,
                f"pointer designates a {type(target).__name__}, not an object",
            )
            return

        content = copy.deepcopy(target)
        if self._recursive:
            self._walk_object(content, seen | {pointer})

        logger.debug("Resolved %s", pointer)
        del node[REF_KEY]
        node.update(content)

    def _record(
        self, pointer: str, expression: str, kind: IssueKind, reason: str
    ) -> None:
        issue = UnresolvedReference(
            pointer=pointer, expression=expression, kind=kind, reason=reason
        )
        self.unresolved.append(issue)
        if kind is IssueKind.UNEXPECTED_SHAPE:
            logger.error("Cannot resolve %s: %s", pointer, reason)
        else:
            logger.warning("Cannot resolve %s: %s", pointer, reason)


def resolve_refs(
    node: Any, document: Any, recursive: bool = False
) -> list[UnresolvedReference]:
    """Resolve all ``$ref`` pointers in *node* against *document*, in place.

    Args:
        node: The sub-tree to dereference.  It is modified in place; pass a
            deep copy if it is part of *document* and the document must stay
            intact.
        document: The full document used as the lookup source.
        recursive: Also resolve references inside inlined content.

    Returns:
        The references that were left unresolved (empty when everything
        resolved).
    """
    resolver = ReferenceResolver(document, recursive=recursive)
    resolver.resolve(node)
    return resolver.unresolved
