"""JMESPath querying and ``$ref`` pointer translation.

Two small pieces live here:

* :func:`evaluate` -- run a JMESPath expression against a parsed document.
  It is used both for the user's initial ``--pattern`` and for every
  ``$ref`` lookup made by :mod:`apispec.parser.resolver`.
* :func:`pointer_to_expression` -- turn a fragment pointer such as
  ``#/components/schemas/Pet`` into the equivalent JMESPath expression
  ``components.schemas.Pet``.  :func:`pointer_to_index_expression` is the
  variant the resolver retries with for pointers into lists
  (``#/x/0`` -> ``x[0]``).
"""

from __future__ import annotations

import re
from typing import Any

import jmespath
from jmespath.exceptions import JMESPathError

from apispec.exceptions import QueryError

ROOT_MARKER = "#/"
"""Prefix meaning "from the document root" in a fragment pointer."""

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ARRAY_INDEX = re.compile(r"0|[1-9][0-9]*")


def evaluate(expression: str, document: Any) -> Any:
    """Evaluate a JMESPath *expression* against *document*.

    Args:
        expression: A JMESPath expression (e.g. ``paths."/pets".get``).
        document: The parsed document tree to search.

    Returns:
        The matched value, or ``None`` when nothing matches.

    Raises:
        QueryError: If the expression cannot be parsed or evaluated.
    """
    try:
        return jmespath.search(expression, document)
    except JMESPathError as exc:
        raise QueryError(f"Invalid query expression {expression!r}: {exc}") from exc


def pointer_to_expression(pointer: str) -> str:
    """Convert a ``$ref`` pointer into a JMESPath expression.

    A single leading ``#/`` is stripped, the rest is split on ``/`` and
    rejoined with ``.``.  Segments are unescaped per RFC 6901 (``~1`` is
    ``/``, ``~0`` is ``~``) and any segment that is not a bare JMESPath
    identifier is emitted as a quoted identifier, so
    ``#/paths/~1pets/get`` becomes ``paths."/pets".get``.

    The function never fails; malformed pointers give expressions that
    simply match nothing.

    Example::

        >>> pointer_to_expression("#/components/responses/errorResponse")
        'components.responses.errorResponse'
        >>> pointer_to_expression("no/leading/marker")
        'no.leading.marker'
    """
    return ".".join(
        _quote_identifier(_unescape(segment)) for segment in _segments(pointer)
    )


def pointer_to_index_expression(pointer: str) -> str | None:
    """Convert a ``$ref`` pointer, reading array-index segments as indexes.

    RFC 6901 segments such as ``0`` or ``12`` may address either an object
    member or a list element.  :func:`pointer_to_expression` always reads
    them as member names; this variant emits them as ``[N]`` instead.

    Returns:
        The expression, or ``None`` when the pointer has no index segment.

    Example::

        >>> pointer_to_index_expression("#/paths/~1pets/get/parameters/0")
        'paths."/pets".get.parameters[0]'
        >>> pointer_to_index_expression("#/x/0")
        'x[0]'
    """
    segments = _segments(pointer)
    if not any(_ARRAY_INDEX.fullmatch(segment) for segment in segments):
        return None

    expression = ""
    for segment in segments:
        if _ARRAY_INDEX.fullmatch(segment):
            expression += f"[{segment}]"
        else:
            if expression:
                expression += "."
            expression += _quote_identifier(_unescape(segment))
    return expression


def path_to_expression(api_path: str) -> str:
    """Build the expression selecting one entry of the ``paths`` object.

    A leading ``/`` is added when missing, so ``auth`` and ``/auth`` both
    select ``paths."/auth"``.
    """
    if not api_path.startswith("/"):
        api_path = f"/{api_path}"
    return f"paths.{_quote_identifier(api_path)}"


def _segments(pointer: str) -> list[str]:
    if pointer.startswith(ROOT_MARKER):
        pointer = pointer[len(ROOT_MARKER):]
    return pointer.split("/")


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def _quote_identifier(name: str) -> str:
    """Return *name* as a JMESPath identifier, quoting it when needed."""
    if _IDENTIFIER.fullmatch(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
