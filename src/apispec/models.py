"""Canonical models shared across all apispec modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config
directory or the project directory: :class:`Settings`.

**Document models** -- describe a loaded API description and the generic
tree it parses into: :class:`DocumentFormat`, :class:`LoadedDocument`,
:class:`NodeKind` and the :func:`node_kind` classifier.

**Resolution report models** -- produced by the ``$ref`` resolver:
:class:`IssueKind` and :class:`UnresolvedReference`.

All models use Pydantic v2.
"""

from __future__ import annotations

import datetime
import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class DocumentFormat(str, enum.Enum):
    """Serialization formats understood on input and produced on output."""

    JSON = "json"
    YAML = "yaml"


class Settings(BaseModel):
    """Effective settings for a single ``apispec`` invocation.

    Built by :func:`~apispec.config.resolve_settings` from defaults, the
    user config file, the project config file, environment variables, and
    CLI flags, in increasing order of precedence.

    Example::

        Settings(output="yaml", loglevel="debug", timeout=60)
    """

    model_config = ConfigDict(extra="forbid")

    output: DocumentFormat = Field(
        default=DocumentFormat.JSON, description="Output serialization: json or yaml"
    )
    loglevel: str = Field(
        default="error",
        description="Diagnostic level: trace, debug, info, warn, error, fatal, panic",
    )
    timeout: float = Field(
        default=240.0, gt=0, description="HTTP fetch timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates on fetch")
    validate_spec: bool = Field(
        default=False, description="Validate the document against the OpenAPI schema"
    )
    deep: bool = Field(
        default=False, description="Re-resolve references found inside resolved content"
    )
    color: bool = Field(default=True, description="Allow coloured terminal output")


# --- Documents ---


class LoadedDocument(BaseModel):
    """A parsed API description together with where it came from.

    ``format`` is the detected *source* format; it only matters for
    diagnostics, since output is always marshaled from the parsed tree.
    """

    data: Any
    format: DocumentFormat
    source: str
    size: int = Field(default=0, description="Raw document size in bytes")


class NodeKind(str, enum.Enum):
    """The three shapes a parsed JSON/YAML document node can take."""

    OBJECT = "object"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


_SCALAR_TYPES = (str, int, float, bool, type(None), datetime.date)


def node_kind(node: Any) -> NodeKind:
    """Classify *node* as an object, a sequence, or a scalar.

    Only the types produced by :func:`json.loads` and :func:`yaml.safe_load`
    are accepted. YAML timestamps (``date`` / ``datetime``) count as scalars.

    Raises:
        TypeError: If *node* is of any other type, so that traversals never
            skip an unexpected container silently.
    """
    if isinstance(node, dict):
        return NodeKind.OBJECT
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    if isinstance(node, _SCALAR_TYPES):
        return NodeKind.SCALAR
    raise TypeError(f"Unsupported document node type: {type(node).__name__}")


# --- Resolution report ---


class IssueKind(str, enum.Enum):
    """Why a ``$ref`` pointer was left in place."""

    UNRESOLVABLE = "unresolvable"
    """The query failed or matched nothing."""

    UNEXPECTED_SHAPE = "unexpected_shape"
    """The pointer designates a scalar or a sequence, not an object."""

    CIRCULAR = "circular"
    """The pointer is already being resolved further up (recursive mode only)."""


class UnresolvedReference(BaseModel):
    """One ``$ref`` pointer the resolver could not inline.

    The original ``{"$ref": ...}`` object is left untouched in the tree; this
    record explains why.
    """

    pointer: str = Field(description="The $ref value as written in the document")
    expression: str = Field(description="The JMESPath expression it was turned into")
    kind: IssueKind
    reason: str = Field(default="", description="Human-readable explanation")
