"""Load API descriptions from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI / Swagger documents and
converting them into Python dictionaries.  It supports both JSON and YAML
with automatic format detection:

1. the response ``Content-Type`` (URLs only);
2. the ``.json`` / ``.yaml`` / ``.yml`` suffix of the URL or file name;
3. the content itself -- JSON is tried first, then YAML.

YAML documents are normalised to the JSON data model after parsing (mapping
keys become strings, timestamps become ISO strings), so that ``200:`` and
``"200":`` response keys are looked up the same way by queries and ``$ref``
pointers.

The public functions are:

* :func:`load_document` -- dispatch on the source (``-``, URL, or path).
* :func:`load_from_url`, :func:`load_from_file`, :func:`load_from_stdin`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from apispec.exceptions import ConnectionError_, SpecParseError
from apispec.models import DocumentFormat, LoadedDocument

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 240.0
"""Seconds to wait for a remote document (the whole exchange, not per read)."""


def load_document(
    source: str, timeout: float = DEFAULT_TIMEOUT, verify_ssl: bool = True
) -> LoadedDocument:
    """Load an API description from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: Fetch timeout in seconds (URLs only).
        verify_ssl: Verify TLS certificates (URLs only).

    Returns:
        The parsed document with its detected format.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
        ConnectionError_: If a URL cannot be reached.
    """
    if source == "-":
        return load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return load_from_url(source, timeout=timeout, verify_ssl=verify_ssl)
    else:
        return load_from_file(source)


def load_from_stdin() -> LoadedDocument:
    """Read a document from stdin, detecting JSON or YAML from the content.

    Raises:
        SpecParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _build(content, source="stdin", hint=None)


def load_from_url(
    url: str, timeout: float = DEFAULT_TIMEOUT, verify_ssl: bool = True
) -> LoadedDocument:
    """Fetch a document over HTTP(S), following redirects.

    Args:
        url: The HTTP(S) URL to fetch.
        timeout: Timeout in seconds.
        verify_ssl: Verify the server's TLS certificate.

    Raises:
        SpecParseError: On an HTTP error status or unparseable content.
        ConnectionError_: If the request fails at the network level.
    """
    logger.info("Fetching API description from %s", url)
    try:
        response = httpx.get(
            url, timeout=timeout, follow_redirects=True, verify=verify_ssl
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConnectionError_(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    logger.debug("Content-Type: %s", content_type or "(none)")

    hint = _format_from_media_type(content_type)
    if hint is None:
        hint = _format_from_name(httpx.URL(url).path)

    return _build(response.text, source=url, hint=hint)


def load_from_file(path: str) -> LoadedDocument:
    """Load a document from a local file.

    Supports ``.json``, ``.yaml`` and ``.yml`` extensions and falls back to
    content-based detection for anything else.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    return _build(content, source=path, hint=_format_from_name(file_path.name))


def describe_size(size: int) -> str:
    """Render a byte count as ``B``, ``KB`` or ``MB`` for diagnostics."""
    if size < 1024:
        return f"{size} Bytes"
    if size < 1024 * 1024:
        return f"{size // 1024} KB"
    return f"{size // (1024 * 1024)} MB"


# ------------------------------------------------------------------ #
# Private helpers
# ------------------------------------------------------------------ #


def _build(content: str, source: str, hint: DocumentFormat | None) -> LoadedDocument:
    data, fmt = _parse_content(content, hint)
    size = len(content.encode("utf-8"))
    logger.debug("Spec type: %s", fmt.value)
    logger.debug("Size of API description: %s", describe_size(size))
    return LoadedDocument(data=data, format=fmt, source=source, size=size)


def _format_from_media_type(content_type: str) -> DocumentFormat | None:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type.endswith(("/json", "+json")):
        return DocumentFormat.JSON
    if media_type.endswith(("/yaml", "/x-yaml", "+yaml", "/yml")):
        return DocumentFormat.YAML
    return None


def _format_from_name(name: str) -> DocumentFormat | None:
    suffix = Path(name).suffix.lower()
    if suffix == ".json":
        return DocumentFormat.JSON
    if suffix in (".yaml", ".yml"):
        return DocumentFormat.YAML
    return None


def _parse_content(
    content: str, hint: DocumentFormat | None = None
) -> tuple[dict[str, Any], DocumentFormat]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is YAML), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Returns:
        The parsed dictionary and the format it was parsed as.

    Raises:
        SpecParseError: If the content cannot be parsed as either format, or
            does not hold a mapping at the top level.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint is not DocumentFormat.YAML:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint is DocumentFormat.JSON:
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result), DocumentFormat.JSON

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(_to_json_model(result)), DocumentFormat.YAML

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise SpecParseError(
            "Spec must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def _to_json_model(data: Any) -> Any:
    """Coerce a YAML tree into the JSON data model."""
    try:
        return json.loads(json.dumps(data, default=str))
    except (TypeError, ValueError) as exc:
        raise SpecParseError(f"YAML document cannot be represented as JSON: {exc}") from exc
