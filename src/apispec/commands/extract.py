"""Extract commands -- ``fetch``, ``local`` and ``stdin``.

All three commands run the same pipeline and differ only in where the API
description comes from:

1. resolve effective :class:`~apispec.models.Settings` (flags, env, config);
2. load the document (URL, file, or stdin) and optionally validate it;
3. select a sub-tree with a JMESPath ``--pattern`` (or an API ``--path``);
4. deep-copy the sub-tree and inline its ``$ref`` pointers against the
   full document;
5. optionally strip docs, examples, and extensions;
6. print the result as JSON or YAML.

Example::

    apispec fetch -u https://petstore3.swagger.io/api/v3/openapi.json \\
        -p 'paths."/pet".put.responses' -o yaml
    apispec local -f openapi.yaml --path /auth --strip-docs
    curl -s https://example.com/openapi.json | apispec stdin -p components.schemas.Pet
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

import typer

from apispec.exceptions import ApispecError, InvalidUsageError, UnresolvedRefsError
from apispec.models import UnresolvedReference
from apispec.output import error

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
# Shared options
# ------------------------------------------------------------------ #

_PATTERN = typer.Option(
    None,
    "--pattern",
    "-p",
    help="JMESPath pattern selecting the sub-tree: https://jmespath.org/tutorial.html",
)
_API_PATH = typer.Option(
    None,
    "--path",
    help="API path to extract, e.g. '/auth' (shortcut for -p 'paths.\"/auth\"').",
)
_OUTPUT = typer.Option(
    None, "--output", "-o", help="Output type: 'json' (default) or 'yaml'."
)
_LOGLEVEL = typer.Option(
    None,
    "--loglevel",
    "-l",
    help="Logging level: 'trace', 'debug', 'info', 'warn', 'error' (default), 'fatal', 'panic'.",
)
_VALIDATE = typer.Option(
    False, "--validate", "-v", help="Validate the document against the OpenAPI schema."
)
_DEEP = typer.Option(
    False, "--deep", help="Also resolve references found inside resolved content."
)
_NO_RESOLVE = typer.Option(
    False, "--no-resolve", help="Print the selected sub-tree without resolving $ref."
)
_STRIP_DOCS = typer.Option(
    False, "--strip-docs", help="Remove descriptions, summaries and externalDocs."
)
_STRIP_EXAMPLES = typer.Option(
    False, "--strip-examples", help="Remove example and examples entries."
)
_STRIP_EXTENSIONS = typer.Option(
    False, "--strip-extensions", help="Remove x- vendor extensions."
)
_STRICT = typer.Option(
    False, "--strict", help="Fail (exit 11) instead of printing when a $ref stays unresolved."
)
_OUTPUT_FILE = typer.Option(
    None, "--output-file", help="Write the result to this file instead of stdout."
)
_NO_COLOR = typer.Option(False, "--no-color", help="Disable color output.")


# ------------------------------------------------------------------ #
# Pipeline
# ------------------------------------------------------------------ #


def select_expression(pattern: Optional[str], api_path: Optional[str]) -> str:
    """Return the query expression from exactly one of ``--pattern`` / ``--path``.

    Raises:
        InvalidUsageError: If both or neither are given.
    """
    from apispec.parser.query import path_to_expression

    if pattern and api_path:
        raise InvalidUsageError("Use either --pattern or --path, not both")
    if pattern:
        return pattern
    if api_path:
        return path_to_expression(api_path)
    raise InvalidUsageError("Missing option: --pattern (or --path) is required")


def extract_subtree(
    document: dict[str, Any],
    expression: str,
    resolve: bool = True,
    deep: bool = False,
    strip_docs: bool = False,
    strip_examples: bool = False,
    strip_extensions: bool = False,
) -> tuple[Any, list[UnresolvedReference]]:
    """Select, dereference and prune a sub-tree of *document*.

    The selected sub-tree is deep-copied first, so *document* is left
    exactly as loaded.

    Args:
        document: The full parsed document.
        expression: JMESPath expression selecting the sub-tree.
        resolve: Inline ``$ref`` pointers.
        deep: Resolve references inside inlined content as well.
        strip_docs: Remove descriptions, summaries and ``externalDocs``.
        strip_examples: Remove ``example`` / ``examples``.
        strip_extensions: Remove ``x-`` keys.

    Returns:
        The resulting sub-tree (``None`` when the query matched nothing) and
        the list of references left unresolved.

    Raises:
        QueryError: If *expression* is not a valid JMESPath expression.
    """
    from apispec.parser.pruner import prune
    from apispec.parser.query import evaluate
    from apispec.parser.resolver import resolve_refs

    selected = evaluate(expression, document)
    if selected is None:
        logger.warning("Pattern %r matched nothing", expression)
        return None, []

    subtree = copy.deepcopy(selected)
    unresolved: list[UnresolvedReference] = []
    if resolve:
        unresolved = resolve_refs(subtree, document, recursive=deep)
    prune(subtree, docs=strip_docs, examples=strip_examples, extensions=strip_extensions)
    return subtree, unresolved


def run_extraction(
    source: str,
    pattern: Optional[str],
    api_path: Optional[str],
    output: Optional[str],
    loglevel: Optional[str],
    validate: bool,
    deep: bool,
    no_resolve: bool,
    strip_docs: bool,
    strip_examples: bool,
    strip_extensions: bool,
    strict: bool,
    output_file: Optional[str],
    no_color: bool,
    timeout: Optional[float] = None,
    insecure: bool = False,
) -> None:
    """Run the whole pipeline for *source* and print the result.

    Flags left at their defaults do not override environment or config
    file settings.

    Raises:
        ApispecError: Any failure, carrying the exit code to use.
    """
    from apispec.config import resolve_settings
    from apispec.output import (
        OutputManager,
        configure_logging,
        emit,
        parse_format,
        set_output,
    )
    from apispec.parser.loader import load_document
    from apispec.parser.validator import validate_document

    settings = resolve_settings(
        output=parse_format(output) if output is not None else None,
        loglevel=loglevel,
        timeout=timeout,
        verify_ssl=False if insecure else None,
        validate_spec=True if validate else None,
        deep=True if deep else None,
        color=False if no_color else None,
    )
    set_output(
        OutputManager(
            format=settings.output,
            no_color=not settings.color,
            output_file=output_file,
        )
    )
    configure_logging(settings.loglevel)

    expression = select_expression(pattern, api_path)
    logger.debug("Source     : %s", source)
    logger.debug("Pattern    : %s", expression)
    logger.debug("Output Type: %s", settings.output.value)
    logger.debug("Validation : %s", settings.validate_spec)

    loaded = load_document(source, timeout=settings.timeout, verify_ssl=settings.verify_ssl)

    if settings.validate_spec:
        validate_document(loaded.data)

    result, unresolved = extract_subtree(
        loaded.data,
        expression,
        resolve=not no_resolve,
        deep=settings.deep,
        strip_docs=strip_docs,
        strip_examples=strip_examples,
        strip_extensions=strip_extensions,
    )

    if unresolved:
        pointers = ", ".join(sorted({issue.pointer for issue in unresolved}))
        if strict:
            raise UnresolvedRefsError(
                f"{len(unresolved)} reference(s) left unresolved: {pointers}"
            )
        logger.warning("%d reference(s) left unresolved: %s", len(unresolved), pointers)

    emit(result)
    logger.info("Extraction completed successfully")


def _run_command(source: str, **options: Any) -> None:
    """Run :func:`run_extraction`, turning errors into a clean exit."""
    try:
        run_extraction(source, **options)
    except ApispecError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


def fetch_command(
    url: str = typer.Option(..., "--url", "-u", help="URL of the OpenAPI spec."),
    pattern: Optional[str] = _PATTERN,
    api_path: Optional[str] = _API_PATH,
    output: Optional[str] = _OUTPUT,
    loglevel: Optional[str] = _LOGLEVEL,
    validate: bool = _VALIDATE,
    deep: bool = _DEEP,
    no_resolve: bool = _NO_RESOLVE,
    strip_docs: bool = _STRIP_DOCS,
    strip_examples: bool = _STRIP_EXAMPLES,
    strip_extensions: bool = _STRIP_EXTENSIONS,
    strict: bool = _STRICT,
    output_file: Optional[str] = _OUTPUT_FILE,
    no_color: bool = _NO_COLOR,
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Fetch timeout in seconds (default 240)."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip TLS certificate verification."
    ),
) -> None:
    """Fetch an OpenAPI spec over HTTP(S) and extract part of it.

    Example::

        apispec fetch -u https://example.com/openapi.json -p components.schemas.Pet
    """
    _run_command(
        url,
        pattern=pattern,
        api_path=api_path,
        output=output,
        loglevel=loglevel,
        validate=validate,
        deep=deep,
        no_resolve=no_resolve,
        strip_docs=strip_docs,
        strip_examples=strip_examples,
        strip_extensions=strip_extensions,
        strict=strict,
        output_file=output_file,
        no_color=no_color,
        timeout=timeout,
        insecure=insecure,
    )


def local_command(
    file: str = typer.Option(..., "--file", "-f", help="Path to the local OpenAPI spec file."),
    pattern: Optional[str] = _PATTERN,
    api_path: Optional[str] = _API_PATH,
    output: Optional[str] = _OUTPUT,
    loglevel: Optional[str] = _LOGLEVEL,
    validate: bool = _VALIDATE,
    deep: bool = _DEEP,
    no_resolve: bool = _NO_RESOLVE,
    strip_docs: bool = _STRIP_DOCS,
    strip_examples: bool = _STRIP_EXAMPLES,
    strip_extensions: bool = _STRIP_EXTENSIONS,
    strict: bool = _STRICT,
    output_file: Optional[str] = _OUTPUT_FILE,
    no_color: bool = _NO_COLOR,
) -> None:
    """Process a local OpenAPI spec file (JSON or YAML).

    Example::

        apispec local -f openapi.yaml --path /auth -o yaml
    """
    _run_command(
        file,
        pattern=pattern,
        api_path=api_path,
        output=output,
        loglevel=loglevel,
        validate=validate,
        deep=deep,
        no_resolve=no_resolve,
        strip_docs=strip_docs,
        strip_examples=strip_examples,
        strip_extensions=strip_extensions,
        strict=strict,
        output_file=output_file,
        no_color=no_color,
    )


def stdin_command(
    pattern: Optional[str] = _PATTERN,
    api_path: Optional[str] = _API_PATH,
    output: Optional[str] = _OUTPUT,
    loglevel: Optional[str] = _LOGLEVEL,
    validate: bool = _VALIDATE,
    deep: bool = _DEEP,
    no_resolve: bool = _NO_RESOLVE,
    strip_docs: bool = _STRIP_DOCS,
    strip_examples: bool = _STRIP_EXAMPLES,
    strip_extensions: bool = _STRIP_EXTENSIONS,
    strict: bool = _STRICT,
    output_file: Optional[str] = _OUTPUT_FILE,
    no_color: bool = _NO_COLOR,
) -> None:
    """Process an OpenAPI spec read from stdin.

    Example::

        curl -s https://example.com/openapi.json | apispec stdin -p info
    """
    _run_command(
        "-",
        pattern=pattern,
        api_path=api_path,
        output=output,
        loglevel=loglevel,
        validate=validate,
        deep=deep,
        no_resolve=no_resolve,
        strip_docs=strip_docs,
        strip_examples=strip_examples,
        strip_extensions=strip_extensions,
        strict=strict,
        output_file=output_file,
        no_color=no_color,
    )
