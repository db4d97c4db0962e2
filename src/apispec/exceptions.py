"""Exception hierarchy for apispec.

All exceptions inherit from :class:`ApispecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apispec.exit_codes`.
The top-level error handler in :func:`apispec.app.main` catches
``ApispecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Reference resolution failures are deliberately *not* part of this
hierarchy: the resolver records them and carries on (see
:mod:`apispec.parser.resolver`). Only the driver turns them into an error,
and only when ``--strict`` is given.

Subclass hierarchy::

    ApispecError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- ConnectionError_     (exit 6)
    +-- SpecParseError       (exit 7)
    +-- SpecValidationError  (exit 8)
    +-- QueryError           (exit 9)
    +-- UnresolvedRefsError  (exit 11)
    +-- ConfigError          (exit 1)
"""

from apispec.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_QUERY_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_UNRESOLVED_REFS,
    EXIT_VALIDATION_FAILURE,
)


class ApispecError(Exception):
    """Base exception for all apispec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apispec.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApispecError):
    """Raised for invalid CLI arguments, unknown output formats, or log levels."""

    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(ApispecError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(ApispecError):
    """Raised when the API description cannot be fetched, read, or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SpecValidationError(ApispecError):
    """Raised when ``--validate`` is on and the document is not valid OpenAPI."""

    exit_code = EXIT_VALIDATION_FAILURE


class QueryError(ApispecError):
    """Raised when a JMESPath expression cannot be compiled or evaluated."""

    exit_code = EXIT_QUERY_ERROR


class UnresolvedRefsError(ApispecError):
    """Raised in strict mode when references remain in the output."""

    exit_code = EXIT_UNRESOLVED_REFS


class ConfigError(ApispecError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
