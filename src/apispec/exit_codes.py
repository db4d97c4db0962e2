"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apispec.exceptions.ApispecError` subclass.
Shell wrappers and CI jobs can inspect the exit code to tell a bad URL from
an invalid document without parsing stderr.

Example::

    $ apispec fetch -u https://example.com/openapi.json -p info --validate
    $ echo $?
    8   # EXIT_VALIDATION_FAILURE -- the document failed schema validation
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unknown option value."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be fetched, read, or parsed."""

EXIT_VALIDATION_FAILURE = 8
"""The API description failed OpenAPI schema validation."""

EXIT_QUERY_ERROR = 9
"""The JMESPath query expression could not be compiled or evaluated."""

EXIT_UNRESOLVED_REFS = 11
"""``--strict`` was given and one or more ``$ref`` pointers stayed unresolved."""
