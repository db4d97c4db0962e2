"""apispec -- extract and dereference parts of OpenAPI / Swagger documents.

This package fetches an API description (OpenAPI 3.x or Swagger 2.0, JSON or
YAML) from a URL, a local file, or stdin, optionally validates it, selects a
sub-tree with a JMESPath expression, inlines every internal ``$ref`` pointer
in that sub-tree, and prints the result as JSON or YAML.

Typical workflow::

    apispec fetch -u https://petstore3.swagger.io/api/v3/openapi.json \\
        -p 'paths."/pet".post' -o yaml

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr discipline, marshaling, and logging setup.
    parser: Loading, validation, querying, pruning, and ``$ref`` resolution.
"""

__version__ = "1.0.0"
