"""Validate a parsed document against the OpenAPI / Swagger schema.

Validation is entirely delegated to ``openapi-spec-validator``, which
detects the document version (Swagger 2.0, OpenAPI 3.0 or 3.1) from the
``swagger`` / ``openapi`` field and applies the matching schema.  A
``$ref`` the validator cannot follow is reported like a schema violation.
"""

from __future__ import annotations

import logging
from typing import Any

from jsonschema.exceptions import ValidationError
from openapi_spec_validator import validate
from openapi_spec_validator.validation.exceptions import ValidatorDetectError
from referencing.exceptions import Unresolvable

from apispec.exceptions import SpecValidationError

logger = logging.getLogger(__name__)


def detect_version(document: dict[str, Any]) -> str:
    """Return a label such as ``"OpenAPI 3.0.3"`` or ``"Swagger 2.0"``.

    Used for diagnostics only; returns ``"unknown"`` when neither version
    field is present.
    """
    if "openapi" in document:
        return f"OpenAPI {document['openapi']}"
    if "swagger" in document:
        return f"Swagger {document['swagger']}"
    return "unknown"


def validate_document(document: dict[str, Any]) -> None:
    """Validate *document* and raise if it is not a valid API description.

    Args:
        document: The full parsed document.

    Raises:
        SpecValidationError: If the version cannot be detected or the
            document violates its schema.
    """
    logger.debug("Validating %s document", detect_version(document))
    try:
        validate(document)
    except ValidatorDetectError as exc:
        raise SpecValidationError(
            f"Cannot detect the OpenAPI version of the document: {exc}"
        ) from exc
    except Unresolvable as exc:
        raise SpecValidationError(
            f"Invalid OpenAPI document: unresolvable reference {exc.ref!r}"
        ) from exc
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.path)
        where = f" at '{location}'" if location else ""
        raise SpecValidationError(
            f"Invalid OpenAPI document{where}: {exc.message}"
        ) from exc
    logger.info("Document is a valid %s description", detect_version(document))
