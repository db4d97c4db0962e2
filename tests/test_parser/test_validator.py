"""Tests for apispec.parser.validator."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from apispec.exceptions import SpecValidationError
from apispec.parser.validator import detect_version, validate_document


class TestDetectVersion:
    def test_openapi(self) -> None:
        assert detect_version({"openapi": "3.1.0"}) == "OpenAPI 3.1.0"

    def test_swagger(self) -> None:
        assert detect_version({"swagger": "2.0"}) == "Swagger 2.0"

    def test_unknown(self) -> None:
        assert detect_version({"info": {}}) == "unknown"


class TestValidateDocument:
    """Schema validation is delegated to openapi-spec-validator."""

    def test_valid_document_passes(self, petstore_raw: dict[str, Any]) -> None:
        validate_document(petstore_raw)

    def test_valid_swagger_document_passes(self) -> None:
        validate_document(
            {
                "swagger": "2.0",
                "info": {"title": "Legacy", "version": "1.0"},
                "paths": {},
            }
        )

    def test_missing_info_fails(self, petstore_raw: dict[str, Any]) -> None:
        broken = copy.deepcopy(petstore_raw)
        del broken["info"]
        with pytest.raises(SpecValidationError, match="Invalid OpenAPI document"):
            validate_document(broken)

    def test_dangling_reference_fails(self, petstore_raw: dict[str, Any]) -> None:
        broken = copy.deepcopy(petstore_raw)
        broken["paths"]["/pets"]["get"]["responses"]["default"] = {
            "$ref": "#/components/responses/Missing"
        }
        with pytest.raises(SpecValidationError, match="unresolvable reference") as exc_info:
            validate_document(broken)
        assert "/components/responses/Missing" in str(exc_info.value)

    def test_undetectable_version_fails(self) -> None:
        with pytest.raises(SpecValidationError, match="Cannot detect"):
            validate_document({"info": {"title": "x", "version": "1"}, "paths": {}})

    def test_exit_code(self) -> None:
        assert SpecValidationError("x").exit_code == 8
