"""Tests for the extraction pipeline helpers in apispec.commands.extract."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from apispec.commands.extract import extract_subtree, select_expression
from apispec.exceptions import InvalidUsageError, QueryError
from apispec.models import IssueKind


class TestSelectExpression:
    def test_pattern_used_verbatim(self) -> None:
        assert select_expression("components.schemas", None) == "components.schemas"

    def test_path_translated(self) -> None:
        assert select_expression(None, "/pets") == 'paths."/pets"'

    def test_both_rejected(self) -> None:
        with pytest.raises(InvalidUsageError, match="not both"):
            select_expression("info", "/pets")

    def test_neither_rejected(self) -> None:
        with pytest.raises(InvalidUsageError, match="--pattern"):
            select_expression(None, None)


class TestExtractSubtree:
    def test_document_left_untouched(self, petstore_raw: dict[str, Any]) -> None:
        before = copy.deepcopy(petstore_raw)
        result, unresolved = extract_subtree(petstore_raw, 'paths."/pets"', deep=True)

        assert petstore_raw == before
        assert unresolved == []
        assert "$ref" not in result["get"]["parameters"][0]

    def test_result_does_not_alias_document(self, petstore_raw: dict[str, Any]) -> None:
        result, _ = extract_subtree(petstore_raw, "components.schemas.Pets")
        result["items"]["properties"]["id"]["type"] = "string"
        assert petstore_raw["components"]["schemas"]["Pet"]["properties"]["id"]["type"] == "integer"

    def test_no_match(self, petstore_raw: dict[str, Any], caplog) -> None:
        with caplog.at_level("WARNING", logger="apispec"):
            result, unresolved = extract_subtree(petstore_raw, "nothing.here")
        assert result is None
        assert unresolved == []
        assert "matched nothing" in caplog.text

    def test_invalid_expression(self, petstore_raw: dict[str, Any]) -> None:
        with pytest.raises(QueryError):
            extract_subtree(petstore_raw, "paths.[")

    def test_resolve_disabled(self, petstore_raw: dict[str, Any]) -> None:
        result, _ = extract_subtree(petstore_raw, "components.schemas.Pets", resolve=False)
        assert result["items"] == {"$ref": "#/components/schemas/Pet"}

    def test_cycles_reported_in_deep_mode(self, petstore_raw: dict[str, Any]) -> None:
        _, unresolved = extract_subtree(petstore_raw, "components.schemas.TreeNode", deep=True)
        assert [issue.kind for issue in unresolved] == [IssueKind.CIRCULAR]

    def test_extensions_stripped_after_resolution(self, petstore_raw: dict[str, Any]) -> None:
        result, _ = extract_subtree(petstore_raw, "info", strip_extensions=True)
        assert "x-logo" not in result
        assert petstore_raw["info"]["x-logo"]
