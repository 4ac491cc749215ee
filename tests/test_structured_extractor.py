"""
Tests for strict decoding of model answers (try_parse).
"""

import json
import time

import pytest

from market_factory.parsing.structured_extractor import (
    FailureReason,
    ParseFailure,
    find_fenced_json,
    try_parse,
)

RECORD = {"resolutionCriteria": "X", "description": "Y", "edgeCases": "Z"}


class TestFencedBlocks:

    def test_json_fence_with_trailing_prose(self) -> None:
        raw = "```json\n" + json.dumps(RECORD) + "\n```\nLet me know if you need changes."
        details = try_parse(raw)
        assert details.resolution_criteria == "X"
        assert details.description == "Y"
        assert details.edge_cases == "Z"

    def test_untagged_fence_with_leading_prose(self) -> None:
        raw = "Here is the market:\n```\n" + json.dumps(RECORD, indent=2) + "\n```"
        assert try_parse(raw).model_dump(by_alias=True) == RECORD

    def test_uppercase_tag(self) -> None:
        raw = "```JSON\n" + json.dumps(RECORD) + "\n```"
        assert try_parse(raw).edge_cases == "Z"

    def test_first_fenced_block_wins(self) -> None:
        other = {"resolutionCriteria": "A", "description": "B", "edgeCases": "C"}
        raw = (
            "```json\n" + json.dumps(RECORD) + "\n```\n"
            "Alternative version:\n"
            "```json\n" + json.dumps(other) + "\n```"
        )
        assert try_parse(raw).resolution_criteria == "X"

    def test_nested_object_in_fence(self) -> None:
        raw = "```json\n" + json.dumps(dict(RECORD, meta={"source": "gpt"})) + "\n```"
        assert try_parse(raw).description == "Y"

    def test_find_fenced_json_returns_none_without_fence(self) -> None:
        assert find_fenced_json(json.dumps(RECORD)) is None

    def test_fence_inside_string_value_is_skipped(self) -> None:
        raw = '```json\n{"note": "use ``` fences"}\n```'
        assert find_fenced_json(raw) == '{"note": "use ``` fences"}'

    def test_unclosed_fences_are_scanned_in_linear_time(self) -> None:
        raw = "```{" * 20000
        started = time.perf_counter()
        assert find_fenced_json(raw) is None
        assert time.perf_counter() - started < 1.0

    def test_content_is_not_modified(self) -> None:
        record = {
            "resolutionCriteria": "  Resolves YES if:\n- X happens\n",
            "description": "Line one.\n\nLine two.",
            "edgeCases": "Ambiguous if Y.",
        }
        raw = "```json\n" + json.dumps(record) + "\n```"
        assert try_parse(raw).model_dump(by_alias=True) == record


class TestUnfenced:

    def test_plain_json_matches_fenced_result(self) -> None:
        fenced = try_parse("```json\n" + json.dumps(RECORD) + "\n```")
        assert try_parse(json.dumps(RECORD)) == fenced

    def test_surrounding_whitespace(self) -> None:
        assert try_parse("\n  " + json.dumps(RECORD) + "  \n").edge_cases == "Z"

    def test_extra_keys_are_ignored(self) -> None:
        details = try_parse(json.dumps(dict(RECORD, title="Will X happen?")))
        assert details.model_dump(by_alias=True) == RECORD

    def test_field_names_are_accepted(self) -> None:
        raw = json.dumps(
            {"resolution_criteria": "X", "description": "Y", "edge_cases": "Z"}
        )
        assert try_parse(raw).model_dump(by_alias=True) == RECORD

    def test_list_values_are_joined_by_line(self) -> None:
        raw = json.dumps(dict(RECORD, edgeCases=["Postponed event", "Data source offline"]))
        assert try_parse(raw).edge_cases == "Postponed event\nData source offline"

    def test_scalar_values_become_text(self) -> None:
        assert try_parse(json.dumps(dict(RECORD, description=42))).description == "42"

    @pytest.mark.parametrize("value,expected", [(True, "true"), (False, "false"), (1.5, "1.5")])
    def test_scalars_keep_json_spelling(self, value, expected: str) -> None:
        assert try_parse(json.dumps(dict(RECORD, edgeCases=value))).edge_cases == expected


class TestFailures:

    @pytest.mark.parametrize("raw", [
        "",
        "   ",
        "Resolution Criteria:\nMarket resolves YES if X happens.",
        "{'resolutionCriteria': 'X'}",
        "```json\n{\"resolutionCriteria\": }\n```",
        "1" * 5000,
        '{"resolutionCriteria": ' + "1" * 5000 + ', "description": "Y", "edgeCases": "Z"}',
        "[" * 200000,
    ])
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            try_parse(raw)
        assert exc_info.value.reason is FailureReason.MALFORMED

    @pytest.mark.parametrize("raw", ['["X", "Y", "Z"]', "42", '"text"', "null"])
    def test_not_an_object(self, raw: str) -> None:
        with pytest.raises(ParseFailure) as exc_info:
            try_parse(raw)
        assert exc_info.value.reason is FailureReason.NOT_AN_OBJECT

    def test_missing_field(self) -> None:
        raw = json.dumps({"resolutionCriteria": "X", "description": "Y"})
        with pytest.raises(ParseFailure) as exc_info:
            try_parse(raw)
        assert exc_info.value.reason is FailureReason.MISSING_FIELD
        assert exc_info.value.missing == ["edgeCases"]

    def test_null_counts_as_missing(self) -> None:
        raw = json.dumps(dict(RECORD, description=None))
        with pytest.raises(ParseFailure) as exc_info:
            try_parse(raw)
        assert exc_info.value.reason is FailureReason.MISSING_FIELD
        assert exc_info.value.missing == ["description"]

    def test_failure_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            try_parse("not json at all")
