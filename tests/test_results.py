"""Tests for decoding SPARQL JSON results and the result views."""

from __future__ import annotations

import io
import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from sparqlkit.errors import MalformedInputError
from sparqlkit.results import as_bindings, as_solutions, parse_json
from sparqlkit.terms import (
    XSD_BOOLEAN,
    XSD_DATETIME,
    XSD_FLOAT,
    XSD_INTEGER,
    XSD_STRING,
    IRI,
    BlankNode,
    LangLiteral,
    Literal,
)


def _doc(bindings, vars=None, **extra) -> str:
    head = {"vars": vars if vars is not None else sorted({k for b in bindings for k in b})}
    return json.dumps({"head": head, "results": {"bindings": bindings}, **extra})


class TestParseJSON:
    """Test decoding of the wire format."""

    def test_counts(self, result_set):
        assert len(result_set.rows) == 2
        assert len(result_set.vars) == 9
        assert result_set.head.link == ()

    def test_accepts_stream(self, results_bytes):
        from_binary = parse_json(io.BytesIO(results_bytes))
        from_text = parse_json(io.StringIO(results_bytes.decode("utf-8")))
        assert from_binary == from_text == parse_json(results_bytes)

    def test_row_count_matches_bindings(self):
        bindings = [{"s": {"type": "uri", "value": f"http://example.org/{i}"}} for i in range(25)]
        assert len(parse_json(_doc(bindings)).rows) == 25

    def test_binding_fields(self, result_set):
        bob = result_set.rows[1]["name"]
        assert bob.type == "literal"
        assert bob.value == "Bob"
        assert bob.lang == "en"
        assert bob.datatype is None
        age = result_set.rows[0]["age"]
        assert age.datatype == XSD_INTEGER

    def test_unknown_fields_ignored(self):
        doc = json.dumps({
            "head": {"vars": ["s"], "extra": 1},
            "results": {
                "distinct": True,
                "bindings": [{"s": {"type": "uri", "value": "urn:x", "custom": "?"}}],
            },
            "other": {"nested": []},
        })
        result_set = parse_json(doc)
        assert result_set.results.distinct is True
        assert result_set.rows[0]["s"].value == "urn:x"

    def test_missing_sections_default_to_empty(self):
        result_set = parse_json("{}")
        assert result_set.vars == []
        assert result_set.rows == ()
        assert result_set.boolean is None

    def test_null_sections_default_to_empty(self):
        result_set = parse_json('{"head": {"vars": null, "link": null}, "results": {"bindings": null}}')
        assert result_set.vars == []
        assert result_set.rows == ()

    def test_ask_response(self):
        result_set = parse_json('{"head": {}, "boolean": true}')
        assert result_set.boolean is True
        assert result_set.solutions() == []

    def test_rows_not_checked_against_vars(self):
        doc = _doc([{"undeclared": {"type": "uri", "value": "urn:u"}}], vars=["s"])
        result_set = parse_json(doc)
        assert len(result_set.rows) == 1

    @pytest.mark.parametrize(
        "payload",
        [
            b"",
            b'{"head": {"vars": ["s"]}, "results": {"bindings": [',
            b"not json at all",
            b"\xff\xfe\xfa",
            b"[" * 200000,
        ],
    )
    def test_malformed_json(self, payload):
        with pytest.raises(MalformedInputError) as excinfo:
            parse_json(payload)
        assert excinfo.value.__cause__ is not None

    def test_wrong_structure(self):
        with pytest.raises(MalformedInputError) as excinfo:
            parse_json('{"results": {"bindings": "nope"}}')
        assert isinstance(excinfo.value.__cause__, ValidationError)

    def test_result_set_is_frozen(self, result_set):
        with pytest.raises(ValidationError):
            result_set.boolean = True

    def test_rows_are_read_only(self, result_set):
        row = result_set.rows[0]
        with pytest.raises(TypeError):
            row["x"] = row["name"]
        with pytest.raises(TypeError):
            del row["x"]
        assert "x" in result_set.rows[0]

    def test_null_cells_decode(self):
        doc = _doc([{"s": {"type": "uri", "value": "urn:a"}, "o": None, "p": {"type": None, "value": None}}])
        result_set = parse_json(doc)
        assert result_set.rows[0]["o"].type == ""
        assert result_set.rows[0]["p"].value == ""


class TestBindingsView:
    """Test the variable → terms projection."""

    def test_bound_variables(self, result_set):
        bindings = result_set.bindings()
        assert len(bindings) == 9
        assert len(bindings["x"]) == 2
        assert len(bindings["updated"]) == 1
        assert len(bindings["mbox"]) == 1

    def test_row_order(self, result_set):
        assert as_bindings(result_set)["hpage"] == [
            IRI("http://work.example.org/alice/"),
            IRI("http://work.example.org/bob/"),
        ]

    def test_unknown_kind_is_skipped(self):
        doc = _doc([
            {"v": {"type": "uri", "value": "urn:a"}},
            {"v": {"type": "something-else", "value": "x"}},
            {"v": {"type": "bnode", "value": "b0"}},
        ])
        assert as_bindings(parse_json(doc)) == {"v": [IRI("urn:a"), BlankNode("b0")]}

    def test_variable_never_bound_has_no_key(self):
        doc = _doc([{"s": {"type": "uri", "value": "urn:a"}}], vars=["s", "o"])
        assert as_bindings(parse_json(doc)) == {"s": [IRI("urn:a")]}

    def test_null_cells_are_skipped(self):
        doc = _doc([
            {"s": {"type": "uri", "value": "urn:a"}, "o": None},
            {"s": None, "o": {"type": "literal", "value": None}},
        ])
        assert as_bindings(parse_json(doc)) == {
            "s": [IRI("urn:a")],
            "o": [Literal("", XSD_STRING)],
        }


class TestSolutionsView:
    """Test the per-row projection."""

    def test_terms(self, result_set):
        s = result_set.solutions()
        assert s[0]["x"] == BlankNode("r1")
        assert s[0]["hpage"] == IRI("http://work.example.org/alice/")
        assert s[0]["name"] == Literal("Alice", XSD_STRING)
        assert s[1]["name"] == LangLiteral("Bob", "en")
        assert s[0]["age"] == Literal(17, XSD_INTEGER)
        assert s[0]["score"] == Literal(0.2, XSD_FLOAT)
        assert s[0]["z"] == Literal(True, XSD_BOOLEAN)
        assert s[1]["z"] == Literal(False, XSD_BOOLEAN)
        updated = datetime(2014, 7, 21, 2, 0, 40, tzinfo=timezone.utc)
        assert s[0]["updated"] == Literal(updated, XSD_DATETIME)

    def test_absent_variable_is_omitted(self, result_set):
        s = as_solutions(result_set)
        assert "mbox" not in s[0]
        assert "updated" not in s[1]
        assert None not in s[0].values()

    def test_unknown_kind_drops_only_that_cell(self):
        doc = _doc([{
            "s": {"type": "uri", "value": "urn:a"},
            "o": {"type": "something-else", "value": "x"},
        }])
        assert as_solutions(parse_json(doc)) == [{"s": IRI("urn:a")}]

    def test_null_cell_drops_only_that_cell(self):
        doc = _doc([
            {"s": {"type": "uri", "value": "urn:a"}, "o": None},
            {"s": {"type": None, "value": "urn:b"}, "o": {"type": "literal", "value": None}},
        ])
        assert as_solutions(parse_json(doc)) == [
            {"s": IRI("urn:a")},
            {"o": Literal("", XSD_STRING)},
        ]

    def test_empty_rows_are_kept(self):
        doc = _doc([{}, {"s": {"type": "uri", "value": "urn:a"}}], vars=["s"])
        assert as_solutions(parse_json(doc)) == [{}, {"s": IRI("urn:a")}]

    def test_views_are_recomputed(self, result_set):
        assert result_set.solutions() == result_set.solutions()
        assert result_set.solutions() is not result_set.solutions()
