"""Unit tests for query evaluation."""

import pytest

from docstore.components.evaluator import matches, strict_equal, tokenize
from docstore.components.query import And, Condition, Eq, Gt, Or, Text

RECORD = {"id": 1, "name": "Alice Smith", "age": 30, "tags": ["a", "b"], "active": True, "note": None}


def test_empty_and_matches_everything():
    """Test vacuous truth of an empty conjunction."""
    assert matches(RECORD, {"$and": []})
    assert matches({}, And(()))


def test_empty_or_matches_nothing():
    """Test vacuous falsehood of an empty disjunction."""
    assert not matches(RECORD, {"$or": []})
    assert not matches({}, Or(()))


def test_eq_on_own_value_matches():
    """Test that every field matches $eq against its own value."""
    for name, value in RECORD.items():
        assert matches(RECORD, {name: {"$eq": value}})


def test_and_or_short_circuit_semantics():
    """Test conjunction and disjunction of conditions."""
    young = {"age": {"$lt": 18}}
    named = {"name": {"$eq": "Alice Smith"}}

    assert matches(RECORD, {"$or": [young, named]})
    assert not matches(RECORD, {"$and": [young, named]})
    assert matches(RECORD, {"$and": [named, {"$or": [young, {"age": {"$gt": 20}}]}]})


def test_condition_map_is_conjunction():
    """Test that every field criterion must hold."""
    assert matches(RECORD, {"age": {"$gt": 20}, "id": {"$in": [1, 2]}})
    assert not matches(RECORD, {"age": {"$gt": 20}, "id": {"$in": [2, 3]}})


def test_gt_lt_numbers_and_strings():
    """Test ordered comparisons on mutually ordered types."""
    assert matches(RECORD, {"age": {"$gt": 29.5}})
    assert not matches(RECORD, {"age": {"$gt": 30}})
    assert matches(RECORD, {"age": {"$lt": 31}})
    assert matches(RECORD, {"name": {"$gt": "Al"}})
    assert matches(RECORD, {"name": {"$lt": "Bob"}})


def test_incompatible_types_never_match():
    """Test that mismatched types yield no match instead of raising."""
    assert not matches(RECORD, {"age": {"$gt": "10"}})
    assert not matches(RECORD, {"name": {"$lt": 5}})
    assert not matches(RECORD, {"tags": {"$gt": 1}})
    assert not matches(RECORD, {"note": {"$lt": 1}})
    assert not matches(RECORD, {"active": {"$gt": 0}})


def test_strict_equality():
    """Test that equality never coerces between kinds."""
    assert not matches(RECORD, {"active": {"$eq": 1}})
    assert not matches(RECORD, {"age": {"$eq": "30"}})
    assert matches(RECORD, {"age": {"$eq": 30.0}})
    assert matches(RECORD, {"tags": {"$eq": ["a", "b"]}})
    assert not matches(RECORD, {"tags": {"$eq": ["b", "a"]}})
    assert strict_equal(None, None)
    assert not strict_equal(0, None)
    assert not strict_equal(False, 0)


def test_in_uses_strict_equality():
    """Test $in membership."""
    assert matches(RECORD, {"age": {"$in": ["x", 30]}})
    assert not matches(RECORD, {"active": {"$in": [1]}})
    assert not matches(RECORD, {"age": {"$in": []}})


def test_absent_field_never_matches():
    """Test that an absent field fails every criterion, even $eq null."""
    for criterion in ({"$eq": None}, {"$gt": 0}, {"$lt": 0}, {"$in": [None]}):
        assert not matches(RECORD, {"missing": criterion})

    assert matches(RECORD, {"note": {"$eq": None}})


def test_tokenize_splits_on_single_spaces():
    """Test lowercasing and single-space splitting."""
    assert tokenize("Hello World") == ["hello", "world"]
    assert tokenize("a  b") == ["a", "", "b"]


def test_text_requires_every_word():
    """Test that all query words must be present."""
    fields = ["name"]

    assert matches({"name": "a b c"}, {"$text": "a b"}, fields)
    assert not matches({"name": "a"}, {"$text": "a b"}, fields)
    assert matches({"name": "Alice Smith"}, Text("smith ALICE"), fields)


def test_text_is_word_membership_not_substring():
    """Test that partial words do not match."""
    assert not matches(RECORD, {"$text": "ali"}, ["name"])


def test_text_words_may_come_from_different_fields():
    """Test that each word may be found in a different single field."""
    record = {"title": "red car", "body": "fast engine"}
    fields = ["title", "body"]

    assert matches(record, {"$text": "red fast"}, fields)
    assert not matches(record, {"$text": "car fast"}, ["title"])


def test_text_only_searches_configured_fields():
    """Test that non full-text fields are ignored."""
    record = {"name": "alice", "city": "paris"}

    assert not matches(record, {"$text": "paris"}, ["name"])
    assert not matches(record, {"$text": "alice"}, [])


def test_text_on_non_string_and_missing_fields():
    """Test text rendering of numbers, booleans and lists."""
    record = {"n": 42, "flag": True, "tags": ["x y", "z"]}
    fields = ["n", "flag", "tags", "absent"]

    assert matches(record, {"$text": "42 true"}, fields)
    assert matches(record, {"$text": "x"}, fields)
    assert not matches(record, {"$text": "undefined"}, fields)


@pytest.mark.parametrize(
    "query",
    [
        Condition({"age": Gt(1)}),
        And((Condition({"id": Eq(1)}), Text("alice"))),
    ],
)
def test_typed_queries_evaluate(query):
    """Test evaluation of typed nodes."""
    assert matches(RECORD, query, ["name"])
