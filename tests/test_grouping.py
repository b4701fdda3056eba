"""
Tests for group assignment and name sanitation.
"""

import pytest

from depsplit.config import CollisionPolicy, GroupNaming
from depsplit.errors import NamingCollisionError
from depsplit.splitting import (
    FunctionUnit,
    GroupAssigner,
    ingest_source,
    is_degenerate,
    sanitize_identifier,
)


def fn(name, *used):
    return FunctionUnit(name=name, body=f"def {name}():\n    pass\n", usage_set=frozenset(used))


@pytest.fixture
def table():
    return ingest_source("import net\nimport json\nimport requests\n").imports


class TestSanitizeIdentifier:
    """Tests for sanitize_identifier."""

    def test_keeps_alphanumerics_and_underscores(self):
        assert sanitize_identifier("json_requests") == "json_requests"

    def test_drops_everything_else(self):
        assert sanitize_identifier("a-b.c d+e") == "abcde"

    def test_drops_numeric_characters_not_allowed_in_identifiers(self):
        assert sanitize_identifier("net\u00b2") == "net"

    def test_normalizes_compatibility_characters(self):
        assert sanitize_identifier("\ufb01le") == "file"

    def test_leading_digit_is_prefixed(self):
        assert sanitize_identifier("9lives") == "_9lives"


class TestGroupAssigner:
    """Tests for GroupAssigner."""

    def test_usage_keys(self, table):
        groups = GroupAssigner(table).assign(
            [fn("a", "net"), fn("b"), fn("c", "requests", "json"), fn("d", "net")]
        )

        assert [g.key for g in groups] == ["net", "general", "json_requests"]
        assert [g.member_names for g in groups] == [["a", "d"], ["b"], ["c"]]
        assert [g.identifier for g in groups] == ["net", "general", "json_requests"]

    def test_sequential_keys_reuse_identical_sets(self, table):
        groups = GroupAssigner(table, naming=GroupNaming.SEQUENTIAL).assign(
            [fn("a", "net"), fn("b"), fn("c", "json", "requests"), fn("d", "net"), fn("e", "requests", "json")]
        )

        assert [g.key for g in groups] == ["group_1", "general", "group_2"]
        assert [g.member_names for g in groups] == [["a", "d"], ["b"], ["c", "e"]]

    def test_relevant_imports(self, table):
        groups = GroupAssigner(table).assign([fn("c", "requests", "json"), fn("b")])

        assert [s.text.strip() for s in groups[0].relevant_imports] == [
            "import json",
            "import requests",
        ]
        assert groups[1].relevant_imports == []

    def test_keys_are_deterministic(self, table):
        functions = [fn("a", "net"), fn("b", "json"), fn("c")]
        first = [(g.key, g.identifier) for g in GroupAssigner(table).assign(functions)]
        second = [(g.key, g.identifier) for g in GroupAssigner(table).assign(functions)]
        assert first == second

    def test_collision_gets_numeric_suffix(self):
        table = ingest_source("import a_b\nimport a\nimport b\n").imports
        groups = GroupAssigner(table).assign([fn("f", "a_b"), fn("g", "a", "b")])

        assert [g.key for g in groups] == ["a_b", "a_b"]
        assert [g.identifier for g in groups] == ["a_b", "a_b_2"]

    def test_collision_with_general_key(self):
        table = ingest_source("import general\n").imports
        groups = GroupAssigner(table).assign([fn("f"), fn("g", "general")])

        assert [g.identifier for g in groups] == ["general", "general_2"]
        assert groups[0].is_general and not groups[1].is_general

    def test_collision_error_policy(self):
        table = ingest_source("import a_b\nimport a\nimport b\n").imports
        assigner = GroupAssigner(table, on_collision=CollisionPolicy.ERROR)

        with pytest.raises(NamingCollisionError) as exc_info:
            assigner.assign([fn("f", "a_b"), fn("g", "a", "b")])
        assert exc_info.value.identifier == "a_b"

    def test_custom_general_key(self, table):
        groups = GroupAssigner(table, general_key="common").assign([fn("f")])
        assert groups[0].key == "common"


class TestIsDegenerate:
    """Tests for the all-general collapse condition."""

    def test_all_general(self, table):
        assert is_degenerate(GroupAssigner(table).assign([fn("a"), fn("b")]))

    def test_general_next_to_other_group(self, table):
        assert not is_degenerate(GroupAssigner(table).assign([fn("a", "net"), fn("b")]))

    def test_no_functions(self, table):
        assert not is_degenerate(GroupAssigner(table).assign([]))
