"""
Test Pattern Compiler
=====================

Unit tests for loading and compiling rule data.
"""

import logging
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import PatternCompileError, RuleLoadError
from rules.compiler import (
    RawRuleGroup, compile_pattern, compile_rules, flatten_categories,
    load_raw_rules, load_rule_table, DEFAULT_RULES_FILE,
)
from rules.matcher import find_match


RULES_YAML = """
order: [greetings, fallback]
categories:
  fallback:
    - patterns: ['(.*)']
      responses: ["Go on."]
  greetings:
    - patterns: ['hello']
      responses: ["Hi."]
  extra:
    - patterns: ['pizza']
      responses: ["Yum."]
"""


class TestCompilePattern:
    """Tests for compile_pattern."""

    def test_case_insensitive(self):
        """Test compiled patterns ignore case."""
        assert compile_pattern("hello").search("HELLO") is not None

    def test_anchor_kept(self):
        """Test an explicit $ still anchors the end of line."""
        pattern = compile_pattern(r"\?$")
        assert pattern.search("really?") is not None
        assert pattern.search("really? no") is None

    def test_invalid_pattern(self):
        """Test invalid regex raises PatternCompileError."""
        with pytest.raises(PatternCompileError) as exc_info:
            compile_pattern("I need (", group_index=4)

        assert exc_info.value.pattern == "I need ("
        assert exc_info.value.group_index == 4


class TestCompileRules:
    """Tests for compile_rules."""

    def test_order_preserved(self):
        """Test groups and patterns keep their input order."""
        table = compile_rules([
            RawRuleGroup(patterns=["a", "b"], responses=["1"]),
            RawRuleGroup(patterns=["c"], responses=["2", "3"]),
        ])

        assert len(table) == 2
        assert [p.pattern for p in table[0].patterns] == ["a", "b"]
        assert table[1].responses == ("2", "3")
        assert table.pattern_count == 3

    def test_invalid_pattern_aborts_table(self):
        """Test no partial table is produced on a bad pattern."""
        raw = [
            RawRuleGroup(patterns=["fine"], responses=["ok"]),
            RawRuleGroup(patterns=["[unclosed"], responses=["never"]),
        ]

        with pytest.raises(PatternCompileError) as exc_info:
            compile_rules(raw)

        assert exc_info.value.group_index == 1

    def test_empty_responses_rejected(self):
        """Test a group without responses is rejected."""
        with pytest.raises(RuleLoadError):
            compile_rules([RawRuleGroup(patterns=["x"], responses=[])])

    def test_unfillable_placeholder_warns(self, caplog):
        """Test a template referencing a missing capture logs a warning."""
        with caplog.at_level(logging.WARNING, logger="eliza"):
            table = compile_rules([
                RawRuleGroup(patterns=["I need (.*)"], responses=["!0 and !1"]),
            ])

        assert len(table) == 1
        assert "beyond available captures" in caplog.text

    def test_compiling_twice_behaves_the_same(self):
        """Test two compilations of the same data match identically."""
        raw = load_raw_rules()
        first = compile_rules(raw)
        second = compile_rules(raw)

        for text in ["hello", "I need a hug", "my mother is kind", "why?", "zzz"]:
            assert find_match(text, first) == find_match(text, second)


class TestFlattenCategories:
    """Tests for flatten_categories."""

    def test_explicit_order(self):
        """Test categories follow the given order."""
        categories = {
            "b": [{"patterns": ["b"], "responses": ["B"]}],
            "a": [{"patterns": ["a"], "responses": ["A"]}],
        }

        raw = flatten_categories(categories, ["a", "b"])

        assert [group.category for group in raw] == ["a", "b"]

    def test_unlisted_categories_appended_before_fallback(self):
        """Test unlisted categories go after listed ones, fallback last."""
        categories = {
            "fallback": [{"patterns": [".*"], "responses": ["?"]}],
            "x": [{"patterns": ["x"], "responses": ["X"]}],
            "y": [{"patterns": ["y"], "responses": ["Y"]}],
        }

        raw = flatten_categories(categories, ["y"])

        assert [group.category for group in raw] == ["y", "x", "fallback"]

    def test_fallback_in_order_still_last(self):
        """Test fallback closes the table even when the order names it."""
        categories = {
            "fallback": [{"patterns": ["(.*)"], "responses": ["?"]}],
            "x": [{"patterns": ["x"], "responses": ["X"]}],
            "y": [{"patterns": ["y"], "responses": ["Y"]}],
        }

        raw = flatten_categories(categories, ["y", "fallback"])

        assert [group.category for group in raw] == ["y", "x", "fallback"]

    def test_category_after_fallback_reachable(self):
        """Test an unlisted category is matched before the catch-all."""
        categories = {
            "fallback": [{"patterns": ["(.*)"], "responses": ["?"]}],
            "extra": [{"patterns": ["pizza"], "responses": ["Yum."]}],
        }

        table = compile_rules(flatten_categories(categories, ["fallback"]))

        assert find_match("I like pizza", table).responses == ("Yum.",)

    def test_unknown_category_in_order(self):
        """Test naming an undefined category is an error."""
        with pytest.raises(RuleLoadError):
            flatten_categories({"a": []}, ["a", "missing"])

    def test_malformed_group(self):
        """Test a group without patterns is rejected."""
        with pytest.raises(RuleLoadError):
            flatten_categories({"a": [{"responses": ["A"]}]})


class TestLoadRawRules:
    """Tests for loading rules files."""

    def test_file_order_used(self, tmp_path):
        """Test the file's order list decides precedence."""
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML)

        raw = load_raw_rules(path)

        assert [group.category for group in raw] == ["greetings", "extra", "fallback"]

    def test_order_override(self, tmp_path):
        """Test an explicit category order overrides the file."""
        path = tmp_path / "rules.yaml"
        path.write_text(RULES_YAML)

        raw = load_raw_rules(path, ["extra", "greetings"])

        assert [group.category for group in raw] == ["extra", "greetings", "fallback"]

    def test_missing_file(self, tmp_path):
        """Test a missing rules file raises RuleLoadError."""
        with pytest.raises(RuleLoadError):
            load_raw_rules(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test unparseable YAML raises RuleLoadError."""
        path = tmp_path / "rules.yaml"
        path.write_text("categories: [unclosed")

        with pytest.raises(RuleLoadError):
            load_raw_rules(path)

    def test_missing_categories(self, tmp_path):
        """Test a file without categories is rejected."""
        path = tmp_path / "rules.yaml"
        path.write_text("order: [a]\n")

        with pytest.raises(RuleLoadError):
            load_raw_rules(path)

    def test_invalid_pattern_in_file(self, tmp_path):
        """Test a bad regex in a rules file is fatal."""
        path = tmp_path / "rules.yaml"
        path.write_text(
            "categories:\n"
            "  broken:\n"
            "    - patterns: ['(oops']\n"
            "      responses: ['never']\n"
        )

        with pytest.raises(PatternCompileError):
            load_rule_table(path)


class TestDefaultRules:
    """Tests for the packaged rule table."""

    def test_default_file_exists(self):
        """Test the packaged rules file ships with the package."""
        assert DEFAULT_RULES_FILE.is_file()

    def test_default_table_compiles(self):
        """Test the packaged rules compile and end with a catch-all."""
        table = load_rule_table()

        assert len(table) > 0
        assert table.categories()[-1] == "fallback"
        assert table[len(table) - 1].patterns[0].search("") is not None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
