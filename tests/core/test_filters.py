"""Tests for key confinement and stripping."""

import re

import pytest

from vault_lookup.core import ConfigurationError, KeyFilter, compile_patterns, parse_options


class TestCompilePatterns:
    def test_compiles_strings(self):
        patterns = compile_patterns(["^a", r"\d+"], "confine_to_keys")
        assert [p.pattern for p in patterns] == ["^a", r"\d+"]

    def test_keeps_compiled_patterns(self):
        pattern = re.compile("x")
        assert compile_patterns([pattern], "strip_from_keys") == [pattern]

    def test_none_is_empty(self):
        assert compile_patterns(None, "confine_to_keys") == []

    @pytest.mark.parametrize("option", ["confine_to_keys", "strip_from_keys"])
    def test_invalid_pattern_names_option_and_pattern(self, option):
        with pytest.raises(ConfigurationError) as exc_info:
            compile_patterns(["ok", "("], option)

        message = str(exc_info.value)
        assert message.startswith(f"creating regexp for {option} failed with: ")
        assert "missing )" in message
        assert message.endswith("/(/")


class TestKeyFilter:
    def test_no_confinement_allows_everything(self):
        assert KeyFilter().is_allowed("anything")

    def test_confinement(self):
        key_filter = KeyFilter.from_options(parse_options({"confine_to_keys": ["^vault_", "_secret$"]}))

        assert key_filter.is_allowed("vault_password")
        assert key_filter.is_allowed("db_secret")
        assert not key_filter.is_allowed("puppet/data/test_key")

    def test_confinement_matches_anywhere_in_key(self):
        key_filter = KeyFilter.from_options(parse_options({"confine_to_keys": ["vault"]}))
        assert key_filter.is_allowed("confined_vault_key")

    def test_strip_digit_runs(self):
        key_filter = KeyFilter.from_options(parse_options({"strip_from_keys": ["[0-9]*"]}))
        assert key_filter.strip("stripped_key12345") == "stripped_key"

    def test_strip_patterns_apply_in_order(self):
        key_filter = KeyFilter.from_options(parse_options({"strip_from_keys": ["^app::", "::"]}))
        assert key_filter.strip("app::db::password") == "dbpassword"

    def test_strip_without_patterns_is_identity(self):
        assert KeyFilter().strip("key") == "key"
