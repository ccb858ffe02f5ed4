"""Tests for domain pattern matching."""

import pytest

from edmgutil.core.matcher import matches, matches_any


class TestMatches:
    """Test matches()."""

    @pytest.mark.parametrize("host, expected", [
        ("sentry.io", True),
        ("whatever.sentry.io", True),
        ("whatever.else.sentry.io", True),
        ("whatever.else.sentry.com", False),
        ("notsentry.io", False),
        ("sentry.io.evil.com", False),
    ])
    def test_wildcard(self, host, expected):
        """Wildcard patterns match the apex and subdomains on a dot boundary."""
        assert matches("*.sentry.io", host) is expected

    def test_literal_requires_exact_host(self):
        """Literal patterns only match the exact host."""
        assert matches("sentry.io", "sentry.io") is True
        assert matches("sentry.io", "www.sentry.io") is False
        assert matches("www.sentry.io", "sentry.io") is False

    def test_matching_is_case_sensitive(self):
        """No case folding is applied to patterns."""
        assert matches("*.Sentry.io", "sentry.io") is False
        assert matches("Sentry.io", "sentry.io") is False


class TestMatchesAny:
    """Test matches_any()."""

    def test_empty_patterns_match_everything(self):
        assert matches_any([], "example.com") is True
        assert matches_any([], None) is True

    def test_any_pattern_may_match(self):
        patterns = ["*.sentry.io", "example.com"]
        assert matches_any(patterns, "example.com") is True
        assert matches_any(patterns, "o1.ingest.sentry.io") is True
        assert matches_any(patterns, "other.com") is False

    def test_missing_host_never_matches_filters(self):
        assert matches_any(["*.sentry.io"], None) is False
