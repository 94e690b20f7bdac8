"""Tests for error page detection."""

import pytest

from docscheck.detection import (
    detect_error_page,
    find_patterns,
    has_error_body,
    has_error_title,
)


class TestErrorTitle:
    """Test cases for title matching."""

    @pytest.mark.parametrize("title", [
        "404 | My Docs",
        "Not Found",
        "Error",
        "Page not found - Docs",
    ])
    def test_error_titles(self, title):
        assert has_error_title(title) is True

    @pytest.mark.parametrize("title", ["Getting Started", "not found", "", None])
    def test_normal_titles(self, title):
        assert has_error_title(title) is False


class TestErrorBody:
    """Test cases for body text matching."""

    def test_body_patterns_match(self):
        """Test each body phrase is recognised."""
        assert has_error_body("Sorry. Page not found.")
        assert has_error_body("Error 404")
        assert has_error_body("Cannot find the requested module")
        assert has_error_body("The page you were looking for doesn't exist.")

    def test_match_is_case_sensitive(self):
        """Test lowercase variants do not match."""
        assert not has_error_body("page not found")

    def test_find_patterns_returns_matches(self):
        """Test all matching phrases are returned."""
        assert find_patterns("Error 404: Not Found", ["Error 404", "Not Found", "Missing"]) == [
            "Error 404",
            "Not Found",
        ]


class TestDetectErrorPage:
    """Test cases for detect_error_page."""

    def test_clean_page(self):
        """Test a normal page is not flagged."""
        assert detect_error_page("Getting Started", "Install the package", 200) is None

    def test_title_reason(self):
        """Test the title reason quotes the title."""
        assert detect_error_page("404", "", 200) == 'Page has error in title: "404"'

    def test_body_reason_includes_status(self):
        """Test the body reason names the served status."""
        reason = detect_error_page("Docs", "Page not found", 304)
        assert reason == "Page contains error messages despite 304 status"

    def test_title_takes_precedence(self):
        """Test a title match is reported even when the body also matches."""
        reason = detect_error_page("Not Found", "Page not found", 200)
        assert reason.startswith("Page has error in title")

    def test_missing_text(self):
        """Test missing title and body are treated as clean."""
        assert detect_error_page(None, None) is None
