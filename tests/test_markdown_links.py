"""Tests for Markdown relative link validation."""

import pytest

from docscheck.markdown_links import (
    MarkdownLinkValidator,
    check_markdown_links,
    extract_markdown_links,
    find_markdown_files,
    is_external_link,
    is_valid_relative_link,
)
from docscheck.models import BrokenMarkdownLink


@pytest.fixture
def content_tree(tmp_path):
    """A small docs tree with one good and one broken relative link."""
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("See [x](./b.md) and [y](./missing.md).\n")
    (docs / "b.md").write_text("Back to [a](a.md#intro).\n")
    return tmp_path


class TestExtractMarkdownLinks:
    """Test cases for extract_markdown_links."""

    def test_finds_inline_links(self):
        links = extract_markdown_links("[One](one.md) text [Two](../two.md#x)")

        assert [(link.text, link.target) for link in links] == [
            ("One", "one.md"),
            ("Two", "../two.md#x"),
        ]
        assert links[0].position == 0

    def test_image_links_are_matched(self):
        """Test image syntax is checked like any other link."""
        links = extract_markdown_links("![diagram](./img/flow.png)")
        assert links[0].target == "./img/flow.png"

    def test_empty_text_not_matched(self):
        assert extract_markdown_links("[](nowhere.md)") == []

    def test_external_prefixes(self):
        assert is_external_link("https://example.com")
        assert is_external_link("http://example.com")
        assert not is_external_link("./local.md")
        assert not is_external_link("mailto:team@example.com")


class TestIsValidRelativeLink:
    """Test cases for is_valid_relative_link."""

    def test_existing_file(self, tmp_path):
        (tmp_path / "b.md").write_text("")
        assert is_valid_relative_link(tmp_path, "./b.md") is True

    def test_missing_file(self, tmp_path):
        assert is_valid_relative_link(tmp_path, "./missing.md") is False

    def test_fragment_stripped(self, tmp_path):
        (tmp_path / "b.md").write_text("")
        assert is_valid_relative_link(tmp_path, "b.md#section") is True

    def test_anchor_only(self, tmp_path):
        assert is_valid_relative_link(tmp_path, "#section") is True

    def test_directory_target(self, tmp_path):
        (tmp_path / "guide").mkdir()
        assert is_valid_relative_link(tmp_path, "guide") is True

    def test_parent_traversal(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "top.md").write_text("")
        assert is_valid_relative_link(tmp_path / "sub", "../top.md") is True

    def test_symlink_loop_is_missing(self, tmp_path):
        """Test a link through a self-referencing symlink is broken, not an error."""
        (tmp_path / "loop").symlink_to("loop")
        assert is_valid_relative_link(tmp_path, "./loop/x.md") is False


class TestMarkdownLinkValidator:
    """Test cases for MarkdownLinkValidator."""

    def test_reports_broken_link(self, content_tree):
        """Test the missing target is reported with its display path."""
        validator = MarkdownLinkValidator(content_tree / "docs", relative_to=content_tree)
        broken = validator.validate()

        assert broken == [
            BrokenMarkdownLink(file="docs/a.md", link="./missing.md", text="y")
        ]
        assert validator.files_checked == 2
        assert validator.unchecked == []

    def test_external_links_ignored(self, tmp_path):
        (tmp_path / "a.md").write_text("[site](https://example.com/missing.md)")
        assert check_markdown_links(tmp_path, relative_to=tmp_path) == []

    def test_mdx_files_scanned(self, tmp_path):
        (tmp_path / "page.mdx").write_text("[x](./nope.md)")
        (tmp_path / "notes.txt").write_text("[x](./nope.md)")

        broken = check_markdown_links(tmp_path, relative_to=tmp_path)

        assert [item.file for item in broken] == ["page.mdx"]

    def test_nested_files_in_sorted_order(self, tmp_path):
        """Test files are reported in a stable order."""
        (tmp_path / "z").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "z" / "one.md").write_text("[x](gone.md)")
        (tmp_path / "a" / "two.md").write_text("[x](gone.md)")
        (tmp_path / "root.md").write_text("[x](gone.md)")

        files = find_markdown_files(tmp_path)
        broken = check_markdown_links(tmp_path, relative_to=tmp_path)

        assert [path.relative_to(tmp_path).as_posix() for path in files] == [
            "root.md",
            "a/two.md",
            "z/one.md",
        ]
        assert [item.file for item in broken] == ["root.md", "a/two.md", "z/one.md"]

    def test_missing_content_dir(self, tmp_path):
        """Test a missing directory yields no files and no error."""
        validator = MarkdownLinkValidator(tmp_path / "absent", relative_to=tmp_path)
        assert validator.validate() == []
        assert validator.files_checked == 0

    def test_check_error_recorded_as_unchecked(self, content_tree, monkeypatch):
        """Test a link whose check raises is neither broken nor valid."""
        def denied(base_dir, target):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("docscheck.markdown_links.is_valid_relative_link", denied)
        validator = MarkdownLinkValidator(content_tree / "docs", relative_to=content_tree)

        assert validator.validate() == []
        assert len(validator.unchecked) == 3
        entry, message = validator.unchecked[0]
        assert entry.file == "docs/a.md"
        assert "Permission denied" in message

    def test_symlink_loop_reported_and_scan_continues(self, content_tree):
        """Test a looping link is reported broken and later files are still checked."""
        docs = content_tree / "docs"
        (docs / "loop").symlink_to("loop")
        (docs / "0-loop.md").write_text("[l](./loop/x.md)\n")
        validator = MarkdownLinkValidator(docs, relative_to=content_tree)

        broken = validator.validate()

        assert BrokenMarkdownLink(file="docs/0-loop.md", link="./loop/x.md", text="l") in broken
        assert BrokenMarkdownLink(file="docs/a.md", link="./missing.md", text="y") in broken
        assert validator.files_checked == 3
        assert validator.unchecked == []

    def test_validate_resets_between_runs(self, content_tree):
        validator = MarkdownLinkValidator(content_tree / "docs", relative_to=content_tree)
        validator.validate()
        assert len(validator.validate()) == 1
