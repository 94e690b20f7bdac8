"""Validation of relative links in Markdown sources.

Checks ``[text](target)`` links against the filesystem without a browser or
network access. Matching is a regular expression, not a Markdown parser:
reference-style links, links split across lines and links inside code
fences are not handled specially.
"""

import errno
import logging
import os
import re
from pathlib import Path
from typing import List, Optional, Tuple

from docscheck.constants import EXTERNAL_LINK_PREFIXES, MARKDOWN_EXTENSIONS
from docscheck.models import BrokenMarkdownLink, MarkdownLink

logger = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def find_markdown_files(root: Path) -> List[Path]:
    """Recursively list Markdown files under ``root`` in sorted order."""
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if name.endswith(MARKDOWN_EXTENSIONS):
                files.append(Path(dirpath) / name)
    return files


def extract_markdown_links(content: str) -> List[MarkdownLink]:
    """Find every inline ``[text](target)`` link in ``content``."""
    return [
        MarkdownLink(text=match.group(1), target=match.group(2), position=match.start())
        for match in LINK_PATTERN.finditer(content)
    ]


def is_external_link(target: str) -> bool:
    return target.startswith(EXTERNAL_LINK_PREFIXES)


def is_valid_relative_link(base_dir: Path, target: str) -> bool:
    """Check that a relative link target exists on disk.

    Anchor-only links, and links that are empty once the fragment is
    removed, are treated as valid.

    Args:
        base_dir: Directory of the file containing the link
        target: Raw link target

    Returns:
        True if the target exists. A symlink loop counts as missing.

    Raises:
        OSError: If existence cannot be determined (e.g. permission denied)
    """
    if target.startswith("#"):
        return True

    path_part = target.split("#", 1)[0]
    if not path_part:
        return True

    # Lexical join: ".." segments collapse before any symlink is followed
    resolved = os.path.normpath(os.path.join(base_dir, path_part))
    try:
        os.stat(resolved)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        if e.errno == errno.ELOOP:
            return False
        raise
    return True


class MarkdownLinkValidator:
    """Finds broken relative links in a tree of Markdown files.

    Links whose check raised (for example a permission error) are neither
    reported broken nor assumed valid; they are collected in ``unchecked``
    together with the error message.
    """

    def __init__(self, content_dir: Path, relative_to: Optional[Path] = None):
        """
        Args:
            content_dir: Root of the Markdown sources
            relative_to: Base directory for the file paths in the report
                (defaults to the current working directory)
        """
        self.content_dir = Path(content_dir)
        self.relative_to = Path(relative_to) if relative_to else Path.cwd()
        self.files_checked = 0
        self.broken: List[BrokenMarkdownLink] = []
        self.unchecked: List[Tuple[BrokenMarkdownLink, str]] = []

    def _display_path(self, file_path: Path) -> str:
        try:
            return file_path.resolve().relative_to(self.relative_to.resolve()).as_posix()
        except ValueError:
            return file_path.as_posix()

    def validate(self) -> List[BrokenMarkdownLink]:
        """Scan every Markdown file and check its relative links.

        Returns:
            Broken links in file order
        """
        logger.info("\nChecking Markdown links in content files...")

        self.files_checked = 0
        self.broken = []
        self.unchecked = []

        if not self.content_dir.is_dir():
            logger.warning(f"Content directory not found: {self.content_dir}")

        markdown_files = find_markdown_files(self.content_dir)
        logger.info(f"Found {len(markdown_files)} Markdown files")

        for file_path in markdown_files:
            self._validate_file(file_path)

        return self.broken

    def _validate_file(self, file_path: Path) -> None:
        display_path = self._display_path(file_path)

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {display_path}: {e}")
            return

        self.files_checked += 1
        base_dir = file_path.parent

        for link in extract_markdown_links(content):
            if is_external_link(link.target):
                continue

            entry = BrokenMarkdownLink(file=display_path, link=link.target, text=link.text)
            try:
                if not is_valid_relative_link(base_dir, link.target):
                    self.broken.append(entry)
            except (OSError, ValueError) as e:
                logger.error(f"Error checking link {link.target} in {display_path}: {e}")
                self.unchecked.append((entry, str(e)))


def check_markdown_links(
    content_dir: Path,
    relative_to: Optional[Path] = None,
) -> List[BrokenMarkdownLink]:
    """Convenience wrapper returning the broken links under ``content_dir``."""
    return MarkdownLinkValidator(content_dir, relative_to=relative_to).validate()
