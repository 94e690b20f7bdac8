"""Regenerate the documentation sidebar from the docs directory.

The sidebar configuration is a TypeScript file read by the site generator.
Rather than parsing it, each top-level category block is located with a
regular expression and replaced by a freshly rendered one; a category that
does not exist yet is inserted after the preceding one.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from docscheck.constants import COMPONENT_PAGES, COMPONENTS_LABEL, SIDEBAR_SECTIONS
from docscheck.exceptions import SidebarError

logger = logging.getLogger(__name__)

SidebarItem = Union[str, Dict[str, Any]]


def _label(name: str) -> str:
    return name[:1].upper() + name[1:]


def _doc_ids(directory: Path, prefix: str) -> List[str]:
    """Sorted ``prefix/<stem>`` ids for the .md files directly in ``directory``."""
    return sorted(
        f"{prefix}/{entry.name[:-3]}"
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(".md")
    )


def category(label: str, items: List[SidebarItem]) -> Dict[str, Any]:
    return {"type": "category", "label": label, "items": items}


def generate_sidebar_items(dir_path: Path, base_segment: str) -> List[SidebarItem]:
    """Build sidebar items for a docs section directory.

    Args:
        dir_path: Section directory, e.g. ``docs/architecture``
        base_segment: Doc id prefix, e.g. ``architecture``

    Returns:
        Doc ids of the section's own pages, then one category per
        subdirectory that contains pages. Empty if the directory is missing.
    """
    dir_path = Path(dir_path)
    if not dir_path.is_dir():
        return []

    items: List[SidebarItem] = list(_doc_ids(dir_path, base_segment))

    for subdir in sorted(p for p in dir_path.iterdir() if p.is_dir()):
        sub_items = _doc_ids(subdir, f"{base_segment}/{subdir.name}")
        if sub_items:
            items.append(category(_label(subdir.name), sub_items))

    return items


def generate_component_items(components_dir: Path) -> List[SidebarItem]:
    """Build one category per component directory.

    Each category starts with the component overview, followed by the
    optional pages in COMPONENT_PAGES that exist and an Examples category
    when the component has an ``examples`` directory with pages.
    """
    components_dir = Path(components_dir)
    if not components_dir.is_dir():
        return []

    items: List[SidebarItem] = []
    for component_dir in sorted(p for p in components_dir.iterdir() if p.is_dir()):
        component = component_dir.name
        component_items: List[SidebarItem] = [f"components/{component}/overview"]

        for page in COMPONENT_PAGES:
            if (component_dir / f"{page}.md").exists():
                component_items.append(f"components/{component}/{page}")

        examples_dir = component_dir / "examples"
        if examples_dir.is_dir():
            example_items = _doc_ids(examples_dir, f"components/{component}/examples")
            if example_items:
                component_items.append(category("Examples", example_items))

        items.append(category(_label(component), component_items))

    return items


def render_category(label: str, items: List[SidebarItem]) -> str:
    """Render a category block in the sidebar file's TypeScript style."""
    rendered_items = json.dumps(items, indent=6, ensure_ascii=False).replace('"', "'")
    return (
        "{\n"
        "      type: 'category',\n"
        f"      label: '{label}',\n"
        f"      items: {rendered_items},\n"
        "    },"
    )


def _block_pattern(label: str) -> re.Pattern:
    # The closing "],\s*}," only follows the outer items list; nested
    # categories end their items with "]" and a bare "}".
    return re.compile(
        r"(\{\s*type:\s*'category',\s*label:\s*'" + re.escape(label)
        + r"',\s*items:\s*\[[\s\S]*?\],\s*\},)"
    )


def replace_section(content: str, label: str, block: str) -> str:
    """Replace the first category block labelled ``label`` with ``block``."""
    return _block_pattern(label).sub(lambda _: block, content, count=1)


def insert_section_after(content: str, after_label: str, block: str) -> str:
    """Insert ``block`` after the first category block labelled ``after_label``."""
    return _block_pattern(after_label).sub(
        lambda match: f"{match.group(1)}\n    {block}", content, count=1
    )


def update_sidebar_content(
    content: str,
    component_items: List[SidebarItem],
    section_items: List[Tuple[str, List[SidebarItem]]],
) -> str:
    """Rewrite the generated categories of a sidebar file.

    Args:
        content: Current sidebar file text
        component_items: Items for the Components category
        section_items: (label, items) pairs in insertion order; each new
            section is placed after the nearest preceding section that
            exists in the file (the first after Components)

    Returns:
        Updated file text. Sections with no items are left untouched.
    """
    updated = content

    if component_items:
        updated = replace_section(
            updated, COMPONENTS_LABEL, render_category(COMPONENTS_LABEL, component_items)
        )

    previous_label = COMPONENTS_LABEL
    for label, items in section_items:
        if items:
            block = render_category(label, items)
            if f"label: '{label}'" in updated:
                updated = replace_section(updated, label, block)
            else:
                updated = insert_section_after(updated, previous_label, block)
        if f"label: '{label}'" in updated:
            previous_label = label

    return updated


class SidebarUpdater:
    """Scans the docs directory and rewrites the sidebar configuration file."""

    def __init__(self, docs_dir: Path, sidebar_file: Path):
        self.docs_dir = Path(docs_dir)
        self.sidebar_file = Path(sidebar_file)

    def collect_sections(self) -> List[Tuple[str, List[SidebarItem]]]:
        return [
            (label, generate_sidebar_items(self.docs_dir / directory, directory))
            for directory, label in SIDEBAR_SECTIONS
        ]

    def run(self, dry_run: bool = False) -> str:
        """Regenerate the sidebar.

        Args:
            dry_run: Return the new content without writing it

        Returns:
            The updated sidebar text

        Raises:
            SidebarError: If the sidebar file cannot be read or written
        """
        try:
            content = self.sidebar_file.read_text(encoding="utf-8")
        except OSError as e:
            raise SidebarError(
                f"Error reading sidebar file {self.sidebar_file}: {e}",
                path=str(self.sidebar_file),
            ) from e

        component_items = generate_component_items(self.docs_dir / "components")
        updated = update_sidebar_content(content, component_items, self.collect_sections())

        if dry_run:
            return updated

        try:
            self.sidebar_file.write_text(updated, encoding="utf-8")
        except OSError as e:
            raise SidebarError(
                f"Error writing sidebar file {self.sidebar_file}: {e}",
                path=str(self.sidebar_file),
            ) from e

        logger.info(f"Successfully updated sidebar configuration in {self.sidebar_file}")
        return updated
