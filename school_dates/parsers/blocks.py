"""
Block collection from a term-dates HTML page.

Walks the parsed document and emits, in document order:
- HeadingBlock for h1-h4
- RowBlock for each table row with at least one non-empty cell
- TextBlock for paragraphs and list items outside tables

Text inside tables is only reported through row cells. Blocks are emitted
when their element closes, so a paragraph nested in a list item comes
before the list item's own text.
"""

from typing import Optional

import structlog
from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from school_dates.core.models import HeadingBlock, ParsedBlock, RowBlock, TextBlock
from school_dates.core.normalizer import clean_text

logger = structlog.get_logger(__name__)


HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}
TEXT_TAGS = {"p", "li"}
CELL_TAGS = ["td", "th"]
IGNORED_TAGS = {"script", "style", "noscript", "template", "head"}
_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


def element_text(element: Tag, exclude: frozenset = frozenset()) -> str:
    """
    Concatenate the text of an element's descendants.

    Args:
        element: Element to read
        exclude: Tag names whose subtrees are skipped

    Returns:
        Raw (uncleaned) text; <br> contributes a space
    """
    parts: list[str] = []

    def gather(node: Tag) -> None:
        for child in node.children:
            if isinstance(child, Tag):
                name = (child.name or "").lower()
                if name == "br":
                    parts.append(" ")
                elif name not in exclude and name not in IGNORED_TAGS:
                    gather(child)
            elif isinstance(child, NavigableString) and not isinstance(child, _NON_TEXT_STRINGS):
                parts.append(str(child))

    gather(element)
    return "".join(parts)


class BlockCollector:
    """
    Collects ParsedBlocks from HTML.

    Keeps a table depth counter while walking so paragraph and list text
    inside tables is not emitted twice.
    """

    def __init__(self):
        self.blocks: list[ParsedBlock] = []
        self._table_depth = 0

    def collect(self, html: str) -> list[ParsedBlock]:
        self.blocks = []
        self._table_depth = 0
        soup = BeautifulSoup(html or "", "lxml")
        self._walk(soup)
        return self.blocks

    def _walk(self, node: Tag) -> None:
        for child in node.children:
            if isinstance(child, Tag):
                self._visit(child)

    def _visit(self, element: Tag) -> None:
        name = (element.name or "").lower()
        if name in IGNORED_TAGS:
            return

        inside_table = self._table_depth > 0
        if name == "table":
            self._table_depth += 1
        try:
            self._walk(element)
        finally:
            if name == "table":
                self._table_depth = max(0, self._table_depth - 1)

        if name in HEADING_LEVELS:
            self._add_heading(HEADING_LEVELS[name], element)
        elif name == "tr":
            self._add_row(element)
        elif name in TEXT_TAGS and not inside_table:
            self._add_text(element)

    def _add_heading(self, level: int, element: Tag) -> None:
        text = clean_text(element_text(element))
        if text:
            self.blocks.append(HeadingBlock(level=level, text=text))

    def _add_row(self, element: Tag) -> None:
        cells = tuple(
            clean_text(element_text(cell))
            for cell in element.find_all(CELL_TAGS, recursive=False)
        )
        if any(cells):
            self.blocks.append(RowBlock(cells=cells))

    def _add_text(self, element: Tag) -> None:
        text = clean_text(element_text(element, exclude=frozenset(TEXT_TAGS | {"table"})))
        if text:
            self.blocks.append(TextBlock(text=text))


def collect_blocks(html: Optional[str]) -> list[ParsedBlock]:
    """
    Convert HTML into an ordered list of blocks.

    Never raises: an irrecoverable parse failure is logged and yields [].
    """
    try:
        blocks = BlockCollector().collect(html or "")
    except Exception as e:
        logger.warning("block_collection_failed", error=str(e))
        return []

    logger.debug("blocks_collected", count=len(blocks))
    return blocks
