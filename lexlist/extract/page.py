"""Parsed character page and the table-walking helpers shared by the extractors."""

from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore

from lexlist.common.utils import _clean_value


class CharacterPage:
    """One fetched character page, parsed once and shared by every extractor."""

    def __init__(self, html: str):
        self.html = html or ""
        self.soup = BeautifulSoup(self.html, "html.parser")
        self._text: Optional[str] = None

    @property
    def text(self) -> str:
        """Whole-page text, used by free-text fallbacks."""
        if self._text is None:
            self._text = self.soup.get_text()
        return self._text

    def tables(self) -> List[Tag]:
        return self.soup.find_all("table")


def cell_text(tag: Tag) -> str:
    """Visible text of an element, trimmed."""
    return _clean_value(tag.get_text())


def own_text(tag: Tag) -> str:
    """Text directly under tag, ignoring text inside child elements."""
    return _clean_value("".join(str(c) for c in tag.children if isinstance(c, NavigableString)))


def cell_lines(cell: Tag) -> List[str]:
    """Split a cell into entries on line breaks, tabs, and <br> elements."""
    chunks: List[str] = []
    for node in cell.descendants:
        if isinstance(node, NavigableString):
            chunks.append(str(node))
        elif isinstance(node, Tag) and node.name == "br":
            chunks.append("\n")
    raw = "".join(chunks).replace("\r", "\n").replace("\t", "\n")
    return [line for line in (_clean_value(part) for part in raw.split("\n")) if line]


def row_cells(row: Tag) -> List[Tag]:
    """The td/th cells that belong to this row (not to nested tables)."""
    return row.find_all(["td", "th"], recursive=False)


def value_below(cell: Tag) -> Optional[Tag]:
    """The cell in the same column of the immediately following row."""
    row = cell.find_parent("tr")
    if row is None:
        return None
    col = next((i for i, c in enumerate(row_cells(row)) if c is cell), None)
    if col is None:
        return None
    next_row = row.find_next_sibling("tr")
    if next_row is None:
        return None
    next_cells = row_cells(next_row)
    if col >= len(next_cells):
        return None
    return next_cells[col]


def owning_table(tag: Tag) -> Optional[Tag]:
    """The nearest table enclosing tag."""
    return tag.find_parent("table")
