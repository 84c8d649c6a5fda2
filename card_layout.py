"""
card_layout.py — Turn records into ordered cards for an N-column grid.

Three ordering strategies are available:

    hint      precomputed per-column-count order from the dataset
              (columns 2-4); other column counts fall back to dataset order
    natural   position among the displayable records
    diagonal  records sweep the grid's anti-diagonals from the top-left
              corner; cards carry explicit grid coordinates
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from card_database import Record

ORDERINGS = ("hint", "natural", "diagonal")


@dataclass(frozen=True)
class Card:
    record: Record
    order: int
    image_source: str
    grid_row: Optional[int] = None
    grid_col: Optional[int] = None


@dataclass(frozen=True)
class PageData:
    cards: List[Card]
    num_cols: int
    num_rows: int


def row_count(card_count: int, num_cols: int) -> int:
    if card_count == 0:
        return 0
    return (card_count + num_cols - 1) // num_cols


def resolve_image_source(base: str, image_link: str) -> str:
    """Join the configured image base with a record's image link."""
    if image_link.startswith(("http://", "https://", "//")):
        return image_link
    if not base:
        return image_link
    return base.rstrip("/") + "/" + image_link.lstrip("/")


def diagonal_cells(rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    """Yield 1-based (row, col) cells of a rows x cols grid, diagonal by diagonal.

    Diagonal d holds the cells with row + col == d (0-based). Each diagonal
    is filled from its top cell downward, then the sweep moves on to d + 1.
    """
    for d in range(rows + cols - 1):
        for r in range(max(0, d - cols + 1), min(d, rows - 1) + 1):
            yield r + 1, d - r + 1


# -- Ordering strategies -----------------------------------------------------
#
# Each takes the full record sequence and the column count and returns
# (record, order) for every displayable record.

_Placed = Tuple[Record, int]


def _order_by_hint(records: Sequence[Record], num_cols: int) -> List[_Placed]:
    placed = []  # type: List[_Placed]
    for i, r in enumerate(records):
        if not r.displayable:
            continue
        if num_cols == 2:
            order = r.order_2_cols
        elif num_cols == 3:
            order = r.order_3_cols
        elif num_cols == 4:
            order = r.order_4_cols
        else:
            order = i
        placed.append((r, order))
    return placed


def _order_natural(records: Sequence[Record], num_cols: int) -> List[_Placed]:
    shown = [r for r in records if r.displayable]
    return [(r, i) for i, r in enumerate(shown)]


def _order_diagonal(records: Sequence[Record], num_cols: int) -> List[_Placed]:
    # order is the 1-based position in the diagonal sweep; cells are handed
    # out after sorting so a reversed layout starts from the other end
    shown = [r for r in records if r.displayable]
    return [(r, i) for i, r in enumerate(shown, start=1)]


STRATEGIES = {
    "hint": _order_by_hint,
    "natural": _order_natural,
    "diagonal": _order_diagonal,
}  # type: Dict[str, Callable[[Sequence[Record], int], List[_Placed]]]

# strategies whose cards are pinned to explicit grid cells
POSITIONED = {"diagonal"}


def build_cards(records: Sequence[Record], num_cols: int, reversed_: bool,
                image_source: str, ordering: str = "hint") -> List[Card]:
    """Displayable records as cards, sorted by order (descending if reversed_)."""
    if num_cols < 1:
        raise ValueError(f"num_cols must be positive, got {num_cols}")
    try:
        strategy = STRATEGIES[ordering]
    except KeyError:
        raise ValueError(
            f"unknown ordering {ordering!r}, expected one of {', '.join(ORDERINGS)}"
        ) from None

    cards = [
        Card(
            record=r,
            order=order,
            image_source=resolve_image_source(image_source, r.image_link),
        )
        for r, order in strategy(records, num_cols)
    ]
    # sorted() is stable, so equal orders keep dataset order in both directions
    cards = sorted(cards, key=lambda c: c.order, reverse=reversed_)

    if ordering in POSITIONED:
        cells = diagonal_cells(row_count(len(cards), num_cols), num_cols)
        cards = [replace(c, grid_row=row, grid_col=col)
                 for c, (row, col) in zip(cards, cells)]
    return cards


def build_page(records: Sequence[Record], num_cols: int, reversed_: bool,
               image_source: str, ordering: str = "hint") -> PageData:
    cards = build_cards(records, num_cols, reversed_, image_source, ordering)
    return PageData(cards=cards, num_cols=num_cols,
                    num_rows=row_count(len(cards), num_cols))
