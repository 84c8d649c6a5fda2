"""
page_cache.py — Pre-rendered card grid fragments, one per layout.

Every (column count, sort direction) pair is rendered once at startup and
kept as bytes under a key like "cols:3:rev:false". The cache is read-only
afterwards, so request threads share it without locking.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Mapping, Optional, Sequence

from card_database import Record
from card_layout import PageData, build_page
from render_pages import render_content

COLUMN_COUNTS = (1, 2, 3, 4)
DIRECTIONS = (False, True)

log = logging.getLogger("page_cache")


def cache_key(num_cols: int, reversed_: bool) -> str:
    return f"cols:{num_cols}:rev:{'true' if reversed_ else 'false'}"


class PageCache(Mapping[str, bytes]):
    """Immutable mapping of cache key -> rendered fragment bytes."""

    def __init__(self, entries: Dict[str, bytes]):
        self._entries = dict(entries)

    def __getitem__(self, key: str) -> bytes:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, key: str) -> bytes:
        """Return the fragment for key. Raises KeyError on a miss."""
        return self._entries[key]

    def get(self, key: str, default: Optional[bytes] = None) -> Optional[bytes]:
        return self._entries.get(key, default)


def prebuild(records: Sequence[Record], image_source: str, ordering: str = "hint",
             render: Callable[[PageData], str] = render_content) -> PageCache:
    """Render every layout. A layout that fails to render is logged and left out."""
    entries = {}  # type: Dict[str, bytes]
    for num_cols in COLUMN_COUNTS:
        for reversed_ in DIRECTIONS:
            key = cache_key(num_cols, reversed_)
            page = build_page(records, num_cols, reversed_, image_source, ordering)
            try:
                entries[key] = render(page).encode("utf-8")
            except Exception:
                log.exception(f"failed to pre-render {key}")
                continue

    log.info(f"Pre-rendered {len(entries)}/{len(COLUMN_COUNTS) * len(DIRECTIONS)} "
             f"layouts ({ordering} ordering)")
    return PageCache(entries)
