#!/usr/bin/env python3
"""
card_database.py — Country records loaded from the bundled countries.csv.

The dataset is parsed once at startup into an immutable tuple of Records.
Column layout (0-based):

    0  Country            4  National Dish     8  Order 2 Cols
    1  Both (BMI)         5  Dish Wiki         9  Order 3 Cols
    2  Female (unused)    6  Image Link       10  Order 4 Cols
    3  Male (unused)      7  Aspect Ratio

A row whose BMI ("Both") does not parse is dropped. Aspect ratio and the
order hints fall back to 0 and the row is kept.
"""
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

PROJECT_ROOT = Path(__file__).resolve().parent
DATA_PATH = PROJECT_ROOT / "countries.csv"

COL_COUNTRY = 0
COL_BMI = 1
COL_FEMALE = 2
COL_MALE = 3
COL_DISH = 4
COL_DISH_WIKI = 5
COL_IMAGE_LINK = 6
COL_ASPECT_RATIO = 7
COL_ORDER_2 = 8
COL_ORDER_3 = 9
COL_ORDER_4 = 10

NUM_COLUMNS = 11

HEADER = [
    "Country", "Both", "Female", "Male", "National Dish", "Dish Wiki",
    "Image Link", "Aspect Ratio", "Order 2 Cols", "Order 3 Cols", "Order 4 Cols",
]

log = logging.getLogger("card_database")

# ASCII base-10 only: no surrounding whitespace, no "_" separators, no
# non-ASCII digits
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class ParseError(ValueError):
    """The dataset is not well-formed delimited text."""


@dataclass(frozen=True)
class Record:
    country: str
    both: float
    national_dish: str
    dish_wiki: str
    image_link: str
    aspect_ratio: float
    order_2_cols: int
    order_3_cols: int
    order_4_cols: int

    @property
    def displayable(self) -> bool:
        return self.image_link != ""


def parse_int(value: str) -> int:
    """Strict base-10 integer. Raises ValueError for anything else."""
    if not _INT_RE.fullmatch(value):
        raise ValueError(f"invalid integer {value!r}")
    return int(value, 10)


def parse_float(value: str) -> float:
    """Strict decimal float. Raises ValueError for anything else."""
    if not _FLOAT_RE.fullmatch(value):
        raise ValueError(f"invalid number {value!r}")
    return float(value)


def _soft_float(value: str, field: str, line: int) -> Tuple[float, bool]:
    try:
        return parse_float(value), False
    except ValueError:
        log.debug(f"line {line}: bad {field} {value!r}, defaulting to 0")
        return 0.0, True


def _soft_int(value: str, field: str, line: int) -> Tuple[int, bool]:
    try:
        return parse_int(value), False
    except ValueError:
        log.debug(f"line {line}: bad {field} {value!r}, defaulting to 0")
        return 0, True


def _read_rows(raw: bytes) -> List[List[str]]:
    """Decode and split the stream, enforcing a fixed record width."""
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"dataset is not valid UTF-8: {e}") from e

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    rows = []  # type: List[List[str]]
    width = None  # type: Optional[int]
    try:
        for row in reader:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                raise ParseError(
                    f"line {reader.line_num}: wrong number of fields "
                    f"({len(row)}, expected {width})"
                )
            rows.append(row)
    except csv.Error as e:
        raise ParseError(f"line {reader.line_num}: {e}") from e

    if not rows:
        raise ParseError("dataset is empty")
    if width is not None and width < NUM_COLUMNS:
        raise ParseError(f"dataset has {width} columns, expected {NUM_COLUMNS}")
    return rows


def load_records(raw: bytes) -> Tuple[Record, ...]:
    """Parse the raw CSV bytes into Records. Raises ParseError on malformed input."""
    rows = _read_rows(raw)

    records = []  # type: List[Record]
    dropped = 0
    softened = 0
    # line numbers are 1-based and the header is line 1
    for line, rec in enumerate(rows[1:], start=2):
        try:
            both = parse_float(rec[COL_BMI])
        except ValueError:
            log.warning(f"line {line}: failed to parse BMI {rec[COL_BMI]!r} "
                        f"for {rec[COL_COUNTRY]!r}, skipping row")
            dropped += 1
            continue

        aspect_ratio, bad_ar = _soft_float(rec[COL_ASPECT_RATIO], "aspect ratio", line)
        order_2, bad_2 = _soft_int(rec[COL_ORDER_2], "2-column order", line)
        order_3, bad_3 = _soft_int(rec[COL_ORDER_3], "3-column order", line)
        order_4, bad_4 = _soft_int(rec[COL_ORDER_4], "4-column order", line)
        if bad_ar or bad_2 or bad_3 or bad_4:
            softened += 1

        records.append(Record(
            country=rec[COL_COUNTRY],
            both=both,
            national_dish=rec[COL_DISH],
            dish_wiki=rec[COL_DISH_WIKI],
            image_link=rec[COL_IMAGE_LINK],
            aspect_ratio=aspect_ratio,
            order_2_cols=order_2,
            order_3_cols=order_3,
            order_4_cols=order_4,
        ))

    log.info(f"Loaded {len(records)} records "
             f"({dropped} dropped, {softened} with defaulted layout fields)")
    return tuple(records)


def load_dataset(path: Path = DATA_PATH) -> Tuple[Record, ...]:
    """Read and parse the dataset file. Missing files raise FileNotFoundError."""
    return load_records(path.read_bytes())


def _fmt_float(value: float) -> str:
    s = repr(value)
    return s[:-2] if s.endswith(".0") else s


def write_records(records: Iterable[Record], path: Path,
                  unused: Optional[dict] = None) -> None:
    """Write records back in the dataset column layout.

    `unused` maps country -> (female, male) for the columns the server
    ignores, so a rewrite can preserve them.
    """
    unused = unused or {}
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for r in records:
        female, male = unused.get(r.country, ("", ""))
        writer.writerow([
            r.country, _fmt_float(r.both), female, male, r.national_dish,
            r.dish_wiki, r.image_link, _fmt_float(r.aspect_ratio),
            r.order_2_cols, r.order_3_cols, r.order_4_cols,
        ])
    path.write_text(buf.getvalue(), encoding="utf-8")


def read_unused_columns(path: Path = DATA_PATH) -> dict:
    """Return {country: (female, male)} for the columns load_records skips."""
    rows = _read_rows(path.read_bytes())
    return {rec[COL_COUNTRY]: (rec[COL_FEMALE], rec[COL_MALE]) for rec in rows[1:]}
