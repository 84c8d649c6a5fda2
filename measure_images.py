#!/usr/bin/env python3
"""
measure_images.py — Recompute the Aspect Ratio column of countries.csv.

Opens every dish image referenced by the dataset and stores width / height,
rounded to 4 decimals. Rows without an image link, and images that are
missing or unreadable, keep their current value.

Usage:
    python3 measure_images.py                       # images from static/images
    python3 measure_images.py --images ~/dishes     # another directory
    python3 measure_images.py --dry                 # report only, don't write
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError
from tqdm import tqdm

import card_database as db

IMAGES_DIR = db.PROJECT_ROOT / "static" / "images"


def measure(path: Path) -> Optional[float]:
    """Aspect ratio (width / height) of an image, honouring EXIF rotation."""
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            w, h = img.size
    except (OSError, UnidentifiedImageError):
        return None
    if h == 0:
        return None
    return round(w / h, 4)


def remeasure(records, images_dir):
    # type: (Tuple[db.Record, ...], Path) -> Tuple[List[db.Record], Dict[str, str]]
    """Return updated records and {country: problem} for images that were skipped."""
    updated = []  # type: List[db.Record]
    problems = {}  # type: Dict[str, str]
    for r in tqdm(records, desc="measure", unit="img"):
        if not r.displayable:
            updated.append(r)
            continue
        path = images_dir / r.image_link
        if not path.is_file():
            problems[r.country] = f"missing {path.name}"
            updated.append(r)
            continue
        ratio = measure(path)
        if ratio is None:
            problems[r.country] = f"unreadable {path.name}"
            updated.append(r)
            continue
        updated.append(replace(r, aspect_ratio=ratio))
    return updated, problems


def main(argv=None):
    parser = argparse.ArgumentParser(description="Recompute dish image aspect ratios")
    parser.add_argument("--images", type=Path, default=IMAGES_DIR,
                        help="directory holding the dish images")
    parser.add_argument("--data", type=Path, default=db.DATA_PATH,
                        help="dataset to update")
    parser.add_argument("--dry", action="store_true", help="don't write the dataset")
    args = parser.parse_args(argv)

    records = db.load_dataset(args.data)
    unused = db.read_unused_columns(args.data)
    updated, problems = remeasure(records, args.images)

    changed = [(old, new) for old, new in zip(records, updated)
               if old.aspect_ratio != new.aspect_ratio]
    for old, new in changed:
        print(f"  {new.country:<20} {old.aspect_ratio:g} → {new.aspect_ratio:g}")
    for country, problem in sorted(problems.items()):
        print(f"  [SKIP] {country}: {problem}")

    print(f"\n{len(changed)} changed, {len(problems)} skipped, "
          f"{sum(1 for r in records if r.displayable)} images referenced")

    if args.dry or not changed:
        return 0
    # Rows with an unparseable BMI never made it into `records`; rewriting
    # would silently delete them.
    if len(records) != len(unused):
        print("Dataset has rows that failed to load; fix them before rewriting.")
        return 1
    db.write_records(updated, args.data, unused)
    print(f"Wrote {args.data}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
