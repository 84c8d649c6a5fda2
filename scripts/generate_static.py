#!/usr/bin/env python3
"""
Write every pre-rendered page and card grid to disk for static hosting.

Builds the same app context the server uses and saves the home page, the
sources page and one fragment per cache key:

    index.html, sources.html, content-<cols>-<asc|rev>.html

Usage:
    python scripts/generate_static.py
    python scripts/generate_static.py --out /tmp/site
"""
import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

OUTPUT_DIR = PROJECT_ROOT / "build"


def fragment_name(num_cols, reversed_):
    # type: (int, bool) -> str
    return f"content-{num_cols}-{'rev' if reversed_ else 'asc'}.html"


def main(argv=None):
    from page_cache import COLUMN_COUNTS, DIRECTIONS, cache_key
    from serve_cards import App
    from settings import get_settings

    parser = argparse.ArgumentParser(description="Export pre-rendered pages")
    parser.add_argument("--out", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s  %(levelname)-7s  %(message)s")

    app = App.build(settings)
    out = args.out
    out.mkdir(parents=True, exist_ok=True)

    (out / "index.html").write_bytes(app.home_html)
    print(f"  index.html          ({len(app.home_html):,} bytes)")
    (out / "sources.html").write_bytes(app.sources_html)
    print(f"  sources.html        ({len(app.sources_html):,} bytes)")

    written = 2
    for num_cols in COLUMN_COUNTS:
        for reversed_ in DIRECTIONS:
            body = app.cache.get(cache_key(num_cols, reversed_))
            name = fragment_name(num_cols, reversed_)
            if body is None:
                print(f"  [SKIP] {name} — layout failed to render")
                continue
            (out / name).write_bytes(body)
            print(f"  {name:<19} ({len(body):,} bytes)")
            written += 1

    print(f"\n{written} files written to {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
