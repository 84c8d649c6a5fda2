"""
render_pages.py — HTML for the home page, the sources page and the card grid.

Everything here is a pure function of its arguments. Record text is escaped
before it reaches the markup.
"""
from __future__ import annotations

from html import escape

from card_layout import Card, PageData

SITE_TITLE = "National Dishes"

# shown when a dish photo is missing from IMG_SOURCE
PLACEHOLDER_SRC = "/static/placeholder.svg"


def page_shell(title, content, active=""):
    # type: (str, str, str) -> str
    """Wrap content in the shared header + main layout."""
    def _active(page):
        return ' class="active"' if page == active else ''

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)} · {SITE_TITLE}</title>
<link rel="stylesheet" href="/static/style.css">
</head>
<body>
<header class="site-header">
  <a class="brand" href="/">{SITE_TITLE}</a>
  <nav>
    <a href="/"{_active("home")}>Dishes</a>
    <a href="/sources"{_active("sources")}>Sources</a>
  </nav>
</header>
<main>
{content}
</main>
</body>
</html>
"""


def render_card(card: Card) -> str:
    r = card.record
    style = ""
    if card.grid_row is not None and card.grid_col is not None:
        style = f' style="grid-row: {card.grid_row}; grid-column: {card.grid_col}"'

    ratio = ""
    if r.aspect_ratio > 0:
        ratio = f' style="aspect-ratio: {r.aspect_ratio:g}"'

    dish = escape(r.national_dish)
    if r.dish_wiki:
        dish = f'<a href="{escape(r.dish_wiki)}" target="_blank" rel="noopener">{dish}</a>'

    return (
        f'<article class="card" data-order="{card.order}"{style}>'
        f'<img src="{escape(card.image_source)}" alt="{escape(r.national_dish)}" '
        f'loading="lazy"{ratio} '
        f'onerror="this.onerror=null;this.src=&#x27;{PLACEHOLDER_SRC}&#x27;">'
        f'<div class="card-meta">'
        f'<div class="card-country">{escape(r.country)}</div>'
        f'<div class="card-dish">{dish}</div>'
        f'<div class="card-bmi">BMI {r.both:.1f}</div>'
        f'</div></article>'
    )


def render_content(page: PageData) -> str:
    """Render the card grid fragment served from /content."""
    cards = "\n".join(render_card(c) for c in page.cards)
    return (
        f'<section class="grid" data-cols="{page.num_cols}" data-rows="{page.num_rows}" '
        f'style="grid-template-columns: repeat({page.num_cols}, minmax(0, 1fr))">\n'
        f'{cards}\n'
        f'</section>\n'
    )


def render_home():
    # type: () -> str
    content = """<section class="intro">
  <h1>National dishes of the world</h1>
  <p>Each country's national dish, next to the average adult BMI reported for it.</p>
  <button id="sort-toggle" type="button" aria-pressed="false">Reverse order</button>
</section>
<div id="content" aria-live="polite"><p class="loading">Loading…</p></div>
<script src="/static/app.js" defer></script>"""
    return page_shell("Dishes", content, active="home")


SOURCES = [
    ("Body mass index by country",
     "https://en.wikipedia.org/wiki/List_of_countries_by_body_mass_index"),
    ("National dishes",
     "https://en.wikipedia.org/wiki/National_dish"),
    ("Dish photographs",
     "https://commons.wikimedia.org/"),
]


def render_sources():
    # type: () -> str
    items = "\n".join(
        f'    <li><a href="{escape(url)}" target="_blank" rel="noopener">{escape(name)}</a></li>'
        for name, url in SOURCES
    )
    content = f"""<section class="sources">
  <h1>Sources</h1>
  <p>BMI figures are age-standardised estimates for adults. Photographs are
  credited on their linked Wikipedia pages.</p>
  <ul>
{items}
  </ul>
</section>"""
    return page_shell("Sources", content, active="sources")
