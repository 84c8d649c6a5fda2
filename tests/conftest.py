from __future__ import annotations

import csv
import io

import pytest

from card_database import HEADER, Record


def csv_bytes(rows, header=HEADER):
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue().encode("utf-8")


def row(country="Peru", both="26.6", dish="Ceviche", wiki="https://example.org/ceviche",
        image="ceviche.jpg", ratio="1.5", o2="1", o3="1", o4="1"):
    return [country, both, "27.3", "25.9", dish, wiki, image, ratio, o2, o3, o4]


def record(country="Peru", image="x.jpg", o2=0, o3=0, o4=0, both=25.0, wiki=""):
    return Record(
        country=country, both=both, national_dish=f"{country} dish", dish_wiki=wiki,
        image_link=image, aspect_ratio=1.0, order_2_cols=o2, order_3_cols=o3,
        order_4_cols=o4,
    )


@pytest.fixture
def sample_records():
    return (
        record("Argentina", "asado.jpg", o2=3, o3=2, o4=4),
        record("Ethiopia", "", o2=0, o3=0, o4=0),
        record("Japan", "sushi.jpg", o2=1, o3=3, o4=2),
        record("Peru", "ceviche.jpg", o2=2, o3=1, o4=1),
        record("Kenya", "", o2=0, o3=0, o4=0),
        record("Spain", "paella.jpg", o2=4, o3=4, o4=3),
    )
