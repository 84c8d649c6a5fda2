from __future__ import annotations

import logging

import pytest

import card_database as db
from conftest import csv_bytes, row


def test_bundled_dataset_loads():
    records = db.load_dataset()
    assert len(records) == 46
    assert sum(1 for r in records if r.displayable) == 42
    assert records[0].country == "Argentina"
    assert records[0].both == pytest.approx(27.7)


def test_fields_map_to_columns():
    raw = csv_bytes([row(country="Peru", both="26.6", dish="Ceviche",
                         wiki="https://example.org/c", image="ceviche.jpg",
                         ratio="1.3333", o2="7", o3="8", o4="9")])
    (r,) = db.load_records(raw)
    assert r.country == "Peru"
    assert r.both == pytest.approx(26.6)
    assert r.national_dish == "Ceviche"
    assert r.dish_wiki == "https://example.org/c"
    assert r.image_link == "ceviche.jpg"
    assert r.aspect_ratio == pytest.approx(1.3333)
    assert (r.order_2_cols, r.order_3_cols, r.order_4_cols) == (7, 8, 9)


def test_header_only_gives_no_records():
    assert db.load_records(csv_bytes([])) == ()


def test_bad_bmi_drops_row(caplog):
    raw = csv_bytes([row(country="A"), row(country="B", both="n/a"), row(country="C")])
    with caplog.at_level(logging.WARNING, logger="card_database"):
        records = db.load_records(raw)
    assert [r.country for r in records] == ["A", "C"]
    assert "failed to parse BMI" in caplog.text


def test_bad_layout_fields_default_to_zero():
    raw = csv_bytes([row(ratio="wide", o2="", o3="x", o4="2.5")])
    (r,) = db.load_records(raw)
    assert r.aspect_ratio == 0
    assert (r.order_2_cols, r.order_3_cols, r.order_4_cols) == (0, 0, 0)


def test_empty_image_link_is_kept_but_not_displayable():
    (r,) = db.load_records(csv_bytes([row(image="")]))
    assert not r.displayable


def test_quoted_commas():
    (r,) = db.load_records(csv_bytes([row(dish="Rice, beans and plantain")]))
    assert r.national_dish == "Rice, beans and plantain"


def test_wrong_field_count_is_parse_error():
    raw = csv_bytes([row()]) + b"Chile,28.6,29.2\n"
    with pytest.raises(db.ParseError, match="wrong number of fields"):
        db.load_records(raw)


def test_bad_quoting_is_parse_error():
    raw = csv_bytes([]) + b'Chile,"28.6"x,1,2,d,w,i,1,1,1,1\n'
    with pytest.raises(db.ParseError):
        db.load_records(raw)


def test_too_few_columns_is_parse_error():
    with pytest.raises(db.ParseError, match="columns"):
        db.load_records(b"Country,Both\nPeru,26.6\n")


def test_empty_stream_is_parse_error():
    with pytest.raises(db.ParseError, match="empty"):
        db.load_records(b"")


def test_invalid_utf8_is_parse_error():
    with pytest.raises(db.ParseError, match="UTF-8"):
        db.load_records(csv_bytes([]) + b"\xff\xfe,1\n")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        db.load_dataset(tmp_path / "nope.csv")


def test_write_records_keeps_unused_columns(tmp_path):
    path = tmp_path / "countries.csv"
    path.write_bytes(csv_bytes([row(country="Peru", ratio="1.5")]))
    records = db.load_dataset(path)
    unused = db.read_unused_columns(path)
    assert unused == {"Peru": ("27.3", "25.9")}

    db.write_records(records, path, unused)
    text = path.read_text(encoding="utf-8").splitlines()
    assert text[0].split(",") == db.HEADER
    assert text[1] == "Peru,26.6,27.3,25.9,Ceviche,https://example.org/ceviche,ceviche.jpg,1.5,1,1,1"


@pytest.mark.parametrize("both", [" 25.3", "25.3 ", "2_5.3", "٢٥.٣", "25,3", "0x19", ""])
def test_loose_bmi_text_drops_row(both):
    assert db.load_records(csv_bytes([row(both=both)])) == ()


@pytest.mark.parametrize("o2", [" 4", "4 ", "1_0", "٤", "+", "4.0"])
def test_loose_order_hint_defaults_to_zero(o2):
    (r,) = db.load_records(csv_bytes([row(o2=o2)]))
    assert r.order_2_cols == 0


@pytest.mark.parametrize("text,value", [
    ("25.3", 25.3), ("-1.5", -1.5), ("+2", 2.0), ("5.", 5.0), (".5", 0.5), ("1e3", 1000.0),
])
def test_parse_float_accepts_decimal_text(text, value):
    assert db.parse_float(text) == pytest.approx(value)


@pytest.mark.parametrize("text,value", [("7", 7), ("-3", -3), ("+12", 12), ("007", 7)])
def test_parse_int_accepts_decimal_text(text, value):
    assert db.parse_int(text) == value
