"""Tests for cell codecs and header mapping."""

import pytest

from homelibrary.cells import (
    canonical_header,
    cell_text,
    decode_cover_cell,
    encode_cover_cell,
    encode_text_cell,
)
from homelibrary.models import Field


def test_encode_cover_wraps_url_in_image_formula():
    assert encode_cover_cell("https://example.com/cover.jpg") == '=IMAGE("https://example.com/cover.jpg")'


@pytest.mark.parametrize("value", [None, "", "   "])
def test_encode_cover_without_url_is_empty(value):
    assert encode_cover_cell(value) == ""


def test_encode_cover_escapes_quotes():
    assert encode_cover_cell('https://x/a"b.jpg') == '=IMAGE("https://x/a""b.jpg")'
    assert decode_cover_cell(encode_cover_cell('https://x/a"b.jpg')) == 'https://x/a"b.jpg'


def test_decode_cover_round_trip():
    formula = encode_cover_cell("https://example.com/cover.jpg")
    assert decode_cover_cell(formula) == "https://example.com/cover.jpg"


@pytest.mark.parametrize(
    "text",
    [
        '=image("https://example.com/c.jpg")',
        ' =IMAGE( "https://example.com/c.jpg", 1)',
        '=IMAGE("https://example.com/c.jpg")  ',
    ],
)
def test_decode_cover_tolerates_formula_variants(text):
    assert decode_cover_cell(text) == "https://example.com/c.jpg"


def test_decode_cover_passes_plain_urls_through():
    assert decode_cover_cell("https://example.com/c.jpg") == "https://example.com/c.jpg"
    assert decode_cover_cell("") == ""


def test_decode_cover_drops_other_formulas():
    assert decode_cover_cell("=HYPERLINK(A1)") == ""


@pytest.mark.parametrize(
    "header, field",
    [
        ("ISBN", Field.ISBN),
        ("isbn", Field.ISBN),
        (" Title ", Field.TITLE),
        ("Reading Level", Field.READING_LEVEL),
        ("level", Field.READING_LEVEL),
        ("author", Field.AUTHORS),
        ("Requested By", Field.REQUESTED_BY),
        ("requested_by", Field.REQUESTED_BY),
        ("RequestedBy", Field.REQUESTED_BY),
    ],
)
def test_canonical_header_accepts_case_and_spacing_variants(header, field):
    assert canonical_header(header) is field


def test_canonical_header_unknown_column():
    assert canonical_header("Shelf photo") is None
    assert canonical_header("") is None


def test_cell_text_renders_numbers_without_float_noise():
    assert cell_text(9780306406157) == "9780306406157"
    assert cell_text(312.0) == "312"
    assert cell_text(2.5) == "2.5"
    assert cell_text(None) == ""
    assert cell_text(True) == "TRUE"


def test_encode_text_cell_prefixes_apostrophe():
    assert encode_text_cell("0306406152") == "'0306406152"
    assert encode_text_cell("=SUM(A1:A2)") == "'=SUM(A1:A2)"
    assert encode_text_cell(310) == "'310"
    assert encode_text_cell("") == ""
    assert encode_text_cell(None) == ""
