"""Tests for paragraph text synthesis and editable region layout."""

import pytest

from pdfstudio.engine.config import LayoutConfig
from pdfstudio.models.pdf_types import ParsedPage, TextLine, TextParagraph
from pdfstudio.processors.text_synthesis import (
    build_editable_regions,
    count_spaces,
    estimate_font_size,
    paragraph_geometry,
    synthesize_line,
    synthesize_page,
    synthesize_paragraph,
)
from pdfstudio.utils.validation import InvalidGeometryError, NoPageLoadedError


def test_single_word_paragraph(make_span):
    word = make_span("Hello", 50, 100, width=30, height=12, font_size=12)
    result = synthesize_paragraph(TextParagraph(spans=(word,)))

    assert result.text == "Hello"
    geometry = result.geometry
    assert geometry.baseFontPt == 12
    assert geometry.leftPt == pytest.approx(49.5)
    assert geometry.widthPt == pytest.approx(31)
    assert geometry.topPt == pytest.approx(112)
    assert geometry.heightPt == pytest.approx(12)


def test_space_count_follows_gap():
    # 10pt font: char width 5pt, space width 3pt
    assert count_spaces(0, 5) == 0
    assert count_spaces(-4, 5) == 0
    assert count_spaces(0.2, 5) == 1
    assert count_spaces(3, 5) == 1
    assert count_spaces(20, 5) == 7
    assert count_spaces(500, 5) == 10


def test_line_joins_words_with_inferred_spaces(make_span):
    line = TextLine(
        spans=(
            make_span("alpha", 0, 500),
            make_span("beta", 18, 500),
            make_span("gamma", 51, 500),
        ),
        baseline=500,
    )
    assert synthesize_line(line) == "alpha beta      gamma"


def test_touching_words_get_no_space(make_span):
    line = TextLine(spans=(make_span("un", 0, 0), make_span("done", 15, 0)), baseline=0)
    assert synthesize_line(line) == "undone"


def test_paragraph_lines_join_with_newline(letter_page):
    paragraphs = synthesize_page(letter_page)
    assert [paragraph.text for paragraph in paragraphs] == [
        "Quarterly Report\nDraft",
        "Revenue grew\nsteadily.",
    ]
    assert [paragraph.index for paragraph in paragraphs] == [0, 1]


def test_geometry_bounds_all_spans(letter_page):
    heading = synthesize_page(letter_page)[0].geometry
    assert heading.leftPt == pytest.approx(71.5)
    assert heading.widthPt == pytest.approx(104.6)
    assert heading.topPt == pytest.approx(712)
    assert heading.heightPt == pytest.approx(28)
    assert heading.bottomPt == pytest.approx(684)


def test_font_size_falls_back_to_height_then_default(make_span):
    assert estimate_font_size([make_span("a", 0, 0, height=9, font_size=0.5)]) == 9
    assert estimate_font_size([make_span("a", 0, 0, height=0, font_size=0)]) == 10.0
    assert estimate_font_size([]) == 10.0


def test_font_size_is_median(make_span):
    spans = [make_span(str(size), 0, 0, font_size=size) for size in (8, 30, 11)]
    assert estimate_font_size(spans) == 11


def test_geometry_enforces_minimum_box(make_span):
    geometry = paragraph_geometry([make_span(".", 10, 10, width=1, height=2)])
    assert geometry.widthPt == 8.0
    assert geometry.heightPt == 8.0


def test_empty_paragraph_geometry():
    geometry = paragraph_geometry([])
    assert geometry.leftPt == 0.0
    assert geometry.widthPt == 8.0
    assert geometry.baseFontPt == 10.0


def test_regions_scale_to_raster(letter_page):
    regions = build_editable_regions(letter_page, 1224, 1584)
    assert len(regions) == 2

    heading = regions[0]
    assert heading.text == "Quarterly Report\nDraft"
    # 6pt inset on every side, then 2px per point
    assert heading.rect.left == pytest.approx((71.5 + 6) * 2)
    assert heading.rect.top == pytest.approx(1584 - (712 - 6) * 2)
    assert heading.rect.width == pytest.approx((104.6 - 12) * 2)
    assert heading.rect.height == pytest.approx((28 - 12) * 2)
    assert heading.fontSizePx == pytest.approx(12 * 2 * 0.9)
    assert heading.geometry.leftPt == pytest.approx(71.5)


def test_region_inset_never_inverts_box(make_span):
    page = ParsedPage(pageNumber=0, widthPt=100, heightPt=100,
                      spans=(make_span("x", 10, 10, width=4, height=4),))
    region = build_editable_regions(page, 100, 100, LayoutConfig(region_margin_pt=50))[0]
    assert region.rect.width == 0
    assert region.rect.height == 0


def test_regions_reject_missing_or_degenerate_page(letter_page):
    with pytest.raises(NoPageLoadedError):
        build_editable_regions(None, 100, 100)
    with pytest.raises(InvalidGeometryError):
        build_editable_regions(letter_page, 0, 100)
