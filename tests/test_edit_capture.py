"""Tests for mapping edited paragraph strings back to spans."""

import pytest

from pdfstudio.models.pdf_types import ParsedPage
from pdfstudio.processors.edit_capture import (
    apply_region_edits,
    capture_page,
    capture_paragraph,
    dominant_font_name,
)
from pdfstudio.processors.text_synthesis import synthesize_page
from pdfstudio.utils.validation import NoPageLoadedError


def test_unedited_capture_keeps_synthesized_text(letter_page):
    paragraphs = synthesize_page(letter_page)
    captured = capture_page(letter_page, paragraphs, [p.text for p in paragraphs])

    assert [span.text for span in captured.spans] == [p.text for p in paragraphs]
    assert captured.widthPt == letter_page.widthPt
    assert captured.pageNumber == letter_page.pageNumber


def test_each_paragraph_collapses_to_one_span(letter_page):
    paragraphs = synthesize_page(letter_page)
    captured = capture_page(letter_page, paragraphs, ["A", "B"])
    assert len(captured.spans) == len(paragraphs) == 2
    assert [span.index for span in captured.spans] == [0, 1]


def test_captured_span_is_positioned_from_geometry(letter_page):
    heading = synthesize_page(letter_page)[0]
    span = capture_paragraph(heading, "Annual Report")

    assert span.text == "Annual Report"
    assert span.x == pytest.approx(71.5)
    assert span.y == pytest.approx(712 - 12)
    assert span.width == pytest.approx(104.6)
    assert span.height == pytest.approx(28)
    assert span.fontSize == 12
    assert span.fontName == "Helvetica"


def test_empty_edit_still_yields_span(letter_page):
    paragraphs = synthesize_page(letter_page)
    captured = capture_page(letter_page, paragraphs, ["", "kept"])
    assert [span.text for span in captured.spans] == ["", "kept"]


def test_capture_leaves_source_page_untouched(letter_page):
    paragraphs = synthesize_page(letter_page)
    capture_page(letter_page, paragraphs, ["x", "y"])
    assert len(letter_page.spans) == 6


def test_capture_requires_page():
    with pytest.raises(NoPageLoadedError):
        capture_page(None, (), ())


def test_capture_requires_paragraph_geometry(letter_page):
    with pytest.raises(NoPageLoadedError):
        capture_page(letter_page, (), ())


def test_capture_of_empty_page_yields_no_spans():
    page = ParsedPage(pageNumber=0, widthPt=612, heightPt=792)
    assert capture_page(page, (), ()).spans == ()


def test_capture_rejects_mismatched_strings(letter_page):
    paragraphs = synthesize_page(letter_page)
    with pytest.raises(ValueError):
        capture_page(letter_page, paragraphs, ["only one"])


def test_dominant_font_name(make_span):
    spans = [
        make_span("a", 0, 0, font_name="Times-Bold"),
        make_span("b", 0, 0, font_name="Times-Roman"),
        make_span("c", 0, 0, font_name="Times-Roman"),
        make_span("d", 0, 0, font_name=None),
    ]
    assert dominant_font_name(spans) == "Times-Roman"
    assert dominant_font_name([make_span("e", 0, 0, font_name=None)]) is None


def test_apply_region_edits_overlays_by_index(letter_page):
    captured = apply_region_edits(letter_page, {1: "Revenue fell."})
    assert [span.text for span in captured.spans] == [
        "Quarterly Report\nDraft",
        "Revenue fell.",
    ]


def test_apply_region_edits_rejects_unknown_region(letter_page):
    with pytest.raises(IndexError):
        apply_region_edits(letter_page, {5: "nowhere"})
