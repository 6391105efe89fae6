"""Shared fixtures for the layout engine tests."""

import itertools

import pytest

from pdfstudio.extractors.pdf_writer import write_document
from pdfstudio.models.pdf_types import ParsedDocument, ParsedPage, TextSpan


@pytest.fixture
def make_span():
    """Factory for word spans; indices auto-increment per test."""
    counter = itertools.count()

    def _make_span(text, x, y, width=15.0, height=10.0, font_size=None, font_name="Helvetica"):
        return TextSpan(
            index=next(counter),
            text=text,
            x=x,
            y=y,
            width=width,
            height=height,
            fontSize=height if font_size is None else font_size,
            fontName=font_name,
        )

    return _make_span


@pytest.fixture
def letter_page(make_span):
    """US Letter page with a two-line heading and an indented body paragraph."""
    spans = [
        make_span("Quarterly", 72, 700, width=60, height=12),
        make_span("Report", 135.6, 700, width=40, height=12),
        make_span("Draft", 72, 684, width=32, height=12),
        make_span("Revenue", 108, 600, width=45),
        make_span("grew", 156, 600, width=25),
        make_span("steadily.", 108, 588, width=40),
    ]
    return ParsedPage(pageNumber=0, widthPt=612, heightPt=792, spans=tuple(spans))


@pytest.fixture
def two_page_document(letter_page, make_span):
    second = ParsedPage(
        pageNumber=1,
        widthPt=612,
        heightPt=792,
        spans=(make_span("Appendix", 72, 720, width=50, height=14),),
    )
    return ParsedDocument(pages=(letter_page, second))


@pytest.fixture
def pdf_file(tmp_path, two_page_document):
    """The two-page document written to disk as a real PDF."""
    path = tmp_path / "sample.pdf"
    path.write_bytes(write_document(two_page_document))
    return path
