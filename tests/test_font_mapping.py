"""Tests for mapping extracted font names to standard 14 fonts."""

import pytest

from pdfstudio.utils.font_mapping import map_pdf_font_to_base14, normalize_font_name


@pytest.mark.parametrize("font_name,expected", [
    ("ABCDEF+ArialMT", "Helvetica"),
    ("Arial-BoldMT", "Helvetica-Bold"),
    ("TimesNewRomanPS-ItalicMT", "Times-Italic"),
    ("Times-BoldItalic", "Times-BoldItalic"),
    ("CourierNewPSMT", "Courier"),
    ("DejaVuSans", "Helvetica"),
    ("LiberationSerif-Bold", "Times-Bold"),
    ("", "Helvetica"),
])
def test_map_pdf_font_to_base14(font_name, expected):
    assert map_pdf_font_to_base14(font_name) == expected


def test_normalize_strips_subset_prefix():
    assert normalize_font_name("ABCDEF+TimesNewRomanPS-BoldMT") == "timesnewromanps"
