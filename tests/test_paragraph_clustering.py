"""Tests for paragraph clustering over clustered lines."""

from pdfstudio.engine.config import LayoutConfig
from pdfstudio.processors.line_clustering import cluster_lines
from pdfstudio.processors.paragraph_clustering import cluster_page, cluster_paragraphs


def _paragraph_texts(paragraphs):
    return [[span.text for span in paragraph.spans] for paragraph in paragraphs]


def test_close_aligned_lines_merge_and_indent_splits(make_span):
    spans = [
        make_span("one", 50, 100),
        make_span("two", 50, 80),
        make_span("three", 65, 60),
    ]
    paragraphs = cluster_page(spans)
    assert _paragraph_texts(paragraphs) == [["one", "two"], ["three"]]


def test_gap_at_threshold_starts_new_paragraph(make_span):
    # Second line top is 82, exactly 18pt below the first line's bottom
    spans = [make_span("above", 50, 100), make_span("below", 50, 72)]
    assert len(cluster_page(spans)) == 2

    spans = [make_span("above", 50, 100), make_span("below", 50, 72.5)]
    assert len(cluster_page(spans)) == 1


def test_indent_at_threshold_starts_new_paragraph(make_span):
    spans = [make_span("left", 50, 100), make_span("shifted", 60, 88)]
    assert len(cluster_page(spans)) == 2

    spans = [make_span("left", 50, 100), make_span("nudged", 59.5, 88)]
    assert len(cluster_page(spans)) == 1


def test_paragraph_spans_follow_line_order(letter_page):
    paragraphs = cluster_page(letter_page.spans)
    assert _paragraph_texts(paragraphs) == [
        ["Quarterly", "Report", "Draft"],
        ["Revenue", "grew", "steadily."],
    ]


def test_lines_are_not_resorted(make_span):
    lines = cluster_lines([make_span("low", 50, 100), make_span("high", 50, 300)])
    reversed_lines = tuple(reversed(lines))
    paragraphs = cluster_paragraphs(reversed_lines, LayoutConfig(max_vertical_gap_pt=1000))
    assert _paragraph_texts(paragraphs) == [["low", "high"]]


def test_every_span_lands_in_exactly_one_paragraph(letter_page):
    paragraphs = cluster_page(letter_page.spans)
    placed = [span.index for paragraph in paragraphs for span in paragraph.spans]
    assert sorted(placed) == sorted(span.index for span in letter_page.spans)


def test_empty_lines_give_no_paragraphs():
    assert cluster_paragraphs([]) == ()
    assert cluster_page([]) == ()


def test_paragraph_clustering_is_deterministic(letter_page):
    first = cluster_page(letter_page.spans)
    second = cluster_page(letter_page.spans)
    assert first == second
    assert cluster_paragraphs(cluster_lines(letter_page.spans)) == first
    assert len(first) == 2
