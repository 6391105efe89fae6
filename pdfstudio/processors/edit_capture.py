"""Edit Capture

Maps edited paragraph strings back onto page-space spans.

This is a one-way, lossy transform: every paragraph collapses to exactly one
span positioned from the paragraph's retained geometry. The original
per-word spans are not recoverable after capture.
"""

import logging
from collections import Counter
from typing import Mapping, Optional, Sequence

from pdfstudio.engine.config import LayoutConfig
from pdfstudio.models.pdf_types import ParsedPage, SynthesizedParagraph, TextSpan
from pdfstudio.processors.text_synthesis import synthesize_page
from pdfstudio.utils.validation import NoPageLoadedError

logger = logging.getLogger(__name__)


def dominant_font_name(spans: Sequence[TextSpan]) -> Optional[str]:
    """Most frequent font name among ``spans``; ties go to the first seen."""
    counts = Counter(span.fontName for span in spans if span.fontName)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def capture_paragraph(paragraph: SynthesizedParagraph, edited_text: str) -> TextSpan:
    """
    Produce the span replacing one paragraph.

    The baseline is approximated as the box top minus one font height.
    """
    geometry = paragraph.geometry
    return TextSpan(
        index=paragraph.index,
        text=edited_text,
        x=geometry.leftPt,
        y=geometry.topPt - geometry.baseFontPt,
        width=geometry.widthPt,
        height=geometry.heightPt,
        fontSize=geometry.baseFontPt,
        fontName=dominant_font_name(paragraph.spans)
    )


def capture_page(
    page: Optional[ParsedPage],
    paragraphs: Sequence[SynthesizedParagraph],
    edited_texts: Sequence[str]
) -> ParsedPage:
    """
    Replace a page's spans with one captured span per paragraph.

    Args:
        page: The page the paragraphs were synthesized from
        paragraphs: Retained paragraphs in region order
        edited_texts: One (possibly unmodified) string per paragraph

    Returns:
        New ParsedPage with its span list replaced wholesale

    Raises:
        NoPageLoadedError: If no page is given, or the page has spans but
            no paragraphs were established for it
        ValueError: If the number of strings does not match the paragraphs
    """
    if page is None:
        raise NoPageLoadedError("Cannot capture edits: no page loaded")
    if page.spans and not paragraphs:
        raise NoPageLoadedError(
            f"Cannot capture edits on page {page.pageNumber + 1}: no paragraph geometry established"
        )

    if len(paragraphs) != len(edited_texts):
        raise ValueError(
            f"Expected {len(paragraphs)} edited strings, got {len(edited_texts)}"
        )

    spans = [
        capture_paragraph(paragraph, text)
        for paragraph, text in zip(paragraphs, edited_texts)
    ]

    logger.debug(
        f"Page {page.pageNumber}: captured {len(spans)} paragraph spans "
        f"(replacing {len(page.spans)} spans)"
    )
    return page.with_spans(spans)


def apply_region_edits(
    page: Optional[ParsedPage],
    edits: Mapping[int, str],
    config: Optional[LayoutConfig] = None
) -> ParsedPage:
    """
    Synthesize a page, overlay edited strings by region index, and capture.

    Regions without an entry keep their synthesized text, so an empty
    ``edits`` mapping performs the plain paragraph collapse.

    Raises:
        NoPageLoadedError: If no page is given
        IndexError: If an edit names a region the page does not have
    """
    if page is None:
        raise NoPageLoadedError("Cannot capture edits: no page loaded")

    paragraphs = synthesize_page(page, config)
    texts = [paragraph.text for paragraph in paragraphs]

    for index, text in edits.items():
        if index < 0 or index >= len(texts):
            raise IndexError(f"Region index {index} out of bounds (0-{len(texts) - 1})")
        texts[index] = text

    return capture_page(page, paragraphs, texts)
