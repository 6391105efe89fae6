"""Paragraph Text Synthesis

Turns a paragraph's word geometry into an editable display string and a
bounding box. Line breaks are recovered by re-running line clustering on the
paragraph's own spans; spaces between words are inferred from the horizontal
gap relative to an approximate character width.
"""

import logging
import statistics
from typing import Iterable, List, Optional, Sequence, Tuple

from pdfstudio.engine.config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from pdfstudio.models.pdf_types import (
    EditableRegion,
    ParagraphGeometry,
    ParsedPage,
    SynthesizedParagraph,
    TextLine,
    TextParagraph,
    TextSpan,
)
from pdfstudio.processors.line_clustering import cluster_lines
from pdfstudio.processors.paragraph_clustering import cluster_page
from pdfstudio.utils.pdf_transforms import PageTransform

logger = logging.getLogger(__name__)

LINE_BREAK = "\n"
# Font sizes at or below this are extractor noise; fall back to the word height
MIN_TRUSTED_FONT_SIZE = 1.0


def estimate_font_size(spans: Iterable[TextSpan], config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> float:
    """Median font size of ``spans``, using word height where the font size is unreliable."""
    sizes = [
        span.fontSize if span.fontSize > MIN_TRUSTED_FONT_SIZE else span.height
        for span in spans
    ]
    positive = [size for size in sizes if size > 0]
    if not positive:
        return config.default_font_pt
    return float(statistics.median(positive))


def count_spaces(gap: float, char_width: float, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> int:
    """Number of spaces standing in for a horizontal gap between two words."""
    if gap <= 0:
        return 0
    spaces = round(gap / (char_width * config.space_width_factor))
    return max(1, min(config.max_spaces, spaces))


def synthesize_line(line: TextLine, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> str:
    """Concatenate a line's words left to right with inferred spacing."""
    font_pt = estimate_font_size(line.spans, config)
    char_width = max(config.min_char_width_pt, font_pt * config.char_width_factor)

    pieces = [line.spans[0].text]
    for prev_span, cur_span in zip(line.spans, line.spans[1:]):
        gap = cur_span.x - prev_span.right
        pieces.append(" " * count_spaces(gap, char_width, config))
        pieces.append(cur_span.text)
    return "".join(pieces)


def paragraph_geometry(
    spans: Sequence[TextSpan],
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> ParagraphGeometry:
    """Padded bounding box and median font size of a paragraph."""
    if not spans:
        return ParagraphGeometry(
            leftPt=0.0,
            topPt=config.min_box_pt,
            widthPt=config.min_box_pt,
            heightPt=config.min_box_pt,
            baseFontPt=config.default_font_pt
        )

    left = min(span.x for span in spans) - config.bbox_padding_pt
    right = max(span.right for span in spans) + config.bbox_padding_pt
    top = max(span.top for span in spans)
    bottom = min(span.y for span in spans)

    return ParagraphGeometry(
        leftPt=left,
        topPt=top,
        widthPt=max(config.min_box_pt, right - left),
        heightPt=max(config.min_box_pt, top - bottom),
        baseFontPt=estimate_font_size(spans, config)
    )


def synthesize_paragraph(
    paragraph: TextParagraph,
    index: int = 0,
    config: Optional[LayoutConfig] = None
) -> SynthesizedParagraph:
    """
    Build the display string and geometry for one paragraph.

    Args:
        paragraph: Flat spans of the paragraph
        index: Position of the paragraph on its page
        config: Layout heuristics (defaults if None)

    Returns:
        SynthesizedParagraph retaining the original spans for edit capture
    """
    config = config or DEFAULT_LAYOUT_CONFIG
    lines = cluster_lines(paragraph.spans, config)
    text = LINE_BREAK.join(synthesize_line(line, config) for line in lines)

    return SynthesizedParagraph(
        index=index,
        text=text,
        geometry=paragraph_geometry(paragraph.spans, config),
        spans=paragraph.spans
    )


def synthesize_page(
    page: ParsedPage,
    config: Optional[LayoutConfig] = None
) -> Tuple[SynthesizedParagraph, ...]:
    """Cluster a page and synthesize every paragraph, top to bottom."""
    config = config or DEFAULT_LAYOUT_CONFIG
    paragraphs = cluster_page(page.spans, config)
    result = tuple(
        synthesize_paragraph(paragraph, index, config)
        for index, paragraph in enumerate(paragraphs)
    )
    logger.debug(
        f"Page {page.pageNumber}: synthesized {len(result)} paragraphs from {len(page.spans)} spans"
    )
    return result


def build_editable_regions(
    page: ParsedPage,
    raster_width: float,
    raster_height: float,
    config: Optional[LayoutConfig] = None,
    paragraphs: Optional[Sequence[SynthesizedParagraph]] = None
) -> List[EditableRegion]:
    """
    Describe each paragraph as a pixel rectangle for the presentation layer.

    The rectangle is inset by ``region_margin_pt``; the retained geometry is
    the full box used by edit capture.

    Raises:
        NoPageLoadedError: If page is None
        InvalidGeometryError: If page or raster dimensions are not positive
    """
    config = config or DEFAULT_LAYOUT_CONFIG
    transform = PageTransform.for_page(page, raster_width, raster_height)
    if paragraphs is None:
        paragraphs = synthesize_page(page, config)

    return [
        EditableRegion(
            index=paragraph.index,
            text=paragraph.text,
            rect=transform.geometry_to_pixels(paragraph.geometry.inset(config.region_margin_pt)),
            geometry=paragraph.geometry,
            fontSizePx=transform.font_size_to_pixels(paragraph.geometry.baseFontPt)
        )
        for paragraph in paragraphs
    ]
