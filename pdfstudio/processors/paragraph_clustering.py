"""Paragraph Clustering

Merges consecutive lines into paragraphs when they share an indent and sit
close together vertically. Lines are taken in the order the line clusterer
produced them; no further vertical sort happens here.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from pdfstudio.engine.config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from pdfstudio.models.pdf_types import TextLine, TextParagraph, TextSpan
from pdfstudio.processors.line_clustering import cluster_lines

logger = logging.getLogger(__name__)


def lines_continue_paragraph(
    prev_line: TextLine,
    cur_line: TextLine,
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> bool:
    """Check whether ``cur_line`` continues the paragraph ending with ``prev_line``."""
    same_indent = abs(cur_line.left - prev_line.left) < config.indent_tolerance_pt
    vertical_gap = prev_line.min_y - cur_line.max_top
    small_gap = vertical_gap < config.max_vertical_gap_pt
    return same_indent and small_gap


def cluster_paragraphs(
    lines: Sequence[TextLine],
    config: Optional[LayoutConfig] = None
) -> Tuple[TextParagraph, ...]:
    """
    Group adjacent lines into paragraphs.

    Args:
        lines: Lines in the order produced by ``cluster_lines``
        config: Layout heuristics (defaults if None)

    Returns:
        Tuple of TextParagraph, each holding its lines' spans flattened in line order
    """
    config = config or DEFAULT_LAYOUT_CONFIG
    if not lines:
        return ()

    paragraphs: List[List[TextSpan]] = [list(lines[0].spans)]
    for prev_line, cur_line in zip(lines, lines[1:]):
        if lines_continue_paragraph(prev_line, cur_line, config):
            paragraphs[-1].extend(cur_line.spans)
        else:
            paragraphs.append(list(cur_line.spans))

    logger.debug(f"Clustered {len(lines)} lines into {len(paragraphs)} paragraphs")
    return tuple(TextParagraph(spans=tuple(spans)) for spans in paragraphs)


def cluster_page(
    spans: Sequence[TextSpan],
    config: Optional[LayoutConfig] = None
) -> Tuple[TextParagraph, ...]:
    """Run line and paragraph clustering over a page's spans."""
    return cluster_paragraphs(cluster_lines(spans, config), config)
