"""Baseline Line Clustering

Groups an unordered stream of word spans into lines that share an approximate
baseline. Assignment is greedy first-fit: each word joins the first existing
line whose reference baseline is within tolerance, even when a line created
later would be a closer match.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from pdfstudio.engine.config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from pdfstudio.models.pdf_types import TextLine, TextSpan

logger = logging.getLogger(__name__)


def baseline_tolerance(span: TextSpan, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> float:
    """Vertical distance within which ``span`` may join a line."""
    return max(config.baseline_tolerance_pt, config.height_tolerance_factor * span.height)


def reading_order(spans: Sequence[TextSpan]) -> np.ndarray:
    """Indices of ``spans`` by descending y; ties keep input order."""
    ys = np.fromiter((span.y for span in spans), dtype=float, count=len(spans))
    return np.argsort(-ys, kind='stable')


def assign_lines(
    spans: Sequence[TextSpan],
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> Tuple[np.ndarray, np.ndarray, Tuple[float, ...]]:
    """
    First-fit line assignment.

    Returns:
        Tuple of (processing order, line id per input span, reference baseline per line)
    """
    order = reading_order(spans)
    line_ids = np.full(len(spans), -1, dtype=int)
    baselines = []

    for span_idx in order:
        span = spans[span_idx]
        tolerance = baseline_tolerance(span, config)

        for line_id, ref_y in enumerate(baselines):
            if abs(span.y - ref_y) <= tolerance:
                line_ids[span_idx] = line_id
                break
        else:
            line_ids[span_idx] = len(baselines)
            baselines.append(span.y)

    return order, line_ids, tuple(baselines)


def cluster_lines(
    spans: Sequence[TextSpan],
    config: Optional[LayoutConfig] = None
) -> Tuple[TextLine, ...]:
    """
    Group spans into lines, top to bottom.

    Lines come back in creation order; spans inside a line are sorted by x.
    Every input span appears in exactly one line.

    Args:
        spans: Word spans of a page or paragraph, in any order
        config: Layout heuristics (defaults if None)

    Returns:
        Tuple of TextLine, empty for empty input
    """
    config = config or DEFAULT_LAYOUT_CONFIG
    if not spans:
        return ()

    order, line_ids, baselines = assign_lines(spans, config)

    members = [[] for _ in baselines]
    for span_idx in order:
        members[line_ids[span_idx]].append(spans[span_idx])

    lines = tuple(
        TextLine(spans=tuple(sorted(line_spans, key=lambda s: s.x)), baseline=ref_y)
        for line_spans, ref_y in zip(members, baselines)
    )

    logger.debug(f"Clustered {len(spans)} spans into {len(lines)} lines")
    return lines
