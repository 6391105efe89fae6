"""
Layout Processing Components

Pure layout stages that turn positioned word spans into editable paragraphs
and back:

- Line clustering: greedy first-fit baseline grouping
- Paragraph clustering: indent and vertical gap continuation
- Text synthesis: gap-derived spacing, line joining, bounding geometry
- Edit capture: one replacement span per edited paragraph

None of these hold state between calls; the EditSession in engine/ owns state.
"""

from pdfstudio.processors.line_clustering import cluster_lines
from pdfstudio.processors.paragraph_clustering import cluster_paragraphs, cluster_page
from pdfstudio.processors.text_synthesis import (
    synthesize_line,
    synthesize_paragraph,
    synthesize_page,
    build_editable_regions,
)
from pdfstudio.processors.edit_capture import capture_paragraph, capture_page

__version__ = "1.0.0"
__all__ = [
    'cluster_lines',
    'cluster_paragraphs',
    'cluster_page',
    'synthesize_line',
    'synthesize_paragraph',
    'synthesize_page',
    'build_editable_regions',
    'capture_paragraph',
    'capture_page',
]
