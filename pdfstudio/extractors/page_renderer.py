"""
Page Renderer

Rasterizes a single PDF page for the editing surface.
Uses PDFEngine + RenderProcessor.
"""

import logging
from typing import Optional, Tuple

from pdfstudio.utils.validation import PdfValidationError

logger = logging.getLogger(__name__)


def render_page(
    file_path: str,
    page_index: int = 0,
    dpi: Optional[int] = None
) -> Tuple[bytes, Tuple[int, int]]:
    """
    Render one page as PNG.

    Args:
        file_path: Path to the PDF file
        page_index: 0-based page index
        dpi: Resolution (engine default of 144 if None)

    Returns:
        Tuple of (PNG bytes, (raster width, raster height))

    Raises:
        IndexError: If the page does not exist
        ValueError: If dpi is out of range
        PdfValidationError: If the file cannot be opened or rendered
    """
    from pdfstudio.engine import PDFEngine, EngineConfig

    config = EngineConfig(enable_text_processor=False, enable_caching=False)

    try:
        with PDFEngine(file_path, config=config) as engine:
            png_bytes, size = engine.render_processor.render_page_png(page_index, dpi)
            logger.info(f"Rendered page {page_index + 1}: {size[0]}x{size[1]}px, {len(png_bytes)} bytes")
            return png_bytes, size

    except (PdfValidationError, IndexError, ValueError):
        raise
    except Exception as e:
        logger.error(f"Page rendering failed: {e}", exc_info=True)
        raise PdfValidationError(f"Page rendering failed: {str(e)}")
