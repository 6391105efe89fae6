"""Render Processor for PDFEngine

Rasterizes pages for the editing surface. Only the pixel size of the result
feeds the layout engine; pixel content is passed through untouched.
"""

import io
import logging
from typing import Optional, Tuple, TYPE_CHECKING

from PIL import Image

from pdfstudio.engine.base_processor import BaseProcessor

if TYPE_CHECKING:
    from pdfstudio.engine.pdf_engine import PDFEngine

logger = logging.getLogger(__name__)

DEFAULT_RENDER_DPI = 144
MAX_RENDER_DPI = 600


class RenderProcessor(BaseProcessor):
    """
    Page rasterization processor for PDFEngine.

    Uses pdfplumber's page renderer and hands back Pillow images.
    """

    def __init__(self, engine: 'PDFEngine', dpi: int = DEFAULT_RENDER_DPI):
        super().__init__(engine)
        self.dpi = dpi

    def render_page(self, page_index: int, dpi: Optional[int] = None) -> Image.Image:
        """
        Render a page to an RGB image.

        Args:
            page_index: 0-based page index
            dpi: Resolution override (uses processor default if None)

        Returns:
            Pillow image of the page
        """
        self.require_ready()

        resolution = dpi or self.dpi
        if resolution < 1 or resolution > MAX_RENDER_DPI:
            raise ValueError(f"dpi must be between 1 and {MAX_RENDER_DPI}, got {resolution}")

        plumber_page = self.engine.get_plumber_page(page_index)
        page_image = plumber_page.to_image(resolution=resolution)
        image = page_image.original.convert("RGB")

        logger.debug(f"Page {page_index + 1}: rendered {image.width}x{image.height}px at {resolution} dpi")
        return image

    def render_page_png(self, page_index: int, dpi: Optional[int] = None) -> Tuple[bytes, Tuple[int, int]]:
        """
        Render a page and encode it as PNG.

        Returns:
            Tuple of (PNG bytes, (pixel width, pixel height))
        """
        image = self.render_page(page_index, dpi)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue(), image.size
