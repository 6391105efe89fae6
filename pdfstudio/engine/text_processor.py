"""Text Processor for PDFEngine

Extracts word-level spans from a page into a ParsedPage snapshot.
"""

import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from pdfstudio.engine.base_processor import BaseProcessor
from pdfstudio.models.pdf_types import ParsedPage, TextSpan

if TYPE_CHECKING:
    from pdfstudio.engine.pdf_engine import PDFEngine

logger = logging.getLogger(__name__)


class TextProcessorOptions:
    """Configuration options for word extraction"""

    def __init__(
        self,
        x_tolerance: float = 3.0,
        y_tolerance: float = 3.0,
        keep_blank_chars: bool = False,
        use_text_flow: bool = False,
        use_font_size: bool = True
    ):
        """
        Initialize text processor options.

        Args:
            x_tolerance: Horizontal gap (pt) below which characters join a word
            y_tolerance: Vertical offset (pt) below which characters share a line
            keep_blank_chars: Treat spaces as part of words instead of separators
            use_text_flow: Follow content stream order instead of page position
            use_font_size: Use the font size as the size heuristic, else the word height
        """
        self.x_tolerance = x_tolerance
        self.y_tolerance = y_tolerance
        self.keep_blank_chars = keep_blank_chars
        self.use_text_flow = use_text_flow
        self.use_font_size = use_font_size


class TextProcessor(BaseProcessor):
    """
    Word extraction processor for PDFEngine.

    Converts pdfplumber words (top-left origin) into page-space spans
    (bottom-left origin, y at the word bottom).
    """

    def __init__(self, engine: 'PDFEngine', options: Optional[TextProcessorOptions] = None):
        """
        Initialize text processor.

        Args:
            engine: Parent PDFEngine instance
            options: TextProcessorOptions or None for defaults
        """
        super().__init__(engine)
        self.options = options or TextProcessorOptions()

    def extract_words(self, page_index: int) -> List[Dict]:
        """
        Raw pdfplumber words for a page, with font name and size attached.

        Args:
            page_index: 0-based page index
        """
        plumber_page = self.engine.get_plumber_page(page_index)
        return plumber_page.extract_words(
            x_tolerance=self.options.x_tolerance,
            y_tolerance=self.options.y_tolerance,
            keep_blank_chars=self.options.keep_blank_chars,
            use_text_flow=self.options.use_text_flow,
            extra_attrs=["fontname", "size"]
        )

    def extract_page(self, page_index: int) -> ParsedPage:
        """
        Extract one page as a ParsedPage.

        Results are cached on the engine by 1-based page number.

        Args:
            page_index: 0-based page index

        Returns:
            ParsedPage with spans in extraction order
        """
        self.require_ready()

        page_num = page_index + 1
        cached = self.engine.get_cached_page(page_num)
        if cached is not None:
            return cached

        width_pt, height_pt = self.engine.get_page_size(page_index)
        words = self.extract_words(page_index)

        spans = []
        for word in words:
            span = self._word_to_span(word, len(spans), height_pt)
            if span is not None:
                spans.append(span)

        page = ParsedPage(
            pageNumber=page_index,
            widthPt=width_pt,
            heightPt=height_pt,
            spans=tuple(spans)
        )

        logger.debug(f"Page {page_num}: extracted {len(spans)} word spans")
        self.engine.cache_page(page_num, page)
        return page

    def _word_to_span(self, word: Dict, index: int, page_height: float) -> Optional[TextSpan]:
        """Convert a pdfplumber word dict to a page-space span."""
        text = word.get('text', '')
        if not text.strip():
            return None

        x0, x1 = float(word['x0']), float(word['x1'])
        top, bottom = float(word['top']), float(word['bottom'])
        height = bottom - top

        font_size = height
        if self.options.use_font_size and word.get('size'):
            font_size = float(word['size'])

        return TextSpan(
            index=index,
            text=text,
            x=x0,
            y=page_height - bottom,
            width=x1 - x0,
            height=height,
            fontSize=font_size,
            fontName=word.get('fontname')
        )
