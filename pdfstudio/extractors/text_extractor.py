"""
PDF Document Extractor

Builds a ParsedDocument snapshot (word spans in page space) from a PDF file.

Uses PDFEngine + TextProcessor for all extraction operations.
"""

import logging
from typing import Optional, TYPE_CHECKING

from pdfstudio.models.pdf_types import ParsedDocument
from pdfstudio.utils.validation import PdfValidationError

if TYPE_CHECKING:
    from pdfstudio.engine.config import EngineConfig, PageRange

logger = logging.getLogger(__name__)


def extract_document(
    file_path: str,
    page_range: Optional['PageRange'] = None,
    config: Optional['EngineConfig'] = None
) -> ParsedDocument:
    """
    Extract word spans for a range of pages.

    Args:
        file_path: Path to the PDF file
        page_range: PageRange (1-based) or None for all pages
        config: EngineConfig or None for defaults

    Returns:
        ParsedDocument with one ParsedPage per extracted page

    Raises:
        PdfValidationError: If the file cannot be opened or extracted
    """
    from pdfstudio.engine import PDFEngine, EngineConfig, PageRange

    engine_config = config or EngineConfig(enable_render_processor=False)
    page_range = page_range or PageRange.all_pages()

    try:
        with PDFEngine(file_path, config=engine_config) as engine:
            text_processor = engine.text_processor

            total_pages = engine.get_page_count()
            page_numbers = page_range.to_page_numbers(total_pages)

            logger.info(f"Processing PDF: {total_pages} total pages, extracting {page_range}")

            pages = []
            for page_num in page_numbers:
                logger.debug(f"Processing page {page_num}")
                pages.append(text_processor.extract_page(page_num - 1))

            document = ParsedDocument(pages=tuple(pages))
            span_total = sum(len(page.spans) for page in document.pages)
            logger.info(f"Extraction complete: {document.page_count} pages, {span_total} spans")
            return document

    except PdfValidationError:
        raise
    except Exception as e:
        logger.error(f"PDF extraction failed: {e}", exc_info=True)
        raise PdfValidationError(f"PDF extraction failed: {str(e)}")

