"""
PDF Processing Engine - Core Coordinator

The PDFEngine manages the open document, orchestrates processors, and caches
extracted pages.

Usage:
    >>> from pdfstudio.engine import PDFEngine, EngineConfig
    >>>
    >>> with PDFEngine('document.pdf', config=EngineConfig(render_dpi=96)) as engine:
    ...     page = engine.text_processor.extract_page(0)
"""

import logging
import os
from pathlib import Path
from typing import Optional, Any, Dict, Tuple

import pdfplumber

from pdfstudio.engine.config import EngineConfig
from pdfstudio.engine.base_processor import ProcessorRegistry
from pdfstudio.utils.validation import PdfValidationError, comprehensive_pdf_validation

logger = logging.getLogger(__name__)


class PDFEngine:
    """
    PDF document engine with resource management and processor coordination.

    Example:
        >>> with PDFEngine('document.pdf') as engine:
        ...     total_pages = engine.get_page_count()
    """

    def __init__(self, file_path: str, config: Optional[EngineConfig] = None):
        """
        Initialize PDF engine with file path and optional configuration.

        Note: Document is not opened until entering context manager (__enter__).

        Raises:
            FileNotFoundError: If file does not exist
            PdfValidationError: If configuration is invalid
        """
        self.file_path = str(file_path)
        self.config = config or EngineConfig.default()

        if not os.path.exists(self.file_path):
            raise FileNotFoundError(f"PDF file not found: {self.file_path}")

        if not self.config.validate():
            raise PdfValidationError("Invalid engine configuration")

        self._pdfplumber_doc = None
        self._is_open = False

        self._page_cache: Dict[int, Any] = {}
        self._cache_enabled = self.config.enable_caching

        self._processors = ProcessorRegistry()

        self._page_count: Optional[int] = None

        logger.debug(f"PDFEngine initialized for: {Path(self.file_path).name}")

    def __enter__(self) -> 'PDFEngine':
        """
        Enter context manager - open PDF and initialize processors.

        Raises:
            PdfValidationError: If PDF cannot be opened or is invalid
        """
        try:
            logger.info(f"Opening PDF: {self.file_path}")

            if self.config.validate_on_open:
                self._validate_pdf_file()

            self._pdfplumber_doc = pdfplumber.open(self.file_path)
            self._page_count = len(self._pdfplumber_doc.pages)
            self._is_open = True

            self._initialize_processors()

            logger.info(f"PDF opened successfully: {self._page_count} pages")
            return self

        except PdfValidationError:
            self._cleanup_resources()
            raise
        except Exception as e:
            logger.error(f"Failed to open PDF: {e}")
            self._cleanup_resources()
            raise PdfValidationError(f"Failed to open PDF: {str(e)}")

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager - clean up all resources."""
        logger.info("Closing PDF engine")
        self._cleanup_resources()

        if exc_type is not None:
            logger.error(f"Exception during engine operation: {exc_val}")

        return False

    def _validate_pdf_file(self) -> None:
        """
        Validate PDF file before processing.

        Raises:
            PdfValidationError: If validation fails
        """
        results = comprehensive_pdf_validation(self.file_path, self.config.max_file_size_mb)
        for warning in results['warnings']:
            logger.warning(warning)
        if not results['is_valid']:
            raise PdfValidationError(f"PDF validation failed: {'; '.join(results['errors'])}")

    def _initialize_processors(self) -> None:
        """Initialize all enabled processors."""
        self._processors = ProcessorRegistry()

        if self.config.enable_text_processor:
            from pdfstudio.engine.text_processor import TextProcessor
            self._processors.register('text', TextProcessor(self))

        if self.config.enable_render_processor:
            from pdfstudio.engine.render_processor import RenderProcessor
            self._processors.register('render', RenderProcessor(self, dpi=self.config.render_dpi))

        self._processors.initialize_all()

    def _cleanup_resources(self) -> None:
        """
        Clean up all resources (document, processors, cache).

        This method is idempotent and safe to call multiple times.
        """
        self._processors.cleanup_all()

        if self._pdfplumber_doc is not None:
            try:
                self._pdfplumber_doc.close()
            except Exception as e:
                logger.warning(f"Error closing pdfplumber document: {e}")
            finally:
                self._pdfplumber_doc = None

        self._page_cache.clear()
        self._is_open = False

    def _require_open(self) -> None:
        if not self._is_open:
            raise RuntimeError("Engine not opened - use within context manager")

    def _require_page(self, page_index: int) -> None:
        self._require_open()
        if page_index < 0 or page_index >= self._page_count:
            raise IndexError(f"Page index {page_index} out of bounds (0-{self._page_count-1})")

    # Public API - Document Information

    def get_page_count(self) -> int:
        """
        Get total number of pages in document.

        Raises:
            RuntimeError: If engine not opened
        """
        self._require_open()
        return self._page_count

    def get_page_size(self, page_index: int) -> Tuple[float, float]:
        """
        Get page width and height in points.

        Raises:
            RuntimeError: If engine not opened
            IndexError: If page index out of bounds
        """
        self._require_page(page_index)
        page = self._pdfplumber_doc.pages[page_index]
        return float(page.width), float(page.height)

    def get_plumber_page(self, page_index: int):
        """
        Access a pdfplumber page (for processors).

        Raises:
            RuntimeError: If engine not opened
            IndexError: If page index out of bounds
        """
        self._require_page(page_index)
        return self._pdfplumber_doc.pages[page_index]

    # Public API - Page Caching

    def get_cached_page(self, page_num: int) -> Optional[Any]:
        """Get cached page data for a 1-based page number, if available."""
        if not self._cache_enabled:
            return None

        return self._page_cache.get(page_num)

    def cache_page(self, page_num: int, page_data: Any) -> None:
        """Cache page data for a 1-based page number."""
        if not self._cache_enabled or self.config.max_cache_pages == 0:
            return

        # Evict the oldest entry when full
        if len(self._page_cache) >= self.config.max_cache_pages:
            oldest_key = next(iter(self._page_cache))
            del self._page_cache[oldest_key]

        self._page_cache[page_num] = page_data

    def clear_cache(self) -> None:
        """Clear all cached page data."""
        self._page_cache.clear()

    # Public API - Processor Access

    @property
    def text_processor(self):
        """Access TextProcessor instance."""
        processor = self._processors.get('text')
        if processor is None:
            raise RuntimeError("TextProcessor not enabled or not yet initialized")
        return processor

    @property
    def render_processor(self):
        """Access RenderProcessor instance."""
        processor = self._processors.get('render')
        if processor is None:
            raise RuntimeError("RenderProcessor not enabled or not yet initialized")
        return processor

    # Status and Debugging

    @property
    def is_open(self) -> bool:
        """Check if engine is currently open."""
        return self._is_open

    def get_status(self) -> Dict[str, Any]:
        """Get engine status information."""
        return {
            'is_open': self._is_open,
            'file_path': self.file_path,
            'page_count': self._page_count,
            'cache_enabled': self._cache_enabled,
            'cached_pages': len(self._page_cache),
            'processors': self._processors.names,
            'config': self.config.to_dict()
        }

    def __repr__(self) -> str:
        """String representation for debugging."""
        status = "open" if self._is_open else "closed"
        pages = f"{self._page_count} pages" if self._page_count else "unknown pages"
        return f"PDFEngine({Path(self.file_path).name}, {status}, {pages})"
