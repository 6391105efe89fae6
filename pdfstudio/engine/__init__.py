"""
PDF Processing Engine

Core engine module for coordinating PDF operations.
Contains the PDFEngine class and its processors. The edit session lives in
``pdfstudio.engine.edit_session``.
"""

__version__ = "1.0.0"

from pdfstudio.engine.pdf_engine import PDFEngine
from pdfstudio.engine.config import EngineConfig, LayoutConfig, PageRange
from pdfstudio.engine.base_processor import BaseProcessor
from pdfstudio.engine.text_processor import TextProcessor, TextProcessorOptions
from pdfstudio.engine.render_processor import RenderProcessor

__all__ = [
    'PDFEngine',
    'EngineConfig',
    'LayoutConfig',
    'PageRange',
    'BaseProcessor',
    'TextProcessor',
    'TextProcessorOptions',
    'RenderProcessor',
]
