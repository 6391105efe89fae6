"""pdfstudio: PDF layout reconstruction and in-place text editing."""

__version__ = "1.0.0"
