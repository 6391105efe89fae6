"""
Processors attached to a PDFEngine, and the registry the engine keeps them in.

A processor is usable between initialize() and cleanup(); the engine drives
both through its registry when the document is opened and closed.
"""

from typing import Dict, List, Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from pdfstudio.engine.pdf_engine import PDFEngine

logger = logging.getLogger(__name__)


class BaseProcessor:
    """Page-level work bound to one open PDFEngine."""

    def __init__(self, engine: 'PDFEngine'):
        self.engine = engine
        self._ready = False

    def initialize(self) -> None:
        self._ready = True

    def cleanup(self) -> None:
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready and self.engine is not None

    def require_ready(self) -> None:
        """Raise RuntimeError unless the processor is attached and initialized."""
        if not self.is_ready:
            raise RuntimeError(f"{type(self).__name__} used outside an open engine")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({'ready' if self._ready else 'idle'})"


class ProcessorRegistry:
    """Named processors, initialized in registration order and cleaned up in reverse."""

    def __init__(self):
        self._processors: Dict[str, BaseProcessor] = {}

    def register(self, name: str, processor: BaseProcessor) -> None:
        if name in self._processors:
            raise ValueError(f"Processor '{name}' is already registered")
        self._processors[name] = processor
        logger.debug(f"Registered {name} processor: {processor!r}")

    def get(self, name: str) -> Optional[BaseProcessor]:
        return self._processors.get(name)

    def initialize_all(self) -> None:
        for processor in self._processors.values():
            processor.initialize()

    def cleanup_all(self) -> None:
        for name, processor in reversed(list(self._processors.items())):
            try:
                processor.cleanup()
            except Exception as e:
                # Keep releasing the remaining processors
                logger.warning(f"Error cleaning up {name} processor: {e}")

    @property
    def names(self) -> List[str]:
        return list(self._processors)

    def __len__(self) -> int:
        return len(self._processors)
