"""
Configuration system for the PDF Studio engine.

Provides structured configuration using dataclasses with clear defaults,
type safety, and backward compatibility with dict-based configs.
"""

from dataclasses import dataclass, fields
from typing import Optional, Dict, Any, List, Mapping
import json
import logging
import os

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Tunable heuristics of the layout reconstruction engine.

    All distances are PDF points. Instances are immutable and shared between
    calls; derive a variant with from_dict or dataclasses.replace.

    Example:
        >>> config = LayoutConfig(max_vertical_gap_pt=24.0)
        >>> paragraphs = cluster_page(page.spans, config)
    """
    # Line clustering
    baseline_tolerance_pt: float = 3.0  # Minimum baseline tolerance
    height_tolerance_factor: float = 0.35  # Tolerance grows with word height

    # Paragraph clustering
    indent_tolerance_pt: float = 10.0  # Left edges closer than this share an indent
    max_vertical_gap_pt: float = 18.0  # Lines closer than this belong together

    # Text synthesis
    char_width_factor: float = 0.5  # Approximate char width as a fraction of font size
    min_char_width_pt: float = 0.5
    space_width_factor: float = 0.6  # Space width as a fraction of char width
    max_spaces: int = 10
    default_font_pt: float = 10.0  # Used when no positive font size is known
    bbox_padding_pt: float = 0.5  # Horizontal padding around paragraph boxes
    min_box_pt: float = 8.0

    # Presentation
    region_margin_pt: float = 6.0  # Inward margin of editable regions

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all values are valid, False otherwise
        """
        non_negative = (
            'baseline_tolerance_pt', 'height_tolerance_factor', 'indent_tolerance_pt',
            'max_vertical_gap_pt', 'bbox_padding_pt', 'min_box_pt', 'region_margin_pt'
        )
        for name in non_negative:
            if getattr(self, name) < 0:
                logger.error(f"{name} must be non-negative")
                return False

        positive = ('char_width_factor', 'min_char_width_pt', 'space_width_factor', 'default_font_pt')
        for name in positive:
            if getattr(self, name) <= 0:
                logger.error(f"{name} must be positive")
                return False

        if self.max_spaces < 1:
            logger.error("max_spaces must be at least 1")
            return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'LayoutConfig':
        """
        Create LayoutConfig from dictionary.

        Unknown keys are ignored with a warning.

        Raises:
            ValueError: If the resulting configuration is invalid
        """
        valid_keys = {f.name for f in fields(cls)}

        filtered_config = {}
        for key, value in (config or {}).items():
            if key in valid_keys:
                filtered_config[key] = value
            else:
                logger.warning(f"Unknown layout config key '{key}' will be ignored")

        layout_config = cls(**filtered_config)
        if not layout_config.validate():
            raise ValueError("Invalid LayoutConfig")
        return layout_config

    @classmethod
    def default(cls) -> 'LayoutConfig':
        """Create configuration with default values."""
        return cls()


DEFAULT_LAYOUT_CONFIG = LayoutConfig()


@dataclass
class EngineConfig:
    """
    Central configuration for PDFEngine initialization.

    Example:
        >>> config = EngineConfig(render_dpi=96, max_cache_pages=20)
        >>> engine = PDFEngine(file_path, config=config)
    """

    # Resource management
    enable_caching: bool = True
    max_cache_pages: int = 10

    # Processing options
    enable_text_processor: bool = True
    enable_render_processor: bool = True
    render_dpi: int = 144

    # Layout heuristics (as dictionary for flexibility)
    layout_options: Optional[Dict[str, Any]] = None

    # Limits
    max_file_size_mb: int = 50

    # Validation
    validate_on_open: bool = True

    # Logging
    log_level: str = "INFO"

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all values are valid, False otherwise
        """
        if self.max_cache_pages < 0:
            logger.error("max_cache_pages must be non-negative")
            return False

        if self.render_dpi < 1:
            logger.error("render_dpi must be at least 1")
            return False

        if self.max_file_size_mb < 1:
            logger.error("max_file_size_mb must be at least 1 MB")
            return False

        if not any([self.enable_text_processor, self.enable_render_processor]):
            logger.error("At least one processor must be enabled")
            return False

        return True

    @property
    def layout(self) -> LayoutConfig:
        """Layout heuristics resolved from ``layout_options``."""
        return LayoutConfig.from_dict(self.layout_options or {})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Useful for serialization, logging, and debugging.
        """
        return {
            'enable_caching': self.enable_caching,
            'max_cache_pages': self.max_cache_pages,
            'enable_text_processor': self.enable_text_processor,
            'enable_render_processor': self.enable_render_processor,
            'render_dpi': self.render_dpi,
            'layout_options': dict(self.layout_options or {}),
            'max_file_size_mb': self.max_file_size_mb,
            'validate_on_open': self.validate_on_open,
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EngineConfig':
        """
        Create EngineConfig from dictionary.

        Unknown keys are ignored with a warning.

        Args:
            config: Dictionary of configuration values

        Returns:
            EngineConfig instance
        """
        valid_keys = {f.name for f in fields(cls)}

        filtered_config = {}
        for key, value in config.items():
            if key in valid_keys:
                filtered_config[key] = value
            else:
                logger.warning(f"Unknown config key '{key}' will be ignored")

        return cls(**filtered_config)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'EngineConfig':
        """
        Create EngineConfig from environment variables.

        Reads LOG_LEVEL, PDFSTUDIO_RENDER_DPI, PDFSTUDIO_MAX_FILE_SIZE_MB and
        PDFSTUDIO_LAYOUT (a JSON object of LayoutConfig fields). Unset
        variables keep their defaults.

        Raises:
            ValueError: If a variable cannot be parsed or the result is invalid
        """
        environ = os.environ if environ is None else environ
        config = cls(log_level=environ.get("LOG_LEVEL", "INFO").upper())

        if "PDFSTUDIO_RENDER_DPI" in environ:
            config.render_dpi = int(environ["PDFSTUDIO_RENDER_DPI"])
        if "PDFSTUDIO_MAX_FILE_SIZE_MB" in environ:
            config.max_file_size_mb = int(environ["PDFSTUDIO_MAX_FILE_SIZE_MB"])
        if "PDFSTUDIO_LAYOUT" in environ:
            layout_options = json.loads(environ["PDFSTUDIO_LAYOUT"])
            if not isinstance(layout_options, dict):
                raise ValueError("PDFSTUDIO_LAYOUT must be a JSON object")
            config.layout_options = layout_options

        if not config.validate():
            raise ValueError(f"Invalid engine configuration from environment: {config!r}")
        # Fails early on bad layout options
        config.layout
        return config

    @classmethod
    def default(cls) -> 'EngineConfig':
        """Create configuration with default values."""
        return cls()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"EngineConfig("
            f"caching={self.enable_caching}, "
            f"text={self.enable_text_processor}, "
            f"render={self.enable_render_processor}, "
            f"dpi={self.render_dpi})"
        )


@dataclass
class PageRange:
    """
    Represents a range of pages to process in a PDF document.

    Uses 1-based page numbering consistent with PDF viewers.

    Example:
        >>> page_range = PageRange(start=5, end=None)  # page 5 to the end
        >>> page_range = PageRange.single_page(7)
    """

    start: int  # 1-based page number
    end: Optional[int] = None  # None means "to end of document"

    def __post_init__(self):
        """Validate page range on construction."""
        if self.start < 1:
            raise ValueError(f"start page must be >= 1, got {self.start}")

        if self.end is not None:
            if self.end < 1:
                raise ValueError(f"end page must be >= 1, got {self.end}")
            if self.end < self.start:
                raise ValueError(
                    f"end page ({self.end}) must be >= start page ({self.start})"
                )

    def to_page_numbers(self, total_pages: int) -> List[int]:
        """
        Convert range to explicit list of page numbers.

        Example:
            >>> PageRange(start=2, end=5).to_page_numbers(10)
            [2, 3, 4, 5]
        """
        if total_pages < 1:
            return []

        start = max(1, min(self.start, total_pages))
        end = total_pages if self.end is None else min(self.end, total_pages)

        if start > end:
            return []

        return list(range(start, end + 1))

    @classmethod
    def all_pages(cls) -> 'PageRange':
        """Create range representing all pages in document."""
        return cls(start=1, end=None)

    @classmethod
    def single_page(cls, page_num: int) -> 'PageRange':
        """Create range for a single 1-based page."""
        return cls(start=page_num, end=page_num)

    def __repr__(self) -> str:
        """String representation for debugging."""
        if self.end is None:
            return f"PageRange({self.start}→end)"
        elif self.start == self.end:
            return f"PageRange(page {self.start})"
        else:
            return f"PageRange({self.start}→{self.end})"
