"""Coordinate transforms between PDF page space and raster space.

Page space: points, origin bottom-left, Y up.
Raster space: pixels, origin top-left, Y down.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from pdfstudio.models.pdf_types import ParagraphGeometry, ParsedPage, PixelRect
from pdfstudio.utils.validation import InvalidGeometryError, NoPageLoadedError

POINTS_PER_INCH = 72.0
EDITOR_FONT_SCALE = 0.9
MIN_EDITOR_FONT_PX = 8.0


@dataclass(frozen=True)
class PageTransform:
    """Maps one page onto a raster rendered at matching aspect ratio.

    A single scale serves both axes; the renderer is trusted to keep the
    page's aspect ratio.
    """
    scale: float  # Pixels per point
    raster_width: float
    raster_height: float

    @classmethod
    def for_page(
        cls, page: Optional[ParsedPage], raster_width: float, raster_height: float
    ) -> 'PageTransform':
        """Build the transform for ``page`` rendered at ``raster_width`` x ``raster_height``.

        Raises:
            NoPageLoadedError: If no page is given
            InvalidGeometryError: If page or raster dimensions are not positive
        """
        if page is None:
            raise NoPageLoadedError("No page loaded")

        _require_positive("page width", page.widthPt)
        _require_positive("page height", page.heightPt)
        _require_positive("raster width", raster_width)
        _require_positive("raster height", raster_height)

        return cls(
            scale=raster_width / page.widthPt,
            raster_width=float(raster_width),
            raster_height=float(raster_height)
        )

    def span_to_pixels(self, x: float, y: float, width: float, height: float) -> PixelRect:
        """Convert a bottom-left anchored box to a top-left raster rectangle."""
        return PixelRect(
            left=x * self.scale,
            top=self.raster_height - (y * self.scale + height * self.scale),
            width=width * self.scale,
            height=height * self.scale
        )

    def geometry_to_pixels(self, geometry: ParagraphGeometry) -> PixelRect:
        return self.span_to_pixels(
            geometry.leftPt, geometry.bottomPt, geometry.widthPt, geometry.heightPt
        )

    def font_size_to_pixels(self, font_pt: float) -> float:
        """Editor font size for text drawn over the raster."""
        return max(MIN_EDITOR_FONT_PX, font_pt * self.scale * EDITOR_FONT_SCALE)

    def point_to_page(self, px: float, py: float) -> Tuple[float, float]:
        """Inverse mapping of a raster point back to page space."""
        return px / self.scale, (self.raster_height - py) / self.scale


def raster_size_for_dpi(page: ParsedPage, dpi: float) -> Tuple[int, int]:
    """Pixel size of ``page`` rendered at ``dpi``."""
    _require_positive("page width", page.widthPt)
    _require_positive("page height", page.heightPt)
    _require_positive("dpi", dpi)
    return (
        int(round(page.widthPt * dpi / POINTS_PER_INCH)),
        int(round(page.heightPt * dpi / POINTS_PER_INCH))
    )


def _require_positive(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value <= 0:
        raise InvalidGeometryError(f"{name} must be positive, got {value}")
