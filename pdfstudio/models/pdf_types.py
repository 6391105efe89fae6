"""
Pydantic models for the PDF Studio layout engine and API.

Page-space values are PDF points with the origin at the bottom-left corner;
raster values are pixels with the origin at the top-left corner.
All layout snapshots are frozen: an edit produces new values, never patches.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple
from enum import Enum


class SessionState(str, Enum):
    """States of a page edit session"""
    VIEWING = "viewing"
    EDITING = "editing"
    CLOSED = "closed"


class FrozenModel(BaseModel):
    """Base class for immutable layout values"""
    model_config = ConfigDict(frozen=True)


# Document model
class TextSpan(FrozenModel):
    """Word (or captured paragraph) box with text, in page-space points"""
    index: int
    text: str
    x: float
    y: float  # Word bottom, used as the baseline
    width: float
    height: float
    fontSize: float
    fontName: Optional[str] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height


class ParsedPage(FrozenModel):
    """Snapshot of one page: size in points plus spans in extraction order"""
    pageNumber: int  # 0-based
    widthPt: float
    heightPt: float
    spans: Tuple[TextSpan, ...] = ()

    def with_spans(self, spans) -> 'ParsedPage':
        """Return a new page whose span list is replaced wholesale."""
        return ParsedPage(
            pageNumber=self.pageNumber,
            widthPt=self.widthPt,
            heightPt=self.heightPt,
            spans=tuple(spans)
        )


class ParsedDocument(FrozenModel):
    """Ordered pages; the presentation layer indexes by position"""
    pages: Tuple[ParsedPage, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def replace_page(self, page_index: int, page: ParsedPage) -> 'ParsedDocument':
        """Return a new document with the page at ``page_index`` replaced."""
        if page_index < 0 or page_index >= len(self.pages):
            raise IndexError(f"Page index {page_index} out of bounds (0-{len(self.pages) - 1})")
        pages = list(self.pages)
        pages[page_index] = page
        return ParsedDocument(pages=tuple(pages))


# Ephemeral groupings
class TextLine(FrozenModel):
    """Spans sharing a baseline band, sorted left to right"""
    spans: Tuple[TextSpan, ...]
    baseline: float  # y of the first span placed into the line

    @property
    def left(self) -> float:
        return self.spans[0].x

    @property
    def min_y(self) -> float:
        return min(span.y for span in self.spans)

    @property
    def max_top(self) -> float:
        return max(span.top for span in self.spans)


class TextParagraph(FrozenModel):
    """Flat spans of adjacent lines sharing indentation and proximity"""
    spans: Tuple[TextSpan, ...]


class ParagraphGeometry(FrozenModel):
    """Bounding box and representative font size of a paragraph, in points"""
    leftPt: float
    topPt: float
    widthPt: float
    heightPt: float
    baseFontPt: float

    @property
    def bottomPt(self) -> float:
        return self.topPt - self.heightPt

    def inset(self, margin: float) -> 'ParagraphGeometry':
        """Shrink the box symmetrically, never past its center."""
        dx = min(margin, self.widthPt / 2)
        dy = min(margin, self.heightPt / 2)
        return ParagraphGeometry(
            leftPt=self.leftPt + dx,
            topPt=self.topPt - dy,
            widthPt=self.widthPt - 2 * dx,
            heightPt=self.heightPt - 2 * dy,
            baseFontPt=self.baseFontPt
        )


class PixelRect(FrozenModel):
    """Rectangle in raster space (origin top-left, Y down)"""
    left: float
    top: float
    width: float
    height: float


class SynthesizedParagraph(FrozenModel):
    """Display string plus the retained geometry and spans used by edit capture"""
    index: int
    text: str
    geometry: ParagraphGeometry
    spans: Tuple[TextSpan, ...]


class EditableRegion(FrozenModel):
    """What the presentation layer draws: a pixel rectangle and its string"""
    index: int
    text: str
    rect: PixelRect
    geometry: ParagraphGeometry
    fontSizePx: float


# API models
class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    detail: Optional[str] = None


class EditRegionsRequest(BaseModel):
    """Request model for building editable regions for one page"""
    page: ParsedPage
    rasterWidth: Optional[int] = Field(None, gt=0, description="Pixel width of the rendered page, given together with rasterHeight")
    rasterHeight: Optional[int] = Field(None, gt=0, description="Pixel height of the rendered page, given together with rasterWidth")
    dpi: int = Field(144, ge=1, le=600, description="Render resolution, used when raster size is omitted")


class EditRegionsResponse(BaseModel):
    """Editable regions for one page plus the scale used to place them"""
    pageNumber: int
    scale: float
    regions: List[EditableRegion]


class RegionEdit(BaseModel):
    """Edited string for one region"""
    index: int = Field(..., ge=0, description="Region index as returned by /edit-regions")
    text: str


class ApplyEditsRequest(BaseModel):
    """Request model for capturing edits back into page-space spans"""
    page: ParsedPage
    edits: List[RegionEdit] = Field(default_factory=list, description="Regions not listed keep their synthesized text")


class ExportRequest(BaseModel):
    """Request model for writing a document to PDF"""
    document: ParsedDocument
    filename: str = "edited.pdf"
