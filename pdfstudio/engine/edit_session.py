"""
Edit Session

Owns a ParsedDocument and drives the per-page edit cycle:

    Viewing --enter_edit_mode--> Editing --leave_edit_mode/navigate--> Viewing
    Viewing | Editing --close--> Closed

Leaving Editing always runs edit capture first and replaces the page in the
owned document. Nothing here holds a reference to a UI control: regions go
out as plain records and edited strings come back in by region index.
"""

import logging
from typing import List, Optional, Tuple

from pdfstudio.engine.config import LayoutConfig
from pdfstudio.models.pdf_types import (
    EditableRegion,
    ParsedDocument,
    ParsedPage,
    SessionState,
    SynthesizedParagraph,
)
from pdfstudio.processors.edit_capture import capture_page
from pdfstudio.processors.text_synthesis import build_editable_regions, synthesize_page
from pdfstudio.utils.validation import NoPageLoadedError, SessionStateError

logger = logging.getLogger(__name__)


class EditSession:
    """
    Edit session over one document.

    The host must serialize calls for a given session; the session itself
    keeps no locks.

    Example:
        >>> session = EditSession(document)
        >>> regions = session.enter_edit_mode(1224, 1584)
        >>> session.update_region(0, "New heading")
        >>> document = session.leave_edit_mode()
    """

    def __init__(self, document: ParsedDocument, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig.default()
        self._document: Optional[ParsedDocument] = document
        self._state = SessionState.VIEWING
        self._page_index = 0

        # Ephemeral groupings, only populated while Editing
        self._paragraphs: Tuple[SynthesizedParagraph, ...] = ()
        self._texts: List[str] = []
        self._raster_size: Optional[Tuple[int, int]] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def document(self) -> ParsedDocument:
        """The owned document, including every captured page."""
        if self._document is None:
            raise NoPageLoadedError("Session is closed")
        return self._document

    @property
    def current_page(self) -> ParsedPage:
        """
        The active page.

        Raises:
            NoPageLoadedError: If the session is closed or the document has no pages
        """
        document = self.document
        if not document.pages:
            raise NoPageLoadedError("Document has no pages")
        return document.pages[self._page_index]

    @property
    def edited_texts(self) -> Tuple[str, ...]:
        return tuple(self._texts)

    def enter_edit_mode(self, raster_width: int, raster_height: int) -> List[EditableRegion]:
        """
        Viewing -> Editing. Builds lines, paragraphs, geometry and strings fresh.

        Args:
            raster_width: Pixel width of the rendered page
            raster_height: Pixel height of the rendered page

        Returns:
            Editable regions for the current page

        Raises:
            SessionStateError: If not Viewing
            NoPageLoadedError: If there is no active page
            InvalidGeometryError: If page or raster sizes are not positive
        """
        self._require_state(SessionState.VIEWING, "enter edit mode")
        page = self.current_page

        paragraphs = synthesize_page(page, self.config)
        regions = build_editable_regions(
            page, raster_width, raster_height, self.config, paragraphs=paragraphs
        )

        self._paragraphs = paragraphs
        self._texts = [paragraph.text for paragraph in paragraphs]
        self._raster_size = (raster_width, raster_height)
        self._state = SessionState.EDITING

        logger.info(f"Editing page {self._page_index + 1}: {len(regions)} regions")
        return regions

    def update_region(self, index: int, text: str) -> None:
        """Record the edited string for one region."""
        self._require_state(SessionState.EDITING, "update a region")
        if index < 0 or index >= len(self._texts):
            raise IndexError(f"Region index {index} out of bounds (0-{len(self._texts) - 1})")
        self._texts[index] = text

    def leave_edit_mode(self) -> ParsedDocument:
        """
        Editing -> Viewing. Captures edits into the owned document first.

        Returns:
            The updated document

        Raises:
            NoPageLoadedError: If no edit geometry has been established
        """
        if self._state is not SessionState.EDITING:
            raise NoPageLoadedError(
                f"Cannot capture edits while {self._state.value}: no edit geometry established"
            )
        self._capture()
        self._state = SessionState.VIEWING
        return self.document

    def navigate(self, page_index: int) -> Optional[List[EditableRegion]]:
        """
        Switch to another page (index clamped to the document).

        When Editing, the current page is captured and the edit surface is
        rebuilt for the new page at the same raster size.

        Returns:
            New regions when still Editing, otherwise None
        """
        if self._state is SessionState.CLOSED:
            raise NoPageLoadedError("Session is closed")

        target = max(0, min(page_index, self.document.page_count - 1))

        if self._state is SessionState.EDITING:
            raster_width, raster_height = self._raster_size
            self.leave_edit_mode()
            self._page_index = target
            return self.enter_edit_mode(raster_width, raster_height)

        self._page_index = target
        return None

    def close(self) -> Optional[ParsedDocument]:
        """
        Any state -> Closed. Captures pending edits before discarding state.

        Returns:
            The final document, or None if already closed
        """
        if self._state is SessionState.CLOSED:
            return None

        if self._state is SessionState.EDITING:
            self._capture()

        document = self._document
        self._discard_groupings()
        self._document = None
        self._state = SessionState.CLOSED
        logger.info("Edit session closed")
        return document

    def _capture(self) -> None:
        """Replace the current page with one captured span per paragraph."""
        page = self.current_page
        captured = capture_page(page, self._paragraphs, self._texts)
        self._document = self._document.replace_page(self._page_index, captured)
        logger.debug(f"Captured page {self._page_index + 1}: {len(captured.spans)} spans")
        self._discard_groupings()

    def _discard_groupings(self) -> None:
        self._paragraphs = ()
        self._texts = []
        self._raster_size = None

    def _require_state(self, expected: SessionState, action: str) -> None:
        if self._state is SessionState.CLOSED:
            raise NoPageLoadedError(f"Cannot {action}: session is closed")
        if self._state is not expected:
            raise SessionStateError(f"Cannot {action} while {self._state.value}")

    def __repr__(self) -> str:
        return f"EditSession(page {self._page_index + 1}, {self._state.value})"
