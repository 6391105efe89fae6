"""
PDF Document Writer

Serializes a ParsedDocument to a new PDF: one page per ParsedPage at its
original size, each span drawn as text at its page-space position.

Spans carrying several lines (captured paragraphs) are drawn line by line,
first line on the span's y, then moving down by the leading.
"""

import io
import logging
from typing import Dict, List, Tuple

import pikepdf
from pikepdf import Dictionary, Name, Operator, Pdf, String, unparse_content_stream

from pdfstudio.constants.pdf_keys import (
    FONT_RESOURCE_PREFIX,
    KEY_BASE_FONT,
    KEY_ENCODING,
    KEY_FONT,
    KEY_RESOURCES,
    KEY_SUBTYPE,
    KEY_TYPE,
    VAL_FONT,
    VAL_TYPE1,
    VAL_WIN_ANSI_ENCODING,
)
from pdfstudio.constants.pdf_operators import (
    OP_BEGIN_TEXT,
    OP_END_TEXT,
    OP_MOVE_TEXT,
    OP_NEXT_LINE,
    OP_RESTORE_STATE,
    OP_SAVE_STATE,
    OP_SET_FONT,
    OP_SET_GRAY_FILL,
    OP_SET_LEADING,
    OP_SHOW_TEXT,
)
from pdfstudio.models.pdf_types import ParsedDocument, ParsedPage, TextSpan
from pdfstudio.processors.text_synthesis import LINE_BREAK
from pdfstudio.utils.font_mapping import map_pdf_font_to_base14

logger = logging.getLogger(__name__)

MIN_FONT_SIZE_PT = 1.0
LEADING_FACTOR = 1.2
TEXT_ENCODING = "cp1252"  # Matches /WinAnsiEncoding closely enough for the standard 14 fonts


def write_document(document: ParsedDocument) -> bytes:
    """
    Write a document to PDF bytes.

    Args:
        document: Document snapshot, typically after edit capture

    Returns:
        The new PDF as bytes
    """
    pdf = pikepdf.new()
    font_objects: Dict[str, pikepdf.Object] = {}

    for page in document.pages:
        _write_page(pdf, page, font_objects)

    buffer = io.BytesIO()
    pdf.save(buffer)
    result = buffer.getvalue()

    logger.info(f"Wrote PDF: {document.page_count} pages, {len(font_objects)} fonts, {len(result)} bytes")
    return result


def _write_page(pdf: Pdf, page: ParsedPage, font_objects: Dict[str, pikepdf.Object]) -> None:
    """Append one page with its spans drawn as text."""
    pdf_page = pdf.add_blank_page(page_size=(page.widthPt, page.heightPt))

    resource_names: Dict[str, Name] = {}
    instructions: List[Tuple[list, Operator]] = []

    for span in page.spans:
        if not span.text:
            continue
        lines = span.text.split(LINE_BREAK)

        base_font = map_pdf_font_to_base14(span.fontName or "")
        if base_font not in resource_names:
            resource_names[base_font] = Name(f"{FONT_RESOURCE_PREFIX}{len(resource_names) + 1}")
            if base_font not in font_objects:
                font_objects[base_font] = _make_font(pdf, base_font)

        instructions.extend(_span_instructions(span, resource_names[base_font], lines))

    if resource_names:
        pdf_page.obj[KEY_RESOURCES][KEY_FONT] = Dictionary({
            str(name): font_objects[base_font] for base_font, name in resource_names.items()
        })

    pdf_page.Contents = pdf.make_stream(unparse_content_stream(instructions))
    logger.debug(f"Page {page.pageNumber + 1}: wrote {len(page.spans)} spans")


def _make_font(pdf: Pdf, base_font: str) -> pikepdf.Object:
    """Create an indirect standard 14 Type1 font dictionary."""
    return pdf.make_indirect(Dictionary({
        KEY_TYPE: Name(VAL_FONT),
        KEY_SUBTYPE: Name(VAL_TYPE1),
        KEY_BASE_FONT: Name(f"/{base_font}"),
        KEY_ENCODING: Name(VAL_WIN_ANSI_ENCODING),
    }))


def _span_instructions(span: TextSpan, font_name: Name, lines: List[str]) -> List[Tuple[list, Operator]]:
    """Content stream instructions drawing one span, isolated in q/Q."""
    font_size = max(MIN_FONT_SIZE_PT, span.fontSize)
    leading = font_size * LEADING_FACTOR

    instructions = [
        ([], Operator(OP_SAVE_STATE)),
        ([0], Operator(OP_SET_GRAY_FILL)),
        ([], Operator(OP_BEGIN_TEXT)),
        ([font_name, _num(font_size)], Operator(OP_SET_FONT)),
        ([_num(leading)], Operator(OP_SET_LEADING)),
        ([_num(span.x), _num(span.y)], Operator(OP_MOVE_TEXT)),
    ]

    for line_index, line in enumerate(lines):
        if line_index > 0:
            instructions.append(([], Operator(OP_NEXT_LINE)))
        if line:
            instructions.append(([_encode_text(line)], Operator(OP_SHOW_TEXT)))

    instructions.append(([], Operator(OP_END_TEXT)))
    instructions.append(([], Operator(OP_RESTORE_STATE)))
    return instructions


def _encode_text(text: str) -> String:
    """Encode for WinAnsi; unmappable characters become '?'."""
    return String(text.encode(TEXT_ENCODING, errors='replace'))


def _num(value: float) -> float:
    return float(value)


SAMPLE_PAGE_SIZE = (612.0, 792.0)
SAMPLE_LINES = (
    # text, font, size, distance of the baseline from the page top
    ("Hello from PDF Studio", "Helvetica-Bold", 20.0, 100.0),
    ("You created this PDF and opened it here automatically.", "Helvetica", 12.0, 140.0),
)
SAMPLE_LEFT_PT = 60.0


def sample_document() -> ParsedDocument:
    """One Letter page with a title and a body line, for trying the editor without a file."""
    width_pt, height_pt = SAMPLE_PAGE_SIZE
    spans = [
        TextSpan(
            index=index,
            text=text,
            x=SAMPLE_LEFT_PT,
            y=height_pt - from_top,
            width=len(text) * size * 0.5,
            height=size,
            fontSize=size,
            fontName=font_name
        )
        for index, (text, font_name, size, from_top) in enumerate(SAMPLE_LINES)
    ]
    page = ParsedPage(pageNumber=0, widthPt=width_pt, heightPt=height_pt, spans=tuple(spans))
    return ParsedDocument(pages=(page,))
