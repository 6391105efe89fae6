"""PDF Studio Python Server"""

import sys
import logging
import asyncio
import hashlib
from typing import Optional

import uvicorn
from fastapi import FastAPI, UploadFile, File, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from rich.console import Console
from rich.logging import RichHandler

from pdfstudio.engine.config import EngineConfig, PageRange
from pdfstudio.models.pdf_types import (
    ApplyEditsRequest,
    EditRegionsRequest,
    EditRegionsResponse,
    ExportRequest,
    ParsedDocument,
    ParsedPage,
)
from pdfstudio.extractors.page_renderer import render_page
from pdfstudio.extractors.pdf_writer import sample_document, write_document
from pdfstudio.extractors.text_extractor import extract_document
from pdfstudio.processors.edit_capture import apply_region_edits
from pdfstudio.processors.text_synthesis import build_editable_regions
from pdfstudio.utils.endpoint_decorators import handle_layout_errors, handle_pdf_processing
from pdfstudio.utils.pdf_transforms import PageTransform, raster_size_for_dpi
from pdfstudio.utils.validation import validate_processing_environment

API_VERSION = "1.0.0"
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
DEFAULT_CACHE_MAX_AGE = 3600
DEFAULT_TIMEOUT_SECONDS = 300
MIN_TIMEOUT_SECONDS = 30
MAX_TIMEOUT_SECONDS = 600
MAX_RENDER_DPI = 600

logger = logging.getLogger("rich")

server_config = EngineConfig.from_env()
layout_config = server_config.layout

app = FastAPI(
    title="PDF Studio API",
    description="Reconstruct editable paragraphs from PDF pages and write edits back",
    version=API_VERSION
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "message": "PDF Studio API",
        "version": API_VERSION,
        "features": [
            "Word extraction to page-space spans",
            "Page rasterization for the editing surface",
            "Line and paragraph reconstruction",
            "Editable region layout in raster space",
            "Edit capture back into page-space spans",
            "PDF export of edited documents",
            "Sample document creation"
        ]
    }

@app.get("/health")
async def health_check():
    """Health check with dependency verification"""
    try:
        import PIL
        import pdfplumber
        import pikepdf
        import numpy
        import pydantic

        env_ok, env_error = validate_processing_environment()

        return {
            "status": "healthy" if env_ok else "degraded",
            "version": API_VERSION,
            "environment": env_error or "ok",
            "features": {
                "text_extraction": "pdfplumber",
                "rendering": "pdfplumber + Pillow",
                "layout": "numpy",
                "pdf_writing": "pikepdf"
            },
            "dependencies": {
                "PIL": PIL.__version__,
                "pdfplumber": pdfplumber.__version__,
                "pikepdf": pikepdf.__version__,
                "numpy": numpy.__version__,
                "pydantic": pydantic.VERSION
            }
        }
    except ImportError as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": f"Missing dependency: {str(e)}"
            }
        )

@app.post("/parse-pdf", response_model=ParsedDocument)
@handle_pdf_processing
async def parse_pdf(
    *,
    request: Request,
    file: UploadFile = File(...),
    start_page: Optional[int] = Query(1, ge=1, description="Starting page number (1-based)"),
    end_page: Optional[int] = Query(None, ge=1, description="Ending page number (1-based), None for all pages"),
    processing_timeout: Optional[int] = Query(DEFAULT_TIMEOUT_SECONDS, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS, description="Processing timeout in seconds")
):
    """
    Extract word spans from a PDF.

    **Coordinates:**
    - Points, origin at the bottom-left corner of each page
    - `y` is the word bottom, used as the baseline

    **Returns:**
    - `ParsedDocument` with one page per extracted page, spans in extraction order
    """
    temp_file_path = request.state.temp_file_path

    page_range = PageRange(start=start_page or 1, end=end_page)
    logger.info(f"Parsing PDF {file.filename} ({page_range})")

    document = await asyncio.to_thread(extract_document, temp_file_path, page_range)

    logger.info(f"Successfully parsed {document.page_count} pages")
    return document

@app.post("/render-page")
@handle_pdf_processing
async def render_pdf_page(
    *,
    request: Request,
    file: UploadFile = File(...),
    page_number: int = Query(1, ge=1, description="Page number (1-based)"),
    dpi: int = Query(server_config.render_dpi, ge=1, le=MAX_RENDER_DPI, description="Render resolution"),
    processing_timeout: Optional[int] = Query(DEFAULT_TIMEOUT_SECONDS, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS, description="Processing timeout in seconds")
):
    """
    Render one page as PNG.

    **Returns:**
    - PNG image; raster size in `X-Raster-Width` / `X-Raster-Height`
    - Response headers: `ETag`, `Cache-Control` (1 hour)

    **Use Case:** Pass the raster size to [/edit-regions](#/default/edit_regions_edit_regions_post).
    """
    temp_file_path = request.state.temp_file_path
    file_content = request.state.file_content

    content_hash = hashlib.md5(file_content).hexdigest()[:16]
    etag = f'"{content_hash}-p{page_number}-d{dpi}"'

    png_bytes, (raster_width, raster_height) = await asyncio.to_thread(
        render_page,
        temp_file_path,
        page_number - 1,
        dpi
    )

    return Response(
        content=png_bytes,
        media_type="image/png",
        headers={
            "ETag": etag,
            "Cache-Control": f"public, max-age={DEFAULT_CACHE_MAX_AGE}",
            "Content-Length": str(len(png_bytes)),
            "X-Raster-Width": str(raster_width),
            "X-Raster-Height": str(raster_height)
        }
    )

@app.post("/edit-regions", response_model=EditRegionsResponse)
@handle_layout_errors
async def edit_regions(body: EditRegionsRequest):
    """
    Reconstruct paragraphs on a page and lay them out over its raster.

    **Raster size:**
    - `rasterWidth` / `rasterHeight` as reported by [/render-page](#/default/render_pdf_page_render_page_post)
    - Both or neither; when omitted, derived from the page size at `dpi`

    **Returns:**
    - Regions in paragraph order, each with a pixel rectangle, display text and editor font size
    """
    page = body.page
    if (body.rasterWidth is None) != (body.rasterHeight is None):
        raise HTTPException(
            status_code=400,
            detail="rasterWidth and rasterHeight must be given together"
        )
    if body.rasterWidth is None:
        raster_width, raster_height = raster_size_for_dpi(page, body.dpi)
    else:
        raster_width, raster_height = body.rasterWidth, body.rasterHeight

    transform = PageTransform.for_page(page, raster_width, raster_height)
    regions = await asyncio.to_thread(
        build_editable_regions,
        page,
        raster_width,
        raster_height,
        layout_config
    )

    logger.info(f"Page {page.pageNumber + 1}: {len(regions)} editable regions at {raster_width}x{raster_height}px")
    return EditRegionsResponse(pageNumber=page.pageNumber, scale=transform.scale, regions=regions)

@app.post("/apply-edits", response_model=ParsedPage)
@handle_layout_errors
async def apply_edits(body: ApplyEditsRequest):
    """
    Capture edited strings back into page-space spans.

    Every paragraph on the page collapses to one span, edited or not.
    Regions missing from `edits` keep their synthesized text.
    """
    edits = {edit.index: edit.text for edit in body.edits}

    captured = await asyncio.to_thread(apply_region_edits, body.page, edits, layout_config)

    logger.info(
        f"Page {body.page.pageNumber + 1}: captured {len(edits)} edits, "
        f"{len(body.page.spans)} spans -> {len(captured.spans)}"
    )
    return captured

@app.post("/export-pdf")
@handle_layout_errors
async def export_pdf(body: ExportRequest):
    """
    Write a document to a new PDF.

    Spans are drawn with standard 14 fonts at their page-space positions.
    """
    pdf_bytes = await asyncio.to_thread(write_document, body.document)

    if not pdf_bytes:
        raise HTTPException(status_code=500, detail="Failed to write PDF.")

    filename = body.filename if body.filename.lower().endswith('.pdf') else f"{body.filename}.pdf"
    return Response(
        content=pdf_bytes,
        media_type='application/pdf',
        headers={
            "Content-Disposition": f"attachment; filename={filename}"
        }
    )

@app.get("/sample-pdf")
async def sample_pdf():
    """
    A new one-page PDF with a title and a body line.

    **Use Case:** Start editing without an existing file.
    """
    pdf_bytes = await asyncio.to_thread(write_document, sample_document())
    return Response(
        content=pdf_bytes,
        media_type='application/pdf',
        headers={
            "Content-Disposition": "attachment; filename=new.pdf"
        }
    )

def _configure_server_logging():
    """Configure logging with Rich handler and filters for clean output"""
    console = Console(force_terminal=True)

    class ShutdownFilter(logging.Filter):
        """Filter out shutdown-related log messages"""
        def filter(self, record):
            if record.exc_info and record.exc_info[0] in (KeyboardInterrupt, asyncio.CancelledError):
                return False
            if "CancelledError" in str(record.msg) or "KeyboardInterrupt" in str(record.msg):
                return False
            return True

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=True
    )
    rich_handler.addFilter(ShutdownFilter())

    # Silence everything by default
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[rich_handler])

    # Allow server startup logs
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    for module_name in ["rich", "pdfstudio"]:
        logging.getLogger(module_name).setLevel(server_config.log_level)

    return console

def _find_free_port(start_port: int = 8000) -> int:
    """Find an available port starting from the given port"""
    import socket

    port = start_port
    max_port = start_port + 100

    while port < max_port:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(('localhost', port))
                return port
        except OSError:
            port += 1

    return start_port

server_console = _configure_server_logging()

def run():
    """Console entry point"""
    free_port = _find_free_port()
    server_console.print(f"[bold green]🚀 Starting server on http://localhost:{free_port}[/bold green]")

    try:
        uvicorn.run("pdfstudio.main:app", host="0.0.0.0", port=free_port, reload=True, log_config=None)
    except KeyboardInterrupt:
        server_console.print("\n[bold yellow]🛑 Server stopped.[/bold yellow]")
        sys.exit(0)

if __name__ == "__main__":
    run()
