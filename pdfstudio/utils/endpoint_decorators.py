"""
Decorators shared by the FastAPI endpoints.

Uploads are checked and staged to a temporary file; engine errors are
translated to HTTP status codes in one place.
"""

import os
import tempfile
import logging
import asyncio
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Iterator, Optional
from fastapi import UploadFile, HTTPException, Request

from pdfstudio.utils.validation import (
    validate_file_content,
    PdfValidationError,
    LayoutError,
    InvalidGeometryError,
    NoPageLoadedError,
    SessionStateError,
    VALIDATION_CONSTANTS
)

logger = logging.getLogger(__name__)

LAYOUT_ERROR_STATUS = {
    InvalidGeometryError: 400,
    NoPageLoadedError: 404,
    SessionStateError: 409,
}

# Checked in order; the first matching type decides the status
ERROR_STATUS = (
    (PdfValidationError, 400),
    (IndexError, 404),
    (ValueError, 400),
)


def layout_error_to_http(error: LayoutError) -> HTTPException:
    """Convert a layout engine error to the matching HTTPException."""
    status_code = 400
    for error_type, code in LAYOUT_ERROR_STATUS.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail=str(error))


def error_to_http(error: Exception, context: str) -> HTTPException:
    """Map an engine or extraction failure to an HTTPException, logging it."""
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, LayoutError):
        logger.warning(f"Layout error in {context}: {error}")
        return layout_error_to_http(error)
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            logger.warning(f"{type(error).__name__} in {context}: {error}")
            return HTTPException(status_code=status_code, detail=str(error))

    logger.exception(f"Unexpected error in {context}: {error}")
    return HTTPException(status_code=500, detail=f"Internal server error: {str(error)}")


async def read_pdf_upload(file: Optional[UploadFile]) -> bytes:
    """Read an uploaded PDF, rejecting wrong extensions and bad content with 400."""
    if not file:
        raise HTTPException(status_code=400, detail="File parameter is required")
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(status_code=400, detail="Only PDF files are supported")

    try:
        content = await file.read()
    except OSError as e:
        logger.error(f"Error reading uploaded file: {e}")
        raise HTTPException(status_code=400, detail=f"Error reading uploaded file: {str(e)}")

    is_valid, error = validate_file_content(content, max_size_mb=VALIDATION_CONSTANTS['MAX_FILE_SIZE_MB'])
    if not is_valid:
        logger.warning(f"Rejected upload {file.filename}: {error}")
        raise HTTPException(status_code=400, detail=error)
    return content


@contextmanager
def staged_pdf(content: bytes) -> Iterator[str]:
    """Write PDF bytes to a temporary file and yield its path; the file is removed on exit."""
    # Closed before use so other handles can open it on Windows
    with tempfile.NamedTemporaryFile(delete=False, suffix='.pdf') as temp_file:
        temp_file.write(content)
    try:
        yield temp_file.name
    finally:
        try:
            os.unlink(temp_file.name)
        except OSError as e:
            logger.warning(f"Failed to remove staged PDF {temp_file.name}: {e}")


def handle_pdf_processing(func: Callable) -> Callable:
    """
    Decorator for endpoints that take an uploaded PDF.

    The endpoint must accept `request: Request` and `file: UploadFile` as
    keyword arguments. Before it runs, the upload is validated and staged;
    the endpoint finds `request.state.temp_file_path` and
    `request.state.file_content`. An optional `processing_timeout` keyword
    bounds the run (408 when exceeded).
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        request: Optional[Request] = kwargs.get('request')
        if request is None:
            raise HTTPException(status_code=500, detail=f"{func.__name__} must accept 'request: Request'")

        file: Optional[UploadFile] = kwargs.get('file')
        content = await read_pdf_upload(file)
        timeout_seconds = kwargs.get('processing_timeout') or VALIDATION_CONSTANTS['MAX_PROCESSING_TIME_SECONDS']

        with staged_pdf(content) as temp_file_path:
            request.state.temp_file_path = temp_file_path
            request.state.file_content = content
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)
            except asyncio.TimeoutError:
                logger.error(f"Processing {file.filename} timed out after {timeout_seconds}s")
                raise HTTPException(
                    status_code=408,
                    detail=f"PDF processing timed out after {timeout_seconds} seconds."
                )
            except Exception as e:
                raise error_to_http(e, file.filename)

    return wrapper


def handle_layout_errors(func: Callable) -> Callable:
    """
    Decorator for JSON endpoints that run the layout engine:
    - LayoutError subclasses map to 400 / 404 / 409
    - IndexError and ValueError from bad edit payloads map to 400
    - Anything else is logged and reported as 500
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (IndexError, ValueError) as e:
            logger.warning(f"Invalid edit request in {func.__name__}: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            raise error_to_http(e, func.__name__)

    return wrapper
