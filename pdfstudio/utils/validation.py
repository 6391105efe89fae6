"""
PDF File Validation and Error Types
Validation, resource checks, and the exception hierarchy used across the engine.
"""

import os
import tempfile
import psutil
from typing import Optional, Tuple, Dict, Any
import logging

logger = logging.getLogger(__name__)

# Validation constants
VALIDATION_CONSTANTS = {
    'PDF_SIGNATURE': b'%PDF',
    'MAX_FILE_SIZE_MB': 50,
    'MAX_PROCESSING_TIME_SECONDS': 300,  # 5 minutes
    'MIN_AVAILABLE_MEMORY_MB': 100,
    'MIN_FREE_DISK_MB': 100,
    'SUPPORTED_PDF_VERSIONS': ['1.0', '1.1', '1.2', '1.3', '1.4', '1.5', '1.6', '1.7', '2.0'],
}

class PdfValidationError(Exception):
    """Custom exception for PDF validation errors"""
    pass

class LayoutError(Exception):
    """Base exception for layout reconstruction and edit capture"""
    pass

class InvalidGeometryError(LayoutError):
    """Page or raster dimensions cannot produce a finite scale"""
    pass

class NoPageLoadedError(LayoutError):
    """Transform or edit capture requested without an active page"""
    pass

class SessionStateError(LayoutError):
    """Edit session operation not allowed in the current state"""
    pass

def validate_pdf_signature(file_path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate PDF file signature (magic bytes) and version

    Args:
        file_path: Path to the PDF file

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        with open(file_path, 'rb') as f:
            header = f.read(8)

            if len(header) < 4:
                return False, "File too small to be a valid PDF"

            if not header.startswith(VALIDATION_CONSTANTS['PDF_SIGNATURE']):
                return False, f"Invalid PDF signature. Expected {VALIDATION_CONSTANTS['PDF_SIGNATURE']}, got {header[:4]}"

            if len(header) >= 8:
                try:
                    version_str = header[5:8].decode('ascii')
                    if version_str not in VALIDATION_CONSTANTS['SUPPORTED_PDF_VERSIONS']:
                        # Many PDFs still parse with an unknown version
                        logger.warning(f"Unsupported PDF version: {version_str}")
                except UnicodeDecodeError:
                    logger.warning("Could not decode PDF version")

            return True, None

    except FileNotFoundError:
        return False, f"File not found: {file_path}"
    except PermissionError:
        return False, f"Permission denied accessing file: {file_path}"
    except OSError as e:
        return False, f"Error validating PDF signature: {str(e)}"

def validate_file_size(file_path: str, max_size_mb: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate file size limits

    Returns:
        Tuple of (is_valid, error_message)
    """
    if max_size_mb is None:
        max_size_mb = VALIDATION_CONSTANTS['MAX_FILE_SIZE_MB']

    try:
        size_mb = os.path.getsize(file_path) / (1024 * 1024)

        if size_mb > max_size_mb:
            return False, f"File too large: {size_mb:.1f}MB (max: {max_size_mb}MB)"

        logger.debug(f"File size validation passed: {size_mb:.1f}MB")
        return True, None

    except FileNotFoundError:
        return False, f"File not found: {file_path}"
    except OSError as e:
        return False, f"Error checking file size: {str(e)}"

def validate_file_content(content: bytes, max_size_mb: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate uploaded file content before saving to disk

    Args:
        content: Raw file content bytes
        max_size_mb: Maximum file size in MB

    Returns:
        Tuple of (is_valid, error_message)
    """
    if max_size_mb is None:
        max_size_mb = VALIDATION_CONSTANTS['MAX_FILE_SIZE_MB']

    size_mb = len(content) / (1024 * 1024)
    if size_mb > max_size_mb:
        return False, f"File too large: {size_mb:.1f}MB (max: {max_size_mb}MB)"

    if len(content) < 4:
        return False, "File too small to be a valid PDF"

    if not content.startswith(VALIDATION_CONSTANTS['PDF_SIGNATURE']):
        return False, "Invalid PDF signature in uploaded content"

    return True, None

def validate_processing_environment() -> Tuple[bool, Optional[str]]:
    """
    Validate that the system has sufficient resources for PDF processing

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024 * 1024)
        min_memory_mb = VALIDATION_CONSTANTS['MIN_AVAILABLE_MEMORY_MB']

        if available_mb < min_memory_mb:
            return False, f"Insufficient memory available: {available_mb:.1f}MB (need at least {min_memory_mb}MB)"

        # Rasterized pages and uploads go through the temp directory
        temp_dir = tempfile.gettempdir()
        free_mb = psutil.disk_usage(temp_dir).free / (1024 * 1024)
        min_disk_mb = VALIDATION_CONSTANTS['MIN_FREE_DISK_MB']

        if free_mb < min_disk_mb:
            return False, f"Insufficient disk space in {temp_dir}: {free_mb:.1f}MB (need at least {min_disk_mb}MB)"

        logger.debug(f"Environment validation passed: {available_mb:.1f}MB memory, {free_mb:.1f}MB disk")
        return True, None

    except (OSError, psutil.Error) as e:
        return False, f"Error checking system resources: {str(e)}"

def comprehensive_pdf_validation(file_path: str, max_size_mb: Optional[int] = None) -> Dict[str, Any]:
    """
    Perform comprehensive PDF file validation

    Args:
        file_path: Path to the PDF file
        max_size_mb: Maximum file size in MB

    Returns:
        Dictionary with validation results
    """
    results = {
        'is_valid': True,
        'errors': [],
        'warnings': [],
        'file_info': {}
    }

    if not os.path.exists(file_path):
        results['is_valid'] = False
        results['errors'].append(f"File not found: {file_path}")
        return results

    size_valid, size_error = validate_file_size(file_path, max_size_mb)
    if not size_valid:
        results['is_valid'] = False
        results['errors'].append(size_error)
    else:
        size_mb = os.path.getsize(file_path) / (1024 * 1024)
        results['file_info']['size_mb'] = round(size_mb, 2)

    sig_valid, sig_error = validate_pdf_signature(file_path)
    if not sig_valid:
        results['is_valid'] = False
        results['errors'].append(sig_error)

    # Low resources are reported but never block a small document
    env_valid, env_error = validate_processing_environment()
    if not env_valid:
        results['warnings'].append(env_error)

    return results

__all__ = [
    'validate_pdf_signature',
    'validate_file_size',
    'validate_file_content',
    'validate_processing_environment',
    'comprehensive_pdf_validation',
    'PdfValidationError',
    'LayoutError',
    'InvalidGeometryError',
    'NoPageLoadedError',
    'SessionStateError',
    'VALIDATION_CONSTANTS'
]
