"""
Font mapping utilities for the document writer
Maps extracted PDF font names to the standard 14 Type1 fonts
"""

import re
from functools import lru_cache
from typing import Tuple

DEFAULT_BASE_FONT = "Helvetica"

# Standard 14 variants per family: (regular, bold, italic, bold italic)
BASE14_FAMILIES = {
    'helvetica': ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    'times': ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    'courier': ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


@lru_cache(maxsize=128)
def normalize_font_name(font_name: str) -> str:
    """
    Strip subset prefixes and style suffixes, lowercase and compact.

    Example: "ABCDEF+TimesNewRomanPS-BoldMT" -> "timesnewromanps"
    """
    if not font_name:
        return ""

    base_name = font_name.split(',')[0].strip().strip('\'"').lstrip('/')
    base_name = re.sub(r'^[A-Z]{6}\+', '', base_name)

    base_name = re.sub(r'-(Bold|Italic|Oblique|BoldItalic|BoldOblique|Regular|Normal|Roman|MT|PS|BoldMT|ItalicMT)$', '', base_name, flags=re.IGNORECASE)
    base_name = re.sub(r',?(Bold|Italic|BoldItalic|Regular|Normal)$', '', base_name, flags=re.IGNORECASE)

    return base_name.lower().replace('-', '').replace('_', '').replace(' ', '')


@lru_cache(maxsize=128)
def get_font_weight_and_style(font_name: str) -> Tuple[bool, bool]:
    """
    Detect bold and italic from a font name.

    Returns:
        Tuple of (is_bold, is_italic)
    """
    if not font_name:
        return False, False

    font_name_lower = font_name.lower()

    is_bold = any(indicator in font_name_lower for indicator in ['bold', 'black', 'heavy', 'semibold', 'demi'])
    is_italic = any(indicator in font_name_lower for indicator in ['italic', 'oblique', 'slant'])

    return is_bold, is_italic


@lru_cache(maxsize=128)
def map_pdf_font_to_base14(font_name: str) -> str:
    """
    Map an extracted PDF font name to a standard 14 BaseFont name.

    Unknown and missing fonts fall back to Helvetica, the metric twin of Arial.
    """
    clean_name = normalize_font_name(font_name or "")

    family = 'helvetica'
    if any(name in clean_name for name in ('courier', 'mono', 'consola')):
        family = 'courier'
    elif any(name in clean_name for name in ('times', 'serif', 'georgia', 'garamond', 'cambria', 'roman')) \
            and 'sans' not in clean_name:
        family = 'times'

    is_bold, is_italic = get_font_weight_and_style(font_name or "")
    variant = (2 if is_italic else 0) + (1 if is_bold else 0)
    return BASE14_FAMILIES[family][variant]
