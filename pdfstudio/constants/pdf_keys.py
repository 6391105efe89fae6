"""
PDF Dictionary Keys and Name Constants
"""

# Resource Dictionary Keys
KEY_RESOURCES = "/Resources"
KEY_FONT = "/Font"

# Object Types and Subtypes
KEY_TYPE = "/Type"
KEY_SUBTYPE = "/Subtype"

# Font Dictionary Keys and Values (PDF spec 9.6.2)
KEY_BASE_FONT = "/BaseFont"
KEY_ENCODING = "/Encoding"
VAL_FONT = "/Font"
VAL_TYPE1 = "/Type1"
VAL_WIN_ANSI_ENCODING = "/WinAnsiEncoding"

# Resource name prefix for fonts added by the writer
FONT_RESOURCE_PREFIX = "/F"
