"""
PDF Operator Constants

Content stream operators emitted by the document writer.
Organized by functional category according to PDF specification.

Reference: PDF 32000-1:2008 specification, Appendix A
"""

# ==============================================================================
# Graphics State Operators (PDF spec 8.4.4)
# ==============================================================================
OP_SAVE_STATE = 'q'                 # Save graphics state
OP_RESTORE_STATE = 'Q'              # Restore graphics state

# ==============================================================================
# Color Operators (PDF spec 8.6.8)
# ==============================================================================
OP_SET_GRAY_FILL = 'g'              # Set Gray color for non-stroking

# ==============================================================================
# Text State Operators (PDF spec 9.3)
# ==============================================================================
OP_BEGIN_TEXT = 'BT'            # Begin text object
OP_END_TEXT = 'ET'              # End text object
OP_SET_FONT = 'Tf'              # Set text font and size
OP_SET_LEADING = 'TL'           # Set text leading

# ==============================================================================
# Text Positioning Operators (PDF spec 9.4.2)
# ==============================================================================
OP_MOVE_TEXT = 'Td'              # Move text position
OP_NEXT_LINE = 'T*'              # Move to start of next text line

# ==============================================================================
# Text Showing Operators (PDF spec 9.4.3)
# ==============================================================================
OP_SHOW_TEXT = 'Tj'              # Show a text string
