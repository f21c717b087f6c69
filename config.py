"""Central configuration for the graymap image library.

All tunable parameters and format constants are defined here with
descriptive names. The library and the imgtool CLI read their defaults
from this module.
"""

# =============================================================================
# PIXEL RANGE
# =============================================================================

# Largest gray level an 8-bit pixel can hold (and the largest maxval accepted)
PIXMAX = 255

# Maxval used when a new image is created without an explicit one
DEFAULT_MAXVAL = 255

# =============================================================================
# PGM (P5) FILE FORMAT
# =============================================================================

# Magic token identifying a binary 8-bit graymap
PGM_MAGIC = b"P5"

# A comment starts at this byte and runs to the end of the line (inclusive)
PGM_COMMENT = b"#"

# Bytes accepted as header whitespace (same set as C isspace)
PGM_WHITESPACE = b" \t\n\v\f\r"

# Whether bytes after the width*height payload are tolerated on load.
# Other PGM writers sometimes append a trailing newline.
ALLOW_TRAILING_DATA = True

# =============================================================================
# OPERATION DEFAULTS (used by the imgtool CLI)
# =============================================================================

# Threshold applied when "thr" is given without a value
DEFAULT_THRESHOLD = 128

# Half-width of the mean filter window when "blur" is given without values
DEFAULT_BLUR_RADIUS = 1

# =============================================================================
# INSTRUMENTATION
# =============================================================================

# Counter for pixel array accesses (reads and stores)
COUNTER_PIXMEM = "pixmem"

# Counter for pixel comparisons done by subimage matching
COUNTER_PIXCMP = "pixcmp"
