"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

FIELD_ID_PREFIX = "field_"
COPY_SUFFIX = "_copy"

DEFAULT_VALIDATION_MESSAGE = "This field is invalid"
DEFAULT_REQUIRED_MESSAGE = "This field is required"

DEFAULT_TEXTAREA_ROWS = 3
DEFAULT_NUMBER_MIN = 0
DEFAULT_NUMBER_MAX = 100
DEFAULT_NUMBER_STEP = 1
DEFAULT_CHOICE_COUNT = 3

# Longest custom formula the parser will accept.
MAX_FORMULA_LENGTH = 500
# Deepest nesting of parentheses, signs and powers in a formula.
MAX_FORMULA_DEPTH = 32

MINUTES_PER_DAY = 24 * 60
