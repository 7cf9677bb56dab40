"""
Deterministic conversion rules.

Defaults shared by the CLI, the HTTP surface and the core.
"""

DEFAULT_DELIMITER = ","
# the csv quote character and line breaks cannot separate fields
FORBIDDEN_DELIMITERS = ('"', "\r", "\n")

# Tried strictly before falling back to charset detection
INPUT_ENCODING = "utf-8-sig"
OUTPUT_ENCODING = "utf-8"

JSON_INDENT = 2
