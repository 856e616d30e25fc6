"""Layout constants.

All sizes are in bytes. Every scalar kind, including the software-packed
sub-word kinds, occupies one 32-bit slot.
"""

SCALAR_SIZE_BYTES = 4

# Buffer references are 32-bit byte offsets
REFERENCE_SIZE_BYTES = 4
REFERENCE_ALIGNMENT_BYTES = 4

# Leading discriminant of enums and of structs used as variant payloads
TAG_SIZE_BYTES = 4
TAG_FIELD_NAME = "tag"
TAGGED_MIN_ALIGNMENT_BYTES = 4

# Enum bodies are declared as arrays of 32-bit words
WORD_SIZE_BYTES = 4

# Variant tags start at 1; 0 is never a valid tag
FIRST_VARIANT_TAG = 1
