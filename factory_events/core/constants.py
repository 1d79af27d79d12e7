"""Core constants: business limits and shared literal values.

Single source of truth for the numbers validation and analytics agree on.
"""

# Longest accepted machine cycle (6 hours).
MAX_DURATION_MS = 6 * 60 * 60 * 1000

# defectCount sentinel: the machine could not count defects.
UNKNOWN_DEFECT_COUNT = -1

# Defects per hour at or above which a machine is reported as Warning.
WARNING_DEFECT_RATE = 2.0

# Decimal places for rates and percentages in query results.
RATE_DECIMALS = 2

# Stored counts are signed 64-bit integers (BIGINT on every backend).
MIN_STORED_INT = -(2**63)
MAX_STORED_INT = 2**63 - 1
