"""Constants for data generation."""

# Default row count per entity
DEFAULT_ROW_COUNT = 100

# Unique key generation
MAX_KEY_ATTEMPTS = 1000
NUMERIC_KEY_START = 1

# List-valued attributes
LIST_DELIMITER = "|"
LIST_MIN_VALUES = 1
LIST_MAX_VALUES = 3

# Field value ranges
DEFAULT_INT_RANGE = (1, 1000)
DEFAULT_PRICE_RANGE = (1.0, 1000.0)
DEFAULT_PERCENT_RANGE = (1, 100)
DATE_RANGE_DAYS = 365 * 2  # 2 years back from today

# Cardinality warnings
IMBALANCE_RATIO_THRESHOLD = 10

# Identifier-reference markers used when both relationship ends are unique
ID_REFERENCE_MARKERS = ("Id", "ID")

# Progress logging
LARGE_ENTITY_THRESHOLD = 100_000  # Entities with more rows log progress
PROGRESS_LOG_INTERVAL_ROWS = 50_000

STATUS_VALUES = ["Active", "Inactive", "Pending", "Suspended", "Archived", "Deleted"]

DEPARTMENTS = [
    "Engineering", "Sales", "Marketing", "Finance", "HR", "Operations",
    "IT", "Legal", "Executive", "Support", "Research", "Development",
    "QA", "Product", "Design", "Customer Success", "Administration",
]
