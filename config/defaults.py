"""Default configuration constants for the Farm Housing dashboard."""

# Record vocabularies
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"

SEX_MALE = "male"
SEX_FEMALE = "female"

# Rooms are partitioned by gender; a worker's sex maps onto exactly one restriction
GENDER_RESTRICTION_BY_SEX = {
    SEX_MALE: "male",
    SEX_FEMALE: "female",
}

# Time range selector -> days looked back from "now"
TIME_RANGE_DAYS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "365d": 365,
}
DEFAULT_TIME_RANGE = "30d"

# Older selector names still sent by saved dashboard links
TIME_RANGE_ALIASES = {
    "week": "7d",
    "month": "30d",
    "quarter": "90d",
    "year": "365d",
}

TIME_RANGE_LABELS = {
    "7d": "Last 7 days",
    "30d": "Last 30 days",
    "90d": "Last 3 months",
    "365d": "Last year",
}

# Occupancy thresholds (percent, compared unrounded)
HIGH_OCCUPANCY_THRESHOLD = 85.0
LOW_OCCUPANCY_THRESHOLD = 50.0

# Male/female headcount gap tolerated as a share of active workers
GENDER_BALANCE_TOLERANCE = 0.2

# Age buckets: (label, min inclusive, max inclusive or None for open-ended)
AGE_BUCKETS = [
    ("18-25", 18, 25),
    ("26-35", 26, 35),
    ("36-45", 36, 45),
    ("46+", 46, None),
]
MINIMUM_BUCKETED_AGE = 18

# Exit reasons
UNSPECIFIED_EXIT_REASON = "unspecified"
NO_EXIT_REASON = "none"

# Percentages are rounded at output time only
PERCENT_DECIMALS = 2

# Occupancy sync display
MAX_CORRECTIONS_SHOWN = 5
