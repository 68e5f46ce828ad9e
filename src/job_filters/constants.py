"""Filter-wide constants and built-in configuration defaults."""

# Query string keys
FILTER_PREFIX = "filter-"  # Prefix carried by every multi-value filter key
CLASSIFIED_STATE = "classifiedState"
RESULT_STATUS = "resultStatus"
SEARCH_STR = "searchStr"

QS_CLASSIFIED_STATE = FILTER_PREFIX + CLASSIFIED_STATE
QS_RESULT_STATUS = FILTER_PREFIX + RESULT_STATUS
QS_SEARCH_STR = FILTER_PREFIX + SEARCH_STR

# Single-value filters stored without the prefix
NON_FIELD_FILTERS = (
    "fromchange",
    "tochange",
    "author",
    "nojobs",
    "startdate",
    "enddate",
    "revision",
)

# Job results
RUNNABLE_RESULT = "runnable"  # Placeholder jobs that always pass status checks
SUPERSEDED_RESULT = "superseded"
COMPLETED_STATE = "completed"
IN_PROGRESS_STATUSES = ["pending", "running"]

# Failure classification ids that count as "unclassified"
UNCLASSIFIED_IDS = frozenset({1, 7})

CLASSIFIED_STATE_DEFAULTS = ["classified", "unclassified"]

# Built-in defaults, used when config/filters.yaml does not override them
DEFAULT_RESULT_STATUSES = [
    "success",
    "testfailed",
    "busted",
    "exception",
    "retry",
    "usercancel",
    "running",
    "pending",
    "runnable",
]
FAILURE_RESULTS = ["testfailed", "busted", "exception"]
CLASSIFICATION_TYPES = [
    {"id": 1, "name": "not classified"},
    {"id": 2, "name": "fixed by commit"},
    {"id": 3, "name": "expected fail"},
    {"id": 4, "name": "intermittent"},
    {"id": 5, "name": "infra"},
    {"id": 6, "name": "intermittent needs filing"},
    {"id": 7, "name": "autoclassified intermittent"},
]
TIERS = ["1", "2", "3"]
DEFAULT_TIERS = ["1", "2"]
PLATFORM_NAMES = {
    "linux32": "Linux",
    "linux64": "Linux x64",
    "osx-10-10": "OS X 10.10",
    "windows7-32": "Windows 7",
    "windows8-64": "Windows 8",
    "windows10-64": "Windows 10 x64",
    "android-4-3-armv7-api15": "Android 4.3 API15+",
}

# Logging display limits
MAX_SEARCH_STR_LOG_LENGTH = 80  # Truncate long search strings in console logs
