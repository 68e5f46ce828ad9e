"""
Registry of filterable job fields and query string key helpers.

Filter keys in the query string carry the "filter-" prefix, except for the
single-value NON_FIELD_FILTERS. resultStatus and classifiedState are prefixed
but tracked separately from the field filters.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from job_filters.constants import (
    CLASSIFIED_STATE,
    CLASSIFIED_STATE_DEFAULTS,
    CLASSIFICATION_TYPES,
    DEFAULT_RESULT_STATUSES,
    DEFAULT_TIERS,
    FILTER_PREFIX,
    NON_FIELD_FILTERS,
    RESULT_STATUS,
    SEARCH_STR,
)
from job_filters.filters.models import ClassificationChoice, FilterDimension, MatchType

logger = logging.getLogger(__name__)


def with_prefix(field: str) -> str:
    """Query string key for a filter field (non-field filters stay unprefixed)."""
    if not field.startswith(FILTER_PREFIX) and field not in NON_FIELD_FILTERS:
        return FILTER_PREFIX + field
    return field


def without_prefix(field: str) -> str:
    """Filter field name for a query string key."""
    if field.startswith(FILTER_PREFIX):
        return field[len(FILTER_PREFIX) :]
    return field


def is_field_filter(key: str) -> bool:
    """True for prefixed keys other than resultStatus and classifiedState."""
    return key.startswith(FILTER_PREFIX) and without_prefix(key) not in (
        RESULT_STATUS,
        CLASSIFIED_STATE,
    )


def to_list(value: Any) -> Optional[List[Any]]:
    """
    Coerce a stored query string value to a list.

    Returns:
        None for None, a new list for lists/tuples, else a one-element list
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _field_dimensions(classification_types: List[ClassificationChoice]) -> Dict[str, FilterDimension]:
    specs = [
        ("ref_data_name", "buildername/jobname", MatchType.SUBSTR),
        ("build_system_type", "build system", MatchType.SUBSTR),
        ("job_type_name", "job name", MatchType.SUBSTR),
        ("job_type_symbol", "job symbol", MatchType.EXACT_STR),
        ("job_group_name", "group name", MatchType.SUBSTR),
        ("job_group_symbol", "group symbol", MatchType.EXACT_STR),
        ("machine_name", "machine name", MatchType.SUBSTR),
        ("platform", "platform", MatchType.SUBSTR),
        ("tier", "tier", MatchType.EXACT_STR),
    ]
    dimensions = {
        name: FilterDimension(name=name, display_name=display_name, match_type=match_type)
        for name, display_name, match_type in specs
    }
    dimensions["failure_classification_id"] = FilterDimension(
        name="failure_classification_id",
        display_name="failure classification",
        match_type=MatchType.CHOICE,
        choices=list(classification_types),
    )
    # text search across multiple fields
    dimensions[SEARCH_STR] = FilterDimension(
        name=SEARCH_STR,
        display_name="search string",
        match_type=MatchType.SEARCH_STR,
    )
    return dimensions


class FilterRegistry:
    """
    Static description of every filterable field and the filter defaults.

    Immutable after construction. Defaults apply when a filter is not present
    in the query string.
    """

    def __init__(
        self,
        classification_types: Optional[Iterable[ClassificationChoice]] = None,
        default_result_statuses: Optional[List[str]] = None,
        default_tiers: Optional[List[str]] = None,
    ):
        """
        Initialize registry.

        Args:
            classification_types: Failure classification taxonomy (choices of
                the failure_classification_id field)
            default_result_statuses: resultStatus default
            default_tiers: tier default
        """
        if classification_types is None:
            classification_types = [ClassificationChoice(**c) for c in CLASSIFICATION_TYPES]
        self.classification_types: List[ClassificationChoice] = list(classification_types)
        self._dimensions = _field_dimensions(self.classification_types)
        self._defaults: Dict[str, List[str]] = {
            RESULT_STATUS: list(
                DEFAULT_RESULT_STATUSES if default_result_statuses is None else default_result_statuses
            ),
            CLASSIFIED_STATE: list(CLASSIFIED_STATE_DEFAULTS),
            "tier": list(DEFAULT_TIERS if default_tiers is None else default_tiers),
        }

    def get(self, field: str) -> Optional[FilterDimension]:
        """Get the registry entry for a field, or None if unregistered."""
        return self._dimensions.get(without_prefix(field))

    def match_type_for(self, field: str) -> MatchType:
        """
        Match type for a field.

        Fields that are not registered are compared exactly, so an unknown
        filter in the query string still restricts jobs that carry the field.
        """
        dimension = self.get(field)
        if dimension is None:
            return MatchType.EXACT_STR
        return dimension.match_type

    def get_field_choices(self) -> Dict[str, FilterDimension]:
        """Registered fields offered to users (everything but the search string)."""
        return {name: dim for name, dim in self._dimensions.items() if name != SEARCH_STR}

    def get_default(self, field: str) -> Optional[List[str]]:
        """Copy of the default values for a field, or None if it has no default."""
        default = self._defaults.get(without_prefix(field))
        return list(default) if default is not None else None

    def prefixed_defaults(self) -> Dict[str, List[str]]:
        """Defaults keyed the way they would appear in the query string."""
        return {with_prefix(field): list(values) for field, values in self._defaults.items()}

    def matches_defaults(self, field: str, values: Any) -> bool:
        """
        True if values equal the field's default as a set.

        Order and duplicates are ignored. Fields without a default never match.
        """
        default = self._defaults.get(without_prefix(field))
        if default is None or values is None:
            return False
        return set(to_list(values)) == set(default)
