"""Match strategies for field filters.

Each strategy takes the (lowercase) filter values and the (lowercase) job
value and returns whether the job passes that field.
"""

from typing import Callable, Dict, List

from job_filters.filters.models import MatchType

Matcher = Callable[[List[str], str], bool]


def contains_exact(values: List[str], job_value: str) -> bool:
    """True if the job value equals any filter value."""
    return job_value in values


def contains_substr(values: List[str], job_value: str) -> bool:
    """True if any filter value is a substring of the job value."""
    return any(value in job_value for value in values)


def contains_all_substr(values: List[str], job_value: str) -> bool:
    """True if every filter value is a substring of the job value."""
    return all(value in job_value for value in values)


MATCHERS: Dict[MatchType, Matcher] = {
    MatchType.EXACT_STR: contains_exact,
    MatchType.SUBSTR: contains_substr,
    MatchType.SEARCH_STR: contains_all_substr,
    MatchType.CHOICE: contains_exact,
}


def get_matcher(match_type: MatchType) -> Matcher:
    """Look up the strategy for a match type."""
    return MATCHERS[match_type]
