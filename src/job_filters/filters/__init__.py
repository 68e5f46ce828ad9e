"""Job visibility filters."""

from job_filters.filters.evaluator import FilterEvaluator
from job_filters.filters.models import (
    ClassificationChoice,
    FilterDimension,
    FilterState,
    JobVisibility,
    MatchType,
    Rejection,
    RejectionCategory,
)
from job_filters.filters.mutator import FilterMutator
from job_filters.filters.registry import FilterRegistry
from job_filters.filters.state_cache import FilterStateCache

__all__ = [
    "ClassificationChoice",
    "FilterDimension",
    "FilterEvaluator",
    "FilterMutator",
    "FilterRegistry",
    "FilterState",
    "FilterStateCache",
    "JobVisibility",
    "MatchType",
    "Rejection",
    "RejectionCategory",
]
