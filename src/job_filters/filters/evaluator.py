"""
Decides whether a job is shown under the current filters.

Rules:
- A job must pass ALL filter dimensions (result status, classified state and
  every field filter, defaults included).
- Within a dimension, matching ONE of the listed values is enough, except for
  the search string where EVERY term must appear.
- Runnable jobs skip the result status and classified state checks but still
  go through the field filters.
"""

import logging
from typing import Callable, Dict, List, Optional

from job_filters.constants import (
    CLASSIFIED_STATE,
    FAILURE_RESULTS,
    RESULT_STATUS,
    RUNNABLE_RESULT,
    SEARCH_STR,
)
from job_filters.filters.matchers import get_matcher
from job_filters.filters.models import FilterState, JobVisibility, Rejection, RejectionCategory
from job_filters.filters.registry import FilterRegistry
from job_filters.jobs.models import Job
from job_filters.jobs.status import is_job_classified, platform_name, result_status

logger = logging.getLogger(__name__)


class FilterEvaluator:
    """
    Evaluates jobs against a FilterState.

    The state is read through ``state_provider`` on every call, so the
    evaluator always sees the latest cached filters without being told
    about refreshes.
    """

    def __init__(
        self,
        registry: FilterRegistry,
        state_provider: Callable[[], FilterState],
        failure_results: Optional[List[str]] = None,
        platform_names: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize evaluator.

        Args:
            registry: Field registry (match types)
            state_provider: Returns the current FilterState
            failure_results: Results that count as failures
            platform_names: Platform display names for the platform field
        """
        self.registry = registry
        self.state_provider = state_provider
        self.failure_results = list(FAILURE_RESULTS if failure_results is None else failure_results)
        self.platform_names = platform_names

    def show_job(self, job: Job) -> bool:
        """
        Whether the job should be shown under the current filters.

        Args:
            job: The job to check

        Returns:
            True if every applicable filter dimension passes
        """
        return self._first_rejection(job, self.state_provider()) is None

    def evaluate_job(self, job: Job) -> JobVisibility:
        """
        Evaluate the job and report which filter hides it.

        Checks run in the same order as show_job and stop at the first
        failure.

        Returns:
            JobVisibility carrying the first failed check, if any
        """
        visibility = JobVisibility(self._first_rejection(job, self.state_provider()))
        if not visibility.shown:
            logger.debug(f"Job {job.id} hidden: {visibility.summary}")
        return visibility

    def is_job_unclassified_failure(self, job: Job) -> bool:
        """True if the job failed and has no real failure classification."""
        return job.result in self.failure_results and not is_job_classified(job)

    def _first_rejection(self, job: Job, state: FilterState) -> Optional[Rejection]:
        # when runnable jobs have been added to a push, they are shown
        # regardless of result status or classified state
        if job.result != RUNNABLE_RESULT:
            status = result_status(job)
            if status not in state.result_status:
                return Rejection(
                    RejectionCategory.RESULT_STATUS,
                    RESULT_STATUS,
                    status,
                    tuple(state.result_status),
                )
            if not self._check_classified_state(job, state):
                return Rejection(
                    RejectionCategory.CLASSIFIED_STATE,
                    CLASSIFIED_STATE,
                    "classified" if is_job_classified(job) else "unclassified",
                    tuple(state.classified_state),
                )
        return self._check_field_filters(job, state)

    def _check_classified_state(self, job: Job, state: FilterState) -> bool:
        classified = is_job_classified(job)
        if "unclassified" not in state.classified_state and not classified:
            return False
        return not ("classified" not in state.classified_state and classified)

    def _check_field_filters(self, job: Job, state: FilterState) -> Optional[Rejection]:
        for field, values in state.field_filters.items():
            job_value = self._get_job_field_value(job, field)
            # a filter on a field the job doesn't have is a pass
            if job_value is None:
                continue

            job_value = str(job_value).lower()
            match_type = self.registry.match_type_for(field)
            if not get_matcher(match_type)(values, job_value):
                return Rejection(
                    RejectionCategory.FIELD, field, job_value, tuple(values), match_type
                )
        return None

    def _get_job_field_value(self, job: Job, field: str):
        """
        Get a field from the job.

        ``platform`` is shown to users as display name plus option, and
        ``searchStr`` is the job's precomputed search string.
        """
        if field == "platform":
            if job.platform is None:
                return None
            return f"{platform_name(job.platform, self.platform_names)} {job.platform_option}"
        if field == SEARCH_STR:
            return job.search_str
        return job.get(field)
