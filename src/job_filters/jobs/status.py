"""Derived job attributes used by the filters."""

from typing import TYPE_CHECKING, Dict, Optional

from job_filters.constants import COMPLETED_STATE, PLATFORM_NAMES, SUPERSEDED_RESULT, UNCLASSIFIED_IDS

if TYPE_CHECKING:
    from job_filters.jobs.models import Job


def result_status(job: "Job") -> str:
    """
    Coarse outcome label of a job.

    Coalesced jobs are "superseded", unfinished jobs report their state
    (pending/running), finished jobs report their result.
    """
    if job.job_coalesced_to_guid is not None:
        return SUPERSEDED_RESULT
    if job.state != COMPLETED_STATE:
        return job.state
    return job.result


def is_job_classified(job: "Job") -> bool:
    """True unless the job's failure classification is one of the unclassified ids."""
    return job.failure_classification_id not in UNCLASSIFIED_IDS


def platform_name(platform: str, platform_names: Optional[Dict[str, str]] = None) -> str:
    """Display name for a platform key, or the key itself when unknown."""
    names = PLATFORM_NAMES if platform_names is None else platform_names
    return names.get(platform, platform)
