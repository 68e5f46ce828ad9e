"""Job records and derived job attributes."""

from job_filters.jobs.models import Job, build_search_str
from job_filters.jobs.status import is_job_classified, platform_name, result_status

__all__ = ["Job", "build_search_str", "is_job_classified", "platform_name", "result_status"]
