"""
Pydantic model for job records evaluated by the filters.

The lowercase search string is computed once, when the job is validated,
unless the producer supplies one.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from job_filters.constants import COMPLETED_STATE
from job_filters.jobs.status import platform_name

# Fields joined (in this order) into the search string
SEARCH_STR_FIELDS = [
    "platform_option",
    "job_group_name",
    "job_group_symbol",
    "job_type_name",
    "job_type_symbol",
    "ref_data_name",
]


def build_search_str(
    data: Mapping[str, Any], platform_names: Optional[Dict[str, str]] = None
) -> str:
    """
    Build the lowercase free-text search string for a job.

    Args:
        data: Raw job fields
        platform_names: Platform key to display name (defaults to the built-in table)

    Returns:
        Space-joined platform display name and descriptive fields, lowercased
    """
    parts = []
    if data.get("platform"):
        parts.append(platform_name(data["platform"], platform_names))
    for field_name in SEARCH_STR_FIELDS:
        value = data.get(field_name)
        if value is not None and value != "":
            parts.append(str(value))
    return " ".join(parts).lower()


class Job(BaseModel):
    """
    A job record.

    Only the fields the filters need are declared; anything else (job_type_name,
    tier, machine_name, ...) is kept as an extra field and read with ``get``.
    """

    id: Optional[int] = None
    result: str = Field(default="unknown", description="Outcome, e.g. success, testfailed, runnable")
    state: str = Field(default=COMPLETED_STATE, description="pending, running or completed")
    failure_classification_id: int = Field(default=1)
    platform: Optional[str] = None
    platform_option: str = ""
    job_coalesced_to_guid: Optional[str] = None
    search_str: str = Field(default="", description="Precomputed lowercase search string")

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def fill_search_str(cls, data: Any, info: ValidationInfo) -> Any:
        """Compute ``search_str`` when the data does not carry one."""
        if isinstance(data, Mapping) and not data.get("search_str"):
            platform_names = (info.context or {}).get("platform_names")
            data = dict(data)
            data["search_str"] = build_search_str(data, platform_names)
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], platform_names: Optional[Dict[str, str]] = None
    ) -> "Job":
        """
        Create a job from raw fields.

        Args:
            data: Raw job fields
            platform_names: Platform display names used in the search string
                (built-in table if None)
        """
        return cls.model_validate(dict(data), context={"platform_names": platform_names})

    def get(self, field_name: str, default: Any = None) -> Any:
        """Get a declared or extra field by name."""
        if field_name in type(self).model_fields:
            return getattr(self, field_name)
        return (self.model_extra or {}).get(field_name, default)
