"""
Filter models.

Registry entries describe each filterable job field; FilterState is the
working form of the filters stored in the query string; JobVisibility explains
why a job was hidden.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MatchType(str, Enum):
    """
    How a field filter's values are matched against a job's field value.

    - EXACT_STR: job value equals one of the filter values
    - SUBSTR: one of the filter values is a substring of the job value
    - SEARCH_STR: every filter value is a substring of the job value
    - CHOICE: like EXACT_STR, values come from a fixed list of choices
    """

    EXACT_STR = "exactstr"
    SUBSTR = "substr"
    SEARCH_STR = "searchStr"
    CHOICE = "choice"


class ClassificationChoice(BaseModel):
    """One entry of the failure classification taxonomy."""

    id: int
    name: str

    model_config = ConfigDict(frozen=True)


class FilterDimension(BaseModel):
    """
    Static description of a filterable job field.

    Attributes:
        name: Field name, also the query string key without the prefix
        display_name: Human-readable name
        match_type: Strategy used to compare filter values with the job value
        choices: Allowed values for CHOICE fields
    """

    name: str
    display_name: str
    match_type: MatchType
    choices: Optional[List[ClassificationChoice]] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {"name": self.display_name, "matchType": self.match_type.value}
        if self.choices is not None:
            data["choices"] = [choice.model_dump() for choice in self.choices]
        return data


@dataclass
class FilterState:
    """
    Filters derived from the query string plus defaults.

    Attributes:
        result_status: Result statuses to show
        classified_state: Subset of ["classified", "unclassified"] to show
        field_filters: Field name to lowercase filter values. Never contains
            resultStatus or classifiedState.
    """

    result_status: List[str] = field(default_factory=list)
    classified_state: List[str] = field(default_factory=list)
    field_filters: Dict[str, List[str]] = field(default_factory=dict)


class RejectionCategory(str, Enum):
    """Which check hid a job, in evaluation order."""

    RESULT_STATUS = "result_status"
    CLASSIFIED_STATE = "classified_state"
    FIELD = "field"


@dataclass(frozen=True)
class Rejection:
    """
    The first check a job failed.

    Attributes:
        category: Which check failed
        filter_name: Filter that hid the job ("resultStatus", "classifiedState"
            or a field name)
        job_value: The job's value for that filter, lowercased for field filters
        filter_values: Values the filter shows
        match_type: How a field filter compared the values (field filters only)
    """

    category: RejectionCategory
    filter_name: str
    job_value: str
    filter_values: Tuple[str, ...]
    match_type: Optional[MatchType] = None

    @property
    def reason(self) -> str:
        if self.category is RejectionCategory.RESULT_STATUS:
            return "Result status not shown"
        if self.category is RejectionCategory.CLASSIFIED_STATE:
            return "Classified state not shown"
        return f"{self.filter_name} does not match"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.value,
            "filter": self.filter_name,
            "job_value": self.job_value,
            "filter_values": list(self.filter_values),
            "match_type": self.match_type.value if self.match_type else None,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class JobVisibility:
    """
    Whether a job is shown and, if not, which filter hides it.

    Attributes:
        rejection: First failed check, or None when the job is shown
    """

    rejection: Optional[Rejection] = None

    @property
    def shown(self) -> bool:
        return self.rejection is None

    @property
    def summary(self) -> str:
        """Short human-readable outcome, e.g. "Result status not shown"."""
        return "Shown" if self.rejection is None else self.rejection.reason

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "shown": self.shown,
            "hidden_by": self.rejection.to_dict() if self.rejection else None,
            "summary": self.summary,
        }
