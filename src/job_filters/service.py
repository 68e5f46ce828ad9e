"""
Job filters service.

Keeps the filter cache in sync with a key/value store and exposes job
evaluation, filter changes and read-only views of the stored filters.

Flow: store change -> cache refresh (only if the filter parameters changed)
-> GLOBAL_FILTER_CHANGED -> consumers call show_job() for each job.
"""

import copy
from typing import Any, Dict, Iterable, List, Optional

from job_filters.config_loader import FilterConfig
from job_filters.constants import (
    CLASSIFIED_STATE,
    FILTER_PREFIX,
    NON_FIELD_FILTERS,
    QS_CLASSIFIED_STATE,
    QS_RESULT_STATUS,
    QS_SEARCH_STR,
    RESULT_STATUS,
    TIERS,
)
from job_filters.events import GLOBAL_FILTER_CHANGED, ChangeNotifier, get_notifier
from job_filters.filters.evaluator import FilterEvaluator
from job_filters.filters.models import FilterDimension, FilterState, JobVisibility
from job_filters.filters.mutator import FilterMutator, strip_field_filters
from job_filters.filters.registry import FilterRegistry, is_field_filter, to_list, without_prefix
from job_filters.filters.state_cache import (
    FilterStateCache,
    build_field_filters,
    get_filters_or_defaults,
)
from job_filters.jobs.models import Job
from job_filters.logging_config import get_structured_logger
from job_filters.store.key_value_store import KeyValueStore, QueryParameters

slogger = get_structured_logger(__name__)


class JobFilters:
    """
    Filter service bound to one key/value store.

    Example:
        ```python
        store = QueryStringStore.from_query_string("filter-resultStatus=success")
        filters = JobFilters(store)
        visible = [job for job in jobs if filters.show_job(job)]
        filters.add_filter("job_type_symbol", "B")  # cache refreshes via the store
        ```
    """

    CLASSIFIED_STATE = CLASSIFIED_STATE
    RESULT_STATUS = RESULT_STATUS
    TIERS = TIERS

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[FilterConfig] = None,
        notifier: Optional[ChangeNotifier] = None,
    ):
        """
        Initialize the service and load the current filters.

        Args:
            store: Store holding the persisted filters
            config: Filter configuration (built-in defaults if None)
            notifier: Where GLOBAL_FILTER_CHANGED is published (process-wide
                notifier if None)
        """
        self.config = config or FilterConfig()
        self.store = store
        self.notifier = notifier or get_notifier()
        self.tiers: List[str] = list(self.config.tiers)

        self.registry = FilterRegistry(
            classification_types=self.config.classification_types,
            default_result_statuses=self.config.default_result_statuses,
            default_tiers=self.config.default_tiers,
        )
        self.cache = FilterStateCache(self.registry)
        self.evaluator = FilterEvaluator(
            self.registry,
            state_provider=lambda: self.cache.state,
            failure_results=self.config.failure_results,
            platform_names=self.config.platform_names,
        )
        self.mutator = FilterMutator(self.store, self.registry, self.config.failure_results)

        # initialize caches on initial load
        self.cache.refresh(self.store.read())
        self._unsubscribe = self.store.on_change(self._on_store_change)
        slogger.store_activity("attached", {"params": len(self.store.read())})

    def _on_store_change(self, params: QueryParameters) -> None:
        """Refresh the cache and notify consumers if the filters changed."""
        if not self.cache.refresh_if_changed(params):
            slogger.cache_activity("unchanged")
            return
        slogger.cache_activity("refreshed", {"refreshes": self.cache.refreshes})
        self.notifier.emit(GLOBAL_FILTER_CHANGED, state=self.cache.state)

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()
        slogger.store_activity("detached")

    @property
    def state(self) -> FilterState:
        """Current cached filters."""
        return self.cache.state

    # Job evaluation

    def show_job(self, job: Job) -> bool:
        """Whether the job should be shown under the current filters."""
        return self.evaluator.show_job(job)

    def evaluate_job(self, job: Job) -> JobVisibility:
        """Evaluate the job, reporting which filter hides it."""
        return self.evaluator.evaluate_job(job)

    def filter_jobs(self, jobs: Iterable[Job]) -> List[Job]:
        """Jobs shown under the current filters, in input order."""
        return [job for job in jobs if self.evaluator.show_job(job)]

    def is_job_unclassified_failure(self, job: Job) -> bool:
        return self.evaluator.is_job_unclassified_failure(job)

    # Filter changes

    def add_filter(self, field: str, value: Any) -> bool:
        slogger.filter_activity("add", field, value)
        return self.mutator.add_filter(field, value)

    def remove_filter(self, field: str, value: Any = None) -> bool:
        slogger.filter_activity("remove", field, value)
        return self.mutator.remove_filter(field, value)

    def replace_filter(self, field: str, value: Any) -> bool:
        slogger.filter_activity("replace", field, value)
        return self.mutator.replace_filter(field, value)

    def remove_all_field_filters(self) -> bool:
        slogger.filter_activity("reset", "field filters")
        return self.mutator.remove_all_field_filters()

    def reset_non_field_filters(self) -> bool:
        slogger.filter_activity("reset", "non-field filters")
        return self.mutator.reset_non_field_filters()

    def toggle_filters(self, field: str, values: Iterable[Any], add: bool) -> None:
        values = list(values)
        slogger.filter_activity("toggle", field, values, {"add": add})
        self.mutator.toggle_filters(field, values, add)

    def toggle_result_statuses(self, result_statuses: Iterable[str]) -> bool:
        result_statuses = list(result_statuses)
        slogger.filter_activity("toggle", RESULT_STATUS, result_statuses)
        return self.mutator.toggle_result_statuses(result_statuses)

    def toggle_in_progress(self) -> bool:
        return self.mutator.toggle_in_progress()

    def toggle_unclassified_failures(self) -> None:
        self.mutator.toggle_unclassified_failures()

    def set_only_unclassified_failures(self) -> None:
        self.mutator.set_only_unclassified_failures()

    def set_only_superseded(self) -> None:
        self.mutator.set_only_superseded()

    # Read-only accessors

    def get_active_filters(self) -> QueryParameters:
        """Stored parameters carrying the filter prefix."""
        return {key: value for key, value in self.store.read().items() if key.startswith(FILTER_PREFIX)}

    def get_result_status_array(self) -> List[str]:
        return to_list(self.store.get(QS_RESULT_STATUS)) or self.registry.get_default(RESULT_STATUS)

    def get_classified_state_array(self) -> List[str]:
        return to_list(self.store.get(QS_CLASSIFIED_STATE)) or self.registry.get_default(
            CLASSIFIED_STATE
        )

    def get_field_filters_obj(self) -> Dict[str, List[str]]:
        """Field filters derived from the current store contents (defaults included)."""
        return build_field_filters(self.store.read(), self.registry)

    def get_field_filters_array(self) -> List[Dict[str, str]]:
        """
        Stored field filters, one entry per value, for display.

        The search string is left out. failure_classification_id entries carry
        the classification name as ``text``.

        Returns:
            List of {"field", "value", "key"[, "text"]} dicts
        """
        classification_names = {
            str(choice.id): choice.name for choice in self.registry.classification_types
        }
        field_filters = []
        for key, values in self.store.read().items():
            if not is_field_filter(key) or key == QS_SEARCH_STR:
                continue
            field = without_prefix(key)
            for value in to_list(values):
                entry = {"field": field, "value": value, "key": key}
                # classification ids are shown by name
                if field == "failure_classification_id" and value in classification_names:
                    entry["text"] = classification_names[value]
                field_filters.append(entry)
        return field_filters

    def get_non_field_filters_array(self) -> List[Dict[str, Any]]:
        return [
            {"field": key, "key": key, "value": value}
            for key, value in self.store.read().items()
            if key in NON_FIELD_FILTERS
        ]

    def is_filter_set_to_show(self, field: str, value: Any) -> bool:
        """True if ``value`` is among the stored (or default) values of ``field``."""
        values = get_filters_or_defaults(self.store.read(), self.registry, field)
        return str(value) in [str(v) for v in values]

    def strip_filters_from_query_string(self, params: QueryParameters) -> QueryParameters:
        """
        Copy of ``params`` without any filters.

        resultStatus, classifiedState and field filters are removed; non-field
        filters and unrelated parameters stay.
        """
        stripped = strip_field_filters(copy.deepcopy(params))
        stripped.pop(QS_CLASSIFIED_STATE, None)
        stripped.pop(QS_RESULT_STATUS, None)
        return stripped

    def get_field_choices(self) -> Dict[str, FilterDimension]:
        return self.registry.get_field_choices()
