"""
Translates filter intents into query string writes.

Every operation reads the current store contents, computes the new value and
writes it back. A filter whose values equal its default set is removed from
the store instead of being stored explicitly. Nothing here refreshes the
filter cache; that happens when the store notifies its listeners.
"""

import logging
from typing import Any, Iterable, List, Optional

from job_filters.constants import (
    CLASSIFIED_STATE,
    FAILURE_RESULTS,
    IN_PROGRESS_STATUSES,
    NON_FIELD_FILTERS,
    QS_CLASSIFIED_STATE,
    QS_RESULT_STATUS,
    RESULT_STATUS,
    SUPERSEDED_RESULT,
)
from job_filters.filters.registry import FilterRegistry, is_field_filter, to_list, with_prefix
from job_filters.filters.state_cache import get_filters_or_defaults
from job_filters.store.key_value_store import KeyValueStore, QueryParameters

logger = logging.getLogger(__name__)


def _unique(values: Iterable[Any]) -> List[Any]:
    """Deduplicate, keeping the order of first occurrence."""
    return list(dict.fromkeys(values))


def strip_field_filters(params: QueryParameters) -> QueryParameters:
    """Copy of ``params`` without field filter keys."""
    return {key: value for key, value in params.items() if not is_field_filter(key)}


class FilterMutator:
    """
    High-level filter changes written to a KeyValueStore.

    Example:
        ```python
        mutator = FilterMutator(store, registry)
        mutator.add_filter("job_type_symbol", "B")
        mutator.toggle_result_statuses(["pending", "running"])
        ```
    """

    def __init__(
        self,
        store: KeyValueStore,
        registry: FilterRegistry,
        failure_results: Optional[List[str]] = None,
    ):
        """
        Initialize mutator.

        Args:
            store: Store holding the persisted filters
            registry: Field registry and defaults
            failure_results: resultStatus values for the unclassified failures view
        """
        self.store = store
        self.registry = registry
        self.failure_results = list(FAILURE_RESULTS if failure_results is None else failure_results)

    def _filters_or_defaults(self, field: str) -> List[Any]:
        return get_filters_or_defaults(self.store.read(), self.registry, field)

    def add_filter(self, field: str, value: Any) -> bool:
        """
        Add a value to a filter.

        Field filters accumulate values; non-field filters are single-valued
        and get replaced. If the result equals the field's defaults the key is
        removed.

        Returns:
            True if the store changed
        """
        old_values = self._filters_or_defaults(field)

        if field not in NON_FIELD_FILTERS:
            new_value: Any = _unique([str(v) for v in old_values] + [str(value)])
        else:
            new_value = str(value)

        if self.registry.matches_defaults(field, new_value):
            new_value = None

        logger.debug(f"add set {with_prefix(field)} from {old_values} to {new_value}")
        return self.store.write(with_prefix(field), new_value)

    def remove_filter(self, field: str, value: Any = None) -> bool:
        """
        Remove a value from a filter, or the whole filter when no value is given.

        The key is removed when nothing remains or the remainder equals the
        field's defaults.

        Returns:
            True if the store changed
        """
        new_value: Optional[List[str]] = None

        if value is not None and value != "":
            old_values = self._filters_or_defaults(field)
            new_value = [str(v) for v in old_values if str(v) != str(value)]
            if not new_value or self.registry.matches_defaults(field, new_value):
                new_value = None
            logger.debug(f"remove set {with_prefix(field)} from {old_values} to {new_value}")

        return self.store.write(with_prefix(field), new_value)

    def replace_filter(self, field: str, value: Any) -> bool:
        """Overwrite a filter as-is (no defaults check, no list handling)."""
        logger.debug(f"replace set {with_prefix(field)} to {value}")
        return self.store.write(with_prefix(field), value)

    def remove_all_field_filters(self) -> bool:
        """Remove every field filter, keeping resultStatus and classifiedState."""
        return self.store.replace(strip_field_filters(self.store.read()))

    def reset_non_field_filters(self) -> bool:
        """
        Reset resultStatus and classifiedState to their defaults.

        Field filters are untouched. Undoes ``set_only_unclassified_failures``.
        """
        params = self.store.read()
        params.pop(QS_RESULT_STATUS, None)
        params.pop(QS_CLASSIFIED_STATE, None)
        return self.store.replace(params)

    def toggle_filters(self, field: str, values: Iterable[Any], add: bool) -> None:
        """
        Add or remove several values of one field.

        Writes are batched, so listeners (and the filter cache) see a single
        change once every value has been applied.

        Args:
            field: Filter field
            values: Values to add or remove
            add: True to add, False to remove
        """
        logger.debug(f"toggling {field} to {add}")
        action = self.add_filter if add else self.remove_filter
        with self.store.batch():
            for value in values:
                action(field, value)

    def toggle_result_statuses(self, result_statuses: Iterable[str]) -> bool:
        """
        Toggle a group of result statuses.

        If all of them are shown they are all removed, otherwise they are all
        added.

        Returns:
            True if the store changed
        """
        result_statuses = list(result_statuses)
        rs_values: Optional[List[str]] = [str(v) for v in self._filters_or_defaults(RESULT_STATUS)]

        if all(status in rs_values for status in result_statuses):
            rs_values = [v for v in rs_values if v not in result_statuses]
        else:
            rs_values = _unique(rs_values + result_statuses)

        if self.registry.matches_defaults(RESULT_STATUS, rs_values):
            rs_values = None
        return self.store.write(QS_RESULT_STATUS, rs_values)

    def toggle_in_progress(self) -> bool:
        """Toggle the pending and running statuses together."""
        return self.toggle_result_statuses(IN_PROGRESS_STATUSES)

    def set_only_unclassified_failures(self) -> None:
        """Show only failed jobs that have not been classified."""
        with self.store.batch():
            self.store.write(QS_RESULT_STATUS, list(self.failure_results))
            self.store.write(QS_CLASSIFIED_STATE, ["unclassified"])

    def set_only_superseded(self) -> None:
        """Show only superseded jobs, classified or not."""
        with self.store.batch():
            self.store.write(QS_RESULT_STATUS, SUPERSEDED_RESULT)
            self.store.write(QS_CLASSIFIED_STATE, self.registry.get_default(CLASSIFIED_STATE))

    def is_unclassified_failures(self) -> bool:
        """True if the store holds exactly the unclassified failures view."""
        return (
            to_list(self.store.get(QS_RESULT_STATUS)) == self.failure_results
            and to_list(self.store.get(QS_CLASSIFIED_STATE)) == ["unclassified"]
        )

    def toggle_unclassified_failures(self) -> None:
        """Switch between the unclassified failures view and the defaults."""
        logger.debug("toggleUnclassifiedFailures")
        if self.is_unclassified_failures():
            self.reset_non_field_filters()
        else:
            self.set_only_unclassified_failures()
