"""
Cache of the filters derived from the query string.

Filters are only re-derived when the prefixed part of the query string
changes, so evaluating many jobs against unchanged filters costs nothing
beyond the checks themselves.
"""

import copy
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

from job_filters.constants import (
    CLASSIFIED_STATE,
    FILTER_PREFIX,
    NON_FIELD_FILTERS,
    QS_SEARCH_STR,
    RESULT_STATUS,
)
from job_filters.filters.models import FilterState
from job_filters.filters.registry import (
    FilterRegistry,
    is_field_filter,
    to_list,
    with_prefix,
    without_prefix,
)
from job_filters.store.key_value_store import QueryParameters

logger = logging.getLogger(__name__)

_REPEATED_SPACES = re.compile(r" +(?= )")
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def filter_params(params: QueryParameters) -> QueryParameters:
    """Copy of the prefixed (filter) part of the parameters."""
    return {key: copy.deepcopy(value) for key, value in params.items() if key.startswith(FILTER_PREFIX)}


def get_filters_or_defaults(
    params: QueryParameters, registry: FilterRegistry, field: str
) -> List[Any]:
    """
    Stored values for a filter, else its defaults, else an empty list.

    Non-field filters are looked up without the prefix. The result is always
    a new list.
    """
    key = without_prefix(field) if field in NON_FIELD_FILTERS else with_prefix(field)
    stored = params.get(key)
    if stored is not None and stored != "":
        return to_list(copy.deepcopy(stored))
    default = registry.get_default(field)
    if default is not None:
        return default
    return []


def parse_search_str(value: Any) -> List[str]:
    """
    Split a stored search string into lowercase terms.

    Runs of spaces collapse to one before splitting. The value is
    percent-decoded; a "%" not followed by two hex digits raises ValueError
    and an escape sequence that is not valid UTF-8 raises UnicodeDecodeError
    (itself a ValueError).
    """
    if isinstance(value, (list, tuple)):
        value = " ".join(str(v) for v in value)
    value = str(value)
    malformed = _MALFORMED_ESCAPE.search(value)
    if malformed:
        raise ValueError(
            f"Malformed percent-escape at position {malformed.start()} in search string {value!r}"
        )
    decoded = unquote(value, errors="strict")
    return _REPEATED_SPACES.sub("", decoded).lower().split(" ")


def build_field_filters(params: QueryParameters, registry: FilterRegistry) -> Dict[str, List[str]]:
    """
    Field filters (all prefixed keys but resultStatus/classifiedState).

    Defaults are laid under the stored parameters so they are tested too.
    """
    search = dict(params)
    for key, values in registry.prefixed_defaults().items():
        search.setdefault(key, values)

    field_filters: Dict[str, List[str]] = {}
    for key, values in search.items():
        if not is_field_filter(key):
            continue
        if key == QS_SEARCH_STR:
            field_filters[without_prefix(key)] = parse_search_str(values)
        else:
            field_filters[without_prefix(key)] = [str(v).lower() for v in to_list(values)]
    return field_filters


def build_filter_state(params: QueryParameters, registry: FilterRegistry) -> FilterState:
    """Derive a FilterState that shares nothing with ``params``."""
    return FilterState(
        result_status=[str(v) for v in get_filters_or_defaults(params, registry, RESULT_STATUS)],
        classified_state=[str(v) for v in get_filters_or_defaults(params, registry, CLASSIFIED_STATE)],
        field_filters=build_field_filters(params, registry),
    )


class FilterStateCache:
    """
    Holds the current FilterState and the filter parameters it came from.

    Example:
        ```python
        cache = FilterStateCache(registry)
        cache.refresh(store.read())
        if cache.refresh_if_changed(store.read()):
            notifier.emit(GLOBAL_FILTER_CHANGED, state=cache.state)
        ```
    """

    def __init__(self, registry: FilterRegistry):
        """
        Initialize cache with default filters.

        Args:
            registry: Field registry and defaults
        """
        self.registry = registry
        self._params: Optional[QueryParameters] = None
        self._state = build_filter_state({}, registry)
        self.refreshes = 0

    @property
    def state(self) -> FilterState:
        return self._state

    def has_changed(self, params: QueryParameters) -> bool:
        """True if the filter part of ``params`` differs from the cached snapshot."""
        return self._params is None or filter_params(params) != self._params

    def refresh(self, params: QueryParameters) -> FilterState:
        """
        Re-derive the filters unconditionally.

        Args:
            params: Current store contents

        Returns:
            The new FilterState
        """
        state = build_filter_state(params, self.registry)
        self._params = filter_params(params)
        self._state = state
        self.refreshes += 1
        logger.debug(
            f"Refreshed filter cache: resultStatus={self._state.result_status}, "
            f"classifiedState={self._state.classified_state}, "
            f"fields={sorted(self._state.field_filters)}"
        )
        return self._state

    def refresh_if_changed(self, params: QueryParameters) -> bool:
        """
        Re-derive the filters only if the filter parameters changed.

        Returns:
            True if the cache was refreshed
        """
        if not self.has_changed(params):
            return False
        self.refresh(params)
        return True
