"""Key/value stores for persisted filter state."""

from job_filters.store.key_value_store import (
    InMemoryKeyValueStore,
    KeyValueStore,
    QueryParameters,
    QueryStringStore,
    parse_query_string,
)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "QueryStringStore",
    "QueryParameters",
    "parse_query_string",
]
