"""
Key/value stores holding the persisted filter state.

The store is the single source of truth for filters. It is shared with
external writers (e.g. back/forward navigation), so consumers re-read it on
every change notification instead of remembering their own writes.
"""

import copy
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Union
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

QueryValue = Union[str, List[str]]
QueryParameters = Dict[str, QueryValue]
ChangeListener = Callable[[QueryParameters], None]


def _normalize_value(value: Any) -> Optional[QueryValue]:
    """Stored values are strings or lists of strings; empty lists mean "unset"."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return [str(v) for v in value]
    return str(value)


class KeyValueStore(ABC):
    """
    Ordered string-keyed store with change notification.

    Subclasses provide raw access to the parameters; this base class handles
    normalization, change detection and listener notification. Listeners are
    called synchronously after the store settles on a new value, once per
    change, or once per batch when writes happen inside ``batch()``.
    """

    def __init__(self):
        self._listeners: List[ChangeListener] = []
        self._batch_depth = 0
        self._changed_in_batch = False

    @abstractmethod
    def _load(self) -> QueryParameters:
        """Return the stored parameters (may be the live mapping)."""

    @abstractmethod
    def _save(self, params: QueryParameters) -> None:
        """Persist the full parameter mapping."""

    def read(self) -> QueryParameters:
        """
        Read all parameters.

        Returns:
            Deep copy of the stored parameters; mutating it does not affect the store
        """
        return copy.deepcopy(self._load())

    def get(self, key: str) -> Optional[QueryValue]:
        """Get one value (copied), or None if the key is not stored."""
        return copy.deepcopy(self._load().get(key))

    def write(self, key: str, value: Any) -> bool:
        """
        Set or remove one key.

        Args:
            key: Parameter name
            value: String, list of strings, or None/empty list to remove the key

        Returns:
            True if the store changed
        """
        params = self.read()
        normalized = _normalize_value(value)
        if normalized is None:
            params.pop(key, None)
        else:
            params[key] = normalized
        return self.replace(params)

    def replace(self, params: QueryParameters) -> bool:
        """
        Replace every parameter at once.

        Returns:
            True if the store changed (unchanged content does not notify)
        """
        new_params: QueryParameters = {}
        for key, value in params.items():
            normalized = _normalize_value(value)
            if normalized is not None:
                new_params[key] = normalized

        if new_params == self._load():
            return False

        self._save(new_params)
        logger.debug(f"Store changed: {new_params}")
        self._changed()
        return True

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            listener: Called with a snapshot of the new parameters

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator["KeyValueStore"]:
        """
        Group several writes into a single change notification.

        Reads inside the batch see every write made so far; listeners are
        notified once when the outermost batch exits, and only if something
        changed.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._changed_in_batch:
                self._changed_in_batch = False
                self._notify()

    def _changed(self) -> None:
        if self._batch_depth:
            self._changed_in_batch = True
        else:
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.read())


class InMemoryKeyValueStore(KeyValueStore):
    """Store keeping its parameters in a dict."""

    def __init__(self, params: Optional[QueryParameters] = None):
        """
        Initialize store.

        Args:
            params: Initial parameters (copied)
        """
        super().__init__()
        self._params: QueryParameters = {}
        for key, value in (params or {}).items():
            normalized = _normalize_value(value)
            if normalized is not None:
                self._params[key] = normalized

    def _load(self) -> QueryParameters:
        return self._params

    def _save(self, params: QueryParameters) -> None:
        self._params = params

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._params!r})"


def parse_query_string(query_string: str) -> QueryParameters:
    """
    Parse an address bar query string.

    Repeated keys become lists, single keys stay strings. A leading "?" is
    ignored.
    """
    params: QueryParameters = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params


class QueryStringStore(InMemoryKeyValueStore):
    """
    Store backed by an address bar query string.

    ``navigate`` models an external writer replacing the whole query string.
    """

    @classmethod
    def from_query_string(cls, query_string: str) -> "QueryStringStore":
        return cls(parse_query_string(query_string))

    def to_query_string(self) -> str:
        """Serialize the parameters, repeating keys for list values."""
        return urlencode(list(self._params.items()), doseq=True)

    def navigate(self, query_string: str) -> bool:
        """
        Replace the store contents from a query string.

        Returns:
            True if the store changed
        """
        return self.replace(parse_query_string(query_string))
