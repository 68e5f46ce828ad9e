"""Job visibility filters synchronized with a query-string style key/value store."""

__version__ = "1.0.0"
