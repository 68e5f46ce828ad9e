"""Custom exceptions for the job filters package.

Ordinary absence (unset filters, jobs missing a field) is never an error;
these exceptions cover broken configuration only.
"""


class JobFiltersError(Exception):
    """Base exception for all job filters errors."""

    pass


class ConfigurationError(JobFiltersError):
    """Raised when the filter configuration cannot be used.

    Examples:
    - Configuration file is not valid YAML
    - A section has the wrong shape (e.g. classification types without ids)
    """

    pass
