"""Shared fixtures for job filters tests."""

import pytest

from job_filters.events import ChangeNotifier
from job_filters.filters.registry import FilterRegistry
from job_filters.jobs.models import Job
from job_filters.service import JobFilters
from job_filters.store.key_value_store import InMemoryKeyValueStore


@pytest.fixture
def registry():
    """Registry with the built-in defaults."""
    return FilterRegistry()


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def notifier():
    """Notifier private to the test."""
    return ChangeNotifier()


@pytest.fixture
def job_filters(store, notifier):
    """Filter service bound to the test store and notifier."""
    service = JobFilters(store, notifier=notifier)
    yield service
    service.close()


@pytest.fixture
def make_job():
    """Factory for a finished, successful, unclassified tier-1 job."""

    def _make(**fields):
        data = {
            "id": 1,
            "result": "success",
            "state": "completed",
            "failure_classification_id": 1,
            "tier": 1,
        }
        data.update(fields)
        return Job.from_dict(data)

    return _make
