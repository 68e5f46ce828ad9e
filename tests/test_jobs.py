"""Tests for job records and derived attributes."""

from job_filters.events import ChangeNotifier
from job_filters.jobs import Job, build_search_str, is_job_classified, platform_name, result_status
from job_filters.service import JobFilters
from job_filters.store import InMemoryKeyValueStore


class TestBuildSearchStr:
    """Test search string construction."""

    def test_fields_joined_and_lowercased(self):
        """Test platform display name comes first, then the descriptive fields."""
        data = {
            "platform": "linux64",
            "platform_option": "opt",
            "job_group_name": "Mochitests",
            "job_group_symbol": "M",
            "job_type_name": "Mochitest Browser Chrome",
            "job_type_symbol": "bc1",
            "ref_data_name": "Ubuntu VM 12.04 x64 try opt test mochitest-bc-1",
        }
        assert build_search_str(data) == (
            "linux x64 opt mochitests m mochitest browser chrome bc1 "
            "ubuntu vm 12.04 x64 try opt test mochitest-bc-1"
        )

    def test_missing_fields_skipped(self):
        """Test absent and empty fields are left out."""
        assert build_search_str({"job_type_symbol": "B", "platform_option": ""}) == "b"

    def test_custom_platform_names(self):
        """Test a supplied platform table is used."""
        assert build_search_str({"platform": "p1"}, {"p1": "Plat One"}) == "plat one"


class TestJob:
    """Test the Job model."""

    def test_from_dict_computes_search_str(self):
        """Test search_str is computed when absent."""
        job = Job.from_dict({"id": 3, "platform": "linux64", "job_type_symbol": "B"})
        assert job.search_str == "linux x64 b"

    def test_from_dict_keeps_search_str(self):
        """Test a supplied search_str is kept."""
        job = Job.from_dict({"job_type_symbol": "B", "search_str": "given"})
        assert job.search_str == "given"

    def test_constructor_computes_search_str(self):
        """Test jobs built directly get a search string too."""
        job = Job(id=1, result="success", platform="linux64", job_type_name="linux build opt")
        assert job.search_str == "linux x64 linux build opt"

    def test_constructor_keeps_search_str(self):
        job = Job(job_type_symbol="B", search_str="given")
        assert job.search_str == "given"

    def test_directly_built_job_under_search_filter(self):
        """Test a directly built job is matched by the search filter."""
        store = InMemoryKeyValueStore({"filter-searchStr": "linux"})
        filters = JobFilters(store, notifier=ChangeNotifier())
        job = Job(id=1, result="success", platform="linux64", job_type_name="linux build opt")
        assert filters.show_job(job) is True

    def test_from_dict_custom_platform_names(self):
        job = Job.from_dict({"platform": "p1"}, {"p1": "Plat One"})
        assert job.search_str == "plat one"

    def test_get_declared_and_extra_fields(self):
        """Test get reads declared fields and extras."""
        job = Job.from_dict({"result": "busted", "tier": 2})
        assert job.get("result") == "busted"
        assert job.get("tier") == 2
        assert job.get("machine_name") is None
        assert job.get("machine_name", "none") == "none"

    def test_defaults(self):
        """Test default field values."""
        job = Job()
        assert job.state == "completed"
        assert job.failure_classification_id == 1
        assert job.job_coalesced_to_guid is None


class TestStatus:
    """Test derived status helpers."""

    def test_result_status_completed(self):
        assert result_status(Job(result="testfailed")) == "testfailed"

    def test_result_status_unfinished(self):
        assert result_status(Job(result="unknown", state="running")) == "running"
        assert result_status(Job(result="unknown", state="pending")) == "pending"

    def test_result_status_superseded(self):
        """Test coalesced jobs are superseded whatever their state."""
        job = Job(result="unknown", state="pending", job_coalesced_to_guid="abc")
        assert result_status(job) == "superseded"

    def test_is_job_classified(self):
        assert is_job_classified(Job(failure_classification_id=1)) is False
        assert is_job_classified(Job(failure_classification_id=7)) is False
        assert is_job_classified(Job(failure_classification_id=4)) is True

    def test_platform_name(self):
        assert platform_name("windows10-64") == "Windows 10 x64"
        assert platform_name("unknown-platform") == "unknown-platform"
        assert platform_name("linux64", {}) == "linux64"
