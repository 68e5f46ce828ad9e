"""Tests for the filter registry and key helpers."""

from job_filters.constants import DEFAULT_RESULT_STATUSES
from job_filters.filters.models import ClassificationChoice, MatchType
from job_filters.filters.registry import (
    FilterRegistry,
    is_field_filter,
    to_list,
    with_prefix,
    without_prefix,
)


class TestKeyHelpers:
    """Test query string key helpers."""

    def test_with_prefix(self):
        """Test prefixing field names."""
        assert with_prefix("tier") == "filter-tier"
        assert with_prefix("filter-tier") == "filter-tier"

    def test_non_field_filters_stay_unprefixed(self):
        """Test that non-field filters are not prefixed."""
        assert with_prefix("author") == "author"
        assert with_prefix("revision") == "revision"

    def test_without_prefix(self):
        """Test removing the prefix."""
        assert without_prefix("filter-job_type_name") == "job_type_name"
        assert without_prefix("author") == "author"

    def test_is_field_filter(self):
        """Test field filter detection."""
        assert is_field_filter("filter-tier") is True
        assert is_field_filter("filter-searchStr") is True
        assert is_field_filter("filter-resultStatus") is False
        assert is_field_filter("filter-classifiedState") is False
        assert is_field_filter("author") is False

    def test_to_list(self):
        """Test list coercion."""
        values = ["a"]
        assert to_list(None) is None
        assert to_list("a") == ["a"]
        assert to_list(values) == ["a"]
        assert to_list(values) is not values
        assert to_list(("a", "b")) == ["a", "b"]


class TestFilterRegistry:
    """Test registry entries and defaults."""

    def test_match_types(self, registry):
        """Test match types of registered fields."""
        assert registry.match_type_for("job_type_name") == MatchType.SUBSTR
        assert registry.match_type_for("job_type_symbol") == MatchType.EXACT_STR
        assert registry.match_type_for("filter-searchStr") == MatchType.SEARCH_STR
        assert registry.match_type_for("failure_classification_id") == MatchType.CHOICE

    def test_unknown_field_is_exact(self, registry):
        """Test that unregistered fields are compared exactly."""
        assert registry.get("custom_field") is None
        assert registry.match_type_for("custom_field") == MatchType.EXACT_STR

    def test_field_choices_exclude_search_str(self, registry):
        """Test that the search string is not offered as a field choice."""
        choices = registry.get_field_choices()
        assert "searchStr" not in choices
        assert "job_type_symbol" in choices
        assert len(choices["failure_classification_id"].choices) == 7

    def test_dimension_to_dict(self, registry):
        """Test serialization of a registry entry."""
        assert registry.get("platform").to_dict() == {"name": "platform", "matchType": "substr"}
        data = registry.get("failure_classification_id").to_dict()
        assert data["matchType"] == "choice"
        assert data["choices"][0] == {"id": 1, "name": "not classified"}

    def test_defaults(self, registry):
        """Test built-in defaults."""
        assert registry.get_default("resultStatus") == DEFAULT_RESULT_STATUSES
        assert registry.get_default("classifiedState") == ["classified", "unclassified"]
        assert registry.get_default("filter-tier") == ["1", "2"]
        assert registry.get_default("job_type_symbol") is None

    def test_get_default_returns_copy(self, registry):
        """Test that callers cannot modify the defaults."""
        registry.get_default("tier").append("3")
        assert registry.get_default("tier") == ["1", "2"]

    def test_prefixed_defaults(self, registry):
        """Test defaults keyed by query string key."""
        defaults = registry.prefixed_defaults()
        assert defaults["filter-tier"] == ["1", "2"]
        assert "filter-resultStatus" in defaults

    def test_matches_defaults_as_set(self, registry):
        """Test that default matching ignores order and duplicates."""
        assert registry.matches_defaults("tier", ["2", "1"]) is True
        assert registry.matches_defaults("tier", ["1", "2", "2"]) is True
        assert registry.matches_defaults("filter-tier", ["1", "2"]) is True
        assert registry.matches_defaults("tier", ["1"]) is False
        assert registry.matches_defaults("tier", ["1", "2", "3"]) is False

    def test_matches_defaults_without_default(self, registry):
        """Test fields without defaults never match."""
        assert registry.matches_defaults("job_type_symbol", ["b"]) is False
        assert registry.matches_defaults("author", "me") is False
        assert registry.matches_defaults("tier", None) is False

    def test_custom_configuration(self):
        """Test registry built from custom taxonomy and defaults."""
        registry = FilterRegistry(
            classification_types=[ClassificationChoice(id=9, name="custom")],
            default_result_statuses=["success"],
            default_tiers=["1"],
        )
        assert registry.get_default("resultStatus") == ["success"]
        assert registry.matches_defaults("tier", ["1"]) is True
        assert registry.get("failure_classification_id").choices[0].name == "custom"
