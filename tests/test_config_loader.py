"""Tests for filter configuration loading."""

import pytest

from job_filters.config_loader import ConfigLoader, FilterConfig
from job_filters.constants import DEFAULT_RESULT_STATUSES, FAILURE_RESULTS
from job_filters.exceptions import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    """Write a config file and return its path."""

    def _write(content: str):
        path = tmp_path / "filters.yaml"
        path.write_text(content)
        return path

    return _write


class TestConfigLoader:
    """Test ConfigLoader."""

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing file falls back to built-in values."""
        loader = ConfigLoader(str(tmp_path / "missing.yaml"))
        config = loader.get_filter_config()
        assert config.default_result_statuses == DEFAULT_RESULT_STATUSES
        assert config.failure_results == FAILURE_RESULTS
        assert config.default_tiers == ["1", "2"]

    def test_partial_override(self, config_file):
        """Test file sections replace defaults, others stay built-in."""
        path = config_file("default_tiers: ['1', '2', '3']\nfailure_results: [busted]\n")
        config = ConfigLoader(str(path)).get_filter_config()
        assert config.default_tiers == ["1", "2", "3"]
        assert config.failure_results == ["busted"]
        assert config.tiers == ["1", "2", "3"]
        assert len(config.classification_types) == 7

    def test_empty_file(self, config_file):
        """Test an empty file yields defaults."""
        config = ConfigLoader(str(config_file(""))).get_filter_config()
        assert config == FilterConfig()

    def test_unknown_keys_ignored(self, config_file):
        """Test unknown sections are ignored."""
        config = ConfigLoader(str(config_file("colors: {busted: red}\n"))).get_filter_config()
        assert not hasattr(config, "colors")

    def test_invalid_yaml(self, config_file):
        """Test malformed YAML raises ConfigurationError."""
        loader = ConfigLoader(str(config_file("tiers: [1, 2\n")))
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            loader.get_filter_config()

    def test_non_mapping(self, config_file):
        """Test a top-level list raises ConfigurationError."""
        loader = ConfigLoader(str(config_file("- success\n- busted\n")))
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            loader.get_filter_config()

    def test_invalid_schema(self, config_file):
        """Test a section of the wrong type raises ConfigurationError."""
        loader = ConfigLoader(str(config_file("classification_types: {id: 1}\n")))
        with pytest.raises(ConfigurationError, match="Invalid filter config"):
            loader.get_filter_config()

    def test_env_var_path(self, config_file, monkeypatch):
        """Test JOB_FILTERS_CONFIG is used when no path is given."""
        path = config_file("failure_results: [exception]\n")
        monkeypatch.setenv("JOB_FILTERS_CONFIG", str(path))
        assert ConfigLoader().get_filter_config().failure_results == ["exception"]

    def test_explicit_path_wins_over_env(self, config_file, tmp_path, monkeypatch):
        """Test an explicit path takes precedence."""
        monkeypatch.setenv("JOB_FILTERS_CONFIG", str(config_file("failure_results: [exception]\n")))
        loader = ConfigLoader(str(tmp_path / "missing.yaml"))
        assert loader.get_filter_config().failure_results == FAILURE_RESULTS

    def test_cache_and_clear(self, config_file):
        """Test results are cached until clear_cache."""
        path = config_file("failure_results: [busted]\n")
        loader = ConfigLoader(str(path))
        first = loader.get_filter_config()

        path.write_text("failure_results: [exception]\n")
        assert loader.get_filter_config() is first

        loader.clear_cache()
        assert loader.get_filter_config().failure_results == ["exception"]

    def test_bundled_config_matches_defaults(self, monkeypatch):
        """Test the shipped config/filters.yaml agrees with the built-in values."""
        monkeypatch.delenv("JOB_FILTERS_CONFIG", raising=False)
        assert ConfigLoader().get_filter_config() == FilterConfig()

    def test_result_statuses_section_ignored(self, config_file):
        """Test a stray result_statuses section is ignored like any unknown key."""
        path = config_file("result_statuses: [success]\n")
        config = ConfigLoader(str(path)).get_filter_config()
        assert "result_statuses" not in config.model_dump()
        assert config.default_result_statuses == DEFAULT_RESULT_STATUSES
