"""Load filter configuration from config/filters.yaml."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from job_filters import constants
from job_filters.exceptions import ConfigurationError
from job_filters.filters.models import ClassificationChoice

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "filters.yaml"


class FilterConfig(BaseModel):
    """
    Filter configuration.

    Every section is optional in the YAML file; missing sections fall back to
    the built-in values in job_filters.constants.
    """

    default_result_statuses: List[str] = Field(
        default_factory=lambda: list(constants.DEFAULT_RESULT_STATUSES),
        description="Result statuses shown when no resultStatus filter is stored",
    )
    failure_results: List[str] = Field(
        default_factory=lambda: list(constants.FAILURE_RESULTS),
        description="Results that count as failures",
    )
    classification_types: List[ClassificationChoice] = Field(
        default_factory=lambda: [
            ClassificationChoice(**choice) for choice in constants.CLASSIFICATION_TYPES
        ],
        description="Failure classification taxonomy, in display order",
    )
    tiers: List[str] = Field(default_factory=lambda: list(constants.TIERS))
    default_tiers: List[str] = Field(default_factory=lambda: list(constants.DEFAULT_TIERS))
    platform_names: Dict[str, str] = Field(
        default_factory=lambda: dict(constants.PLATFORM_NAMES),
        description="Platform key to display name",
    )

    model_config = ConfigDict(extra="ignore")


class ConfigLoader:
    """
    Loads filter configuration from a YAML file.

    The file location is resolved from, in order: the explicit path, the
    JOB_FILTERS_CONFIG environment variable, then config/filters.yaml at the
    project root. A missing file is not an error; built-in defaults are used.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to the filters YAML file
        """
        env_path = os.getenv("JOB_FILTERS_CONFIG")
        self.config_path = Path(config_path or env_path or DEFAULT_CONFIG_PATH)
        self._cache: Dict[str, Any] = {}

    def _read_raw(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            logger.warning(f"Filter config not found at {self.config_path}, using defaults")
            return {}

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Filter config {self.config_path} must be a mapping, got {type(data).__name__}"
            )
        return data

    def get_filter_config(self) -> FilterConfig:
        """
        Get the full filter configuration.

        Returns:
            FilterConfig with file values laid over the built-in defaults

        Raises:
            ConfigurationError: If the file exists but cannot be parsed or validated
        """
        if "filter_config" in self._cache:
            return self._cache["filter_config"]

        raw = self._read_raw()
        try:
            config = FilterConfig(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid filter config in {self.config_path}: {e}") from e

        self._cache["filter_config"] = config
        logger.info(
            f"Loaded filter config: {len(config.default_result_statuses)} default statuses, "
            f"{len(config.classification_types)} classification types, "
            f"{len(config.platform_names)} platform names"
        )
        return config

    def clear_cache(self) -> None:
        """Force the next call to re-read the file."""
        self._cache.clear()
