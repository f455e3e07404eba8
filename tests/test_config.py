"""
Config Tests - Verify defaults, validation and environment overrides.
"""

import pytest

from docscan.config import DiscoveryConfig, get_config, set_config
from docscan.models import FilterSpec


ENV_VARS = [
    "DOCSCAN_FILTER_WORKERS",
    "DOCSCAN_CANDIDATE_QUEUE_SIZE",
    "DOCSCAN_MATCH_QUEUE_SIZE",
    "DOCSCAN_STRICT",
    "DOCSCAN_SCAN_TIMEOUT",
    "DOCSCAN_INCLUDE_EXTENSIONS",
    "DOCSCAN_INCLUDE_DIRS",
    "DOCSCAN_EXCLUDE_EXTENSIONS",
    "DOCSCAN_EXCLUDE_DIRS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    """Tests for the default configuration."""

    def test_pool_and_queue_bounds(self):
        config = DiscoveryConfig()
        assert config.filter_workers == 8
        assert config.candidate_queue_size == 1000
        assert config.match_queue_size == 100
        assert config.strict is False
        assert config.scan_timeout is None

    def test_default_filters_match_spec_default(self):
        """Configured defaults produce the application's standard FilterSpec."""
        assert DiscoveryConfig().default_filters() == FilterSpec.default()

    @pytest.mark.parametrize("field,value", [
        ("filter_workers", 0),
        ("candidate_queue_size", 0),
        ("match_queue_size", -1),
        ("scan_timeout", -1.0),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            DiscoveryConfig(**{field: value})

    def test_validate_after_mutation(self):
        config = DiscoveryConfig()
        config.filter_workers = 0
        with pytest.raises(ValueError):
            config.validate()


class TestFromEnv:
    """Tests for environment overrides."""

    def test_no_env_gives_defaults(self, clean_env):
        assert DiscoveryConfig.from_env() == DiscoveryConfig()

    def test_numeric_overrides(self, clean_env):
        clean_env.setenv("DOCSCAN_FILTER_WORKERS", "3")
        clean_env.setenv("DOCSCAN_CANDIDATE_QUEUE_SIZE", "50")
        clean_env.setenv("DOCSCAN_MATCH_QUEUE_SIZE", "5")
        clean_env.setenv("DOCSCAN_SCAN_TIMEOUT", "2.5")

        config = DiscoveryConfig.from_env()
        assert config.filter_workers == 3
        assert config.candidate_queue_size == 50
        assert config.match_queue_size == 5
        assert config.scan_timeout == 2.5

    @pytest.mark.parametrize("value,expected", [
        ("1", True), ("true", True), ("YES", True), ("0", False), ("off", False),
    ])
    def test_strict_flag(self, clean_env, value, expected):
        clean_env.setenv("DOCSCAN_STRICT", value)
        assert DiscoveryConfig.from_env().strict is expected

    def test_filter_lists(self, clean_env):
        clean_env.setenv("DOCSCAN_INCLUDE_EXTENSIONS", "md, rst")
        clean_env.setenv("DOCSCAN_EXCLUDE_DIRS", ".git,build*")

        spec = DiscoveryConfig.from_env().default_filters()
        assert spec.include_extensions == frozenset({"md", "rst"})
        assert spec.exclude_dir_names == frozenset({".git", "build*"})

    def test_empty_include_means_all(self, clean_env):
        """An explicitly empty include list clears the default."""
        clean_env.setenv("DOCSCAN_INCLUDE_EXTENSIONS", "")
        assert DiscoveryConfig.from_env().include_extensions == set()

    def test_empty_exclude_clears_defaults(self, clean_env):
        """An explicitly empty exclude list turns off the default pruning."""
        clean_env.setenv("DOCSCAN_EXCLUDE_DIRS", "")
        clean_env.setenv("DOCSCAN_EXCLUDE_EXTENSIONS", "")

        config = DiscoveryConfig.from_env()
        assert config.exclude_dir_names == set()
        assert config.exclude_extensions == set()

    def test_invalid_value_raises(self, clean_env):
        clean_env.setenv("DOCSCAN_FILTER_WORKERS", "0")
        with pytest.raises(ValueError):
            DiscoveryConfig.from_env()


class TestSingleton:
    """Tests for the default config accessor."""

    def test_set_and_get(self):
        config = DiscoveryConfig(filter_workers=2)
        set_config(config)
        try:
            assert get_config() is config
        finally:
            set_config(None)

    def test_lazily_built_from_env(self, clean_env):
        set_config(None)
        clean_env.setenv("DOCSCAN_FILTER_WORKERS", "6")
        try:
            assert get_config().filter_workers == 6
        finally:
            set_config(None)
