"""Tests for search configuration loading and validation."""

from io import StringIO

import pytest
import yaml
from rich.console import Console

from powerpairs.config import (
    ConfigManager,
    SearchConfig,
    create_default_config_file,
)
from powerpairs.engine.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any POWERPAIRS_* variables from the environment."""
    import os
    for name in list(os.environ):
        if name.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(name)


class TestSearchConfig:
    """Test SearchConfig dataclass."""

    def test_defaults(self):
        config = SearchConfig()

        assert config.power_count == 10
        assert config.workers is None
        assert config.progress_interval == 0.1
        assert config.progress_skip_polls == 20
        assert config.show_progress is True
        assert config.move_rule == "worst_swap"
        assert config.log_level == "WARNING"
        config.validate()

    def test_power_table(self):
        table = SearchConfig(power_count=4).power_table()
        assert list(table) == [1, 2, 4, 8]

    def test_from_dict(self):
        config = SearchConfig.from_dict({"workers": 3, "move_rule": "best_swap"})

        assert config.workers == 3
        assert config.move_rule == "best_swap"
        assert config.power_count == 10

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SearchConfig.from_dict({"workers": 3, "colour": "blue"})

        assert exc_info.value.errors == ["unknown key 'colour'"]

    def test_validate_collects_every_error(self):
        config = SearchConfig(power_count=1, workers=0, move_rule="random",
                              progress_interval=0, log_level="LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert len(exc_info.value.errors) == 5

    def test_validate_power_count_needs_four(self):
        """Test a table without 4 is rejected: its triplet pool is finite."""
        with pytest.raises(ConfigurationError) as exc_info:
            SearchConfig(power_count=2).validate()

        assert "between 3 and 62" in exc_info.value.errors[0]

    def test_validate_power_count_upper_bound(self):
        with pytest.raises(ConfigurationError):
            SearchConfig(power_count=63).validate()


class TestConfigManager:
    """Test file and environment loading."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigManager(tmp_path / "absent.yml").load()
        assert config == SearchConfig()

    def test_load_file(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text(yaml.dump({"workers": 2, "power_count": 12}))

        config = ConfigManager(path).load()

        assert config.workers == 2
        assert config.power_count == 12

    def test_empty_file(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text("")

        assert ConfigManager(path).load() == SearchConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text("workers: [1, 2\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(path).load()

        assert exc_info.value.source == str(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "search.yml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "search.yml"
        path.write_text(yaml.dump({"workers": 2, "show_progress": True}))
        monkeypatch.setenv("POWERPAIRS_WORKERS", "5")
        monkeypatch.setenv("POWERPAIRS_SHOW_PROGRESS", "false")
        monkeypatch.setenv("POWERPAIRS_LOG_DIR", "")

        config = ConfigManager(path).load()

        assert config.workers == 5
        assert config.show_progress is False
        assert config.log_dir is None

    def test_env_auto_workers(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POWERPAIRS_WORKERS", "auto")
        assert ConfigManager(tmp_path / "absent.yml").load().workers is None

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POWERPAIRS_POWER_COUNT", "many")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(tmp_path / "absent.yml").load()

        assert exc_info.value.source == "env"

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "search.yml"
        ConfigManager(path).save(SearchConfig(workers=6, move_rule="best_swap"))

        config = ConfigManager(path).load()

        assert config.workers == 6
        assert config.move_rule == "best_swap"

    def test_display(self, tmp_path):
        output = StringIO()
        ConfigManager(tmp_path / "absent.yml").display(Console(file=output, width=100))

        assert "power_count" in output.getvalue()


class TestHelpers:
    """Test module-level helpers."""

    def test_create_default_config_file(self, tmp_path):
        path = create_default_config_file(tmp_path / "default.yml")

        assert path.exists()
        assert yaml.safe_load(path.read_text()) == SearchConfig().to_dict()
