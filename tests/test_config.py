"""
Test: settings resolution from defaults, JSON file and environment.
"""
import json

import pytest

from marktrack.config import Settings, load_settings
from marktrack.core.exceptions import ConfigurationError


class TestSettings:
    def test_defaults(self):
        settings = load_settings(environ={})
        assert settings.port == 7878
        assert settings.database_type == "sqlite"
        assert settings.id_length == 4
        assert settings.random_seed is None

    def test_config_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 9000, "log_level": "debug", "random_seed": 3}))
        settings = load_settings(str(path), environ={})
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"
        assert settings.random_seed == 3

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 9000}))
        settings = load_settings(str(path), environ={"MARKTRACK_PORT": "9100", "LOCAL_DB": ":memory:"})
        assert settings.port == 9100
        assert settings.database_path == ":memory:"

    def test_empty_environment_values_ignored(self):
        assert load_settings(environ={"MARKTRACK_PORT": ""}).port == 7878

    @pytest.mark.parametrize("overrides", [
        {"port": "http"},
        {"port": 0},
        {"id_length": 0},
        {"initial_courses": -2},
        {"log_level": "LOUD"},
        {"colour": "blue"},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            Settings.from_mapping(overrides)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path / "absent.json"), environ={})

    def test_bad_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_settings(str(path), environ={})

    def test_to_dict_round_trip(self):
        settings = Settings(port=8001)
        assert Settings.from_mapping(settings.to_dict()) == settings
