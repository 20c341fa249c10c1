"""
Unit tests for the configuration manager.
"""

from pathlib import Path

import pytest
import yaml

from linref_engine.config_manager import ConfigManager, EngineConfig
from linref_engine.geofence import GeofenceValidator


def write_config(path: Path, config: dict) -> Path:
    with open(path, 'w') as f:
        yaml.dump(config, f)
    return path


@pytest.fixture
def config_dict():
    return {
        "name": "test_engine",
        "log_level": "debug",
        "jurisdictions": {
            "path": "/data/jurisdictions.csv",
            "cache": {"ttl_seconds": 60, "key": "test_jurisdictions"},
        },
        "geofence": {
            "validation_mode": "all",
            "polygon": [
                {"lat": 0, "lng": 0},
                {"lat": 0, "lng": 10},
                {"lat": 10, "lng": 10},
                {"lat": 10, "lng": 0},
            ],
        },
    }


class TestLoad:

    def test_load_file(self, tmp_path, config_dict):
        path = write_config(tmp_path / "engine.yaml", config_dict)
        config = ConfigManager(path).load()

        assert isinstance(config, EngineConfig)
        assert config.name == "test_engine"
        assert config.log_level == "DEBUG"
        assert config.jurisdiction_cache_ttl == 60
        assert config.jurisdiction_cache_key == "test_jurisdictions"
        assert config.jurisdictions_path == Path("/data/jurisdictions.csv")
        assert config.geofence["validation_mode"] == "all"
        assert config.geofence["allow_without_location"] is False

    def test_defaults(self):
        config = ConfigManager().load_dict({"name": "minimal"})

        assert config.log_level == "INFO"
        assert config.jurisdiction_cache_ttl == 300
        assert config.jurisdiction_cache_key == "jurisdictions_all"
        assert config.jurisdictions_path is None
        assert config.geofence == {"validation_mode": "any", "allow_without_location": False}

    def test_path_argument_overrides_init(self, tmp_path, config_dict):
        path = write_config(tmp_path / "engine.yaml", config_dict)
        config = ConfigManager(tmp_path / "other.yaml").load(path)
        assert config.name == "test_engine"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "missing.yaml").load()

    def test_no_path(self):
        with pytest.raises(ValueError):
            ConfigManager().load()

    def test_to_dict(self, config_dict):
        data = ConfigManager().load_dict(config_dict).to_dict()
        assert data["jurisdictions_path"] == "/data/jurisdictions.csv"
        assert data["jurisdiction_cache_ttl"] == 60


class TestEnvironmentSubstitution:

    def test_variable(self, monkeypatch):
        monkeypatch.setenv("LINREF_TEST_DATA", "/srv/data")
        config = ConfigManager().load_dict({
            "name": "env",
            "jurisdictions": {"path": "${LINREF_TEST_DATA}/jurisdictions.csv"},
        })
        assert config.jurisdictions_path == Path("/srv/data/jurisdictions.csv")

    def test_default(self, monkeypatch):
        monkeypatch.delenv("LINREF_TEST_DATA", raising=False)
        config = ConfigManager().load_dict({
            "name": "env",
            "jurisdictions": {"path": "${LINREF_TEST_DATA:data}/jurisdictions.csv"},
        })
        assert config.jurisdictions_path == Path("data/jurisdictions.csv")

    def test_nested_lists(self, monkeypatch):
        monkeypatch.setenv("LINREF_ZONE", "Yard")
        config = ConfigManager().load_dict({
            "name": "env",
            "geofence": {"polygons": [{"name": "${LINREF_ZONE}"}]},
        })
        assert config.geofence["polygons"][0]["name"] == "Yard"


class TestValidation:

    @pytest.mark.parametrize("config, message", [
        ({}, "name"),
        ({"name": "x", "log_level": "LOUD"}, "log_level"),
        ({"name": "x", "jurisdictions": []}, "jurisdictions"),
        ({"name": "x", "jurisdictions": {"cache": "yes"}}, "cache"),
        ({"name": "x", "jurisdictions": {"cache": {"ttl_seconds": 0}}}, "positive"),
        ({"name": "x", "jurisdictions": {"cache": {"ttl_seconds": "soon"}}}, "number"),
        ({"name": "x", "geofence": "on"}, "geofence"),
        ({"name": "x", "geofence": {"validation_mode": "most"}}, "validation_mode"),
    ])
    def test_invalid(self, config, message):
        with pytest.raises(ValueError, match=message):
            ConfigManager().load_dict(config)

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            ConfigManager().load_dict(["name"])


class TestGetSection:

    def test_before_load(self):
        with pytest.raises(ValueError):
            ConfigManager().get_section("geofence")

    def test_section(self, config_dict):
        manager = ConfigManager()
        manager.load_dict(config_dict)
        assert manager.get_section("jurisdictions")["cache"]["ttl_seconds"] == 60

    def test_missing_section(self):
        manager = ConfigManager()
        manager.load_dict({"name": "x"})
        with pytest.raises(ValueError):
            manager.get_section("geofence")


class TestExampleConfig:

    def test_example_loads(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LINREF_DATA", raising=False)
        path = tmp_path / "example.yaml"
        ConfigManager().save_example_config(path)

        config = ConfigManager(path).load()
        assert config.name == "linref_engine"
        assert config.jurisdictions_path == Path("data/jurisdictions.csv")

    def test_example_geofence_usable(self, tmp_path):
        path = tmp_path / "example.yaml"
        ConfigManager().save_example_config(path)
        config = ConfigManager(path).load()

        outcome = GeofenceValidator().validate_request(config.geofence, 23.05, 90.05)
        assert outcome.accepted
        assert outcome.zone == "Site Office"
