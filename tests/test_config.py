"""Tests for settings validation and environment configuration."""

import pytest
from pydantic import ValidationError
from py_mapgen.config import MapgenSettings, Settings, validate_settings
from py_mapgen.config.mapgen_settings import MAX_SEED
from py_mapgen.errors import ConfigurationOutOfRangeError


class TestMapgenSettings:
    """Test the per-run settings record."""

    def test_defaults(self):
        settings = MapgenSettings()
        assert settings.seed == 0xDEADBEEF
        assert settings.grid_size == 20
        assert settings.jitter == 1.0
        assert settings.elevation_threshold == 0.65
        assert settings.relaxation_iterations == 0

    def test_frozen(self):
        settings = MapgenSettings()
        with pytest.raises(ValidationError):
            settings.jitter = 2.0

    def test_domain_size_falls_back_to_grid_size(self):
        assert MapgenSettings(grid_size=7).effective_domain_size == 7.0
        assert MapgenSettings(grid_size=7, domain_size=25.0).effective_domain_size == 25.0
        assert MapgenSettings(grid_size=0).effective_domain_size == 1.0

    def test_max_seed_accepted(self):
        assert validate_settings({"seed": MAX_SEED}).seed == MAX_SEED

    @pytest.mark.parametrize("data", [
        {"jitter": -0.1},
        {"grid_size": -1},
        {"seed": -1},
        {"seed": MAX_SEED + 1},
        {"elevation_threshold": float("nan")},
        {"domain_size": 0.0},
        {"relaxation_iterations": -2},
        {"unknown": 1},
    ])
    def test_out_of_range(self, data):
        with pytest.raises(ConfigurationOutOfRangeError):
            validate_settings(data)

    @pytest.mark.parametrize("data", [
        {"jitter": -1.0},
        {"grid_size": -1},
        {"unknown": 1},
    ])
    def test_constructor_rejects_out_of_range(self, data):
        with pytest.raises(ConfigurationOutOfRangeError):
            MapgenSettings(**data)

    def test_updated_validates(self):
        settings = MapgenSettings()
        with pytest.raises(ConfigurationOutOfRangeError):
            settings.updated(jitter=-1.0)

    def test_updated_copies(self):
        settings = MapgenSettings()
        changed = settings.updated(grid_size=5)
        assert changed.grid_size == 5
        assert settings.grid_size == 20
        assert changed.seed == settings.seed


class TestSettings:
    """Test environment-driven application settings."""

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAPGEN_DEFAULT_GRID_SIZE", "7")
        monkeypatch.setenv("MAPGEN_DEFAULT_JITTER", "0.5")
        monkeypatch.setenv("MAPGEN_LOG_FORMAT", "console")

        settings = Settings()
        assert settings.default_grid_size == 7
        assert settings.log_format == "console"

        run = MapgenSettings.from_settings(settings)
        assert run.grid_size == 7
        assert run.jitter == 0.5

    def test_invalid_defaults_rejected(self, monkeypatch):
        monkeypatch.setenv("MAPGEN_DEFAULT_JITTER", "-3")
        with pytest.raises(ConfigurationOutOfRangeError):
            MapgenSettings.from_settings(Settings())
