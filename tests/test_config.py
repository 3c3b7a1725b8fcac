"""
Tests for add-on options loading.
"""

import json

import pytest

from room_trilateration.config import DEFAULT_HOME_ASSISTANT_URL, AddonConfig, load_config
from room_trilateration.errors import ConfigurationError
from room_trilateration.minimizer import InitialGuess


class TestAddonConfig:
    """Test validation of parsed options."""

    def test_defaults(self, house_options):
        """Test a minimal valid configuration."""
        config = AddonConfig.from_dict(house_options)

        assert set(config.anchors) == {"kitchen", "living", "bedroom"}
        assert config.bounds.half_width == pytest.approx(5.33)
        assert config.home_assistant_url == DEFAULT_HOME_ASSISTANT_URL
        assert config.update_interval == 5
        assert config.initial_guess is InitialGuess.ORIGIN

    def test_solver_options(self, house_options):
        """Test that solver options reach the engine."""
        house_options.update(initial_guess="centroid", tolerance=1e-6, max_iterations=50, max_condition=100)

        engine = AddonConfig.from_dict(house_options).create_engine()

        assert engine.initial_guess is InitialGuess.CENTROID
        assert engine.gtol == 1e-6
        assert engine.max_iterations == 50
        assert engine.max_condition == 100

    @pytest.mark.parametrize("key", ["location_mappings", "home_dimensions", "room_assistant_url"])
    def test_missing_required_option(self, house_options, key):
        """Test that each required option is checked."""
        del house_options[key]

        with pytest.raises(ConfigurationError, match=f"Missing configuration: {key}"):
            AddonConfig.from_dict(house_options)

    @pytest.mark.parametrize("option", [
        {"initial_guess": "random"},
        {"max_iterations": "many"},
        {"home_dimensions": {"width": -1, "height": 4}},
    ])
    def test_invalid_option(self, house_options, option):
        """Test that invalid values are reported as configuration errors."""
        house_options.update(option)

        with pytest.raises(ConfigurationError):
            AddonConfig.from_dict(house_options)


class TestLoadConfig:
    """Test reading the options file."""

    def test_load(self, tmp_path, house_options):
        """Test loading options from JSON."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps(house_options))

        config = load_config(str(path))

        assert config.room_assistant_url == "http://room-assistant.local:6415"

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        """Test that malformed JSON is a configuration error."""
        path = tmp_path / "options.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(str(path))

    @pytest.mark.parametrize("content", ["[1, 2]", '"options"', "null"])
    def test_top_level_not_an_object(self, tmp_path, content):
        """Test that options which are not a JSON object are a configuration error."""
        path = tmp_path / "options.json"
        path.write_text(content)

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(str(path))
