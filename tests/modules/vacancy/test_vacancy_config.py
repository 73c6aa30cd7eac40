"""Tests for vacancy configuration loading and validation."""

import json

import pytest

from world_vacancy.modules.vacancy import (
    ConfigError,
    VacancyConfig,
    ZoneConfig,
    load_config,
    load_config_file,
)


PLUGIN_CONFIG = {
    "cooldown-seconds": 30,
    "worlds": {
        "world_nether": {"view-distance": 4, "simulation-distance": 3},
        "world_the_end": {"view-distance": 2, "simulation-distance": 2},
    },
}


class TestLoadConfig:
    def test_plugin_layout(self):
        config = load_config(PLUGIN_CONFIG)

        assert config.cooldown_seconds == 30
        assert [z.name for z in config.zones] == ["world_nether", "world_the_end"]
        nether = config.get_zone("world_nether")
        assert nether.reduced_view_distance == 4
        assert nether.reduced_sim_distance == 3

    def test_underscore_layout(self):
        config = load_config(
            {
                "cooldown_seconds": 15,
                "settle_delay": 2,
                "reload_settle_delay": 0.25,
                "zones": {"alpha": {"view_distance": 4, "simulation_distance": 3}},
            }
        )

        assert config.cooldown_seconds == 15
        assert config.settle_delay == 2
        assert config.reload_settle_delay == 0.25
        assert config.zones == (ZoneConfig("alpha", 4, 3),)

    def test_defaults(self):
        config = load_config({"worlds": {"alpha": {"view-distance": 4, "simulation-distance": 3}}})

        assert config.cooldown_seconds == 10
        assert config.settle_delay == 1.0
        assert config.reload_settle_delay == 0.5
        assert config.command_prefix == "viewdistancetweaks"

    def test_empty_config_has_no_zones(self):
        config = load_config({})

        assert config.zones == ()
        assert config.get_zone("alpha") is None

    @pytest.mark.parametrize("cooldown", [0, -5, "ten", 1.5, True])
    def test_invalid_cooldown_rejected(self, cooldown):
        with pytest.raises(ConfigError):
            load_config({"cooldown-seconds": cooldown})

    @pytest.mark.parametrize(
        "zone",
        [
            {"view-distance": -1, "simulation-distance": 3},
            {"view-distance": 4, "simulation-distance": -2},
            {"view-distance": "far", "simulation-distance": 3},
            {"view-distance": 4},
            "not a mapping",
        ],
    )
    def test_invalid_zone_rejected(self, zone):
        with pytest.raises(ConfigError):
            load_config({"worlds": {"alpha": zone}})

    def test_worlds_must_be_mapping(self):
        with pytest.raises(ConfigError):
            load_config({"worlds": ["alpha"]})

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_config("cooldown: 10")

    def test_negative_reload_settle_rejected(self):
        with pytest.raises(ConfigError):
            VacancyConfig(reload_settle_delay=-0.1)

    def test_duplicate_zone_names_rejected(self):
        with pytest.raises(ConfigError):
            VacancyConfig(zones=(ZoneConfig("a", 1, 1), ZoneConfig("a", 2, 2)))


class TestLoadConfigFile:
    def test_json_file(self, tmp_path):
        path = tmp_path / "vacancy.json"
        path.write_text(json.dumps(PLUGIN_CONFIG), encoding="utf-8")

        config = load_config_file(path)

        assert config.cooldown_seconds == 30
        assert len(config.zones) == 2

    def test_toml_file(self, tmp_path):
        path = tmp_path / "vacancy.toml"
        path.write_text(
            'cooldown-seconds = 20\n'
            '\n'
            '[worlds.world_nether]\n'
            'view-distance = 4\n'
            'simulation-distance = 3\n',
            encoding="utf-8",
        )

        config = load_config_file(path)

        assert config.cooldown_seconds == 20
        assert config.zones == (ZoneConfig("world_nether", 4, 3),)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "vacancy.yml"
        path.write_text("cooldown-seconds: 10\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config_file(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "vacancy.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config_file(path)
