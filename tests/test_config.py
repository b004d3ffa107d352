from __future__ import annotations

import json

import pytest

from bloomgarden.__main__ import build_parser, load_config
from bloomgarden.config import CONFIG_ENV_VAR, PRESETS, GardenConfig, get_preset
from bloomgarden.constants import FRAME_INTERVAL_MS


def test_defaults_without_a_file(monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = GardenConfig.load()
    assert config == GardenConfig()
    assert config.preset == "classic"
    assert config.max_flowers is None


def test_missing_file_gives_defaults(tmp_path) -> None:
    assert GardenConfig.load(str(tmp_path / "nope.json")) == GardenConfig()


def test_corrupt_file_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    assert GardenConfig.load(str(path)) == GardenConfig()

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert GardenConfig.load(str(path)) == GardenConfig()


def test_valid_values_are_loaded_and_bad_ones_replaced(tmp_path, monkeypatch) -> None:
    path = tmp_path / "garden.json"
    path.write_text(
        json.dumps(
            {
                "preset": "meadow",
                "max_flowers": 50,
                "seed": 3,
                "log_level": "debug",
                "frame_interval_ms": -4,
                "window_width": "wide",
                "unknown": True,
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    config = GardenConfig.load()
    assert config.preset == "meadow"
    assert config.max_flowers == 50
    assert config.seed == 3
    assert config.log_level == "DEBUG"
    assert config.frame_interval_ms == FRAME_INTERVAL_MS
    assert config.window_width == GardenConfig().window_width


def test_unknown_preset_and_bad_cap_are_reset() -> None:
    config = GardenConfig.from_dict({"preset": "jungle", "max_flowers": 0})
    assert config.preset == "classic"
    assert config.max_flowers is None


def test_get_preset_rejects_unknown_names() -> None:
    assert get_preset("meadow") is PRESETS["meadow"]
    with pytest.raises(ValueError, match="unknown preset"):
        get_preset("jungle")


def test_command_line_overrides_the_file(tmp_path) -> None:
    path = tmp_path / "garden.json"
    path.write_text(json.dumps({"preset": "meadow", "seed": 1}), encoding="utf-8")
    args = build_parser().parse_args(
        ["--config", str(path), "--preset", "classic", "--max-flowers", "10", "--log-level", "warning"]
    )
    config = load_config(args)
    assert config.preset == "classic"
    assert config.max_flowers == 10
    assert config.seed == 1
    assert config.log_level == "WARNING"


def test_command_line_rejects_bad_values() -> None:
    parser = build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--preset", "jungle"])
    with pytest.raises(SystemExit):
        parser.parse_args(["--max-flowers", "0"])


def test_wrongly_typed_values_fall_back_instead_of_crashing() -> None:
    config = GardenConfig.from_dict({"preset": ["meadow"], "log_level": {"level": "debug"}})
    assert config.preset == "classic"
    assert config.log_level == "INFO"


def test_boolean_cap_and_seed_are_rejected() -> None:
    config = GardenConfig.from_dict({"max_flowers": True, "seed": False})
    assert config.max_flowers is None
    assert config.seed is None


def test_corrupt_typed_file_loads_defaults(tmp_path) -> None:
    path = tmp_path / "garden.json"
    path.write_text(json.dumps({"preset": ["meadow"], "max_flowers": True}), encoding="utf-8")
    assert GardenConfig.load(str(path)) == GardenConfig()
