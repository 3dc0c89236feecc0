"""
Settings persistence tests.
"""

import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from watersort.settings import (
    DEFAULT_SETTINGS,
    context_kwargs,
    load_settings,
    save_settings,
    strategy_kwargs,
)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.json")

    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_file_values_merge_over_defaults(tmp_path):
    path = tmp_path / "watersort.json"
    path.write_text(json.dumps({"seed": 17, "filter_bits": 28}), encoding="utf-8")

    settings = load_settings(path)

    assert settings["seed"] == 17
    assert settings["filter_bits"] == 28
    assert settings["strategy_name"] == DEFAULT_SETTINGS["strategy_name"]


def test_malformed_file_gives_defaults(tmp_path):
    path = tmp_path / "watersort.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_settings(path) == DEFAULT_SETTINGS


def test_non_object_file_gives_defaults(tmp_path):
    path = tmp_path / "watersort.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_settings(path) == DEFAULT_SETTINGS


def test_save_then_load(tmp_path):
    path = tmp_path / "watersort.json"
    settings = DEFAULT_SETTINGS.copy()
    settings.update({"workers": 4, "max_rounds": 50})

    save_settings(settings, path)

    assert load_settings(path) == settings


def test_strategy_kwargs_per_strategy():
    settings = DEFAULT_SETTINGS.copy()
    settings["seed"] = 3

    bucket = strategy_kwargs(settings)
    bfs = strategy_kwargs(settings, "bfs")

    assert bucket == {
        "seed": 3,
        "filter_kind": "bitarray",
        "filter_bits": 32,
        "max_states": 20_000_000,
        "workers": 1,
    }
    assert bfs == {"max_states": 20_000_000}


def test_context_kwargs():
    settings = DEFAULT_SETTINGS.copy()
    settings["max_rounds"] = 12

    assert context_kwargs(settings) == {"timeout_sec": 60.0, "max_rounds": 12}
