"""
Input resolution: raw dicts (API bodies, CLI values) -> validated BeatSpec.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from clicktrack.core.errors import InvalidParameters
from clicktrack.params.resolve import resolve_beat_spec, resolve_subdivisions
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS


def test_defaults_snapshot():
    assert CLICKTRACK_DEFAULTS["sample_rate"] == 44100
    assert CLICKTRACK_DEFAULTS["num_channels"] == 1
    assert CLICKTRACK_DEFAULTS["bits_per_sample"] == 16
    assert CLICKTRACK_DEFAULTS["click"]["length_samples"] == 10
    assert CLICKTRACK_DEFAULTS["click"]["amplitude"] == 30000
    assert CLICKTRACK_DEFAULTS["output"]["filename_prefix"] == "output_"


def test_bpm_entry_maps_to_sixty_seconds():
    spec = resolve_beat_spec({"bpm": 120, "base_beats": 8})
    assert spec.clicks == 120
    assert spec.elapsed_seconds == 60.0
    assert spec.subdivision_factor == 1


def test_recorded_timing():
    spec = resolve_beat_spec({"clicks": 9, "elapsed_seconds": "4.1", "base_beats": 189,
                              "subdivision_factor": 2})
    assert (spec.clicks, spec.elapsed_seconds, spec.base_beats, spec.subdivision_factor) == (9, 4.1, 189, 2)


def test_integral_floats_are_coerced():
    spec = resolve_beat_spec({"bpm": 120.0, "base_beats": 4.0})
    assert spec.clicks == 120 and isinstance(spec.clicks, int)
    assert spec.base_beats == 4 and isinstance(spec.base_beats, int)


def test_bpm_wins_over_recorded_timing():
    spec = resolve_beat_spec({"bpm": 100, "clicks": 3, "elapsed_seconds": 1.0, "base_beats": 4})
    assert spec.clicks == 100


@pytest.mark.parametrize("params", [
    {"bpm": 120},
    {"base_beats": 4},
    {"clicks": 4, "base_beats": 4},
    {"bpm": 0, "base_beats": 4},
    {"bpm": 120.5, "base_beats": 4},
    {"bpm": "fast", "base_beats": 4},
    {"bpm": 120, "base_beats": 4, "subdivision_factor": 0},
    {"clicks": 4, "elapsed_seconds": -1, "base_beats": 4},
    {"clicks": 4, "elapsed_seconds": None, "base_beats": 4},
    {"bpm": True, "base_beats": 4},
])
def test_rejected_inputs(params):
    with pytest.raises(InvalidParameters):
        resolve_beat_spec(params)


def test_subdivisions_list_is_coerced():
    assert resolve_subdivisions([2, 3.0, "4"]) == [2, 3, 4]
    assert resolve_subdivisions(None) == []


@pytest.mark.parametrize("value", ["24", 4, [2.5], [False], ["two"]])
def test_subdivisions_rejected(value):
    with pytest.raises(InvalidParameters):
        resolve_subdivisions(value)
