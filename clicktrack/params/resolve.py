"""
Input resolution: raw request/CLI values -> validated BeatSpec.
Accepts either recorded timing ({clicks, elapsed_seconds}) or a manual tempo ({bpm}).
Numeric strings and integral floats (e.g. 120.0 from JSON) are coerced; anything
else surfaces as InvalidParameters.
"""
from typing import Dict, Any, List

from clicktrack.core.errors import InvalidParameters
from clicktrack.core.types import BeatSpec
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS


def as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidParameters(f"{name} must be an integer, got {value!r}", field=name)
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise InvalidParameters(f"{name} must be an integer, got {value!r}", field=name)
    if not f.is_integer():
        raise InvalidParameters(f"{name} must be an integer, got {value!r}", field=name)
    return int(f)


def as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameters(f"{name} must be a number, got {value!r}", field=name)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidParameters(f"{name} must be a number, got {value!r}", field=name)


def resolve_beat_spec(params: Dict[str, Any]) -> BeatSpec:
    """
    Build and validate a BeatSpec from a flat dict.

    Keys:
        bpm                       manual tempo (takes precedence over clicks/elapsed_seconds)
        clicks, elapsed_seconds   recorded tap timing
        base_beats                required
        subdivision_factor        optional, default 1
    """
    if "base_beats" not in params:
        raise InvalidParameters("base_beats is required", field="base_beats")
    base_beats = as_int("base_beats", params["base_beats"])
    factor = as_int(
        "subdivision_factor",
        params.get("subdivision_factor", CLICKTRACK_DEFAULTS["subdivision_factor"]),
    )

    if params.get("bpm") is not None:
        bpm = as_int("bpm", params["bpm"])
        if bpm <= 0:
            raise InvalidParameters(f"bpm must be positive, got {bpm}", field="bpm")
        spec = BeatSpec.from_bpm(bpm, base_beats, factor)
    elif "clicks" in params and "elapsed_seconds" in params:
        spec = BeatSpec(
            clicks=as_int("clicks", params["clicks"]),
            elapsed_seconds=as_float("elapsed_seconds", params["elapsed_seconds"]),
            base_beats=base_beats,
            subdivision_factor=factor,
        )
    else:
        raise InvalidParameters("Provide either bpm or clicks and elapsed_seconds")

    return spec.validate()


def resolve_subdivisions(value: Any) -> List[int]:
    """Subdivision factors for a session export: a list of integers, each checked like any count."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidParameters(f"subdivisions must be a list of integers, got {value!r}",
                                field="subdivisions")
    return [as_int("subdivisions", k) for k in value]
