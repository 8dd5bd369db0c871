from dataclasses import dataclass, replace
import math
from numbers import Integral, Real

import torch

from clicktrack.core.errors import InvalidParameters
from clicktrack.params.canonical_defaults import SAMPLE_RATE


def round_half_up(x: float) -> int:
    """Round a non-negative sample position to the nearest integer, .5 going up."""
    return int(math.floor(x + 0.5))


def _require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidParameters(f"{name} must be an integer, got {value!r}", field=name)
    if value <= 0:
        raise InvalidParameters(f"{name} must be positive, got {value}", field=name)


@dataclass(frozen=True)
class BeatSpec:
    """
    Beat timing handed to the encoder.

    clicks / elapsed_seconds give the seconds-per-beat estimate; base_beats sets the
    track length; subdivision_factor adds evenly spaced clicks inside each base beat.
    """
    clicks: int
    elapsed_seconds: float
    base_beats: int
    subdivision_factor: int = 1

    def validate(self) -> "BeatSpec":
        """Raise InvalidParameters unless every field is strictly positive."""
        _require_positive_int("clicks", self.clicks)
        if isinstance(self.elapsed_seconds, bool) or not isinstance(self.elapsed_seconds, Real):
            raise InvalidParameters(
                f"elapsed_seconds must be a number, got {self.elapsed_seconds!r}",
                field="elapsed_seconds",
            )
        if not math.isfinite(self.elapsed_seconds) or self.elapsed_seconds <= 0:
            raise InvalidParameters(
                f"elapsed_seconds must be positive, got {self.elapsed_seconds}",
                field="elapsed_seconds",
            )
        _require_positive_int("base_beats", self.base_beats)
        _require_positive_int("subdivision_factor", self.subdivision_factor)
        return self

    @classmethod
    def from_bpm(cls, bpm: int, base_beats: int, subdivision_factor: int = 1) -> "BeatSpec":
        """Manual tempo entry: BPM clicks in 60 seconds."""
        return cls(clicks=bpm, elapsed_seconds=60.0, base_beats=base_beats,
                   subdivision_factor=subdivision_factor)

    def with_subdivision(self, factor: int) -> "BeatSpec":
        return replace(self, subdivision_factor=factor)

    @property
    def base_beat_duration(self) -> float:
        return self.elapsed_seconds / self.clicks

    @property
    def total_duration(self) -> float:
        # Subdivisions add clicks inside the same span; they never lengthen it.
        return self.base_beat_duration * self.base_beats

    @property
    def num_beats(self) -> int:
        return self.base_beats * self.subdivision_factor

    @property
    def effective_beat_duration(self) -> float:
        return self.base_beat_duration / self.subdivision_factor

    @property
    def bpm(self) -> float:
        return 60.0 / self.base_beat_duration

    def num_samples(self, sample_rate: int = SAMPLE_RATE) -> int:
        return round_half_up(self.total_duration * sample_rate)

    def to_dict(self) -> dict:
        return {
            "clicks": self.clicks,
            "elapsed_seconds": self.elapsed_seconds,
            "base_beats": self.base_beats,
            "subdivision_factor": self.subdivision_factor,
            "bpm": self.bpm,
        }


@dataclass
class PcmBuffer:
    samples: torch.Tensor  # int16, 1D
    sample_rate: int = SAMPLE_RATE
    click_count: int = 0

    def __len__(self) -> int:
        return int(self.samples.shape[-1])

    @property
    def duration(self) -> float:
        return len(self) / self.sample_rate
