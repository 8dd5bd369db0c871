"""
Click placement: silent int16 buffer with fixed-length constant-amplitude clicks at
every (sub)beat boundary. Offsets are computed in float64 so they match the scalar
formula round(i * effective_beat_duration * sample_rate) exactly.
"""
import logging

import torch

from clicktrack.core.types import BeatSpec, PcmBuffer
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS

logger = logging.getLogger(__name__)


class ClickRenderer:
    def __init__(self, sample_rate: int = CLICKTRACK_DEFAULTS["sample_rate"]):
        self.sample_rate = sample_rate
        self.click_length = CLICKTRACK_DEFAULTS["click"]["length_samples"]
        self.click_amplitude = CLICKTRACK_DEFAULTS["click"]["amplitude"]

    def click_offsets(self, spec: BeatSpec) -> torch.Tensor:
        """
        Start sample of every click that fits in the buffer.
        Clicks whose last sample would overrun the buffer are dropped, not clamped.
        """
        spec.validate()
        num_samples = spec.num_samples(self.sample_rate)
        beat_index = torch.arange(spec.num_beats, dtype=torch.float64)
        starts = torch.floor(beat_index * spec.effective_beat_duration * self.sample_rate + 0.5)
        starts = starts.to(torch.int64)
        keep = starts + self.click_length <= num_samples
        dropped = int((~keep).sum())
        if dropped:
            logger.debug("Dropped %d click(s) overrunning %d-sample buffer", dropped, num_samples)
        return starts[keep]

    def render(self, spec: BeatSpec) -> PcmBuffer:
        """Fill a silent buffer of round(total_duration * sample_rate) samples with clicks."""
        offsets = self.click_offsets(spec)
        num_samples = spec.num_samples(self.sample_rate)
        samples = torch.zeros(num_samples, dtype=torch.int16)

        if offsets.numel() > 0:
            idx = offsets.unsqueeze(1) + torch.arange(self.click_length, dtype=torch.int64)
            samples[idx.reshape(-1)] = self.click_amplitude

        return PcmBuffer(samples=samples, sample_rate=self.sample_rate,
                         click_count=int(offsets.numel()))
