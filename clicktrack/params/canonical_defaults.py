"""
Canonical click track defaults: single source for synthesis and naming constants.
Used by the renderer, the WAV codec and the encoder so they never disagree on format.
"""

from typing import Dict, Any

# PCM format is fixed: mono, 16-bit, 44.1 kHz.
SAMPLE_RATE = 44100
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16

CLICKTRACK_DEFAULTS: Dict[str, Any] = {
    "sample_rate": SAMPLE_RATE,
    "num_channels": NUM_CHANNELS,
    "bits_per_sample": BITS_PER_SAMPLE,
    "click": {
        "length_samples": 10,
        "amplitude": 30000,  # headroom below int16 max (32767)
    },
    "output": {
        "directory": ".",
        "filename_prefix": "output_",
        "extension": ".wav",
    },
    "subdivision_factor": 1,
    # tap recorder: "m" switches to manual BPM entry
    "tap": {
        "start_key": " ",
        "manual_key": "m",
        "max_prompts": 5,
    },
}
