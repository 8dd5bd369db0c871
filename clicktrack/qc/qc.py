"""
Quality Control analysis for rendered click tracks.
Detects missing/extra clicks, onset drift and malformed WAV headers.
"""
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import torch

from clicktrack.core.io import AudioIO, HEADER_SIZE
from clicktrack.core.types import BeatSpec
from clicktrack.dsp.clicks import ClickRenderer
from clicktrack.params.canonical_defaults import SAMPLE_RATE, NUM_CHANNELS, BITS_PER_SAMPLE
from clicktrack.qc.thresholds import QC_THRESHOLDS


def _to_numpy(samples) -> np.ndarray:
    if isinstance(samples, torch.Tensor):
        samples = samples.detach().cpu().numpy()
    return np.asarray(samples).reshape(-1)


def _onsets(samples: np.ndarray) -> np.ndarray:
    """Start index of every run of non-zero samples."""
    active = samples != 0
    if active.size == 0:
        return np.array([], dtype=np.int64)
    rising = np.flatnonzero(active[1:] & ~active[:-1]) + 1
    if active[0]:
        rising = np.concatenate(([0], rising))
    return rising.astype(np.int64)


def _unmatched(a: np.ndarray, b: np.ndarray, tolerance: int) -> np.ndarray:
    """Entries of a with no entry of b within tolerance samples."""
    if a.size == 0 or b.size == 0:
        return a
    idx = np.searchsorted(b, a)
    right = b[np.clip(idx, 0, b.size - 1)]
    left = b[np.clip(idx - 1, 0, b.size - 1)]
    nearest = np.minimum(np.abs(right - a), np.abs(left - a))
    return a[nearest > tolerance]


def analyze(samples, sample_rate: int = SAMPLE_RATE, spec: Optional[BeatSpec] = None) -> Dict:
    """
    Analyze a rendered click track.

    Args:
        samples: int16 samples (tensor or array, 1D)
        sample_rate: Sample rate in Hz
        spec: When given, onsets are checked against the placement this spec implies

    Returns:
        Dict with metrics and pass/fail flags
    """
    data = _to_numpy(samples)
    onsets = _onsets(data)

    spacing = np.diff(onsets)
    mean_spacing = float(np.mean(spacing)) if spacing.size else 0.0

    metrics = {
        "num_samples": int(data.size),
        "duration_s": data.size / sample_rate,
        "click_count": int(onsets.size),
        "onsets": onsets.tolist(),
        "peak": int(np.max(np.abs(data.astype(np.int32)))) if data.size else 0,
        "mean_spacing_samples": mean_spacing,
        "estimated_bpm": 60.0 * sample_rate / mean_spacing if mean_spacing > 0 else 0.0,
    }

    failures = []
    warnings = []

    if spec is not None:
        expected_buffer = ClickRenderer(sample_rate).render(spec)
        expected = _onsets(_to_numpy(expected_buffer.samples))
        metrics["expected_click_count"] = int(expected.size)
        # Per base beat, so subdivided tracks still report the base tempo.
        metrics["estimated_bpm"] = metrics["estimated_bpm"] / spec.subdivision_factor

        if data.size != len(expected_buffer):
            failures.append(f"Length mismatch: {data.size} samples != {len(expected_buffer)} expected")

        tolerance = QC_THRESHOLDS["spacing_jitter_samples"]
        missing = _unmatched(expected, onsets, tolerance)
        extra = _unmatched(onsets, expected, tolerance)
        if missing.size:
            failures.append(f"Missing {missing.size} click(s), first at sample {int(missing[0])}")
        if extra.size:
            failures.append(f"Unexpected {extra.size} click(s), first at sample {int(extra[0])}")

        if not missing.size and not extra.size and onsets.size == expected.size:
            drift = int(np.max(np.abs(onsets - expected))) if onsets.size else 0
            metrics["max_onset_drift_samples"] = drift
            if drift > 0:
                warnings.append(f"Onsets drift up to {drift} sample(s) from expected placement")

    if spec is None and onsets.size < QC_THRESHOLDS["min_clicks"]:
        failures.append(f"No clicks found in {data.size} samples")

    status = "PASS"
    if failures:
        status = "FAIL"
    elif warnings:
        status = "WARN"

    return {
        "status": status,
        "metrics": metrics,
        "failures": failures,
        "warnings": warnings,
    }


def verify_wav(path: Union[str, Path], spec: Optional[BeatSpec] = None) -> Dict:
    """
    Check a click track file: canonical header fields, total length, then click placement.
    """
    raw = Path(path).read_bytes()
    failures = []

    try:
        header = AudioIO.read_header(raw)
    except ValueError as e:
        return {"status": "FAIL", "header": None, "failures": [str(e)], "warnings": [], "metrics": {}}

    block_align = NUM_CHANNELS * BITS_PER_SAMPLE // 8
    expected_fields = {
        "subchunk1_id": b"fmt ",
        "subchunk1_size": 16,
        "audio_format": 1,
        "num_channels": NUM_CHANNELS,
        "sample_rate": SAMPLE_RATE,
        "byte_rate": SAMPLE_RATE * block_align,
        "block_align": block_align,
        "bits_per_sample": BITS_PER_SAMPLE,
        "subchunk2_id": b"data",
    }
    for key, value in expected_fields.items():
        if header[key] != value:
            failures.append(f"Header {key}: {header[key]!r} != {value!r}")

    data_bytes = header["subchunk2_size"]
    if header["chunk_size"] != 36 + data_bytes:
        failures.append(f"Header chunk_size: {header['chunk_size']} != {36 + data_bytes}")
    if len(raw) != HEADER_SIZE + data_bytes:
        failures.append(f"File length {len(raw)} != {HEADER_SIZE + data_bytes}")

    if failures:
        return {"status": "FAIL", "header": header, "failures": failures, "warnings": [], "metrics": {}}

    samples, sample_rate = AudioIO.load_wav(path)
    result = analyze(samples, sample_rate, spec)
    result["header"] = header
    return result
