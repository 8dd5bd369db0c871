import io
import struct
from pathlib import Path
from typing import Dict, Tuple, Union

import numpy as np
import soundfile as sf
import torch

from clicktrack.core.types import PcmBuffer

HEADER_SIZE = 44

# libsndfile writes the canonical 44-byte header for mono PCM_16 WAV.
_SUBTYPE = 'PCM_16'

# RIFF header, fmt chunk, data chunk header as laid out on disk. Used for parsing only.
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


class AudioIO:
    @staticmethod
    def _to_numpy(buffer: PcmBuffer) -> np.ndarray:
        samples = buffer.samples
        if isinstance(samples, torch.Tensor):
            samples = samples.detach().cpu().numpy()
        return np.asarray(samples, dtype=np.int16).reshape(-1)

    @staticmethod
    def save_wav(buffer: PcmBuffer, path: Union[str, Path]) -> int:
        """
        Writes the buffer as a canonical mono 16-bit PCM WAV. Returns bytes written.
        Raises soundfile.LibsndfileError (a RuntimeError) if the file cannot be created.
        """
        sf.write(str(path), AudioIO._to_numpy(buffer), buffer.sample_rate,
                 format='WAV', subtype=_SUBTYPE)
        return Path(path).stat().st_size

    @staticmethod
    def to_bytes(buffer: PcmBuffer) -> bytes:
        """Returns audio file as bytes (for API responses and archives)."""
        out = io.BytesIO()
        sf.write(out, AudioIO._to_numpy(buffer), buffer.sample_rate,
                 format='WAV', subtype=_SUBTYPE)
        return out.getvalue()

    @staticmethod
    def read_header(data: bytes) -> Dict[str, object]:
        """Parse the 44-byte header fields. Raises ValueError on a malformed blob."""
        if len(data) < HEADER_SIZE:
            raise ValueError(f"WAV data too short for header: {len(data)} bytes")
        fields = _HEADER_STRUCT.unpack_from(data, 0)
        header = dict(zip(
            (
                "chunk_id", "chunk_size", "format",
                "subchunk1_id", "subchunk1_size", "audio_format", "num_channels",
                "sample_rate", "byte_rate", "block_align", "bits_per_sample",
                "subchunk2_id", "subchunk2_size",
            ),
            fields,
        ))
        if header["chunk_id"] != b"RIFF" or header["format"] != b"WAVE":
            raise ValueError("Not a RIFF/WAVE file")
        return header

    @staticmethod
    def load_wav(path: Union[str, Path]) -> Tuple[np.ndarray, int]:
        """Decode a WAV file to int16 samples (mono -> 1D)."""
        data, sample_rate = sf.read(str(path), dtype="int16", always_2d=False)
        return data, sample_rate
