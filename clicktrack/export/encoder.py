"""
WaveformEncoder: beat timing -> click track WAV on disk.
The buffer is built fully in memory before the destination is opened, so a failed
write never leaves a half-rendered track behind the header.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import soundfile as sf

from clicktrack.core.errors import EncodeIOError
from clicktrack.core.io import AudioIO
from clicktrack.core.types import BeatSpec, PcmBuffer
from clicktrack.dsp.clicks import ClickRenderer
from clicktrack.export.naming import FileCounter
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS

logger = logging.getLogger(__name__)


class WaveformEncoder:
    def __init__(
        self,
        output_dir: Union[str, Path] = CLICKTRACK_DEFAULTS["output"]["directory"],
        counter: Optional[FileCounter] = None,
        renderer: Optional[ClickRenderer] = None,
    ):
        self.output_dir = Path(output_dir)
        self.counter = counter if counter is not None else FileCounter()
        self.renderer = renderer if renderer is not None else ClickRenderer()

    def render(self, spec: BeatSpec) -> PcmBuffer:
        """Validate and render without touching disk."""
        return self.renderer.render(spec.validate())

    def encode(
        self,
        clicks: int,
        elapsed_seconds: float,
        base_beats: int,
        subdivision_factor: int = 1,
    ) -> Path:
        """
        Render a click track and write it as output_<N>.wav in output_dir.

        Raises:
            InvalidParameters: any input is non-positive (no file, counter untouched).
            EncodeIOError: the file could not be opened or written.

        Returns:
            Path of the written file.
        """
        spec = BeatSpec(clicks, elapsed_seconds, base_beats, subdivision_factor)
        return self.encode_spec(spec)

    def encode_spec(self, spec: BeatSpec) -> Path:
        buffer = self.render(spec)

        # One increment per attempted file, even if the write fails below.
        filename = self.counter.next_filename()
        path = self.output_dir / filename
        try:
            written = AudioIO.save_wav(buffer, path)
        except (OSError, sf.LibsndfileError) as e:
            logger.error("Could not write %s: %s", path, e)
            raise EncodeIOError(f"Error opening file for output: {path}", filename=str(path)) from e

        logger.info(
            "Wrote %s (%d samples, %d/%d clicks, %d bytes)",
            path, len(buffer), buffer.click_count, spec.num_beats, written,
        )
        return path
