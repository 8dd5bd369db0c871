import zipfile
import io
import json
from datetime import datetime
from typing import Sequence

from clicktrack.core.types import BeatSpec
from clicktrack.core.io import AudioIO
from clicktrack.dsp.clicks import ClickRenderer
from clicktrack.params.resolve import resolve_subdivisions


class Exporter:
    @staticmethod
    def create_session_zip(spec: BeatSpec, subdivisions: Sequence[int] = ()) -> bytes:
        """
        Base track plus one track per subdivision factor, zipped with session_info.json.

        Layout:
          base.wav          subdivision_factor = 1
          sub_<k>.wav       one per requested factor k
          session_info.json spec fields, bpm, per-track click counts
        """
        base_spec = spec.with_subdivision(1).validate()
        factors = resolve_subdivisions(subdivisions)
        # Validate every factor before rendering anything.
        for k in factors:
            base_spec.with_subdivision(k).validate()

        renderer = ClickRenderer()
        buffer = io.BytesIO()
        tracks = []

        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
            entries = [("base.wav", base_spec)]
            entries += [(f"sub_{k}.wav", base_spec.with_subdivision(k)) for k in factors]

            for name, track_spec in entries:
                pcm = renderer.render(track_spec)
                zip_file.writestr(name, AudioIO.to_bytes(pcm))
                tracks.append({
                    "file": name,
                    "subdivision_factor": track_spec.subdivision_factor,
                    "num_samples": len(pcm),
                    "click_count": pcm.click_count,
                })

            meta = {
                "created_at": datetime.now().isoformat(),
                "spec": base_spec.to_dict(),
                "tracks": tracks,
            }
            zip_file.writestr("session_info.json", json.dumps(meta, indent=2))

        return buffer.getvalue()
