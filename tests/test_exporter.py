import sys
import os
import io
import json
import zipfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from clicktrack.core.errors import InvalidParameters
from clicktrack.core.io import AudioIO
from clicktrack.core.types import BeatSpec
from clicktrack.export.exporter import Exporter


def test_session_zip_contains_base_and_subdivisions():
    spec = BeatSpec(4, 2.0, 4)
    blob = Exporter.create_session_zip(spec, [2, 4])
    with zipfile.ZipFile(io.BytesIO(blob)) as zf:
        names = sorted(zf.namelist())
        assert names == ["base.wav", "session_info.json", "sub_2.wav", "sub_4.wav"]

        meta = json.loads(zf.read("session_info.json"))
        assert meta["spec"]["bpm"] == pytest.approx(120.0)
        counts = {t["file"]: t["click_count"] for t in meta["tracks"]}
        assert counts == {"base.wav": 4, "sub_2.wav": 8, "sub_4.wav": 16}

        for name in ("base.wav", "sub_2.wav", "sub_4.wav"):
            wav = zf.read(name)
            header = AudioIO.read_header(wav)
            assert header["subchunk2_size"] == 88200 * 2
            assert len(wav) == 44 + 88200 * 2


def test_base_track_ignores_incoming_subdivision():
    blob = Exporter.create_session_zip(BeatSpec(4, 2.0, 4, 3))
    with zipfile.ZipFile(io.BytesIO(blob)) as zf:
        meta = json.loads(zf.read("session_info.json"))
    assert meta["tracks"] == [
        {"file": "base.wav", "subdivision_factor": 1, "num_samples": 88200, "click_count": 4}
    ]


def test_invalid_subdivision_rejected_before_rendering():
    with pytest.raises(InvalidParameters):
        Exporter.create_session_zip(BeatSpec(4, 2.0, 4), [2, 0])


@pytest.mark.parametrize("subdivisions", ["24", [2.7], [True]])
def test_non_integer_subdivisions_rejected(subdivisions):
    with pytest.raises(InvalidParameters):
        Exporter.create_session_zip(BeatSpec(4, 2.0, 4), subdivisions)
