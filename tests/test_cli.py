"""
CLI workflows: batch BPM/timing runs and the interactive tap/manual session.
"""
import sys
import os
import io

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from clicktrack.tempo.keys import ScriptedKeySource
from tools.beat_to_wav import Console, main


def _console(keys=(), lines=()):
    """Console fed from scripted keys and typed lines; running out behaves like a closed stdin."""
    out = io.StringIO()
    remaining = iter(lines)

    def read_line():
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    console = Console(color=False, keys=ScriptedKeySource(keys), out=out, read_line=read_line)
    return console, out


def test_batch_bpm_with_subdivisions(tmp_path):
    console, out = _console()
    rc = main(["--bpm", "120", "--beats", "4", "--subdivide", "2", "4",
               "--output-dir", str(tmp_path), "--no-color", "--qc"], console=console)
    assert rc == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["output_1.wav", "output_2.wav", "output_3.wav"]
    for p in tmp_path.iterdir():
        assert p.stat().st_size == 44 + 88200 * 2
    text = out.getvalue()
    assert text.count("WAV file generated successfully") == 3
    assert "QC PASS" in text


def test_batch_recorded_timing(tmp_path):
    console, _ = _console()
    rc = main(["--clicks", "4", "--seconds", "2.0", "--beats", "4",
               "--output-dir", str(tmp_path)], console=console)
    assert rc == 0
    assert (tmp_path / "output_1.wav").stat().st_size == 44 + 88200 * 2


def test_batch_invalid_reports_error_without_file(tmp_path):
    console, out = _console()
    rc = main(["--bpm", "120", "--beats", "0", "--output-dir", str(tmp_path)], console=console)
    assert rc == 1
    assert list(tmp_path.iterdir()) == []
    assert "base_beats must be positive" in out.getvalue()


def test_interactive_manual_bpm_with_subdivision(tmp_path):
    console, out = _console(keys=["m", "y", "n"], lines=["120", "4", "2"])
    rc = main(["--output-dir", str(tmp_path)], console=console)
    assert rc == 0
    assert sorted(p.name for p in tmp_path.iterdir()) == ["output_1.wav", "output_2.wav"]
    assert "How many sub-beats per beat" in out.getvalue()


def test_interactive_tap_session(tmp_path):
    console, out = _console(keys=[" ", " ", "x", "n"], lines=["4"])
    rc = main(["--output-dir", str(tmp_path)], console=console)
    assert rc == 0
    assert "Recorded 2 clicks" in out.getvalue()
    assert [p.name for p in tmp_path.iterdir()] == ["output_1.wav"]


def test_interactive_reprompts_on_bad_number(tmp_path):
    console, out = _console(keys=["m", "n"], lines=["fast", "-5", "100", "8"])
    rc = main(["--output-dir", str(tmp_path)], console=console)
    assert rc == 0
    text = out.getvalue()
    assert "'fast' is not a whole number." in text
    assert "greater than zero" in text
    assert (tmp_path / "output_1.wav").exists()


def test_interactive_input_closed(tmp_path):
    console, _ = _console(keys=["m"], lines=[])
    rc = main(["--output-dir", str(tmp_path)], console=console)
    assert rc == 130


def test_seconds_with_bpm_is_rejected(tmp_path, capsys):
    console, _ = _console()
    with pytest.raises(SystemExit) as excinfo:
        main(["--bpm", "120", "--seconds", "4.0", "--beats", "4",
              "--output-dir", str(tmp_path)], console=console)
    assert excinfo.value.code == 2
    assert "--seconds only applies to --clicks" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []
