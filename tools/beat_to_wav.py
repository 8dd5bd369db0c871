#!/usr/bin/env python3
"""
Click track tool: tap along to a song (or type its BPM) and get WAV files with a
click on every beat, for syncing video to music in an editor.

Usage:
    python tools/beat_to_wav.py                         Interactive: tap tempo or manual BPM
    python tools/beat_to_wav.py --bpm 120 --beats 16    Non-interactive base file
    python tools/beat_to_wav.py --bpm 120 --beats 16 --subdivide 2 4
    python tools/beat_to_wav.py --clicks 9 --seconds 4.1 --beats 189

Options:
    --output-dir <path>   Where output_<N>.wav files go (default: current directory)
    --qc                  Verify header and click placement of every written file
    --no-color            Plain output
    --verbose             Debug logging
"""
import sys
import os
import argparse
import logging
import time
from pathlib import Path
from typing import Optional

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from clicktrack.core.errors import EncodeError
from clicktrack.core.types import BeatSpec
from clicktrack.export.encoder import WaveformEncoder
from clicktrack.export.naming import FileCounter
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS
from clicktrack.qc.qc import verify_wav
from clicktrack.tempo.keys import KeySource, TerminalKeySource
from clicktrack.tempo.recorder import TapRecorder, ManualEntry, RecorderAborted

logger = logging.getLogger("clicktrack")

RED = "\033[1;31m"
GREEN = "\033[1;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[1;34m"
CYAN = "\033[1;36m"
RESET = "\033[0m"
CLEAR = "\033[2J\033[H"

MAX_INPUT_ATTEMPTS = 5


class Console:
    """Colored prompts and messages; input() for numbers, a KeySource for single keys."""

    def __init__(self, color: bool = True, keys: KeySource = None, out=None, read_line=input):
        self.color = color
        self.keys = keys or TerminalKeySource()
        self.out = out or sys.stdout
        self.read_line = read_line

    def say(self, text: str, color: str = "") -> None:
        if self.color and color:
            text = f"{color}{text}{RESET}"
        print(text, file=self.out, flush=True)

    def error(self, text: str) -> None:
        self.say(text, RED)

    def clear(self) -> None:
        if self.color:
            print(CLEAR, end="", file=self.out, flush=True)

    def ask_int(self, prompt: str) -> int:
        """Prompt until a positive integer is entered; bounded."""
        for _ in range(MAX_INPUT_ATTEMPTS):
            self.say(prompt, CYAN)
            raw = self.read_line().strip()
            try:
                value = int(raw)
            except ValueError:
                self.error(f"'{raw}' is not a whole number.")
                continue
            if value <= 0:
                self.error("Please enter a number greater than zero.")
                continue
            return value
        raise EOFError(f"No valid number after {MAX_INPUT_ATTEMPTS} attempts")

    def ask_yes(self, prompt: str) -> bool:
        self.say(prompt, CYAN)
        key = self.keys.read_key()
        self.say(key)
        return key in ("y", "Y")


def print_welcome(console: Console) -> None:
    console.clear()
    console.say("Hello! Welcome to the beat visualiser!", BLUE)
    console.say("-\nHow does it work?\n", CYAN)
    console.say(
        "-> Listen to the music of your choice.\n"
        "The program counts your taps over a stretch of time and generates a .wav "
        "with a loud click on every beat, for syncing video to music in an editor.\n",
        GREEN,
    )
    console.say(
        "-> Alternatively, enter the BPM of your music and get the same .wav.\n",
        GREEN,
    )


def write_file(encoder: WaveformEncoder, spec: BeatSpec, console: Console, qc: bool) -> Optional[Path]:
    """Encode one file and report it. EncodeError is printed, not raised."""
    try:
        path = encoder.encode_spec(spec)
    except EncodeError as e:
        console.error(str(e))
        return None

    console.say(f"WAV file generated successfully: {path}", GREEN)
    if qc:
        result = verify_wav(path, spec)
        color = GREEN if result["status"] == "PASS" else YELLOW if result["status"] == "WARN" else RED
        console.say(
            f"QC {result['status']}: {result['metrics'].get('click_count', 0)} clicks, "
            f"~{result['metrics'].get('estimated_bpm', 0.0):.2f} BPM",
            color,
        )
        for f in result["failures"]:
            console.error(f"  - {f}")
        for w in result["warnings"]:
            console.say(f"  - {w}", YELLOW)
    return path


def generate_session(encoder: WaveformEncoder, clicks: int, elapsed: float, console: Console, qc: bool) -> None:
    """Base file, then as many subdivided files as the user asks for."""
    base_beats = console.ask_int(
        "\nHow many beats do you want the WAV to include "
        "(e.g. 4 will result in a WAV that is 4 beats long)?"
    )
    console.say("Creating base .wav file...", YELLOW)
    spec = BeatSpec(clicks, elapsed, base_beats, 1)
    write_file(encoder, spec, console, qc)

    while console.ask_yes("Do you want to create an additional .wav file with sub-beats? (y/n)"):
        factor = console.ask_int("How many sub-beats per beat do you want?")
        write_file(encoder, spec.with_subdivision(factor), console, qc)


def cmd_interactive(args, console: Console, encoder: WaveformEncoder) -> int:
    print_welcome(console)
    console.say(
        "Press [SPACE] to start recording. Press any other key to stop recording "
        "(has to be on-beat).\nPress [m] to manually enter BPM.",
        YELLOW,
    )

    def flash(_count: int) -> None:
        console.clear()
        console.say("Click!", YELLOW)
        time.sleep(0.02)
        console.clear()

    recorder = TapRecorder(
        console.keys,
        on_click=flash,
        on_retry=lambda key: console.error("Press [SPACE] to start or [m] for manual BPM."),
    )
    try:
        result = recorder.record()
    except RecorderAborted as e:
        console.error(str(e))
        return 1

    if isinstance(result, ManualEntry):
        console.clear()
        bpm = console.ask_int("Please enter your desired BPM:")
        generate_session(encoder, bpm, 60.0, console, args.qc)
        return 0

    console.say(
        f"Recorded {result.clicks} clicks in {result.elapsed_seconds:.3f} seconds "
        f"(~{result.bpm:.2f} BPM).",
        CYAN,
    )
    generate_session(encoder, result.clicks, result.elapsed_seconds, console, args.qc)
    return 0


def cmd_batch(args, console: Console, encoder: WaveformEncoder) -> int:
    """Non-interactive: base file plus one file per --subdivide factor."""
    if args.bpm is not None:
        spec = BeatSpec.from_bpm(args.bpm, args.beats)
    else:
        spec = BeatSpec(args.clicks, args.seconds, args.beats)

    failures = 0
    for factor in [1] + list(args.subdivide or []):
        if write_file(encoder, spec.with_subdivision(factor), console, args.qc) is None:
            failures += 1
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate beat-synced click track WAV files.")
    tempo = parser.add_mutually_exclusive_group()
    tempo.add_argument("--bpm", type=int, help="Tempo in beats per minute")
    tempo.add_argument("--clicks", type=int, help="Recorded click count (use with --seconds)")
    parser.add_argument("--seconds", type=float, help="Elapsed seconds for --clicks")
    parser.add_argument("--beats", type=int, help="Base beats in the track")
    parser.add_argument("--subdivide", type=int, nargs="+", metavar="K",
                        help="Also write a file with K clicks per beat (repeatable)")
    parser.add_argument("--output-dir", type=str,
                        default=CLICKTRACK_DEFAULTS["output"]["directory"],
                        help="Output directory (default: current directory)")
    parser.add_argument("--qc", action="store_true", help="Verify each written file")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None, console: Console = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    batch = args.bpm is not None or args.clicks is not None
    if batch:
        if args.beats is None:
            parser.error("--beats is required with --bpm/--clicks")
        if args.clicks is not None and args.seconds is None:
            parser.error("--seconds is required with --clicks")
        if args.bpm is not None and args.seconds is not None:
            parser.error("--seconds only applies to --clicks, not --bpm")

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    console = console or Console(color=not args.no_color)
    encoder = WaveformEncoder(output_dir=output_dir, counter=FileCounter())

    try:
        if batch:
            return cmd_batch(args, console, encoder)
        return cmd_interactive(args, console, encoder)
    except (EOFError, KeyboardInterrupt):
        console.say("")
        logger.debug("Input closed, exiting")
        return 130


if __name__ == "__main__":
    sys.exit(main())
