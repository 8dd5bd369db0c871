"""
Tap recorder: derives beat timing from keystrokes.
Space starts timing; each further space is a click; any other key is the last click
and stops. "m" at the start prompt selects manual BPM entry instead.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from clicktrack.core.types import BeatSpec
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS
from clicktrack.tempo.keys import KeySource

logger = logging.getLogger(__name__)


class RecorderAborted(Exception):
    """Too many unrecognized keys at the start prompt."""


@dataclass
class TapResult:
    clicks: int
    elapsed_seconds: float

    @property
    def bpm(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return 60.0 * self.clicks / self.elapsed_seconds

    def to_spec(self, base_beats: int, subdivision_factor: int = 1) -> BeatSpec:
        return BeatSpec(self.clicks, self.elapsed_seconds, base_beats, subdivision_factor)


@dataclass
class ManualEntry:
    """User chose to type the BPM instead of tapping."""


class TapRecorder:
    def __init__(
        self,
        keys: KeySource,
        clock: Callable[[], float] = time.monotonic,
        max_prompts: int = CLICKTRACK_DEFAULTS["tap"]["max_prompts"],
        on_click: Optional[Callable[[int], None]] = None,
        on_retry: Optional[Callable[[str], None]] = None,
    ):
        self.keys = keys
        self.clock = clock
        self.max_prompts = max_prompts
        self.on_click = on_click
        self.on_retry = on_retry
        self.start_key = CLICKTRACK_DEFAULTS["tap"]["start_key"]
        self.manual_key = CLICKTRACK_DEFAULTS["tap"]["manual_key"]

    def _wait_for_start(self) -> bool:
        """True once the start key is pressed, False for manual entry."""
        for _ in range(self.max_prompts):
            key = self.keys.read_key()
            if key == self.start_key:
                return True
            if key == self.manual_key:
                return False
            logger.debug("Ignoring key %r at start prompt", key)
            if self.on_retry:
                self.on_retry(key)
        raise RecorderAborted(f"No start key after {self.max_prompts} attempts")

    def record(self) -> Union[TapResult, ManualEntry]:
        if not self._wait_for_start():
            return ManualEntry()

        if self.on_click:
            self.on_click(0)
        start = self.clock()

        clicks = 0
        while True:
            key = self.keys.read_key()
            clicks += 1
            if key != self.start_key:
                break
            if self.on_click:
                self.on_click(clicks)

        elapsed = self.clock() - start
        logger.info("Recorded %d clicks in %.3f s", clicks, elapsed)
        return TapResult(clicks=clicks, elapsed_seconds=elapsed)
