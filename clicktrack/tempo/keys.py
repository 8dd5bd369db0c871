"""
Single-keypress sources for the tap recorder.
TerminalKeySource reads one raw key without waiting for Enter, or one character at a
time when stdin is piped; ScriptedKeySource replays a fixed sequence (tests).
"""
import sys
from abc import ABC, abstractmethod
from typing import Iterable


class KeySource(ABC):
    @abstractmethod
    def read_key(self) -> str:
        """Block until one key is pressed and return it as a 1-char string."""


class TerminalKeySource(KeySource):
    def read_key(self) -> str:
        key = self._read_raw()
        # Ctrl-C arrives as a plain character in raw mode and from getwch().
        if key == "\x03":
            raise KeyboardInterrupt
        return key

    def _read_raw(self) -> str:
        if not sys.stdin.isatty():
            key = sys.stdin.read(1)
            if not key:
                raise EOFError("stdin closed")
            return key

        if sys.platform == "win32":
            import msvcrt
            return msvcrt.getwch()

        import termios
        import tty

        fd = sys.stdin.fileno()
        old = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            return sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)


class ScriptedKeySource(KeySource):
    def __init__(self, keys: Iterable[str]):
        self._keys = iter(keys)

    def read_key(self) -> str:
        try:
            return next(self._keys)
        except StopIteration:
            raise EOFError("Key script exhausted")
