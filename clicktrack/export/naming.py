import threading

from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS


class FileCounter:
    """
    Issues output_<N>.wav names, N starting at 1 and increasing by one per call.
    Owned by the caller (CLI session or service) and shared between encoders.
    """

    def __init__(self, start: int = 0, prefix: str = None, extension: str = None):
        self._value = start
        self._lock = threading.Lock()
        self.prefix = prefix if prefix is not None else CLICKTRACK_DEFAULTS["output"]["filename_prefix"]
        self.extension = extension if extension is not None else CLICKTRACK_DEFAULTS["output"]["extension"]

    @property
    def value(self) -> int:
        return self._value

    def next_filename(self) -> str:
        with self._lock:
            self._value += 1
            n = self._value
        return f"{self.prefix}{n}{self.extension}"
