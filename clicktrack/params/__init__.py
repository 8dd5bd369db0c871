"""
Click track defaults. Single source is canonical_defaults.CLICKTRACK_DEFAULTS;
input resolution lives in clicktrack.params.resolve.
"""
from clicktrack.params.canonical_defaults import CLICKTRACK_DEFAULTS

__all__ = ["CLICKTRACK_DEFAULTS"]
