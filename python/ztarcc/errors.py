"""Exception types raised by ztarcc.

Conversion itself never fails on input text; the only runtime failure is
a dictionary load error surfaced on first use.
"""


class ZtarccError(Exception):
    """Base class for ztarcc errors."""


class BuildError(ZtarccError):
    """Dictionary compilation failed (missing source, malformed line, bad reference)."""


class LoadError(ZtarccError):
    """Compiled dictionaries could not be loaded. Not retried."""


class InputEncodingError(ZtarccError):
    """Source text encoding could not be detected or is not supported."""
