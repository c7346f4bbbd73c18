from __future__ import annotations

from typing import Optional


class MergeError(RuntimeError):
    """Base error for mpegjoin."""


class IOFailure(MergeError):
    """Open/read/write/rename failure on a file. Aborts the whole merge."""

    def __init__(self, path: str, step: str, cause: Optional[OSError] = None):
        self.path = path
        self.step = step
        self.cause = cause
        reason = "failed"
        if cause is not None:
            reason = cause.strerror or str(cause)
        super().__init__(f"{step} failed for '{path}': {reason}")


class ReplaceFailure(IOFailure):
    """The rewritten file could not be renamed over the original.

    The output is in an inconsistent state; callers must not retry silently.
    """


class InvalidSelection(MergeError, IndexError):
    """Tag-source index does not point at one of the input files."""


class OutputCollision(MergeError):
    """The output path is also one of the input paths."""


class OutputExists(MergeError):
    """The output file already exists and overwriting was not requested."""


class NoInputFiles(MergeError):
    """There is nothing to merge."""


class XingHeaderError(MergeError, ValueError):
    """No Xing header can be built for the output.

    Either the merged totals do not fit its 32-bit fields or the template
    frame is too short to hold it.

    Raised after the audio has been written; the output holds the frames but
    no VBR header.
    """
