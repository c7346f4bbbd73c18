"""Frame-level concatenation of MPEG audio files.

Public API:
- Mp3Merger
- MergeAccumulator
- MergeResult
- Finalizer
- PrependRewriter
"""

from .finalizer import Finalizer
from .io.rewrite_fs import PrependRewriter
from .merger import MergeAccumulator, MergeResult, Mp3Merger

__all__ = [
    "Mp3Merger",
    "MergeAccumulator",
    "MergeResult",
    "Finalizer",
    "PrependRewriter",
]
