"""MPEG audio (MP3) stream handling.

Public API:
- Mp3Merger, MergeResult, MergeAccumulator (merge)
- Mp3Scanner (scanner)
- decode_frame_header (header)
- is_vbr_header, build_xing_header (vbr)
- read_id3v2_tag (tag)
- EventBus, EventKind, MergeEvent (events)
"""

from .events import EventBus, EventKind, MergeEvent
from .header import decode_frame_header
from .merge import MergeAccumulator, MergeResult, Mp3Merger
from .models import (
    ChannelMode,
    Emphasis,
    FrameHeader,
    ID3v1Tag,
    ID3v2Tag,
    Layer,
    MpegAudioFrame,
    MpegVersion,
)
from .scanner import Mp3Scanner
from .tag import read_id3v2_tag
from .vbr import build_xing_header, is_vbr_header

__all__ = [
    "Mp3Merger",
    "MergeResult",
    "MergeAccumulator",
    "Mp3Scanner",
    "decode_frame_header",
    "is_vbr_header",
    "build_xing_header",
    "read_id3v2_tag",
    "EventBus",
    "EventKind",
    "MergeEvent",
    "FrameHeader",
    "MpegAudioFrame",
    "ID3v1Tag",
    "ID3v2Tag",
    "MpegVersion",
    "Layer",
    "ChannelMode",
    "Emphasis",
]
