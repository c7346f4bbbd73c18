"""Xing/Info and VBRI metadata frames.

Detection decides whether the first frame of an input is a metadata frame
rather than audio. Synthesis builds the Xing frame that is prepended to a
merged output whose frames do not share a single bit rate.
"""

from __future__ import annotations

import struct

from .models import FRAME_HEADER_SIZE, MpegAudioFrame

XING_IDS = (b"Xing", b"Info")
VBRI_ID = b"VBRI"
VBRI_OFFSET = FRAME_HEADER_SIZE + 32

XING_FLAG_FRAMES = 0x01
XING_FLAG_BYTES = 0x02

_U32_MAX = 0xFFFFFFFF
# id (4) + flags (4) + frame count (4) + byte count (4)
_XING_BLOCK_SIZE = 16


def xing_offset(frame: MpegAudioFrame) -> int:
    """The Xing block starts right after the header and the side information."""
    return FRAME_HEADER_SIZE + frame.side_info_size


def is_xing_header(frame: MpegAudioFrame) -> bool:
    offset = xing_offset(frame)
    if len(frame.raw_bytes) < offset + 4:
        return False
    return frame.raw_bytes[offset : offset + 4] in XING_IDS


def is_vbri_header(frame: MpegAudioFrame) -> bool:
    if len(frame.raw_bytes) < VBRI_OFFSET + 4:
        return False
    return frame.raw_bytes[VBRI_OFFSET : VBRI_OFFSET + 4] == VBRI_ID


def is_vbr_header(frame: MpegAudioFrame) -> bool:
    return is_xing_header(frame) or is_vbri_header(frame)


def build_xing_header(
    template: MpegAudioFrame, total_frames: int, total_bytes: int
) -> MpegAudioFrame:
    """Build an Xing frame shaped like `template` carrying the stream totals.

    The result has the template's header and length, so it occupies exactly
    one frame slot. Only the frame-count and byte-count fields are written;
    everything else in the payload is zero.
    """
    for name, value in (("total_frames", total_frames), ("total_bytes", total_bytes)):
        if not 0 <= value <= _U32_MAX:
            raise ValueError(f"{name}={value} does not fit the 32-bit Xing field")

    offset = xing_offset(template)
    length = template.frame_length_bytes
    if length < offset + _XING_BLOCK_SIZE:
        raise ValueError(
            f"template frame of {length} bytes is too short for an Xing block at {offset}"
        )

    raw = bytearray(length)
    raw[:FRAME_HEADER_SIZE] = template.raw_bytes[:FRAME_HEADER_SIZE]
    struct.pack_into(
        ">4sIII",
        raw,
        offset,
        b"Xing",
        XING_FLAG_FRAMES | XING_FLAG_BYTES,
        total_frames,
        total_bytes,
    )
    return MpegAudioFrame(header=template.header, raw_bytes=bytes(raw))
