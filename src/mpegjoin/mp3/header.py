"""Pure decoding of MPEG audio frame headers and ID3 tag headers.

Nothing here does I/O or raises for malformed input: a header that cannot be
decoded yields `None` and the caller resynchronizes.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from .models import (
    FRAME_HEADER_SIZE,
    ID3V2_HEADER_SIZE,
    ChannelMode,
    Emphasis,
    FrameHeader,
    Layer,
    MpegAudioFrame,
    MpegVersion,
    decode_synchsafe,
)

# Bit rates in kbps, indexed by the 4-bit bit-rate field (0 = free format, unsupported).
_V1_L1 = (0, 32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448)
_V1_L2 = (0, 32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384)
_V1_L3 = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320)
_V2_L1 = (0, 32, 48, 56, 64, 80, 96, 112, 128, 144, 160, 176, 192, 224, 256)
_V2_L23 = (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160)

# (is MPEG-1, layer) -> table. MPEG-2 and 2.5 share tables.
BIT_RATES_KBPS: Dict[Tuple[bool, Layer], Tuple[int, ...]] = {
    (True, Layer.I): _V1_L1,
    (True, Layer.II): _V1_L2,
    (True, Layer.III): _V1_L3,
    (False, Layer.I): _V2_L1,
    (False, Layer.II): _V2_L23,
    (False, Layer.III): _V2_L23,
}

SAMPLING_RATES_HZ: Dict[MpegVersion, Tuple[int, int, int]] = {
    MpegVersion.V1: (44100, 48000, 32000),
    MpegVersion.V2: (22050, 24000, 16000),
    MpegVersion.V2_5: (11025, 12000, 8000),
}

SAMPLE_COUNTS: Dict[Tuple[bool, Layer], int] = {
    (True, Layer.I): 384,
    (True, Layer.II): 1152,
    (True, Layer.III): 1152,
    (False, Layer.I): 384,
    (False, Layer.II): 1152,
    (False, Layer.III): 576,
}

_RESERVED_VERSION = 1
_RESERVED_LAYER = 0


def has_frame_sync(window: bytes) -> bool:
    """True when the window starts with the 11-bit frame sync pattern."""
    return (
        len(window) >= 2 and window[0] == 0xFF and (window[1] & 0xE0) == 0xE0
    )


def is_id3v1_signature(window: bytes) -> bool:
    return window[:3] == b"TAG"


def is_id3v2_signature(window: bytes) -> bool:
    return window[:3] == b"ID3"


def decode_id3v2_size(header: bytes) -> int:
    """Return the tag size declared by a 10-byte ID3v2 header (header excluded)."""
    if len(header) < ID3V2_HEADER_SIZE:
        raise ValueError("an ID3v2 header is 10 bytes")
    return decode_synchsafe(header[6:10])


def padding_slot_size(layer: Layer) -> int:
    return 4 if layer == Layer.I else 1


def compute_frame_length(
    sample_count: int, bit_rate_bps: int, sampling_rate_hz: int, padding: bool, layer: Layer
) -> int:
    # Divide the sample count first; reordering this changes the truncation.
    length = (sample_count // 8) * bit_rate_bps // sampling_rate_hz
    if padding:
        length += padding_slot_size(layer)
    return length


def decode_frame_header(window: bytes) -> Optional[FrameHeader]:
    """Decode a 4-byte frame header candidate.

    Returns None when the bytes lack frame sync or any field holds a reserved
    or invalid value.
    """
    if len(window) < FRAME_HEADER_SIZE or not has_frame_sync(window):
        return None

    b1, b2, b3 = window[1], window[2], window[3]

    version_bits = (b1 & 0x18) >> 3
    if version_bits == _RESERVED_VERSION:
        return None
    layer_bits = (b1 & 0x06) >> 1
    if layer_bits == _RESERVED_LAYER:
        return None
    bit_rate_index = (b2 & 0xF0) >> 4
    if bit_rate_index in (0, 15):
        return None
    sampling_rate_index = (b2 & 0x0C) >> 2
    if sampling_rate_index == 3:
        return None
    emphasis_bits = b3 & 0x03
    if emphasis_bits == Emphasis.RESERVED:
        return None
    channel_mode = ChannelMode((b3 & 0xC0) >> 6)
    mode_extension = (b3 & 0x30) >> 4
    # mode extension only has meaning for joint stereo
    if channel_mode != ChannelMode.JOINT_STEREO and mode_extension != 0:
        return None

    version = MpegVersion(version_bits)
    layer = Layer(layer_bits)
    is_v1 = version == MpegVersion.V1

    bit_rate_bps = BIT_RATES_KBPS[(is_v1, layer)][bit_rate_index] * 1000
    sampling_rate_hz = SAMPLING_RATES_HZ[version][sampling_rate_index]
    sample_count = SAMPLE_COUNTS[(is_v1, layer)]
    padding = (b2 & 0x02) == 0x02

    return FrameHeader(
        raw=bytes(window[:FRAME_HEADER_SIZE]),
        mpeg_version=version,
        layer=layer,
        crc_protected=(b1 & 0x01) == 0x00,
        bit_rate_bps=bit_rate_bps,
        sampling_rate_hz=sampling_rate_hz,
        padding=padding,
        private=(b2 & 0x01) == 0x01,
        channel_mode=channel_mode,
        mode_extension=mode_extension,
        copyright=(b3 & 0x08) == 0x08,
        original=(b3 & 0x04) == 0x04,
        emphasis=Emphasis(emphasis_bits),
        sample_count=sample_count,
        frame_length_bytes=compute_frame_length(
            sample_count, bit_rate_bps, sampling_rate_hz, padding, layer
        ),
    )


def side_info_size(obj: Union[FrameHeader, MpegAudioFrame]) -> int:
    return obj.side_info_size
