from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

FRAME_HEADER_SIZE = 4
ID3V1_TAG_SIZE = 128
ID3V2_HEADER_SIZE = 10


def decode_synchsafe(data: bytes) -> int:
    """Decode a synchsafe integer (7 significant bits per byte, top bit ignored)."""
    value = 0
    for b in data:
        value = (value << 7) | (b & 0x7F)
    return value


class MpegVersion(IntEnum):
    """MPEG audio version, keyed by the 2-bit header field (1 is reserved)."""

    V2_5 = 0
    V2 = 2
    V1 = 3

    @property
    def label(self) -> str:
        return {MpegVersion.V2_5: "2.5", MpegVersion.V2: "2", MpegVersion.V1: "1"}[self]


class Layer(IntEnum):
    """MPEG audio layer, keyed by the 2-bit header field (0 is reserved)."""

    III = 1
    II = 2
    I = 3  # noqa: E741


class ChannelMode(IntEnum):
    STEREO = 0
    JOINT_STEREO = 1
    DUAL_CHANNEL = 2
    MONO = 3


class Emphasis(IntEnum):
    NONE = 0
    MS_50_15 = 1
    RESERVED = 2  # never accepted by the decoder
    CCITT_J17 = 3


@dataclass(frozen=True)
class FrameHeader:
    """Decoded 4-byte MPEG audio frame header.

    `frame_length_bytes` includes the header itself and is derived from the
    other fields at decode time.
    """

    raw: bytes
    mpeg_version: MpegVersion
    layer: Layer
    crc_protected: bool
    bit_rate_bps: int
    sampling_rate_hz: int
    padding: bool
    private: bool
    channel_mode: ChannelMode
    mode_extension: int
    copyright: bool
    original: bool
    emphasis: Emphasis
    sample_count: int
    frame_length_bytes: int

    @property
    def side_info_size(self) -> int:
        """Size of the Layer III side information block that follows the header."""
        if self.layer != Layer.III:
            return 0
        mono = self.channel_mode == ChannelMode.MONO
        if self.mpeg_version == MpegVersion.V1:
            return 17 if mono else 32
        return 9 if mono else 17


@dataclass(frozen=True)
class MpegAudioFrame:
    header: FrameHeader
    raw_bytes: bytes

    def __post_init__(self) -> None:
        if len(self.raw_bytes) != self.header.frame_length_bytes:
            raise ValueError(
                f"frame buffer is {len(self.raw_bytes)} bytes, "
                f"header declares {self.header.frame_length_bytes}"
            )
        if self.raw_bytes[:FRAME_HEADER_SIZE] != self.header.raw:
            raise ValueError("frame buffer does not start with its header")

    @property
    def frame_length_bytes(self) -> int:
        return self.header.frame_length_bytes

    @property
    def bit_rate_bps(self) -> int:
        return self.header.bit_rate_bps

    @property
    def sampling_rate_hz(self) -> int:
        return self.header.sampling_rate_hz

    @property
    def side_info_size(self) -> int:
        return self.header.side_info_size

    def __len__(self) -> int:
        return len(self.raw_bytes)


@dataclass(frozen=True)
class ID3v1Tag:
    raw_bytes: bytes

    def __post_init__(self) -> None:
        if len(self.raw_bytes) != ID3V1_TAG_SIZE or self.raw_bytes[:3] != b"TAG":
            raise ValueError("an ID3v1 tag is exactly 128 bytes starting with 'TAG'")


@dataclass(frozen=True)
class ID3v2Tag:
    """A complete ID3v2 tag: the 10-byte header plus `declared_size` bytes."""

    raw_bytes: bytes

    def __post_init__(self) -> None:
        if len(self.raw_bytes) < ID3V2_HEADER_SIZE or self.raw_bytes[:3] != b"ID3":
            raise ValueError("an ID3v2 tag starts with a 10-byte 'ID3' header")
        if len(self.raw_bytes) != ID3V2_HEADER_SIZE + self.declared_size:
            raise ValueError(
                f"ID3v2 tag is {len(self.raw_bytes)} bytes, "
                f"header declares {ID3V2_HEADER_SIZE + self.declared_size}"
            )

    @property
    def declared_size(self) -> int:
        return decode_synchsafe(self.raw_bytes[6:10])

    @property
    def version(self) -> Tuple[int, int]:
        return self.raw_bytes[3], self.raw_bytes[4]

    @property
    def flags(self) -> int:
        return self.raw_bytes[5]


StreamObject = Union[MpegAudioFrame, ID3v1Tag, ID3v2Tag]
