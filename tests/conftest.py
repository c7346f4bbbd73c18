"""Shared builders for synthetic MPEG audio data.

Frames are built bit by bit from their header fields and zero-filled, so the
tests never depend on binary fixture files.
"""

from pathlib import Path
from types import SimpleNamespace
from typing import Iterable

import pytest

from mpegjoin.mp3.header import decode_frame_header

# MPEG-1 Layer III bit-rate indexes used throughout the tests.
BR_128 = 9
BR_320 = 14

V1, V2, V2_5 = 3, 2, 0
L1, L2, L3 = 3, 2, 1
STEREO, JOINT, DUAL, MONO = 0, 1, 2, 3


def header_bytes(
    *,
    version=V1,
    layer=L3,
    bitrate_index=BR_128,
    sampling_index=0,
    padding=False,
    private=False,
    channel_mode=JOINT,
    mode_extension=0,
    crc=False,
    copyright=False,
    original=True,
    emphasis=0,
) -> bytes:
    b1 = 0xE0 | (version << 3) | (layer << 1) | (0 if crc else 1)
    b2 = (bitrate_index << 4) | (sampling_index << 2) | (int(padding) << 1) | int(private)
    b3 = (
        (channel_mode << 6)
        | (mode_extension << 4)
        | (int(copyright) << 3)
        | (int(original) << 2)
        | emphasis
    )
    return bytes([0xFF, b1, b2, b3])


def frame_bytes(*, marker: bytes = b"", marker_offset: int = 36, **fields) -> bytes:
    """A complete zero-filled frame, optionally with `marker` written at an offset."""
    head = header_bytes(**fields)
    header = decode_frame_header(head)
    assert header is not None, f"invalid test header {fields}"
    raw = bytearray(header.frame_length_bytes)
    raw[:4] = head
    if marker:
        raw[marker_offset : marker_offset + len(marker)] = marker
    return bytes(raw)


def synchsafe(n: int) -> bytes:
    return bytes([(n >> 21) & 0x7F, (n >> 14) & 0x7F, (n >> 7) & 0x7F, n & 0x7F])


def id3v2_tag(body_size: int = 20, fill: bytes = b"\x00") -> bytes:
    body = (fill * body_size)[:body_size]
    return b"ID3" + bytes([3, 0, 0]) + synchsafe(body_size) + body


def id3v1_tag(title: bytes = b"Title") -> bytes:
    raw = bytearray(128)
    raw[:3] = b"TAG"
    raw[3 : 3 + len(title)] = title
    return bytes(raw)


def write_file(path: Path, parts: Iterable[bytes]) -> str:
    path.write_bytes(b"".join(parts))
    return str(path)


@pytest.fixture
def mp3():
    """Namespace of builders so test modules don't import conftest directly."""
    return SimpleNamespace(
        header=header_bytes,
        frame=frame_bytes,
        id3v2=id3v2_tag,
        id3v1=id3v1_tag,
        synchsafe=synchsafe,
        write=write_file,
        BR_128=BR_128,
        BR_320=BR_320,
        V1=V1,
        V2=V2,
        V2_5=V2_5,
        L1=L1,
        L2=L2,
        L3=L3,
        STEREO=STEREO,
        JOINT=JOINT,
        DUAL=DUAL,
        MONO=MONO,
    )


@pytest.fixture
def recorded_events():
    """An EventBus plus the list of events it has emitted."""
    from mpegjoin.mp3.events import EventBus

    seen = []
    bus = EventBus([seen.append])
    return SimpleNamespace(bus=bus, events=seen, kinds=lambda: [e.kind for e in seen])
