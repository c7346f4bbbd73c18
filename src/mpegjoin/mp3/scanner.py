from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

from mpegjoin import logger as logger_mod

from .events import EventBus, EventKind
from .header import (
    decode_frame_header,
    decode_id3v2_size,
    has_frame_sync,
    is_id3v1_signature,
    is_id3v2_signature,
)
from .models import (
    FRAME_HEADER_SIZE,
    ID3V1_TAG_SIZE,
    ID3V2_HEADER_SIZE,
    ID3v1Tag,
    ID3v2Tag,
    MpegAudioFrame,
    StreamObject,
)

log = logger_mod.get_logger()


def _read_exact(stream: BinaryIO, size: int) -> Optional[bytes]:
    """Read exactly `size` bytes, or return None if the stream ends first."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            return None
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class Mp3Scanner:
    """Demultiplex a raw byte stream into MPEG frames and ID3 tags.

    The scanner slides a 4-byte window over the stream. At each position it
    looks for an ID3v1 tag ('TAG'), an ID3v2 tag ('ID3') and finally a valid
    frame header, in that order. Anything unrecognised is skipped one byte at
    a time until the stream resynchronizes.

    A stream that ends mid-object is treated as a normal end of stream; the
    truncated trailing bytes are dropped.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        events: Optional[EventBus] = None,
        source: Optional[str] = None,
    ):
        self._stream = stream
        self._events = events
        self._source = source or getattr(stream, "name", None)
        self.bytes_skipped = 0

    def _report_skipped(self, count: int) -> None:
        if count == 0:
            return
        self.bytes_skipped += count
        if self._events is not None:
            self._events.emit(EventKind.BYTES_SKIPPED, self._source, count=count)
        else:
            log.debug(f"sync error: skipped {count} byte(s) in {self._source or 'stream'}")

    def next_object(self) -> Optional[StreamObject]:
        """Return the next frame or tag, or None once the stream is exhausted."""
        first = _read_exact(self._stream, FRAME_HEADER_SIZE)
        if first is None:
            return None
        window = bytearray(first)
        skipped = 0

        while True:
            if is_id3v1_signature(window):
                self._report_skipped(skipped)
                body = _read_exact(self._stream, ID3V1_TAG_SIZE - FRAME_HEADER_SIZE)
                if body is None:
                    return None
                return ID3v1Tag(raw_bytes=bytes(window) + body)

            if is_id3v2_signature(window):
                self._report_skipped(skipped)
                rest = _read_exact(self._stream, ID3V2_HEADER_SIZE - FRAME_HEADER_SIZE)
                if rest is None:
                    return None
                header = bytes(window) + rest
                body = _read_exact(self._stream, decode_id3v2_size(header))
                if body is None:
                    return None
                return ID3v2Tag(raw_bytes=header + body)

            if has_frame_sync(window):
                frame_header = decode_frame_header(window)
                if frame_header is not None:
                    self._report_skipped(skipped)
                    body = _read_exact(
                        self._stream, frame_header.frame_length_bytes - FRAME_HEADER_SIZE
                    )
                    if body is None:
                        return None
                    return MpegAudioFrame(
                        header=frame_header, raw_bytes=bytes(window) + body
                    )

            # Nothing recognised: drop the oldest byte and pull in one more.
            nxt = self._stream.read(1)
            if not nxt:
                self._report_skipped(skipped + FRAME_HEADER_SIZE)
                return None
            del window[0]
            window += nxt
            skipped += 1

    def next_frame(self) -> Optional[MpegAudioFrame]:
        """Return the next audio frame, discarding any tags in between."""
        while True:
            obj = self.next_object()
            if obj is None or isinstance(obj, MpegAudioFrame):
                return obj
            kind = "ID3v1" if isinstance(obj, ID3v1Tag) else "ID3v2"
            if self._events is not None:
                self._events.emit(
                    EventKind.TAG_SKIPPED, self._source, tag=kind, size=len(obj.raw_bytes)
                )
            else:
                log.debug(f"skipping {kind} tag ({len(obj.raw_bytes)} bytes)")

    def iter_objects(self) -> Iterator[StreamObject]:
        while True:
            obj = self.next_object()
            if obj is None:
                return
            yield obj

    def iter_frames(self) -> Iterator[MpegAudioFrame]:
        while True:
            frame = self.next_frame()
            if frame is None:
                return
            yield frame

    __iter__ = iter_frames
