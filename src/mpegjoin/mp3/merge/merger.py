from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence

from mpegjoin import helpers
from mpegjoin import logger as logger_mod
from mpegjoin.errors import (
    InvalidSelection,
    IOFailure,
    NoInputFiles,
    OutputCollision,
    OutputExists,
)

from ..events import EventBus, EventKind
from ..models import MpegAudioFrame
from ..scanner import Mp3Scanner
from ..vbr import is_vbr_header
from .finalizer import Finalizer

log = logger_mod.get_logger()


@dataclass
class MergeAccumulator:
    """Running totals for one merge. Created at merge start, discarded after.

    The totals are plain ints; the 32-bit limit of the Xing header fields is
    enforced by `build_xing_header` when the header is written.
    """

    total_frames: int = 0
    total_bytes: int = 0
    total_files: int = 0
    first_seen_bitrate: Optional[int] = None
    is_vbr: bool = False

    def record_frame(self, frame: MpegAudioFrame) -> bool:
        """Count a written frame. Returns True when this frame first reveals VBR."""
        became_vbr = False
        if self.first_seen_bitrate is None:
            self.first_seen_bitrate = frame.bit_rate_bps
        elif frame.bit_rate_bps != self.first_seen_bitrate and not self.is_vbr:
            self.is_vbr = True
            became_vbr = True

        self.total_frames += 1
        self.total_bytes += frame.frame_length_bytes
        return became_vbr

    def record_file(self) -> None:
        self.total_files += 1


@dataclass(frozen=True)
class MergeResult:
    output_path: str
    total_frames: int
    total_bytes: int
    total_files: int
    is_vbr: bool
    xing_header_written: bool
    tag_transplanted: bool


class Mp3Merger:
    """Concatenate MPEG audio files frame by frame, without re-encoding.

    Contract:
    - frames are copied verbatim, in input order
    - ID3 tags and unrecognised bytes in the inputs are dropped
    - the first frame of each input is dropped if it is an Xing/Info or VBRI
      metadata frame
    - if the written frames do not share one bit rate, an Xing header with the
      true frame and byte counts is prepended to the output
    - optionally, the leading ID3v2 tag of one input is copied to the front
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        finalizer: Optional[Finalizer] = None,
    ):
        self.events = events or EventBus()
        self._finalizer = finalizer or Finalizer(events=self.events)

    def concatenate_stream(
        self,
        stream: BinaryIO,
        sink: BinaryIO,
        acc: MergeAccumulator,
        source: Optional[str] = None,
    ) -> int:
        """Append every audio frame of one input to `sink`. Returns frames written."""
        scanner = Mp3Scanner(stream, events=self.events, source=source)
        written = 0
        is_first_frame = True

        for frame in scanner.iter_frames():
            if is_first_frame:
                is_first_frame = False
                if is_vbr_header(frame):
                    self.events.emit(
                        EventKind.VBR_HEADER_SKIPPED, source, size=frame.frame_length_bytes
                    )
                    continue

            if acc.record_frame(frame):
                self.events.emit(
                    EventKind.VBR_DETECTED,
                    source,
                    first_bitrate=acc.first_seen_bitrate,
                    bitrate=frame.bit_rate_bps,
                )

            try:
                sink.write(frame.raw_bytes)
            except OSError as e:
                raise IOFailure(getattr(sink, "name", "<output>"), "write", e) from e
            written += 1

        return written

    def concatenate(
        self,
        input_paths: Sequence[str],
        sink: BinaryIO,
        acc: MergeAccumulator,
    ) -> MergeAccumulator:
        """Append the frames of every input, in order, opening one file at a time."""
        for path in input_paths:
            self.events.emit(EventKind.INPUT_STARTED, path)
            try:
                with open(path, "rb") as stream:
                    written = self.concatenate_stream(stream, sink, acc, source=path)
            except OSError as e:
                raise IOFailure(path, "read", e) from e
            acc.record_file()
            self.events.emit(EventKind.INPUT_MERGED, path, frames=written)

        return acc

    def validate(
        self,
        output_path: str,
        input_paths: Sequence[str],
        *,
        tag_source: Optional[int] = None,
        force: bool = False,
    ) -> None:
        """Reject a merge before anything is written."""
        if not input_paths:
            raise NoInputFiles("no input files to merge")

        for path in input_paths:
            if helpers.same_path(path, output_path):
                raise OutputCollision(
                    f"the list of input files includes the output file '{output_path}'"
                )

        if tag_source is not None and not 0 <= tag_source < len(input_paths):
            raise InvalidSelection(
                f"tag source index {tag_source + 1} is out of range "
                f"(1..{len(input_paths)})"
            )

        if not force and os.path.exists(output_path):
            raise OutputExists(f"the file '{output_path}' already exists")

    def merge(
        self,
        output_path: str,
        input_paths: Sequence[str],
        *,
        tag_source: Optional[int] = None,
        force: bool = False,
    ) -> MergeResult:
        """Merge `input_paths` into `output_path`.

        `tag_source` is a 0-based index into `input_paths` naming the file whose
        leading ID3v2 tag is copied to the output.
        """
        inputs: List[str] = list(input_paths)
        self.validate(output_path, inputs, tag_source=tag_source, force=force)

        acc = MergeAccumulator()
        try:
            with open(output_path, "wb") as sink:
                self.concatenate(inputs, sink, acc)
        except OSError as e:
            # open/close of the output itself
            raise IOFailure(output_path, "write", e) from e

        self.events.emit(
            EventKind.TOTALS_FINALIZED,
            output_path,
            frames=acc.total_frames,
            bytes=acc.total_bytes,
            files=acc.total_files,
            is_vbr=acc.is_vbr,
        )
        log.info(
            f"[MERGE] {output_path}: {acc.total_files} files, "
            f"{acc.total_frames} frames, {acc.total_bytes} bytes, vbr={acc.is_vbr}"
        )

        tag_source_path = inputs[tag_source] if tag_source is not None else None
        xing_written, tag_written = self._finalizer.finalize(
            output_path, acc, tag_source_path=tag_source_path
        )

        return MergeResult(
            output_path=output_path,
            total_frames=acc.total_frames,
            total_bytes=acc.total_bytes,
            total_files=acc.total_files,
            is_vbr=acc.is_vbr,
            xing_header_written=xing_written,
            tag_transplanted=tag_written,
        )
