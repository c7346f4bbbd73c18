from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from mpegjoin import logger as logger_mod
from mpegjoin.errors import IOFailure, MergeError, XingHeaderError

from ..events import EventBus, EventKind
from ..models import ID3v2Tag, MpegAudioFrame
from ..scanner import Mp3Scanner
from ..tag.transplant import read_id3v2_tag
from ..vbr import build_xing_header
from .io.rewrite_fs import PrependRewriter

if TYPE_CHECKING:
    from .merger import MergeAccumulator

log = logger_mod.get_logger()


class Finalizer:
    """Second pass over a fully written output file.

    Totals are only known once every input has been written, so the Xing
    header is retrofitted by rewriting the file. The transplanted tag is
    prepended last so that it ends up in front of the Xing frame.
    """

    def __init__(
        self,
        rewriter: Optional[PrependRewriter] = None,
        events: Optional[EventBus] = None,
    ):
        self._rewriter = rewriter or PrependRewriter()
        self._events = events or EventBus()

    def _read_template(self, output_path: str) -> MpegAudioFrame:
        try:
            with open(output_path, "rb") as f:
                template = Mp3Scanner(f, source=output_path).next_frame()
        except OSError as e:
            raise IOFailure(output_path, "read template frame", e) from e
        if template is None:
            raise MergeError(f"'{output_path}' contains no audio frames")
        return template

    def add_xing_header(
        self, output_path: str, total_frames: int, total_bytes: int
    ) -> MpegAudioFrame:
        template = self._read_template(output_path)
        try:
            xing = build_xing_header(template, total_frames, total_bytes)
        except ValueError as e:
            raise XingHeaderError(f"cannot add a VBR header to '{output_path}': {e}") from e
        self._rewriter.prepend(output_path, xing.raw_bytes)
        self._events.emit(
            EventKind.XING_HEADER_WRITTEN,
            output_path,
            total_frames=total_frames,
            total_bytes=total_bytes,
            size=len(xing.raw_bytes),
        )
        return xing

    def add_id3v2_tag(self, output_path: str, tag_source_path: str) -> Optional[ID3v2Tag]:
        tag = read_id3v2_tag(tag_source_path)
        if tag is None:
            log.info(f"[TAG] {tag_source_path}: no ID3v2 tag to copy")
            return None
        self._rewriter.prepend(output_path, tag.raw_bytes)
        self._events.emit(
            EventKind.TAG_TRANSPLANTED,
            output_path,
            source=tag_source_path,
            size=len(tag.raw_bytes),
        )
        return tag

    def finalize(
        self,
        output_path: str,
        acc: MergeAccumulator,
        tag_source_path: Optional[str] = None,
    ) -> Tuple[bool, bool]:
        """Apply the Xing header (if VBR) and then the tag (if requested).

        Returns (xing_header_written, tag_transplanted).
        """
        xing_written = False
        if acc.is_vbr:
            self.add_xing_header(output_path, acc.total_frames, acc.total_bytes)
            xing_written = True

        tag_written = False
        if tag_source_path is not None:
            tag_written = self.add_id3v2_tag(output_path, tag_source_path) is not None

        return xing_written, tag_written
