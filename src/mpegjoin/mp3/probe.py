from __future__ import annotations

from dataclasses import dataclass

from mutagen.mp3 import MP3

from mpegjoin import logger as logger_mod

log = logger_mod.get_logger()


@dataclass(frozen=True)
class OutputSummary:
    path: str
    length_seconds: float
    bitrate_bps: int
    sample_rate_hz: int
    bitrate_mode: str
    has_id3v2: bool


def summarize(path: str) -> OutputSummary:
    """Describe a finished output file the way a player would see it.

    Uses `mutagen` as an independent reader, so the duration reflects the Xing
    header when one was written. Raises `mutagen.MutagenError` if no MPEG
    stream can be found.
    """
    audio = MP3(path)
    info = audio.info
    mode = getattr(info, "bitrate_mode", None)
    # mutagen enums print as "BitrateMode.VBR"
    mode_name = str(mode).rsplit(".", 1)[-1] if mode is not None else "UNKNOWN"
    summary = OutputSummary(
        path=path,
        length_seconds=float(info.length),
        bitrate_bps=int(info.bitrate),
        sample_rate_hz=int(info.sample_rate),
        bitrate_mode=mode_name,
        has_id3v2=audio.tags is not None,
    )
    log.debug(f"[PROBE] {path}: {summary}")
    return summary
