from __future__ import annotations

from typing import Optional

from mpegjoin import logger as logger_mod
from mpegjoin.errors import IOFailure

from ..models import ID3v2Tag
from ..scanner import Mp3Scanner

log = logger_mod.get_logger()


def read_id3v2_tag(path: str) -> Optional[ID3v2Tag]:
    """Return the ID3v2 tag at the very start of `path`, if there is one.

    Only the first object in the file is considered. A leading frame, an
    ID3v1 tag or an empty file all mean "no tag" rather than an error.
    """
    try:
        with open(path, "rb") as f:
            obj = Mp3Scanner(f, source=path).next_object()
    except OSError as e:
        raise IOFailure(path, "read tag source", e) from e

    if isinstance(obj, ID3v2Tag):
        log.debug(f"[TAG] {path}: found ID3v2 tag ({len(obj.raw_bytes)} bytes)")
        return obj

    log.debug(f"[TAG] {path}: no leading ID3v2 tag")
    return None
