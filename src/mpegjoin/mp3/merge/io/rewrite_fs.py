from __future__ import annotations

import contextlib
import os
import shutil
import tempfile

from mpegjoin import config
from mpegjoin import logger as logger_mod
from mpegjoin.errors import IOFailure, ReplaceFailure

log = logger_mod.get_logger()


class PrependRewriter:
    """Prepend bytes to an existing file via a temporary file and an atomic rename.

    The canonical path only ever holds either the old content or the complete
    new content. A failure while writing the temporary file leaves the original
    untouched; a failed rename is reported as `ReplaceFailure`.
    """

    def __init__(
        self,
        *,
        temp_suffix: str = config.TEMP_SUFFIX,
        chunk_size: int = config.COPY_CHUNK_SIZE,
    ):
        self.temp_suffix = temp_suffix
        self.chunk_size = chunk_size

    def _temp_path(self, path: str) -> str:
        directory = os.path.dirname(os.path.abspath(path))
        fd, tmp = tempfile.mkstemp(
            prefix=os.path.basename(path) + ".",
            suffix=self.temp_suffix,
            dir=directory,
        )
        os.close(fd)
        return tmp

    def prepend(self, path: str, prefix: bytes) -> None:
        tmp = None
        try:
            tmp = self._temp_path(path)
            with open(path, "rb") as src, open(tmp, "wb") as out:
                out.write(prefix)
                shutil.copyfileobj(src, out, self.chunk_size)
                out.flush()
                os.fsync(out.fileno())
        except OSError as e:
            if tmp is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp)
            raise IOFailure(path, "rewrite", e) from e

        try:
            os.replace(tmp, path)
        except OSError as e:
            log.error(f"[REWRITE] {path}: rename of {tmp} failed, output left inconsistent")
            raise ReplaceFailure(path, "replace", e) from e

        log.debug(f"[REWRITE] {path}: prepended {len(prefix)} bytes")
