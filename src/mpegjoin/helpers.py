import glob
import os
from typing import List

from mpegjoin import config
from mpegjoin import logger as log
from mpegjoin.errors import NoInputFiles

log = log.get_logger()


def collect_inputs(directory: str, pattern: str = config.INPUT_GLOB) -> List[str]:
    """Return the files in `directory` matching `pattern`, sorted by name."""
    log.debug(f"collect_inputs called with directory: {directory}")
    files = sorted(glob.glob(os.path.join(directory, pattern)))
    files = [f for f in files if os.path.isfile(f)]
    if not files:
        raise NoInputFiles(f"no files matching '{pattern}' found in '{directory}'")
    log.debug(f"Found {len(files)} input file(s) in {directory}")
    return files


def same_path(a: str, b: str) -> bool:
    """True when `a` and `b` name the same file (resolving links where possible)."""
    if os.path.realpath(a) == os.path.realpath(b):
        return True
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False
