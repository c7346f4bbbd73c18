from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from mpegjoin import logger as logger_mod

log = logger_mod.get_logger()


class EventKind(str, Enum):
    BYTES_SKIPPED = "bytes_skipped"
    TAG_SKIPPED = "tag_skipped"
    VBR_HEADER_SKIPPED = "vbr_header_skipped"
    VBR_DETECTED = "vbr_detected"
    INPUT_STARTED = "input_started"
    INPUT_MERGED = "input_merged"
    TOTALS_FINALIZED = "totals_finalized"
    XING_HEADER_WRITTEN = "xing_header_written"
    TAG_TRANSPLANTED = "tag_transplanted"


@dataclass(frozen=True)
class MergeEvent:
    kind: EventKind
    path: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[MergeEvent], None]


class EventBus:
    """Fan-out of named merge events to subscribed listeners.

    Every event is also logged at debug level, so callers that only want
    diagnostics need not subscribe at all. Listener exceptions propagate.
    """

    def __init__(self, listeners: Optional[List[Listener]] = None):
        self._listeners: List[Listener] = list(listeners or [])

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, kind: EventKind, path: Optional[str] = None, **detail: Any) -> MergeEvent:
        event = MergeEvent(kind=kind, path=path, detail=dict(detail))
        log.debug(f"[{kind.value}] {path or '-'} {detail or ''}".rstrip())
        for listener in list(self._listeners):
            listener(event)
        return event
