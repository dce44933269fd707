"""Progress events.

The reporter is owned by the caller (UI, script). Codecs only receive a callback
and call it synchronously at fixed checkpoints; the return value is ignored.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO


@dataclass(frozen=True)
class ProgressEvent:
    stage: str
    progress: float  # 0..100
    message: str


ProgressCallback = Callable[[ProgressEvent], None]


def emit(on_progress: Optional[ProgressCallback], stage: str, progress: float, message: str) -> None:
    if on_progress is None:
        return
    pct = min(100.0, max(0.0, float(progress)))
    on_progress(ProgressEvent(stage=stage, progress=pct, message=message))


def print_progress(event: ProgressEvent, file: TextIO | None = None) -> None:
    out = sys.stderr if file is None else file
    print(f"[cct] {event.stage:<16} {event.progress:6.2f}%  {event.message}", file=out)


@dataclass
class ProgressRecorder:
    """Collects events in memory (tests, polling UIs)."""

    events: list[ProgressEvent] = field(default_factory=list)

    def __call__(self, event: ProgressEvent) -> None:
        self.events.append(event)

    @property
    def stages(self) -> list[str]:
        return [e.stage for e in self.events]

    @property
    def percentages(self) -> list[float]:
        return [e.progress for e in self.events]

    def last(self) -> ProgressEvent | None:
        return self.events[-1] if self.events else None
