"""
Park Sync - Run Summary
Accumulates the outcome of one orchestrator run across many entities.
"""

import time
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple


class RunState(Enum):
    """Lifecycle of an orchestrator run."""
    IDLE = "idle"
    RUNNING = "running"
    FETCHING = "fetching"
    PARSING = "parsing"
    WRITING = "writing"
    SUMMARIZING = "summarizing"
    COMPLETED = "completed"


class RunSummary:
    """
    Records written, entities processed, per-entity errors, covered date
    range and duration for one run.

    ``success`` is True iff at least one entity completed.
    """

    def __init__(self, job: str, clock: Callable[[], float] = time.monotonic):
        self.job = job
        self._clock = clock
        self._started = clock()
        self._finished: Optional[float] = None
        self.state = RunState.RUNNING
        self.records_written = 0
        self.processed: List[str] = []
        self.errors: List[Tuple[str, str]] = []
        self.counts: Dict[str, int] = {}
        self.results: List[Dict[str, Any]] = []
        self.min_date: Optional[date] = None
        self.max_date: Optional[date] = None
        self.timestamp = datetime.now(timezone.utc)

    def add_records(self, count: int, dates: Iterable[date] = ()):
        """Count written records and widen the covered date range."""
        self.records_written += count
        for day in dates:
            if self.min_date is None or day < self.min_date:
                self.min_date = day
            if self.max_date is None or day > self.max_date:
                self.max_date = day

    def add_count(self, name: str, count: int):
        """Track a named per-run total (e.g. attractions written)."""
        self.counts[name] = self.counts.get(name, 0) + count

    def mark_processed(self, entity: str):
        self.processed.append(entity)

    def add_error(self, entity: str, error: Any):
        self.errors.append((entity, str(error)))

    def finish(self) -> 'RunSummary':
        self.state = RunState.SUMMARIZING
        self._finished = self._clock()
        self.state = RunState.COMPLETED
        return self

    @property
    def success(self) -> bool:
        return len(self.processed) > 0

    @property
    def duration_ms(self) -> int:
        end = self._finished if self._finished is not None else self._clock()
        return int(round((end - self._started) * 1000))

    @property
    def error_messages(self) -> List[str]:
        """Errors formatted as "<entity>: <message>"."""
        return [f"{entity}: {message}" for entity, message in self.errors]

    def date_range(self) -> Optional[Dict[str, str]]:
        if self.min_date is None or self.max_date is None:
            return None
        return {'start': self.min_date.isoformat(), 'end': self.max_date.isoformat()}

    def to_dict(self) -> Dict[str, Any]:
        """Response shape shared by the trigger endpoints."""
        return {
            'success': self.success,
            'recordsImported': self.records_written,
            'parksProcessed': list(self.processed),
            'errors': self.error_messages,
            'dateRange': self.date_range(),
            'duration': f"{self.duration_ms}ms",
            'timestamp': self.timestamp.isoformat(),
        }
