"""
Run sequencing: only the most recently started run may commit its output.
"""

from typing import List, Optional

from person_lookup.models import AggregationRun, SearchHit


class RunSequencer:
    """Hands out increasing sequence numbers and tells stale runs apart."""

    def __init__(self):
        self._counter = 0

    @property
    def latest(self) -> int:
        return self._counter

    def begin(self, batch: Optional[List[SearchHit]] = None) -> AggregationRun:
        self._counter += 1
        return AggregationRun(sequence_number=self._counter, input_batch=list(batch or []))

    def is_current(self, run: AggregationRun) -> bool:
        return run.sequence_number == self._counter
