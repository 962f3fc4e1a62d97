"""
Temporal matching of note onsets against the fret observation stream
"""
from typing import FrozenSet, Iterable, List

import numpy as np

from fretfusion.config.guitar_config import TEMPORAL_HALF_WINDOW
from fretfusion.events import FretObservation


def observed_frets(onset: float,
                   observations: Iterable[FretObservation],
                   half_window: float = TEMPORAL_HALF_WINDOW) -> FrozenSet[int]:
    """
    Collect every fret seen around a note onset

    The window is symmetric: it covers the fretting hand settling just before
    the pluck as well as the attack transient just after it.

    Args:
        onset: Note onset time (seconds)
        observations: Fret observations, in any order
        half_window: Seconds on either side of the onset (inclusive)

    Returns:
        Union of the frets of every observation in the window (empty if none)
    """
    if half_window < 0:
        raise ValueError(f"half_window must be >= 0, got {half_window}")

    search_start = onset - half_window
    search_end = onset + half_window

    seen = set()
    for observation in observations:
        if search_start <= observation.timestamp <= search_end:
            seen.update(observation.frets)

    return frozenset(seen)


class TemporalMatcher:
    """Answer window queries against one observation stream"""

    def __init__(self, observations: Iterable[FretObservation],
                 half_window: float = TEMPORAL_HALF_WINDOW):
        """
        Args:
            observations: Fret observations, in any order
            half_window: Seconds on either side of an onset (inclusive)
        """
        if half_window < 0:
            raise ValueError(f"half_window must be >= 0, got {half_window}")

        self.half_window = half_window

        # Sort once so every query is a pair of binary searches
        ordered: List[FretObservation] = sorted(observations, key=lambda o: o.timestamp)
        self.observations = ordered
        self.timestamps = np.array([o.timestamp for o in ordered], dtype=float)

    def __len__(self):
        return len(self.observations)

    def observed_frets(self, onset: float) -> FrozenSet[int]:
        """Frets seen within the window around an onset"""
        first, last = self._window_bounds(onset)

        seen = set()
        for observation in self.observations[first:last]:
            seen.update(observation.frets)

        return frozenset(seen)

    def has_evidence(self, onset: float) -> bool:
        first, last = self._window_bounds(onset)
        return last > first

    def _window_bounds(self, onset: float):
        search_start = onset - self.half_window
        search_end = onset + self.half_window

        first = int(np.searchsorted(self.timestamps, search_start, side='left'))
        last = int(np.searchsorted(self.timestamps, search_end, side='right'))

        return first, last
