"""
Map detected pitches to guitar strings and frets
"""
from typing import Iterable, List, Optional

from fretfusion.config.guitar_config import STANDARD_TUNING, MAX_FRET
from fretfusion.events import Candidate, validate_tuning


def find_possible_positions(pitch: int,
                            tuning: Iterable[int] = STANDARD_TUNING,
                            max_fret: int = MAX_FRET) -> List[Candidate]:
    """
    Find every string/fret combination that produces a pitch

    Args:
        pitch: MIDI note number
        tuning: Open-string MIDI numbers, lowest string first
        max_fret: Highest fret considered

    Returns:
        Candidates in ascending string order (empty if the pitch is unplayable)
    """
    positions = []

    for string_idx, open_pitch in enumerate(tuning):
        fret = pitch - open_pitch
        if 0 <= fret <= max_fret:
            positions.append(Candidate(string=string_idx, fret=fret))

    return positions


class GuitarMapper:
    """Map pitches to guitar strings and fret positions"""

    def __init__(self, tuning=None, max_fret=MAX_FRET):
        """
        Args:
            tuning: Guitar tuning (defaults to standard tuning)
            max_fret: Upper bound on the fret search
        """
        if max_fret < 0:
            raise ValueError(f"max_fret must be >= 0, got {max_fret}")

        self.tuning = validate_tuning(STANDARD_TUNING if tuning is None else tuning)
        self.max_fret = max_fret

    def find_positions(self, pitch: int) -> List[Candidate]:
        """All positions for a pitch, lowest string first"""
        return find_possible_positions(pitch, self.tuning, self.max_fret)

    def is_playable(self, pitch: int) -> bool:
        return bool(self.find_positions(pitch))

    def pitch_at(self, string: int, fret: int) -> Optional[int]:
        """MIDI pitch sounded at a position, or None if it is off the fretboard"""
        if not 0 <= string < len(self.tuning) or not 0 <= fret <= self.max_fret:
            return None
        return self.tuning[string] + fret
