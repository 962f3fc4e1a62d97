"""
Resolve audio notes to fretboard positions using visual evidence
"""
from typing import Iterable, List, Optional

from fretfusion.config.guitar_config import MAX_FRET, TEMPORAL_HALF_WINDOW
from fretfusion.events import FretObservation, NoteEvent, StringPreference, TabNote
from fretfusion.fusion.position_scorer import PositionScorer
from fretfusion.fusion.temporal_matcher import TemporalMatcher
from fretfusion.transcription.guitar_mapper import GuitarMapper


class NoteResolver:
    """Fuse audio pitches with observed fret zones, one note at a time"""

    def __init__(self,
                 tuning=None,
                 max_fret=MAX_FRET,
                 half_window=TEMPORAL_HALF_WINDOW,
                 scorer: Optional[PositionScorer] = None):
        """
        Args:
            tuning: Open-string MIDI numbers (defaults to standard tuning)
            max_fret: Highest fret considered
            half_window: Evidence window on either side of an onset (seconds)
            scorer: Position scorer (defaults to the standard constants)
        """
        self.guitar_mapper = GuitarMapper(tuning, max_fret)
        self.half_window = half_window
        self.scorer = scorer or PositionScorer()

    def resolve(self,
                note_events: Iterable[NoteEvent],
                observations: Iterable[FretObservation],
                preference: Optional[StringPreference] = None) -> List[TabNote]:
        """
        Resolve a whole note sequence

        Args:
            note_events: Notes from the audio transcriber, in any order
            observations: Fret observations from the video detector, in any order
            preference: String preference profile (None for a neutral pass)

        Returns:
            Tab notes sorted by onset; notes with no playable position are dropped
        """
        matcher = TemporalMatcher(observations, self.half_window)
        return self.resolve_with_matcher(note_events, matcher, preference)

    def resolve_with_matcher(self,
                             note_events: Iterable[NoteEvent],
                             matcher: TemporalMatcher,
                             preference: Optional[StringPreference] = None) -> List[TabNote]:
        """Same as resolve(), against an already indexed observation stream"""
        tab_notes = []

        for note_event in note_events:
            tab_note = self.resolve_note(note_event, matcher, preference)
            if tab_note is not None:
                tab_notes.append(tab_note)

        # Stable: simultaneous notes keep their input order
        tab_notes.sort(key=lambda n: n.onset)

        return tab_notes

    def resolve_note(self,
                     note_event: NoteEvent,
                     matcher: TemporalMatcher,
                     preference: Optional[StringPreference] = None) -> Optional[TabNote]:
        """Best position for a single note, or None if it cannot be played"""
        candidates = self.guitar_mapper.find_positions(note_event.pitch)
        if not candidates:
            return None

        seen_frets = matcher.observed_frets(note_event.onset)
        best = self.scorer.best_position(candidates, seen_frets, preference)

        return TabNote(
            string=best.string,
            fret=best.fret,
            label=note_event.label,
            onset=note_event.onset,
        )

    def count_unplayable(self, note_events: Iterable[NoteEvent]) -> int:
        """Number of notes that have no position within the fret range"""
        return sum(1 for n in note_events if not self.guitar_mapper.is_playable(n.pitch))
