"""
Build the note event stream from transcriber note-on/note-off messages
"""
from typing import Iterable, List, Tuple

from fretfusion.config.guitar_config import NOTE_VELOCITY_THRESHOLD
from fretfusion.events import NoteEvent


class NoteEventCollector:
    """Pair note-on and note-off messages into timed note events"""

    def __init__(self, velocity_threshold=NOTE_VELOCITY_THRESHOLD):
        """
        Args:
            velocity_threshold: Notes starting at or below this velocity are dropped
        """
        self.velocity_threshold = velocity_threshold

    def collect(self, messages: Iterable[Tuple[str, int, float, int]]) -> List[NoteEvent]:
        """
        Build note events from a message stream

        Args:
            messages: (kind, pitch, time, velocity) tuples in time order, where
                kind is 'note_on' or 'note_off'. A note_on with velocity 0 ends
                the note, as in MIDI.

        Returns:
            Note events sorted by onset
        """
        active = {}  # pitch -> (start time, start velocity)
        note_events = []

        for kind, pitch, msg_time, velocity in messages:
            if kind == 'note_on' and velocity > 0:
                active[pitch] = (msg_time, velocity)
                continue

            if kind not in ('note_on', 'note_off') or pitch not in active:
                continue

            start_time, start_velocity = active.pop(pitch)
            if start_velocity > self.velocity_threshold:
                note_events.append(NoteEvent(
                    pitch=pitch,
                    onset=start_time,
                    duration=msg_time - start_time,
                ))

        note_events.sort(key=lambda n: n.onset)

        return note_events
