"""
Event and result types shared by the fusion and transcription stages
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Tuple

import librosa

from fretfusion.config.guitar_config import NUM_STRINGS


def pitch_label(pitch: int) -> str:
    """Scientific pitch name for a MIDI note number (60 -> 'C4')"""
    return librosa.midi_to_note(pitch, unicode=False)


def whole_number(value, what: str) -> int:
    """Integer value of a pitch or fret, rejecting fractional input"""
    if isinstance(value, bool) or not math.isfinite(float(value)):
        raise ValueError(f"{what} must be a whole number, got {value}")
    number = int(value)
    if number != value:
        raise ValueError(f"{what} must be a whole number, got {value}")
    return number


def seconds(value, what: str) -> float:
    """Finite, non-negative time in seconds"""
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{what} must be a finite time >= 0, got {value}")
    return value


def validate_tuning(tuning: Iterable[int]) -> Tuple[int, ...]:
    """Return the tuning as a tuple, rejecting anything that is not six strings"""
    tuning = tuple(int(p) for p in tuning)
    if len(tuning) != NUM_STRINGS:
        raise ValueError(f"Tuning must have {NUM_STRINGS} strings, got {len(tuning)}")
    return tuning


@dataclass(frozen=True)
class NoteEvent:
    """A note reported by the audio transcriber"""
    pitch: int
    onset: float
    duration: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'pitch', whole_number(self.pitch, 'Note pitch'))
        object.__setattr__(self, 'onset', seconds(self.onset, 'Note onset'))
        object.__setattr__(self, 'duration', seconds(self.duration, 'Note duration'))

    @property
    def label(self) -> str:
        return pitch_label(self.pitch)


@dataclass(frozen=True)
class FretObservation:
    """Fret zones seen in a single video frame"""
    timestamp: float
    frets: FrozenSet[int]

    def __post_init__(self):
        object.__setattr__(self, 'timestamp', seconds(self.timestamp, 'Observation timestamp'))
        object.__setattr__(self, 'frets', frozenset(whole_number(f, 'Fret') for f in self.frets))

        # Frames without detections are left out of the stream, never stored empty
        if not self.frets:
            raise ValueError(f"Observation at {self.timestamp:.3f}s has no frets")
        if min(self.frets) < 0:
            raise ValueError(f"Observation at {self.timestamp:.3f}s has a negative fret")


@dataclass(frozen=True)
class Candidate:
    """A string/fret pair that can produce a given pitch"""
    string: int
    fret: int


@dataclass(frozen=True)
class TabNote:
    """A resolved note placed on the fretboard"""
    string: int
    fret: int
    label: str
    onset: float

    @property
    def position(self) -> Tuple[int, int]:
        return (self.string, self.fret)


@dataclass(frozen=True)
class TabVariation:
    """One complete fingering interpretation of a note sequence"""
    id: int
    name: str
    notes: Tuple[TabNote, ...]
    description: str

    def __post_init__(self):
        object.__setattr__(self, 'notes', tuple(self.notes))

    def positions(self) -> Tuple[Tuple[int, int], ...]:
        """The (string, fret) sequence, which is all that identifies a fingering"""
        return tuple(note.position for note in self.notes)


class StringPreference(Enum):
    """Bias used to break ties between equally plausible positions"""
    HIGH = 'high'
    LOW = 'low'
    BALANCED = 'balanced'
