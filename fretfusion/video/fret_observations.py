"""
Build the fret observation stream from fret-zone detector output
"""
import re
import time
from typing import Dict, Iterable, List, Optional, Tuple

from fretfusion.config.guitar_config import DETECTION_CONFIDENCE_THRESHOLD
from fretfusion.events import FretObservation


FRET_LABEL_PATTERN = re.compile(r'(\d+)')


def extract_fret_number(label: str) -> Optional[int]:
    """Fret number from a detector class label ('fret_7' -> 7)"""
    match = FRET_LABEL_PATTERN.search(label or '')
    if not match:
        return None
    return int(match.group(1))


def frets_from_detections(detections: Iterable[Dict],
                          min_confidence: float = DETECTION_CONFIDENCE_THRESHOLD) -> List[int]:
    """
    Confident, distinct frets in one frame's detections

    Args:
        detections: Dicts with 'label' and 'confidence'
        min_confidence: Detections at or below this are ignored

    Returns:
        Sorted fret numbers
    """
    frets = set()

    for detection in detections:
        if detection.get('confidence', 0.0) <= min_confidence:
            continue

        fret = extract_fret_number(detection.get('label'))
        if fret is not None:
            frets.add(fret)

    return sorted(frets)


def build_observations(frames: Iterable[Tuple[float, Iterable[Dict]]],
                       min_confidence: float = DETECTION_CONFIDENCE_THRESHOLD) -> List[FretObservation]:
    """
    Turn per-frame detections into a fret observation stream

    Args:
        frames: (timestamp, detections) pairs, one per analysed frame
        min_confidence: Detection confidence threshold

    Returns:
        One observation per frame with at least one confident fret
    """
    observations = []

    for timestamp, detections in frames:
        frets = frets_from_detections(detections, min_confidence)
        if frets:
            observations.append(FretObservation(timestamp=timestamp, frets=frets))

    return observations


class FretObservationRecorder:
    """Buffer observations for a live recording session"""

    def __init__(self, min_confidence=DETECTION_CONFIDENCE_THRESHOLD, clock=time.monotonic):
        """
        Args:
            min_confidence: Detection confidence threshold
            clock: Seconds-returning clock used when frames carry no timestamp
        """
        self.min_confidence = min_confidence
        self.clock = clock

        self.is_recording = False
        self.session_start = None
        self.history: List[FretObservation] = []

    def start_session(self):
        """Clear the buffer and start the session clock"""
        self.history = []
        self.session_start = self.clock()
        self.is_recording = True

    def add_frame(self, detections: Iterable[Dict], timestamp: Optional[float] = None) -> Optional[FretObservation]:
        """
        Record one frame's detections

        Args:
            detections: Dicts with 'label' and 'confidence'
            timestamp: Seconds since session start (read from the clock if omitted)

        Returns:
            The stored observation, or None if nothing was recorded
        """
        if not self.is_recording:
            return None

        frets = frets_from_detections(detections, self.min_confidence)
        if not frets:
            return None

        if timestamp is None:
            timestamp = self.clock() - self.session_start

        observation = FretObservation(timestamp=timestamp, frets=frets)
        self.history.append(observation)
        return observation

    def stop_session(self) -> List[FretObservation]:
        """Stop recording and hand over the buffered stream"""
        self.is_recording = False
        self.session_start = None
        return list(self.history)
