"""
Complete transcription pipeline - fuse audio notes with video fret observations
"""
import json
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import numpy as np

from fretfusion.config.guitar_config import MAX_FRET, TEMPORAL_HALF_WINDOW
from fretfusion.events import FretObservation, NoteEvent
from fretfusion.fusion.note_resolver import NoteResolver
from fretfusion.fusion.position_scorer import PositionScorer
from fretfusion.fusion.temporal_matcher import TemporalMatcher
from fretfusion.fusion.variation_generator import VariationGenerator
from fretfusion.transcription.tab_generator import TabGenerator


def load_streams(data: Dict) -> Tuple[List[NoteEvent], List[FretObservation]]:
    """
    Build typed input streams from a decoded JSON document

    Args:
        data: {"notes": [{"pitch", "onset", "duration"}, ...],
               "observations": [{"timestamp", "frets"}, ...]}

    Returns:
        Tuple of (note_events, observations)
    """
    if not isinstance(data, dict) or 'notes' not in data:
        raise ValueError("Input must be an object with a 'notes' list")

    try:
        note_events = [
            NoteEvent(pitch=n['pitch'], onset=n['onset'], duration=n.get('duration', 0.0))
            for n in data['notes']
        ]
        observations = [
            FretObservation(timestamp=o['timestamp'], frets=o['frets'])
            for o in data.get('observations', [])
        ]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed input stream: {e}") from e

    return note_events, observations


def read_streams(input_path) -> Tuple[List[NoteEvent], List[FretObservation]]:
    """Load both input streams from a JSON file"""
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    with open(input_path) as f:
        data = json.load(f)

    return load_streams(data)


class TranscriptionPipeline:
    """
    Fusion pipeline: variations, fallback and tab rendering
    """

    def __init__(self,
                 tuning=None,
                 max_fret=MAX_FRET,
                 half_window=TEMPORAL_HALF_WINDOW,
                 scorer: PositionScorer = None,
                 verbose=True):
        """
        Args:
            tuning: Open-string MIDI numbers (defaults to standard tuning)
            max_fret: Highest fret considered
            half_window: Evidence window on either side of an onset (seconds)
            scorer: Position scorer (defaults to the standard constants)
            verbose: Print progress
        """
        self.verbose = verbose
        self.half_window = half_window

        self.resolver = NoteResolver(tuning, max_fret, half_window, scorer)
        self.variation_generator = VariationGenerator(self.resolver)
        self.tab_generator = TabGenerator()

    def process(self,
                note_events: Iterable[NoteEvent],
                observations: Iterable[FretObservation],
                variation_index: int = 0) -> Dict:
        """
        Fuse both streams and render the selected variation

        Args:
            note_events: Notes from the audio transcriber
            observations: Fret observations from the video detector
            variation_index: Position in the variation list to render

        Returns:
            Dictionary with variations, tab notes, tab text and metadata
        """
        note_events = list(note_events)
        observations = list(observations)

        self._log(f"\n{'='*70}")
        self._log("MULTIMODAL FUSION")
        self._log(f"{'='*70}")

        result = {
            'variations': [],
            'tab_notes': [],
            'tab': None,
            'used_fallback': False,
            'metadata': {}
        }

        self._log("Step 1/3: Generating variations...")
        self._log(f"  -> Audio notes: {len(note_events)}")
        self._log(f"  -> Vision frames: {len(observations)}")
        variations = self.variation_generator.generate(note_events, observations)
        result['variations'] = variations

        self._log("Step 2/3: Selecting variation...")
        if variations:
            if not 0 <= variation_index < len(variations):
                raise ValueError(
                    f"Variation index {variation_index} out of range "
                    f"(found {len(variations)} variations)"
                )
            selected = variations[variation_index]
            result['tab_notes'] = list(selected.notes)
            self._log(f"  -> Generated {len(variations)} variations, using '{selected.name}'")
        else:
            self._log("  -> No variations, using fallback tab generation")
            result['tab_notes'] = self.variation_generator.generate_fallback(note_events, observations)
            result['used_fallback'] = True

        self._log("Step 3/3: Rendering tab...")
        result['tab'] = self.tab_generator.generate(result['tab_notes'])
        result['metadata'] = self.get_fusion_stats(note_events, observations, result)

        stats = result['metadata']
        self._log(f"\nFusion Statistics:")
        self._log(f"  Notes placed: {stats['placed_notes']}/{stats['note_count']}")
        self._log(f"  Unplayable notes: {stats['unplayable_notes']}")
        self._log(f"  Notes with visual evidence: {stats['notes_with_visual_evidence']}")
        self._log(f"  Average fret: {stats['average_fret']:.2f}")
        self._log("✓ Tab generation complete\n")

        return result

    def process_file(self, input_path, variation_index: int = 0) -> Dict:
        """Load a JSON input file and process it"""
        self._log(f"Processing: {input_path}")
        note_events, observations = read_streams(input_path)
        return self.process(note_events, observations, variation_index)

    def get_fusion_stats(self,
                         note_events: List[NoteEvent],
                         observations: List[FretObservation],
                         result: Dict) -> Dict:
        """Get statistics about the fusion run"""
        matcher = TemporalMatcher(observations, self.half_window)
        tab_notes = result['tab_notes']

        frets = [n.fret for n in tab_notes]
        average_fret = float(np.mean(frets)) if frets else 0.0

        return {
            'note_count': len(note_events),
            'observation_count': len(observations),
            'placed_notes': len(tab_notes),
            'unplayable_notes': self.resolver.count_unplayable(note_events),
            'notes_with_visual_evidence': sum(1 for n in note_events if matcher.has_evidence(n.onset)),
            'variation_count': len(result['variations']),
            'average_fret': average_fret,
        }

    def _log(self, message: str):
        if self.verbose:
            print(message)
