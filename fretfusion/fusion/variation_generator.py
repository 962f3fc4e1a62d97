"""
Generate alternative fingerings of the same note sequence
"""
from typing import Iterable, List, Optional

from fretfusion.events import FretObservation, NoteEvent, StringPreference, TabNote, TabVariation
from fretfusion.fusion.note_resolver import NoteResolver
from fretfusion.fusion.temporal_matcher import TemporalMatcher


# (id, preference, name, description), in generation order
VARIATION_PROFILES = [
    (0, StringPreference.HIGH, "High Strings", "Played on higher strings (e, B, G)"),
    (1, StringPreference.LOW, "Low Strings", "Played on lower strings (D, A, E)"),
    (2, StringPreference.BALANCED, "Both", "Balanced across all strings"),
]


class VariationGenerator:
    """Run the resolver under each string preference and keep the distinct results"""

    def __init__(self, resolver: Optional[NoteResolver] = None):
        """
        Args:
            resolver: Note resolver shared by every profile (defaults to standard settings)
        """
        self.resolver = resolver or NoteResolver()

    def generate(self,
                 note_events: Iterable[NoteEvent],
                 observations: Iterable[FretObservation]) -> List[TabVariation]:
        """
        Generate every distinct playable variation

        Args:
            note_events: Notes from the audio transcriber
            observations: Fret observations from the video detector

        Returns:
            Variations in profile order. Ids are fixed per profile and are not
            renumbered when a profile is filtered out or deduplicated.
        """
        note_events = list(note_events)
        matcher = TemporalMatcher(observations, self.resolver.half_window)

        variations = []

        for variation_id, preference, name, description in VARIATION_PROFILES:
            notes = self.resolver.resolve_with_matcher(note_events, matcher, preference)

            if not notes:
                continue

            variations.append(TabVariation(
                id=variation_id,
                name=name,
                notes=notes,
                description=description,
            ))

        return self._remove_duplicate_variations(variations)

    def generate_fallback(self,
                          note_events: Iterable[NoteEvent],
                          observations: Iterable[FretObservation]) -> List[TabNote]:
        """Single neutral resolution pass, for when generate() returns nothing"""
        return self.resolver.resolve(note_events, observations, preference=None)

    def _remove_duplicate_variations(self, variations: List[TabVariation]) -> List[TabVariation]:
        """Drop variations whose string/fret sequence matches an earlier one"""
        unique = []
        seen_positions = set()

        for variation in variations:
            positions = variation.positions()
            if positions in seen_positions:
                continue

            seen_positions.add(positions)
            unique.append(variation)

        return unique
