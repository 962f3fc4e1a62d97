"""
Scoring of candidate fretboard positions against visual evidence
"""
from typing import Iterable, Optional, Sequence

from fretfusion.config.guitar_config import (
    NUM_STRINGS,
    EXACT_MATCH_BONUS,
    NEAR_DISTANCE,
    NEAR_DISTANCE_WEIGHT,
    FAR_DISTANCE_WEIGHT,
    NO_EVIDENCE_FRET_WEIGHT,
    OPEN_STRING_BONUS,
    HIGH_STRING_WEIGHT,
    LOW_STRING_WEIGHT,
    BALANCED_WEIGHT,
    BALANCED_CENTER_STRING,
)
from fretfusion.events import Candidate, StringPreference


class PositionScorer:
    """Score how well a candidate position fits what the camera saw"""

    def __init__(self,
                 exact_match_bonus=EXACT_MATCH_BONUS,
                 near_distance=NEAR_DISTANCE,
                 near_distance_weight=NEAR_DISTANCE_WEIGHT,
                 far_distance_weight=FAR_DISTANCE_WEIGHT,
                 no_evidence_fret_weight=NO_EVIDENCE_FRET_WEIGHT,
                 open_string_bonus=OPEN_STRING_BONUS,
                 high_string_weight=HIGH_STRING_WEIGHT,
                 low_string_weight=LOW_STRING_WEIGHT,
                 balanced_weight=BALANCED_WEIGHT,
                 balanced_center=BALANCED_CENTER_STRING):
        """
        All arguments are integer score constants; bonuses are given as
        positive magnitudes and subtracted.

        Raises:
            ValueError: If a string preference could outweigh an exact visual match
        """
        self.weights = {
            'evidence': {
                'exact_match': exact_match_bonus,
                'near_distance': near_distance,
                'near_weight': near_distance_weight,
                'far_weight': far_distance_weight,
                'no_evidence_fret': no_evidence_fret_weight,
                'open_string': open_string_bonus,
            },
            'preference': {
                StringPreference.HIGH: high_string_weight,
                StringPreference.LOW: low_string_weight,
                StringPreference.BALANCED: balanced_weight,
            },
        }
        self.balanced_center = balanced_center

        max_bias = self.max_preference_bias()
        if max_bias >= exact_match_bonus:
            raise ValueError(
                f"Maximum preference bias ({max_bias}) must stay below the "
                f"exact-match bonus ({exact_match_bonus})"
            )

    def evidence_score(self, candidate: Candidate, seen_frets: Iterable[int]) -> int:
        """
        Score a position from visual evidence alone (no string preference)

        Args:
            candidate: Position to score
            seen_frets: Frets observed around the note onset

        Returns:
            Integer score, lower is better
        """
        weights = self.weights['evidence']
        seen_frets = list(seen_frets)
        score = 0

        if seen_frets:
            # Distance to the nearest visually detected fret
            dist = min(abs(candidate.fret - f) for f in seen_frets)

            if dist == 0:
                score -= weights['exact_match']
            elif dist <= weights['near_distance']:
                score += dist * weights['near_weight']
            else:
                score += dist * weights['far_weight']
        else:
            # No vision data, lower frets are more common
            score += candidate.fret * weights['no_evidence_fret']

        if candidate.fret == 0:
            score -= weights['open_string']

        return score

    def preference_bias(self, string: int, preference: Optional[StringPreference]) -> int:
        """Penalty for a string under a preference profile (0 when neutral)"""
        if preference is None:
            return 0

        weight = self.weights['preference'][preference]

        if preference is StringPreference.HIGH:
            return (NUM_STRINGS - 1 - string) * weight
        if preference is StringPreference.LOW:
            return string * weight
        return abs(string - self.balanced_center) * weight

    def max_preference_bias(self) -> int:
        return max(
            self.preference_bias(string, preference)
            for preference in StringPreference
            for string in range(NUM_STRINGS)
        )

    def score(self,
              candidate: Candidate,
              seen_frets: Iterable[int],
              preference: Optional[StringPreference] = None) -> int:
        """Full score: visual evidence plus string preference"""
        return (self.evidence_score(candidate, seen_frets)
                + self.preference_bias(candidate.string, preference))

    def best_position(self,
                      candidates: Sequence[Candidate],
                      seen_frets: Iterable[int],
                      preference: Optional[StringPreference] = None) -> Optional[Candidate]:
        """
        Pick the lowest-scoring candidate

        Ties go to the earliest candidate, i.e. the lowest string index.
        """
        if not candidates:
            return None

        seen_frets = frozenset(seen_frets)
        return min(candidates, key=lambda c: self.score(c, seen_frets, preference))
