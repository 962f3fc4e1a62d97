#!/usr/bin/env python3
"""
Debug script to see what's happening at each stage
"""
import sys

from fretfusion.fusion.temporal_matcher import TemporalMatcher
from fretfusion.pipeline import TranscriptionPipeline, read_streams


def debug_pipeline(input_path: str):
    """Debug each stage of the pipeline"""

    print("=" * 80)
    print("DEBUGGING FUSION PIPELINE")
    print("=" * 80)

    note_events, observations = read_streams(input_path)
    pipeline = TranscriptionPipeline(verbose=False)
    result = pipeline.process(note_events, observations)

    matcher = TemporalMatcher(observations, pipeline.half_window)
    resolver = pipeline.resolver

    # Audio notes
    print("\n[1] AUDIO NOTES:")
    if note_events:
        print(f"  Total: {len(note_events)}")
        for i, note in enumerate(sorted(note_events, key=lambda n: n.onset)[:10]):
            seen = sorted(matcher.observed_frets(note.onset))
            candidates = resolver.guitar_mapper.find_positions(note.pitch)
            print(f"    {i+1}. Time: {note.onset:.2f}s, Pitch: {note.label} ({note.pitch}), "
                  f"Seen frets: {seen or '-'}, "
                  f"Candidates: {[(c.string, c.fret) for c in candidates] or 'UNPLAYABLE'}")
    else:
        print("  None detected")

    # Vision frames
    print("\n[2] VISION FRAMES:")
    if observations:
        print(f"  Total: {len(observations)}")
        for i, obs in enumerate(matcher.observations[:5]):
            print(f"    {i+1}. Time: {obs.timestamp:.2f}s, Frets: {sorted(obs.frets)}")
    else:
        print("  None detected (every note uses fallback scoring)")

    # Candidate scores for the first few notes
    print("\n[3] CANDIDATE SCORES (neutral):")
    for note in sorted(note_events, key=lambda n: n.onset)[:5]:
        seen = matcher.observed_frets(note.onset)
        scores = [
            f"S{c.string}F{c.fret}={resolver.scorer.score(c, seen)}"
            for c in resolver.guitar_mapper.find_positions(note.pitch)
        ]
        print(f"    {note.onset:.2f}s {note.label}: {', '.join(scores) or 'none'}")

    # Variations
    print("\n[4] VARIATIONS:")
    if result['variations']:
        for variation in result['variations']:
            print(f"  [{variation.id}] {variation.name}: "
                  f"{' '.join(f'S{s}F{f}' for s, f in variation.positions()[:10])}")
    else:
        print(f"  None! Fallback used: {result['used_fallback']}")

    print("\n[5] STATISTICS:")
    for key, value in result['metadata'].items():
        print(f"  {key}: {value}")

    print("\n[6] TAB:")
    print(result['tab'])


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python debug_fusion.py <input.json>")
        sys.exit(1)

    debug_pipeline(sys.argv[1])
