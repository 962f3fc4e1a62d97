#!/usr/bin/env python3
import argparse
import sys

from fretfusion.config.guitar_config import MAX_FRET, TEMPORAL_HALF_WINDOW
from fretfusion.pipeline import TranscriptionPipeline


def main(argv=None):
    parser = argparse.ArgumentParser(description='Guitar Tab Transcriber - Audio/Video Fusion')
    parser.add_argument('input', type=str, help='JSON file with "notes" and "observations" streams')
    parser.add_argument('-o', '--output', type=str, help='Output tab file (default: print)')
    parser.add_argument('--variation', type=int, default=0, help='Variation to render (default: first)')
    parser.add_argument('--all', action='store_true', help='Render every variation')
    parser.add_argument('--max-fret', type=int, default=MAX_FRET, help='Highest fret considered')
    parser.add_argument('--window', type=float, default=TEMPORAL_HALF_WINDOW,
                        help='Evidence window around each onset, in seconds')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only print the tab')

    args = parser.parse_args(argv)

    pipeline = TranscriptionPipeline(
        max_fret=args.max_fret,
        half_window=args.window,
        verbose=not args.quiet
    )

    try:
        result = pipeline.process_file(args.input, variation_index=args.variation)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.all and result['variations']:
        tab = '\n\n'.join(
            pipeline.tab_generator.generate_for_variation(v) for v in result['variations']
        )
    else:
        tab = result['tab']

    if args.output:
        with open(args.output, 'w') as f:
            f.write(tab)
        print(f"Tab saved to: {args.output}")
    else:
        print(tab)

    return 0


if __name__ == "__main__":
    sys.exit(main())
