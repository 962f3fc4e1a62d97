#!/usr/bin/env python3
import sys

def check_imports():
    """Verify all required packages are installed"""
    packages = ['numpy', 'librosa']

    for pkg in packages:
        try:
            __import__(pkg)
            print(f"✓ {pkg}")
        except ImportError as e:
            print(f"✗ {pkg} - {e}")
            return False
    return True

def check_fusion():
    """Check that a single note resolves end to end"""
    from fretfusion.events import FretObservation, NoteEvent
    from fretfusion.pipeline import TranscriptionPipeline

    # Open high e, with the camera seeing an open string
    notes = [NoteEvent(pitch=64, onset=0.5, duration=0.25)]
    observations = [FretObservation(timestamp=0.45, frets=[0])]

    result = TranscriptionPipeline(verbose=False).process(notes, observations)
    first = result['tab_notes'][0]
    print(f"✓ Fusion works ({first.label} -> string {first.string}, fret {first.fret})")
    return True

if __name__ == "__main__":
    print("Validating setup...\n")

    if check_imports():
        print("\n✓ All packages installed")
    else:
        print("\n✗ Some packages missing")
        sys.exit(1)

    if check_fusion():
        print("✓ Fusion pipeline functional")

    print("\n✓ Setup complete! Ready to transcribe.")
