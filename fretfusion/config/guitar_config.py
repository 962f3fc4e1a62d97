# Standard guitar tuning (E A D G B E) as MIDI note numbers, low to high
STANDARD_TUNING = (
    40,  # Low E  - E2
    45,  # A      - A2
    50,  # D      - D3
    55,  # G      - G3
    59,  # B      - B3
    64,  # High E - E4
)

NUM_STRINGS = 6

# Display names, high string first (tab line order)
STRING_NAMES = ['e', 'B', 'G', 'D', 'A', 'E']

# Cap on the fret search range
MAX_FRET = 15

# Fusion: vision frames within +/- this many seconds of an onset count as evidence
TEMPORAL_HALF_WINDOW = 0.2

# Position scoring (lower score is better)
EXACT_MATCH_BONUS = 100        # Seen fret equals candidate fret
NEAR_DISTANCE = 2              # Up to this many frets away counts as "close"
NEAR_DISTANCE_WEIGHT = 10      # Per fret, when close
FAR_DISTANCE_WEIGHT = 100      # Per fret, when far
NO_EVIDENCE_FRET_WEIGHT = 2    # Per fret, when no vision data
OPEN_STRING_BONUS = 5

# String preference bias per variation
HIGH_STRING_WEIGHT = 10
LOW_STRING_WEIGHT = 10
BALANCED_WEIGHT = 5
BALANCED_CENTER_STRING = 3

# Collaborator output filtering
DETECTION_CONFIDENCE_THRESHOLD = 0.3  # Fret-zone detector confidence
NOTE_VELOCITY_THRESHOLD = 60          # Transcriber note-on velocity
