"""
Tests for input stream builders, the fusion pipeline and the command line
"""
import json
from itertools import count

import pytest

import main
from fretfusion.audio.note_events import NoteEventCollector
from fretfusion.events import FretObservation, NoteEvent
from fretfusion.pipeline import TranscriptionPipeline, load_streams, read_streams
from fretfusion.video.fret_observations import (
    FretObservationRecorder, build_observations, extract_fret_number, frets_from_detections,
)


def detection(label, confidence):
    return {'label': label, 'confidence': confidence}


def obs_at(timestamp, *frets):
    return FretObservation(timestamp=timestamp, frets=frets)


@pytest.fixture
def pipeline():
    return TranscriptionPipeline(verbose=False)


# --- Video detections -> fret observations ---

@pytest.mark.parametrize("label, fret", [
    ('fret_7', 7),
    ('Fret 12', 12),
    ('3', 3),
    ('zone0_fret5', 0),
    ('nut', None),
    ('', None),
    (None, None),
])
def test_extract_fret_number(label, fret):
    assert extract_fret_number(label) == fret


def test_low_confidence_detections_are_ignored():
    detections = [
        detection('fret_3', 0.9),
        detection('fret_3', 0.8),
        detection('fret_12', 0.31),
        detection('fret_5', 0.3),
        detection('nut', 0.99),
    ]

    assert frets_from_detections(detections) == [3, 12]


def test_frames_without_frets_are_left_out():
    frames = [
        (0.1, [detection('fret_3', 0.9), detection('fret_12', 0.5)]),
        (0.2, [detection('fret_5', 0.2)]),
        (0.3, []),
    ]

    assert build_observations(frames) == [FretObservation(timestamp=0.1, frets={3, 12})]


def test_recorder_buffers_only_while_recording():
    ticks = count(start=10.0, step=0.5)
    recorder = FretObservationRecorder(clock=lambda: next(ticks))

    assert recorder.add_frame([detection('fret_1', 0.9)], timestamp=0.0) is None

    recorder.start_session()  # clock reads 10.0
    recorder.add_frame([detection('fret_2', 0.9)])  # clock reads 10.5
    recorder.add_frame([detection('fret_9', 0.1)], timestamp=0.75)
    recorder.add_frame([detection('fret_4', 0.9), detection('fret_5', 0.9)], timestamp=1.25)
    history = recorder.stop_session()

    assert history == [
        FretObservation(timestamp=0.5, frets={2}),
        FretObservation(timestamp=1.25, frets={4, 5}),
    ]
    assert not recorder.is_recording
    assert recorder.add_frame([detection('fret_7', 0.9)], timestamp=2.0) is None


def test_new_session_clears_history():
    recorder = FretObservationRecorder()
    recorder.start_session()
    recorder.add_frame([detection('fret_2', 0.9)], timestamp=0.5)
    recorder.stop_session()

    recorder.start_session()

    assert recorder.stop_session() == []


# --- Transcriber messages -> note events ---

def test_note_events_from_messages():
    messages = [
        ('note_on', 64, 0.0, 100),
        ('note_on', 60, 0.5, 50),
        ('note_off', 64, 1.0, 0),
        ('note_off', 62, 1.2, 0),
        ('note_on', 60, 1.5, 0),
        ('note_on', 67, 2.0, 80),
        ('control_change', 67, 2.2, 10),
        ('note_on', 67, 2.5, 0),
    ]

    events = NoteEventCollector().collect(messages)

    assert events == [
        NoteEvent(pitch=64, onset=0.0, duration=1.0),
        NoteEvent(pitch=67, onset=2.0, duration=0.5),
    ]


def test_unfinished_notes_are_not_emitted():
    assert NoteEventCollector().collect([('note_on', 64, 0.0, 100)]) == []


# --- Stream loading ---

def test_load_streams():
    note_events, observations = load_streams({
        'notes': [{'pitch': 45, 'onset': 0.5, 'duration': 0.25}, {'pitch': 64, 'onset': 0.0}],
        'observations': [{'timestamp': 0.4, 'frets': [0, 0, 2]}],
    })

    assert note_events == [NoteEvent(45, 0.5, 0.25), NoteEvent(64, 0.0, 0.0)]
    assert observations == [FretObservation(0.4, {0, 2})]


def test_observations_are_optional():
    _, observations = load_streams({'notes': []})
    assert observations == []


@pytest.mark.parametrize("data", [
    [],
    {'observations': []},
    {'notes': [{'onset': 0.0}]},
    {'notes': [{'pitch': 40, 'onset': -1.0}]},
    {'notes': [], 'observations': [{'timestamp': 0.1, 'frets': []}]},
    {'notes': [], 'observations': [{'timestamp': 0.1}]},
])
def test_malformed_streams_rejected(data):
    with pytest.raises(ValueError):
        load_streams(data)


@pytest.mark.parametrize("document", [
    '{"notes": [{"pitch": 64, "onset": 1.0}, {"pitch": 45, "onset": NaN}]}',
    '{"notes": [{"pitch": 64, "onset": Infinity}]}',
    '{"notes": [{"pitch": 64, "onset": 1.0, "duration": NaN}]}',
    '{"notes": [], "observations": [{"timestamp": Infinity, "frets": [3]}]}',
    '{"notes": [], "observations": [{"timestamp": NaN, "frets": [9]}]}',
    '{"notes": [], "observations": [{"timestamp": 0.5, "frets": [2.7]}]}',
    '{"notes": [{"pitch": 45.9, "onset": 0.0}]}',
])
def test_non_finite_or_fractional_json_rejected(tmp_path, document):
    path = tmp_path / 'take.json'
    path.write_text(document)

    with pytest.raises(ValueError):
        read_streams(path)


def test_read_streams_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_streams(tmp_path / 'missing.json')


# --- Pipeline ---

def test_no_notes_gives_message(pipeline):
    result = pipeline.process([], [])

    assert result['tab'] == "No notes detected."
    assert result['variations'] == []
    assert result['used_fallback'] is True
    assert result['metadata']['note_count'] == 0
    assert result['metadata']['average_fret'] == 0.0


def test_unplayable_notes_are_counted(pipeline):
    result = pipeline.process([NoteEvent(pitch=20, onset=0.0), NoteEvent(pitch=45, onset=1.0)], [])

    assert result['used_fallback'] is False
    assert [n.position for n in result['tab_notes']] == [(1, 0)]
    assert result['metadata']['unplayable_notes'] == 1
    assert result['metadata']['placed_notes'] == 1


def test_only_unplayable_notes_falls_back(pipeline):
    result = pipeline.process([NoteEvent(pitch=100, onset=0.0)], [obs_at(0.0, 3)])

    assert result['used_fallback'] is True
    assert result['tab'] == "No notes detected."
    assert result['metadata']['notes_with_visual_evidence'] == 1


def test_simultaneous_notes_keep_input_order(pipeline):
    events = [
        NoteEvent(pitch=64, onset=1.0),
        NoteEvent(pitch=45, onset=1.0),
        NoteEvent(pitch=40, onset=0.5),
    ]

    result = pipeline.process(events, [])

    for variation in result['variations']:
        assert [(n.onset, n.label) for n in variation.notes] == [
            (0.5, 'E2'), (1.0, 'E4'), (1.0, 'A2'),
        ]
    assert result['tab'].split('\n') == [
        "e|----0----",
        "B|---------",
        "G|---------",
        "D|---------",
        "A|-------0-",
        "E|-0-------",
    ]


def test_selected_variation_is_rendered(pipeline):
    events = [NoteEvent(pitch=59, onset=1.0)]
    observations = [obs_at(0.9, 0, 4), obs_at(1.1, 9)]

    result = pipeline.process(events, observations, variation_index=1)

    assert result['metadata']['variation_count'] == 3
    assert [n.position for n in result['tab_notes']] == [(2, 9)]
    assert result['metadata']['average_fret'] == 9.0
    assert result['metadata']['notes_with_visual_evidence'] == 1


def test_variation_index_out_of_range(pipeline):
    with pytest.raises(ValueError):
        pipeline.process([NoteEvent(pitch=45, onset=0.0)], [], variation_index=5)


def test_verbose_pipeline_prints_progress(capsys):
    TranscriptionPipeline(verbose=True).process([NoteEvent(pitch=45, onset=0.0)], [])

    out = capsys.readouterr().out
    assert "MULTIMODAL FUSION" in out
    assert "Unplayable notes: 0" in out


# --- Command line ---

@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / 'take.json'
    path.write_text(json.dumps({
        'notes': [{'pitch': 59, 'onset': 1.0, 'duration': 0.5}],
        'observations': [{'timestamp': 0.9, 'frets': [0, 4]}, {'timestamp': 1.1, 'frets': [9]}],
    }))
    return path


def test_cli_prints_tab(input_file, capsys):
    assert main.main([str(input_file), '--quiet']) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[1] == "B|-0-"


def test_cli_renders_all_variations(input_file, capsys):
    assert main.main([str(input_file), '-q', '--all']) == 0

    out = capsys.readouterr().out
    assert "[High Strings]" in out
    assert "[Low Strings]" in out
    assert "[Both]" in out


def test_cli_writes_output_file(input_file, tmp_path, capsys):
    output = tmp_path / 'tab.txt'

    assert main.main([str(input_file), '-q', '--variation', '1', '-o', str(output)]) == 0

    assert output.read_text().splitlines()[3] == "D|-9-"


def test_cli_reports_missing_input(tmp_path, capsys):
    assert main.main([str(tmp_path / 'nope.json'), '-q']) == 1
    assert "Error:" in capsys.readouterr().err
