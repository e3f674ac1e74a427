"""Unit tests for Standard MIDI File export."""

import dataclasses
import io

import mido
import pytest

from composition.composer import Composer
from composition.melody_generator import NoteEvent
from composition.parameters import ParameterSet
from server.exceptions import ExportError
from server.midi_export import MidiExporter


def compose(**overrides):
    kwargs = {"genre": "pop", "key": "C", "mood": "happy", "tempo": 120, "duration": 8, "seed": 5}
    kwargs.update(overrides)
    return Composer().compose(ParameterSet(**kwargs))


def parse(data):
    return mido.MidiFile(file=io.BytesIO(data))


def note_ons(track):
    return [msg for msg in track if msg.type == "note_on" and msg.velocity > 0]


class TestMidiExporter:
    """Composition -> type-1 MIDI file."""

    def setup_method(self):
        self.exporter = MidiExporter(ticks_per_beat=480)

    def test_tracks_and_tempo(self):
        composition = compose()
        midi_file = parse(self.exporter.to_bytes(composition))

        assert midi_file.type == 1
        assert midi_file.ticks_per_beat == 480
        assert len(midi_file.tracks) == 5

        tempos = [msg.tempo for msg in midi_file.tracks[0] if msg.type == "set_tempo"]
        assert tempos == [mido.bpm2tempo(120)]
        names = [msg.name for msg in midi_file.tracks[0] if msg.type == "track_name"]
        assert names == [composition.title]

    def test_note_counts_per_track(self):
        composition = compose()
        midi_file = parse(self.exporter.to_bytes(composition))
        melody, harmony, bass, drums = midi_file.tracks[1:]

        assert len(note_ons(melody)) == len(composition.melody)
        assert len(note_ons(harmony)) == sum(len(c.pitch_names) for c in composition.harmony)
        assert len(note_ons(bass)) == len(composition.bass_line)
        assert len(note_ons(drums)) == len(composition.drums.events)

    def test_melody_pitches_and_onsets(self):
        composition = compose()
        midi_file = parse(self.exporter.to_bytes(composition))

        absolute = 0
        onsets = []
        for msg in midi_file.tracks[1]:
            absolute += msg.time
            if msg.type == "note_on" and msg.velocity > 0:
                onsets.append((absolute, msg.note, msg.channel))

        assert [note for _, note, _ in onsets] == [n.pitch for n in composition.melody]
        assert [tick for tick, _, _ in onsets] == [int(n.time * 480) for n in composition.melody]
        assert {channel for _, _, channel in onsets} == {0}

    def test_drums_on_percussion_channel(self):
        midi_file = parse(self.exporter.to_bytes(compose(genre="rock")))
        hits = note_ons(midi_file.tracks[4])

        assert {msg.channel for msg in hits} == {9}
        assert {msg.note for msg in hits} == {36, 38, 42}

    def test_classical_has_no_drum_track(self):
        midi_file = parse(self.exporter.to_bytes(compose(genre="classical")))
        assert len(midi_file.tracks) == 4

    def test_empty_composition_exports(self):
        midi_file = parse(self.exporter.to_bytes(compose(duration=0)))
        assert all(not note_ons(track) for track in midi_file.tracks)

    def test_unknown_duration_token_raises_export_error(self):
        composition = compose()
        broken = dataclasses.replace(
            composition, melody=(NoteEvent("C4", "3n", 80, 0.0, 60),)
        )

        with pytest.raises(ExportError):
            self.exporter.to_bytes(broken)

    def test_filename_from_title(self):
        composition = compose()
        assert MidiExporter.filename(composition) == composition.title.replace(" ", "_") + ".mid"


def note_spans(track):
    """(start tick, end tick, key) per note, asserting no key is struck while sounding."""
    absolute = 0
    sounding = {}
    spans = []
    for msg in track:
        absolute += msg.time
        if msg.type == "note_on" and msg.velocity > 0:
            assert msg.note not in sounding
            sounding[msg.note] = absolute
        elif msg.type == "note_off" or (msg.type == "note_on" and msg.velocity == 0):
            spans.append((sounding.pop(msg.note), absolute, msg.note))
    assert not sounding
    return sorted(spans)


class TestNoteLengths:
    """Exported lengths follow duration tokens without same-key overlaps."""

    def setup_method(self):
        self.exporter = MidiExporter(ticks_per_beat=480)

    def test_repeated_pitches_end_at_next_onset(self):
        composition = compose(mood="calm", duration=60, complexity=1, seed=3)
        spans = note_spans(parse(self.exporter.to_bytes(composition)).tracks[1])

        next_onset = {}
        expected = []
        for note in sorted(composition.melody, key=lambda n: n.time, reverse=True):
            start = int(note.time * 480)
            end = start + 480  # every complexity-1 note is a quarter note
            if note.pitch in next_onset:
                end = min(end, next_onset[note.pitch])
            next_onset[note.pitch] = start
            expected.append((start, end, note.pitch))

        assert spans == sorted(expected)

    def test_unrepeated_notes_keep_full_length(self):
        composition = compose(mood="calm", duration=60, complexity=1, seed=3)
        spans = note_spans(parse(self.exporter.to_bytes(composition)).tracks[1])
        onsets = {}
        for start, _, key in spans:
            onsets.setdefault(key, []).append(start)

        for start, end, key in spans:
            later = [onset for onset in onsets[key] if onset > start]
            if not later or later[0] - start >= 480:
                assert end - start == 480

    def test_hihat_hits_do_not_overlap(self):
        composition = compose(genre="rock", duration=16)
        spans = note_spans(parse(self.exporter.to_bytes(composition)).tracks[4])

        assert len(spans) == len(composition.drums.events)
        assert all(end > start for start, end, _ in spans)
