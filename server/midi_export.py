"""Standard MIDI File export for compositions.

Writes a type-1 file: a conductor track carrying tempo and title, then one
track per part. Event times are read as beats and duration tokens are
converted to beats, so melody, harmony, bass and drums stay aligned.
"""

import io
import logging
import re
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Tuple

import mido

from composition.chord_generator import ChordEvent
from composition.composer import Composition
from composition.melody_generator import NoteEvent
from composition.music_theory import DRUM_PITCHES
from composition.percussion_generator import DrumPattern, PercussionEvent
from composition.pitch import clamp, duration_to_beats, note_to_pitch
from server.exceptions import ExportError

logger = logging.getLogger(__name__)

# (absolute tick, sort order, message); note_off sorts before note_on
TimedMessage = Tuple[int, int, mido.Message]


class NoteSpan(NamedTuple):
    """One sounding note in absolute ticks."""

    pitch: int
    velocity: int
    start: int
    end: int


class MidiExporter:
    """Serializes compositions to Standard MIDI File bytes."""

    # (track name, channel, GM program)
    MELODY_TRACK = ("Melody", 0, 0)  # Acoustic Grand Piano
    HARMONY_TRACK = ("Harmony", 1, 48)  # String Ensemble 1
    BASS_TRACK = ("Bass", 2, 32)  # Acoustic Bass
    DRUM_CHANNEL = 9
    DRUM_DURATION = "16n"

    def __init__(self, ticks_per_beat: int = 480):
        """Initialize MIDI exporter.

        Args:
            ticks_per_beat: MIDI resolution (pulses per quarter note)
        """
        self.ticks_per_beat = ticks_per_beat
        logger.info(f"MIDI exporter initialized (ticks_per_beat={ticks_per_beat})")

    def build(self, composition: Composition) -> mido.MidiFile:
        """Build a MidiFile for a composition.

        Args:
            composition: Composition to serialize

        Returns:
            Type-1 MidiFile with conductor, melody, harmony, bass and (if
            present) drum tracks

        Raises:
            ExportError: If an event cannot be encoded
        """
        midi_file = mido.MidiFile(type=1, ticks_per_beat=self.ticks_per_beat)

        try:
            midi_file.tracks.append(self._conductor_track(composition))
            midi_file.tracks.append(
                self._note_track(self.MELODY_TRACK, composition.melody)
            )
            midi_file.tracks.append(self._chord_track(composition.harmony))
            midi_file.tracks.append(
                self._note_track(self.BASS_TRACK, composition.bass_line)
            )
            if isinstance(composition.drums, DrumPattern):
                midi_file.tracks.append(self._drum_track(composition.drums.events))
        except (ValueError, TypeError) as e:
            raise ExportError(f"Failed to encode '{composition.title}': {e}") from e

        return midi_file

    def to_bytes(self, composition: Composition) -> bytes:
        """Serialize a composition to Standard MIDI File bytes.

        Raises:
            ExportError: If encoding or writing fails
        """
        midi_file = self.build(composition)
        buffer = io.BytesIO()
        try:
            midi_file.save(file=buffer)
        except (ValueError, TypeError, OSError) as e:
            raise ExportError(f"Failed to write '{composition.title}': {e}") from e

        data = buffer.getvalue()
        logger.debug(
            f"Exported {len(midi_file.tracks)} tracks ({len(data)} bytes) "
            f"for '{composition.title}'"
        )
        return data

    @staticmethod
    def filename(composition: Composition) -> str:
        """Download filename derived from the title."""
        return re.sub(r"\s+", "_", composition.title) + ".mid"

    def _ticks(self, beats: float) -> int:
        return int(round(beats * self.ticks_per_beat))

    def _conductor_track(self, composition: Composition) -> mido.MidiTrack:
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("track_name", name=composition.title, time=0))
        track.append(
            mido.MetaMessage(
                "set_tempo",
                tempo=mido.bpm2tempo(composition.parameters.tempo),
                time=0,
            )
        )
        track.append(
            mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0)
        )
        track.append(mido.MetaMessage("end_of_track", time=0))
        return track

    def _span(
        self, pitch: int, velocity: int, start_beats: float, length_beats: float
    ) -> NoteSpan:
        start = self._ticks(start_beats)
        end = start + max(1, self._ticks(length_beats))
        return NoteSpan(clamp(pitch), clamp(velocity, 1), start, end)

    @staticmethod
    def _messages(channel: int, spans: Iterable[NoteSpan]) -> List[TimedMessage]:
        """Turn note spans into note_on/note_off pairs for one channel.

        A note sounding when the same key is struck again is ended at that
        onset, so every note_off closes the note_on it belongs to.
        """
        by_pitch: Dict[int, List[NoteSpan]] = defaultdict(list)
        for span in spans:
            by_pitch[span.pitch].append(span)

        messages: List[TimedMessage] = []
        for pitch, pitch_spans in by_pitch.items():
            pitch_spans.sort(key=lambda span: span.start)
            next_starts = [span.start for span in pitch_spans[1:]] + [None]
            for span, next_start in zip(pitch_spans, next_starts):
                end = span.end
                if next_start is not None and next_start > span.start:
                    end = min(end, next_start)
                messages.append(
                    (
                        span.start,
                        1,
                        mido.Message(
                            "note_on", channel=channel, note=pitch, velocity=span.velocity
                        ),
                    )
                )
                messages.append(
                    (end, 0, mido.Message("note_off", channel=channel, note=pitch, velocity=0))
                )
        return messages

    def _note_track(
        self, track_spec: Tuple[str, int, int], notes: Iterable[NoteEvent]
    ) -> mido.MidiTrack:
        name, channel, program = track_spec
        spans = [
            self._span(
                note.pitch, note.velocity, note.time, duration_to_beats(note.duration)
            )
            for note in notes
        ]
        return self._assemble(name, channel, program, self._messages(channel, spans))

    def _chord_track(self, chords: Iterable[ChordEvent]) -> mido.MidiTrack:
        name, channel, program = self.HARMONY_TRACK
        spans: List[NoteSpan] = []
        for chord in chords:
            length = duration_to_beats(chord.duration)
            for pitch_name in chord.pitch_names:
                spans.append(
                    self._span(
                        note_to_pitch(pitch_name), chord.velocity, chord.time, length
                    )
                )
        return self._assemble(name, channel, program, self._messages(channel, spans))

    def _drum_track(self, hits: Iterable[PercussionEvent]) -> mido.MidiTrack:
        length = duration_to_beats(self.DRUM_DURATION)
        spans = [
            self._span(DRUM_PITCHES[hit.instrument], hit.velocity, hit.time, length)
            for hit in hits
        ]
        return self._assemble(
            "Drums", self.DRUM_CHANNEL, None, self._messages(self.DRUM_CHANNEL, spans)
        )

    def _assemble(
        self,
        name: str,
        channel: int,
        program: int | None,
        messages: List[TimedMessage],
    ) -> mido.MidiTrack:
        """Convert absolute-tick messages into a delta-time track."""
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("track_name", name=name, time=0))
        if program is not None:
            track.append(
                mido.Message("program_change", channel=channel, program=program, time=0)
            )

        messages.sort(key=lambda item: (item[0], item[1]))
        current_tick = 0
        for tick, _, message in messages:
            track.append(message.copy(time=tick - current_tick))
            current_tick = tick

        track.append(mido.MetaMessage("end_of_track", time=0))
        return track
