"""Unit tests for the scale-constrained melody walk."""

import random

import pytest

from composition.melody_generator import MelodyGenerator
from composition.music_theory import MOOD_PROFILES, RHYTHM_PATTERNS, SCALES, MoodProfile
from composition.pitch import note_to_pitch, split_pitch_name


class FixedChoiceRandom(random.Random):
    """Random source whose choice() always returns one value."""

    def __init__(self, pick):
        super().__init__(0)
        self.pick = pick

    def choice(self, seq):
        return self.pick


class AlwaysDriftRandom(random.Random):
    """Random source whose random() always exceeds the drift threshold."""

    def random(self):
        return 0.9


def degrees_of(notes, scale):
    return [scale.notes.index(split_pitch_name(note.pitch_name)[0]) for note in notes]


class TestNoteCount:
    """floor(floor(duration / 60 * tempo) / 2)."""

    @pytest.mark.parametrize(
        "duration, tempo, expected",
        [(8, 120, 8), (30, 120, 30), (10, 100, 8), (0, 120, 0), (0.4, 60, 0), (1, 60, 0)],
    )
    def test_note_count(self, duration, tempo, expected):
        assert MelodyGenerator.note_count(duration, tempo) == expected


class TestMelodyGenerator:
    """Melody generation over the theory tables."""

    def setup_method(self):
        self.generator = MelodyGenerator()
        self.scale = SCALES["C"]

    def test_exact_note_count_and_timing(self):
        notes = self.generator.generate(
            self.scale, MOOD_PROFILES["happy"], RHYTHM_PATTERNS[2], 8, random.Random(1)
        )

        assert len(notes) == 8
        assert [note.time for note in notes] == [i * 0.5 for i in range(8)]

    def test_zero_notes(self):
        notes = self.generator.generate(
            self.scale, MOOD_PROFILES["happy"], RHYTHM_PATTERNS[2], 0, random.Random(1)
        )
        assert notes == []

    @pytest.mark.parametrize("mood_name", sorted(MOOD_PROFILES))
    @pytest.mark.parametrize("key", sorted(SCALES))
    def test_pitches_stay_in_scale(self, mood_name, key):
        scale = SCALES[key]
        mood = MOOD_PROFILES[mood_name]
        notes = self.generator.generate(
            scale, mood, RHYTHM_PATTERNS[5], 64, random.Random(f"{key}-{mood_name}")
        )

        low, high = mood.velocity_range
        for note in notes:
            pitch_class, octave = split_pitch_name(note.pitch_name)
            assert pitch_class in scale.notes, f"{note.pitch_name} not in {key}"
            assert 3 <= octave <= 6
            assert low <= note.velocity <= high
            assert note.duration in RHYTHM_PATTERNS[5]
            assert note.pitch == note_to_pitch(note.pitch_name)

    def test_small_policy_steps_by_at_most_one(self):
        mood = MOOD_PROFILES["sad"]
        assert mood.interval_policy == "small"

        for seed in range(20):
            notes = self.generator.generate(
                self.scale, mood, RHYTHM_PATTERNS[1], 40, random.Random(seed)
            )
            degrees = [0] + degrees_of(notes, self.scale)

            for previous, current in zip(degrees, degrees[1:]):
                assert abs(current - previous) <= 1, (
                    f"seed {seed}: step {previous} -> {current} too large"
                )
                assert 0 <= current <= 6

    def test_middle_preference_keeps_octave(self):
        notes = self.generator.generate(
            self.scale, MOOD_PROFILES["calm"], RHYTHM_PATTERNS[3], 32, AlwaysDriftRandom(3)
        )
        assert {split_pitch_name(note.pitch_name)[1] for note in notes} == {4}

    def test_high_preference_climbs_and_caps(self):
        notes = self.generator.generate(
            self.scale, MOOD_PROFILES["happy"], RHYTHM_PATTERNS[3], 5, AlwaysDriftRandom(3)
        )
        octaves = [split_pitch_name(note.pitch_name)[1] for note in notes]
        assert octaves == [5, 6, 6, 6, 6]

    def test_low_preference_descends_and_floors(self):
        notes = self.generator.generate(
            self.scale, MOOD_PROFILES["sad"], RHYTHM_PATTERNS[3], 4, AlwaysDriftRandom(3)
        )
        octaves = [split_pitch_name(note.pitch_name)[1] for note in notes]
        assert octaves == [3, 3, 3, 3]

    def test_same_seed_same_melody(self):
        first = self.generator.generate(
            self.scale, MOOD_PROFILES["mysterious"], RHYTHM_PATTERNS[4], 16, random.Random(42)
        )
        second = self.generator.generate(
            self.scale, MOOD_PROFILES["mysterious"], RHYTHM_PATTERNS[4], 16, random.Random(42)
        )
        assert first == second


class TestChooseNextDegree:
    """Interval policies clamp at the scale edges instead of wrapping."""

    def setup_method(self):
        self.generator = MelodyGenerator()

    def test_clamps_at_top(self):
        assert self.generator.choose_next_degree(6, 7, "wide", FixedChoiceRandom(5)) == 6

    def test_clamps_at_bottom(self):
        assert self.generator.choose_next_degree(0, 7, "wide", FixedChoiceRandom(-5)) == 0
        assert self.generator.choose_next_degree(1, 7, "large", FixedChoiceRandom(-3)) == 0

    def test_moves_within_range(self):
        assert self.generator.choose_next_degree(3, 7, "large", FixedChoiceRandom(2)) == 5
        assert self.generator.choose_next_degree(3, 7, "smooth", FixedChoiceRandom(-2)) == 1

    def test_unknown_policy_picks_any_degree(self):
        rng = random.Random(11)
        seen = {self.generator.choose_next_degree(0, 7, "chromatic", rng) for _ in range(200)}
        assert seen == set(range(7))

    def test_unknown_policy_mood_still_generates(self):
        mood = MoodProfile((60, 70), "middle", "chromatic")
        notes = self.generator.generate(
            SCALES["Dm"], mood, RHYTHM_PATTERNS[1], 10, random.Random(5)
        )
        assert len(notes) == 10
        assert all(split_pitch_name(n.pitch_name)[0] in SCALES["Dm"].notes for n in notes)
