"""Tests for track title normalisation and time formatting."""

from __future__ import annotations

import pytest

from albumdeck.titles import UNKNOWN_TITLE, format_time, normalize_title


class TestNormalizeTitle:
    def test_strips_extension(self):
        assert normalize_title("Fade.mp3") == "Fade"

    def test_keeps_first_three_words(self):
        assert normalize_title("Alan Walker Fade Original Mix.mp3") == "Alan Walker Fade"

    def test_strips_bracket_prefix_up_to_hyphen(self):
        assert normalize_title("[ncs-] Tobu Hope Original Mix.mp3") == "Tobu Hope Original"

    def test_bracket_prefix_without_hyphen_is_kept(self):
        assert normalize_title("[Live] Song.mp3") == "[Live] Song"

    def test_trims_whitespace(self):
        assert normalize_title("   Spaced Out   .mp3") == "Spaced Out"

    def test_other_audio_extensions(self):
        assert normalize_title("Night Drive.FLAC") == "Night Drive"

    def test_unknown_extension_is_kept(self):
        assert normalize_title("notes.txt") == "notes.txt"

    def test_empty_string(self):
        assert normalize_title("") == UNKNOWN_TITLE

    def test_extension_only(self):
        assert normalize_title(".mp3") == UNKNOWN_TITLE

    def test_whitespace_only(self):
        assert normalize_title("   .mp3") == UNKNOWN_TITLE

    @pytest.mark.parametrize("title", ["Fade", "Heroes Tonight", "Cartoon On On"])
    def test_idempotent_on_short_titles(self, title):
        assert normalize_title(title) == title
        assert normalize_title(normalize_title(title)) == title

    def test_deterministic(self):
        name = "[x-] Some Track Name Here.mp3"
        assert normalize_title(name) == normalize_title(name)


class TestFormatTime:
    def test_zero(self):
        assert format_time(0) == "00:00"

    def test_minutes_and_seconds(self):
        assert format_time(125.9) == "02:05"

    def test_negative(self):
        assert format_time(-3) == "00:00"

    def test_nan(self):
        assert format_time(float("nan")) == "00:00"
