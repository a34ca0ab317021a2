"""Tests für Wochentags-Konvention und Fachfarben."""

from datetime import date, datetime

import pytest

from config.defaults import DEFAULT_PALETTE
from engine.colors import SubjectColorAssigner, color_for, stable_hash, to_hex
from engine.day_convention import (
    date_for_day,
    day_name,
    from_storage,
    to_storage,
    week_anchor,
)


# ─── WOCHENTAGE ───────────────────────────────────────────────────────────────

class TestDayConvention:
    def test_sunday_maps_to_zero(self):
        assert to_storage(7) == 0
        assert from_storage(0) == 7

    def test_weekdays_unchanged(self):
        for day in range(1, 7):
            assert to_storage(day) == day
            assert from_storage(day) == day

    def test_roundtrip_all_days(self):
        assert [from_storage(to_storage(d)) for d in range(1, 8)] == list(range(1, 8))

    @pytest.mark.parametrize("day", [0, 8, -1])
    def test_to_storage_out_of_range(self, day):
        with pytest.raises(ValueError):
            to_storage(day)

    @pytest.mark.parametrize("day", [-1, 7])
    def test_from_storage_out_of_range(self, day):
        with pytest.raises(ValueError):
            from_storage(day)

    def test_week_anchor_is_monday(self):
        """Jeder Tag der Woche liefert denselben Montag."""
        for offset in range(7):
            assert week_anchor(date(2024, 6, 3 + offset)) == date(2024, 6, 3)

    def test_week_anchor_accepts_datetime(self):
        assert week_anchor(datetime(2024, 6, 9, 23, 59)) == date(2024, 6, 3)

    def test_week_anchor_across_year(self):
        assert week_anchor(date(2025, 1, 1)) == date(2024, 12, 30)

    def test_date_for_day(self):
        assert date_for_day(date(2024, 6, 5), 1) == date(2024, 6, 3)
        assert date_for_day(date(2024, 6, 3), 7) == date(2024, 6, 9)

    def test_day_name(self):
        assert day_name(1) == "Montag"
        assert day_name(7, short=True) == "So"
        assert day_name(9) == "9"


# ─── FARBEN ───────────────────────────────────────────────────────────────────

class TestColors:
    def test_palette_has_15_opaque_colors(self):
        assert len(DEFAULT_PALETTE) == 15
        assert all(c >> 24 == 0xFF for c in DEFAULT_PALETTE)

    def test_color_is_deterministic(self):
        a = SubjectColorAssigner()
        b = SubjectColorAssigner()
        assert a.color_for("math") == b.color_for("math")
        assert color_for("math") == a.color_for("math")

    def test_stable_hash_is_crc32(self):
        # Fester Wert: darf sich zwischen Prozessen nicht ändern
        assert stable_hash("") == 0
        assert stable_hash("abc") == 0x352441C2

    def test_color_index_formula(self):
        subject_id = "3f2c9a1e-biologie"
        expected = DEFAULT_PALETTE[abs(stable_hash(subject_id)) % 15]
        assert color_for(subject_id) == expected

    def test_color_always_in_palette(self):
        for i in range(200):
            assert color_for(f"subject-{i}") in DEFAULT_PALETTE

    def test_custom_palette(self):
        palette = [0xFF000000 + i for i in range(15)]
        assigner = SubjectColorAssigner(palette)
        assert assigner.palette == tuple(palette)
        assert assigner.color_for("x") in palette

    @pytest.mark.parametrize("palette", [
        [],
        [0xFF000000, 0xFFFFFFFF],
        [0xFF000000 + i for i in range(16)],
        [0xFF2196F3] * 15,
        [0x802196F3] + [0xFF000000 + i for i in range(14)],
    ])
    def test_invalid_palette_rejected(self, palette):
        """Falsche Größe, doppelte oder durchscheinende Farben → ValueError."""
        with pytest.raises(ValueError):
            SubjectColorAssigner(palette)

    def test_to_hex(self):
        assert to_hex(0xFF2196F3) == "#2196F3"
        assert to_hex(0xFF000001) == "#000001"
