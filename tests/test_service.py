"""Tests für TimetableService: Anlegen, Ändern, Löschen, Wochen-Kopie, Diff."""

from datetime import date, time

import pytest

from engine.errors import NotFoundError, ReferentialError, StorageError, ValidationError

WEEK_1 = date(2024, 6, 3)
WEEK_2 = date(2024, 6, 10)


# ─── ANLEGEN ──────────────────────────────────────────────────────────────────

class TestCreate:
    def test_create_stable(self, service, store):
        lesson = service.create_lesson("5a", "math", 7, "08:00", "08:45", room="R1")
        assert lesson.day_of_week == 7
        assert lesson.start_time == time(8, 0)
        assert lesson.is_stable
        assert lesson.color > 0
        # Ablage speichert Sonntag als 0
        raw = store.get_lesson_record(lesson.id)
        assert raw["day_of_week"] == 0
        assert raw["start_time"] == "08:00:00"

    def test_create_override_normalizes_week(self, service, store):
        lesson = service.create_lesson("5a", "math", 1, "08:00", "08:45",
                                       is_stable=False, week_start_date=date(2024, 6, 6))
        assert lesson.week_start_date == WEEK_1
        assert store.get_lesson_record(lesson.id)["week_start_date"] == "2024-06-03"

    def test_validation_before_storage(self, service, store):
        with pytest.raises(ValidationError) as exc:
            service.create_lesson("5a", "math", 8, "10:00", "09:00")
        assert exc.value.fields == ["day_of_week", "end_time"]
        assert len(store) == 0

    def test_subject_of_other_class(self, service, store):
        with pytest.raises(ReferentialError):
            service.create_lesson("5a", "eng", 1, "08:00", "08:45")
        assert len(store) == 0

    def test_unknown_subject(self, service):
        with pytest.raises(ReferentialError):
            service.create_lesson("5a", "latein", 1, "08:00", "08:45")

    def test_storage_error_wrapped(self, service, store, monkeypatch):
        def boom(fields):
            raise OSError("disk full")

        monkeypatch.setattr(store, "create_lesson_record", boom)
        with pytest.raises(StorageError) as exc:
            service.create_lesson("5a", "math", 1, "08:00", "08:45")
        assert exc.value.operation == "create_lesson_record"
        assert exc.value.params["subject_id"] == "math"
        assert isinstance(exc.value.__cause__, OSError)


# ─── ÄNDERN ───────────────────────────────────────────────────────────────────

class TestUpdate:
    def test_update_fields(self, service, seeded):
        lesson = service.update_lesson(seeded["math"].id, day_of_week=7, room="R2")
        assert lesson.day_of_week == 7
        assert lesson.room == "R2"
        assert lesson.start_time == time(8, 0)

    def test_clear_room(self, service, seeded):
        assert service.update_lesson(seeded["math"].id, room="").room is None

    def test_end_checked_against_stored_start(self, service, seeded):
        with pytest.raises(ValidationError) as exc:
            service.update_lesson(seeded["math"].id, end_time="07:30")
        assert exc.value.field == "end_time"

    def test_unknown_field(self, service, seeded):
        with pytest.raises(ValidationError) as exc:
            service.update_lesson(seeded["math"].id, is_stable=False)
        assert exc.value.reason == "unknown field"

    def test_missing_lesson(self, service):
        with pytest.raises(NotFoundError):
            service.update_lesson("nope", room="R1")

    def test_no_fields_returns_current(self, service, seeded):
        assert service.update_lesson(seeded["math"].id).id == seeded["math"].id

    def test_modified_flag_recomputed(self, service, seeded):
        schedule = service.copy_week_from_stable("5a", WEEK_2)
        copy = next(l for l in schedule.lessons if l.subject_id == "math")
        assert not copy.modified_from_stable

        changed = service.update_lesson(copy.id, room="R9")
        assert changed.modified_from_stable

        restored = service.update_lesson(copy.id, room="R101")
        assert not restored.modified_from_stable


# ─── LÖSCHEN ──────────────────────────────────────────────────────────────────

class TestDelete:
    def test_delete(self, service, seeded, store):
        assert service.delete_lesson(seeded["bio"].id)
        assert store.get_lesson_record(seeded["bio"].id) is None

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_lesson("nope")

    def test_delete_last_override_restores_template(self, service, seeded):
        service.delete_lesson(seeded["hist"].id)
        assert service.resolve_schedule("5a", WEEK_1).source == "stable"


# ─── LESEN ────────────────────────────────────────────────────────────────────

class TestRead:
    def test_resolve_fills_school(self, service, seeded, cache):
        schedule = service.resolve_schedule("5a", WEEK_2)
        assert schedule.school_id == "gym-1"
        assert "5a" in cache

    def test_empty_class_id_rejected(self, service):
        with pytest.raises(ValidationError):
            service.resolve_schedule("")

    def test_school_cache_until_invalidated(self, service, seeded, store, cache):
        assert service.school_for_class("5a") == "gym-1"
        store.add_class("5a", school_id="gym-2")
        assert service.school_for_class("5a") == "gym-1"
        cache.invalidate("5a")
        assert service.school_for_class("5a") == "gym-2"
        assert cache.misses == 2
        assert cache.hits == 1

    def test_cache_remembers_none(self, service, cache):
        assert service.school_for_class("unbekannt") is None
        assert service.school_for_class("unbekannt") is None
        assert cache.misses == 1
        cache.invalidate()
        assert len(cache) == 0

    def test_lessons_for_day(self, service, seeded):
        wednesday = date(2024, 6, 5)
        assert [l.subject_id for l in service.lessons_for_day("5a", wednesday)] == ["hist"]
        monday = date(2024, 6, 10)
        assert [l.subject_id for l in service.lessons_for_day("5a", monday)] == ["math"]


# ─── WOCHEN-KOPIE & DIFF ──────────────────────────────────────────────────────

class TestCopyWeek:
    def test_copy_creates_linked_overrides(self, service, seeded):
        schedule = service.copy_week_from_stable("5a", date(2024, 6, 12))
        assert schedule.source == "override"
        assert schedule.week_start_date == WEEK_2
        assert {l.stable_lesson_id for l in schedule.lessons} == {
            seeded["math"].id, seeded["bio"].id}
        assert all(not l.is_stable for l in schedule.lessons)

    def test_copy_skips_existing_week(self, service, seeded, store):
        before = len(store)
        schedule = service.copy_week_from_stable("5a", WEEK_1)
        assert len(store) == before
        assert [l.subject_id for l in schedule.lessons] == ["hist"]

    def test_failed_copy_rolled_back(self, service, seeded, store, monkeypatch):
        """Bricht die zweite Kopie ab, bleibt keine halbe Woche liegen."""
        original = store.create_lesson_record
        calls = []

        def flaky(fields):
            calls.append(fields)
            if len(calls) == 2:
                raise OSError("Verbindung verloren")
            return original(fields)

        monkeypatch.setattr(store, "create_lesson_record", flaky)
        with pytest.raises(StorageError):
            service.copy_week_from_stable("5a", WEEK_2)
        assert service.resolve_schedule("5a", WEEK_2).source == "stable"

        monkeypatch.setattr(store, "create_lesson_record", original)
        schedule = service.copy_week_from_stable("5a", WEEK_2)
        assert sorted(l.subject_id for l in schedule.lessons) == ["bio", "math"]

    def test_template_untouched_by_copy(self, service, seeded):
        service.copy_week_from_stable("5a", WEEK_2)
        assert len(service.resolve_schedule("5a").lessons) == 2


class TestLessonChanges:
    def test_diff_after_edit(self, service, seeded):
        schedule = service.copy_week_from_stable("5a", WEEK_2)
        copy = next(l for l in schedule.lessons if l.subject_id == "bio")
        service.update_lesson(copy.id, start_time="10:00", end_time="10:45")

        diff = service.lesson_changes(copy.id)
        assert diff.stable_lesson_id == seeded["bio"].id
        assert [c.field for c in diff.changes] == ["start_time", "end_time"]
        assert diff.changes[0].stable_value == "09:00"
        assert diff.changes[0].current_value == "10:00"

    def test_no_link_empty_diff(self, service, seeded):
        assert service.lesson_changes(seeded["hist"].id).is_empty()

    def test_missing_lesson(self, service):
        with pytest.raises(NotFoundError):
            service.lesson_changes("nope")

    def test_deleted_template_empty_diff(self, service, seeded):
        schedule = service.copy_week_from_stable("5a", WEEK_2)
        copy = next(l for l in schedule.lessons if l.subject_id == "math")
        service.delete_lesson(seeded["math"].id)
        diff = service.lesson_changes(copy.id)
        assert diff.is_empty()
        assert diff.stable_lesson_id == seeded["math"].id
