"""TimetableService – Einstiegspunkt für Aufrufer (CLI, UI, Tests).

Bündelt Auflösung, Validierung und Schreibzugriffe. Ablauf beim Schreiben:

1. Feldregeln prüfen (LessonValidator) – vor jedem Ablage-Zugriff
2. Referenz Fach ↔ Klasse prüfen (nur beim Anlegen)
3. Schreiben über das LessonRepository (Tage werden dort umgerechnet)

Validierungs- und Referenzfehler gehen unverändert an den Aufrufer,
Ablage-Fehler kommen bereits als StorageError aus dem Repository.
Es gibt keine Sperren: parallele Änderungen derselben Stunde → last write wins.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Optional, Union

from analysis.changes import LessonDiff, diff_lessons
from analysis.conflicts import ConflictChecker, ConflictReport
from engine.cache import ClassSchoolCache
from engine.colors import SubjectColorAssigner
from engine.day_convention import week_anchor
from engine.errors import FieldViolation, NotFoundError, StorageError, ValidationError
from engine.resolver import ScheduleResolver
from engine.validator import LessonValidator, parse_time
from models.lesson import Lesson
from models.schedule import ResolvedSchedule, ScheduledLesson
from store.base import LessonStore
from store.repository import LessonRepository

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]
TimeLike = Union[str, time]

UPDATABLE_FIELDS = ("subject_id", "day_of_week", "start_time", "end_time", "room")


class TimetableService:
    """Stundenplan einer Klasse lesen und pflegen."""

    def __init__(
        self,
        store: LessonStore,
        cache: Optional[ClassSchoolCache] = None,
        colors: Optional[SubjectColorAssigner] = None,
        validator: Optional[LessonValidator] = None,
    ) -> None:
        self.repo = LessonRepository(store)
        self.cache = cache if cache is not None else ClassSchoolCache()
        self.validator = validator or LessonValidator()
        self.resolver = ScheduleResolver(self.repo, colors=colors)

    # ─── Lesen ───

    def resolve_schedule(self, class_id: str,
                         week_start_date: Optional[DateLike] = None) -> ResolvedSchedule:
        """Wirksamer Plan der Klasse: Wochen-Stunden falls vorhanden, sonst Vorlage."""
        self._require("class_id", class_id)
        schedule = self.resolver.resolve(class_id, week_start_date)
        school_id = self.school_for_class(class_id)
        logger.info(
            f"Plan {class_id} (Woche {schedule.week_start_date or '-'}): "
            f"{len(schedule)} Stunden aus '{schedule.source}'"
        )
        return schedule.model_copy(update={"school_id": school_id})

    def lessons_for_day(self, class_id: str, day: DateLike) -> list[ScheduledLesson]:
        """Stunden eines Kalendertags (Vorrangregel gilt für dessen Woche)."""
        if isinstance(day, datetime):
            day = day.date()
        schedule = self.resolve_schedule(class_id, day)
        return schedule.lessons_for_day(day.isoweekday())

    def school_for_class(self, class_id: str) -> Optional[str]:
        """Schul-ID über den Memo-Cache (nur explizit per invalidate() geleert)."""
        return self.cache.get(class_id, self.repo.class_school)

    def lesson_changes(self, lesson_id: str) -> LessonDiff:
        """Unterschiede einer Wochen-Stunde zu ihrer stabilen Stunde.

        Ohne Verweis oder bei gelöschter Vorlage-Stunde: leerer Diff.
        """
        self._require("lesson_id", lesson_id)
        lesson = self.repo.get_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError(lesson_id)
        if not lesson.stable_lesson_id:
            return LessonDiff(lesson_id=lesson_id)
        stable = self.repo.get_lesson(lesson.stable_lesson_id)
        if stable is None:
            return LessonDiff(lesson_id=lesson_id, stable_lesson_id=lesson.stable_lesson_id)
        return diff_lessons(stable, lesson)

    def find_conflicts(self, class_id: str,
                       week_start_date: Optional[DateLike] = None) -> ConflictReport:
        return ConflictChecker().check(self.resolve_schedule(class_id, week_start_date))

    # ─── Schreiben ───

    def create_lesson(
        self,
        class_id: str,
        subject_id: str,
        day_of_week: int,
        start_time: TimeLike,
        end_time: TimeLike,
        room: Optional[str] = None,
        is_stable: bool = True,
        week_start_date: Optional[DateLike] = None,
        stable_lesson_id: Optional[str] = None,
    ) -> ScheduledLesson:
        """Legt eine stabile Stunde oder eine Wochen-Stunde an.

        Raises:
            ValidationError: Feldregeln verletzt (alle Verletzungen gesammelt).
            ReferentialError: Fach gehört nicht zur Klasse.
            StorageError: Ablage-Fehler.
        """
        self.validator.validate(day_of_week, start_time, end_time, subject_id, class_id,
                                is_stable=is_stable, week_start_date=week_start_date)

        subject = self.repo.get_subject(subject_id)
        self.validator.check_subject_class(subject, class_id)

        fields: dict[str, Any] = {
            "subject_id": subject_id,
            "day_of_week": day_of_week,
            "start_time": parse_time(start_time),
            "end_time": parse_time(end_time),
            "room": room,
            "is_stable": is_stable,
            "week_start_date": week_anchor(week_start_date) if week_start_date else None,
        }
        if stable_lesson_id:
            fields["stable_lesson_id"] = stable_lesson_id

        lesson = self.repo.create_lesson(fields)
        logger.info(f"Stunde angelegt: {lesson.id} ({lesson})")
        return self.resolver.decorate(lesson)

    def update_lesson(self, lesson_id: str, **fields: Any) -> ScheduledLesson:
        """Ändert einzelne Felder (subject_id, day_of_week, start_time, end_time, room).

        ``room=""`` entfernt den Raum. Bei Wochen-Stunden mit Verweis auf eine
        stabile Stunde wird ``modified_from_stable`` neu berechnet.

        Raises:
            ValidationError: Feldregeln verletzt oder unbekanntes Feld.
            NotFoundError: Stunde existiert nicht.
            StorageError: Ablage-Fehler.
        """
        self._require("lesson_id", lesson_id)
        unknown = [k for k in fields if k not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError([FieldViolation(k, "unknown field") for k in unknown])
        self.validator.validate_update(fields)

        current = self.repo.get_lesson(lesson_id)
        if current is None:
            raise NotFoundError(lesson_id)
        if not fields:
            return self.resolver.decorate(current)

        if "start_time" in fields or "end_time" in fields:
            self.validator.validate_time_range(
                fields.get("start_time", current.start_time),
                fields.get("end_time", current.end_time),
            )

        updated = self.repo.update_lesson(lesson_id, fields)
        if updated is None:
            raise NotFoundError(lesson_id)

        if not updated.is_stable and updated.stable_lesson_id:
            updated = self._refresh_modified_flag(updated)

        logger.info(f"Stunde geändert: {lesson_id} ({', '.join(sorted(fields))})")
        return self.resolver.decorate(updated)

    def delete_lesson(self, lesson_id: str) -> bool:
        """Löscht endgültig (kein Soft-Delete)."""
        self._require("lesson_id", lesson_id)
        if not self.repo.delete_lesson(lesson_id):
            raise NotFoundError(lesson_id)
        logger.info(f"Stunde gelöscht: {lesson_id}")
        return True

    def copy_week_from_stable(self, class_id: str, week_start_date: DateLike) -> ResolvedSchedule:
        """Legt für die Woche Kopien aller stabilen Stunden an.

        Hat die Woche bereits eigene Stunden, wird nichts kopiert und der
        bestehende Wochenplan zurückgegeben. Scheitert eine Kopie, werden die
        bereits angelegten wieder gelöscht und der StorageError weitergereicht.
        """
        self._require("class_id", class_id)
        anchor = week_anchor(week_start_date)
        if self.repo.override_lessons(class_id, anchor):
            logger.info(f"Woche {anchor} für {class_id} existiert bereits – nichts kopiert")
            return self.resolve_schedule(class_id, anchor)

        stable = self.repo.stable_lessons(class_id)
        created: list[str] = []
        try:
            for lesson in stable:
                copy = self.repo.create_lesson({
                    "subject_id": lesson.subject_id,
                    "day_of_week": lesson.day_of_week,
                    "start_time": lesson.start_time,
                    "end_time": lesson.end_time,
                    "room": lesson.room,
                    "is_stable": False,
                    "week_start_date": anchor,
                    "stable_lesson_id": lesson.id,
                    "modified_from_stable": False,
                })
                created.append(copy.id)
        except StorageError:
            # Halbe Woche würde die Vorlage ersetzen: bereits Kopiertes zurücknehmen
            logger.error(f"Woche {anchor} für {class_id}: Kopieren abgebrochen, "
                         f"nehme {len(created)} Stunden zurück")
            self._rollback(created)
            raise
        logger.info(f"Woche {anchor} für {class_id}: {len(stable)} Stunden aus Vorlage kopiert")
        return self.resolve_schedule(class_id, anchor)

    # ─── Interne Helfer ───

    def _rollback(self, lesson_ids: list[str]) -> None:
        for lesson_id in reversed(lesson_ids):
            try:
                self.repo.delete_lesson(lesson_id)
            except StorageError as exc:
                logger.error(f"Rücknahme von {lesson_id} fehlgeschlagen: {exc}")

    def _refresh_modified_flag(self, lesson: Lesson) -> Lesson:
        stable = self.repo.get_lesson(lesson.stable_lesson_id)
        if stable is None:
            return lesson
        modified = not diff_lessons(stable, lesson).is_empty()
        if modified == lesson.modified_from_stable:
            return lesson
        refreshed = self.repo.update_lesson(lesson.id, {"modified_from_stable": modified})
        return refreshed or lesson

    @staticmethod
    def _require(name: str, value: Optional[str]) -> None:
        if not value or not str(value).strip():
            raise ValidationError([FieldViolation(name, f"{name} required")])
