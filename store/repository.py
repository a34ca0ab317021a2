"""Grenze zwischen Engine und Ablage.

- Wandelt Roh-Datensätze in Lesson/Subject um (über store.records).
- Wendet dabei die Wochentags-Konvention an, beim Lesen wie beim Schreiben.
- Verpackt jeden Fehler der Ablage genau einmal in StorageError, mit Operation
  und Parametern; die Original-Exception bleibt als ``__cause__`` erhalten.

Ein nicht lesbarer Datensatz lässt die ganze Abfrage scheitern: es gibt keine
Teilergebnisse.
"""

import logging
from datetime import date
from typing import Any, Callable, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

from engine.errors import StorageError, TimetableError
from models.lesson import Lesson
from models.subject import Subject
from store.base import LessonRow, LessonStore
from store.records import Err, parse_lesson_record, to_record_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LessonRepository:
    """Typisierter Zugriff auf eine LessonStore (kanonische Tage 1..7)."""

    def __init__(self, store: LessonStore) -> None:
        self.store = store

    # ─── Interne Helfer ───

    def _call(self, operation: str, params: dict[str, Any],
              fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except TimetableError:
            raise
        except Exception as exc:
            logger.error(f"Ablage-Fehler bei {operation} {params}: {exc}")
            raise StorageError(operation, params, detail=str(exc)) from exc

    def _parse_rows(self, operation: str, params: dict[str, Any],
                    rows: list[LessonRow]) -> list[Lesson]:
        lessons: list[Lesson] = []
        for row in rows:
            result = parse_lesson_record(row)
            if isinstance(result, Err):
                logger.error(f"Unlesbarer Datensatz bei {operation}: {result.error}")
                raise StorageError(operation, params,
                                   detail=f"Datensatz ungültig ({result.error})")
            lessons.append(result.value)
        return lessons

    def _parse_row(self, operation: str, params: dict[str, Any],
                   row: Optional[LessonRow]) -> Optional[Lesson]:
        if row is None:
            return None
        return self._parse_rows(operation, params, [row])[0]

    # ─── Lesen ───

    def override_lessons(self, class_id: str, week_anchor: date) -> list[Lesson]:
        params = {"class_id": class_id, "week_anchor": week_anchor.isoformat()}
        rows = self._call("list_override_lessons", params,
                          self.store.list_override_lessons, class_id, week_anchor)
        return self._parse_rows("list_override_lessons", params, rows)

    def stable_lessons(self, class_id: str) -> list[Lesson]:
        params = {"class_id": class_id}
        rows = self._call("list_stable_lessons", params,
                          self.store.list_stable_lessons, class_id)
        return self._parse_rows("list_stable_lessons", params, rows)

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        params = {"lesson_id": lesson_id}
        row = self._call("get_lesson_record", params,
                         self.store.get_lesson_record, lesson_id)
        return self._parse_row("get_lesson_record", params, row)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        params = {"subject_id": subject_id}
        row = self._call("get_subject", params, self.store.get_subject, subject_id)
        if row is None:
            return None
        try:
            return Subject.model_validate(row)
        except PydanticValidationError as exc:
            raise StorageError("get_subject", params,
                               detail=f"Fach-Datensatz ungültig: {exc}") from exc

    def list_subjects(self, class_id: str) -> list[Subject]:
        params = {"class_id": class_id}
        rows = self._call("list_subjects", params, self.store.list_subjects, class_id)
        try:
            return [Subject.model_validate(r) for r in rows]
        except PydanticValidationError as exc:
            raise StorageError("list_subjects", params,
                               detail=f"Fach-Datensatz ungültig: {exc}") from exc

    def class_school(self, class_id: str) -> Optional[str]:
        return self._call("get_class_school", {"class_id": class_id},
                          self.store.get_class_school, class_id)

    # ─── Schreiben ───

    def create_lesson(self, fields: dict[str, Any]) -> Lesson:
        """``fields`` in kanonischer Form (day_of_week 1..7, time/str, date)."""
        record = to_record_fields(fields)
        params = {k: v for k, v in record.items()}
        row = self._call("create_lesson_record", params,
                         self.store.create_lesson_record, record)
        lesson = self._parse_row("create_lesson_record", params, row)
        if lesson is None:
            raise StorageError("create_lesson_record", params, detail="keine Daten zurückgegeben")
        return lesson

    def update_lesson(self, lesson_id: str, fields: dict[str, Any]) -> Optional[Lesson]:
        record = to_record_fields(fields)
        params = {"lesson_id": lesson_id, **record}
        row = self._call("update_lesson_record", params,
                         self.store.update_lesson_record, lesson_id, record)
        return self._parse_row("update_lesson_record", params, row)

    def delete_lesson(self, lesson_id: str) -> bool:
        return self._call("delete_lesson_record", {"lesson_id": lesson_id},
                          self.store.delete_lesson_record, lesson_id)
