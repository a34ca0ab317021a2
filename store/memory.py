"""In-Memory-Ablage (Referenzimplementierung für Tests und die CLI).

Stunden liegen in Einfügereihenfolge vor; Listen-Abfragen liefern sie in dieser
Reihenfolge zurück. Es gibt keine Sperren: gleichzeitige Änderungen an
derselben Stunde überschreiben sich (last write wins).
"""

import copy
import uuid
from datetime import date
from typing import Any, Optional

from store.base import LessonRow, LessonStore

_LESSON_DEFAULTS: dict[str, Any] = {
    "room": None,
    "is_stable": True,
    "stable_lesson_id": None,
    "modified_from_stable": False,
    "week_start_date": None,
}


class InMemoryLessonStore(LessonStore):
    """Fächer, Klassen und Stunden in einfachen Dicts."""

    def __init__(self) -> None:
        self._classes: dict[str, dict[str, Any]] = {}
        self._subjects: dict[str, dict[str, Any]] = {}
        self._lessons: dict[str, LessonRow] = {}

    # ─── Stammdaten ───

    def add_class(self, class_id: str, name: str = "",
                  school_id: Optional[str] = None) -> dict[str, Any]:
        row = {"id": class_id, "name": name or class_id, "school_id": school_id}
        self._classes[class_id] = row
        return dict(row)

    def add_subject(self, subject_id: str, name: str, class_id: str,
                    teacher_id: Optional[str] = None) -> dict[str, Any]:
        if class_id not in self._classes:
            self.add_class(class_id)
        row = {"id": subject_id, "name": name, "class_id": class_id,
               "teacher_id": teacher_id}
        self._subjects[subject_id] = row
        return dict(row)

    def insert_raw(self, row: LessonRow) -> LessonRow:
        """Übernimmt einen Datensatz ungeprüft (Import, Tests mit kaputten Zeilen)."""
        stored = {**_LESSON_DEFAULTS, **row}
        stored.setdefault("id", str(uuid.uuid4()))
        stored.pop("subjects", None)
        self._lessons[stored["id"]] = stored
        return self._with_join(stored)

    # ─── Abfragen ───

    def _with_join(self, row: LessonRow) -> LessonRow:
        out = copy.deepcopy(row)
        subject = self._subjects.get(row.get("subject_id"))
        if subject is not None:
            out["subjects"] = dict(subject)
        return out

    def _class_subject_ids(self, class_id: str) -> set[str]:
        return {s["id"] for s in self._subjects.values() if s["class_id"] == class_id}

    def list_override_lessons(self, class_id: str, week_anchor: date) -> list[LessonRow]:
        subject_ids = self._class_subject_ids(class_id)
        anchor = week_anchor.isoformat()
        return [
            self._with_join(r) for r in self._lessons.values()
            if r.get("subject_id") in subject_ids
            and not r.get("is_stable")
            and r.get("week_start_date") == anchor
        ]

    def list_stable_lessons(self, class_id: str) -> list[LessonRow]:
        subject_ids = self._class_subject_ids(class_id)
        return [
            self._with_join(r) for r in self._lessons.values()
            if r.get("subject_id") in subject_ids and r.get("is_stable")
        ]

    def get_lesson_record(self, lesson_id: str) -> Optional[LessonRow]:
        row = self._lessons.get(lesson_id)
        return self._with_join(row) if row is not None else None

    def get_subject(self, subject_id: str) -> Optional[dict[str, Any]]:
        row = self._subjects.get(subject_id)
        return dict(row) if row is not None else None

    def list_subjects(self, class_id: str) -> list[dict[str, Any]]:
        return [dict(s) for s in self._subjects.values() if s["class_id"] == class_id]

    def get_class_school(self, class_id: str) -> Optional[str]:
        row = self._classes.get(class_id)
        return row.get("school_id") if row else None

    # ─── Schreiben ───

    def create_lesson_record(self, fields: dict[str, Any]) -> LessonRow:
        row = {**_LESSON_DEFAULTS, **fields, "id": str(uuid.uuid4())}
        self._lessons[row["id"]] = row
        return self._with_join(row)

    def update_lesson_record(self, lesson_id: str, fields: dict[str, Any]) -> Optional[LessonRow]:
        row = self._lessons.get(lesson_id)
        if row is None:
            return None
        row.update({k: v for k, v in fields.items() if k != "id"})
        return self._with_join(row)

    def delete_lesson_record(self, lesson_id: str) -> bool:
        return self._lessons.pop(lesson_id, None) is not None

    # ─── Serialisierung ───

    def to_dict(self) -> dict[str, Any]:
        return {
            "classes": list(self._classes.values()),
            "subjects": list(self._subjects.values()),
            "lessons": list(self._lessons.values()),
        }

    def load_dict(self, data: dict[str, Any]) -> None:
        """Ersetzt den gesamten Inhalt."""
        self._classes = {c["id"]: dict(c) for c in data.get("classes", [])}
        self._subjects = {s["id"]: dict(s) for s in data.get("subjects", [])}
        self._lessons = {}
        for row in data.get("lessons", []):
            self.insert_raw(row)

    def __len__(self) -> int:
        return len(self._lessons)

    def __repr__(self) -> str:
        return (f"InMemoryLessonStore({len(self._classes)} Klassen, "
                f"{len(self._subjects)} Fächer, {len(self._lessons)} Stunden)")
