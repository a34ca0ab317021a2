"""Datei-basierte Ablage: InMemoryLessonStore, nach jeder Änderung als JSON gesichert."""

import json
from pathlib import Path
from typing import Any, Optional

from store.base import LessonRow
from store.memory import InMemoryLessonStore


class JsonLessonStore(InMemoryLessonStore):
    """Lädt beim Start aus ``path`` (falls vorhanden) und speichert bei jedem Schreiben."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self.load_json(self.path)

    def save_json(self, path: Optional[Path] = None) -> None:
        """Speichert den gesamten Inhalt als JSON."""
        target = Path(path) if path else self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def load_json(self, path: Path) -> None:
        """Lädt den Inhalt aus einer JSON-Datei (überschreibt den aktuellen Stand)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Ablage-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            self.load_dict(json.load(f))

    # ─── Schreiben mit Sicherung ───

    def add_class(self, class_id: str, name: str = "",
                  school_id: Optional[str] = None) -> dict[str, Any]:
        row = super().add_class(class_id, name, school_id)
        self.save_json()
        return row

    def add_subject(self, subject_id: str, name: str, class_id: str,
                    teacher_id: Optional[str] = None) -> dict[str, Any]:
        row = super().add_subject(subject_id, name, class_id, teacher_id)
        self.save_json()
        return row

    def create_lesson_record(self, fields: dict[str, Any]) -> LessonRow:
        row = super().create_lesson_record(fields)
        self.save_json()
        return row

    def update_lesson_record(self, lesson_id: str, fields: dict[str, Any]) -> Optional[LessonRow]:
        row = super().update_lesson_record(lesson_id, fields)
        if row is not None:
            self.save_json()
        return row

    def delete_lesson_record(self, lesson_id: str) -> bool:
        deleted = super().delete_lesson_record(lesson_id)
        if deleted:
            self.save_json()
        return deleted
