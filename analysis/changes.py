"""Vergleich einer Wochen-Stunde mit der stabilen Stunde, aus der sie stammt.

Gibt strukturierte Unterschiede zurück, die als Rich-Tabelle oder JSON
ausgegeben werden können.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from models.lesson import Lesson

# Felder, die eine Wochen-Stunde gegenüber der Vorlage verändern kann
COMPARED_FIELDS = ("subject_id", "day_of_week", "start_time", "end_time", "room")


@dataclass
class LessonChange:
    """Ein verändertes Feld."""

    field: str
    stable_value: str
    current_value: str


@dataclass
class LessonDiff:
    """Alle Unterschiede zwischen Wochen-Stunde und stabiler Stunde."""

    lesson_id: str
    stable_lesson_id: Optional[str] = None
    changes: list[LessonChange] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return not self.changes

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "lesson_id": self.lesson_id,
            "stable_lesson_id": self.stable_lesson_id,
            "changes": [
                {
                    "field": c.field,
                    "stable_value": c.stable_value,
                    "current_value": c.current_value,
                }
                for c in self.changes
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def _as_text(name: str, value) -> str:
    if value is None:
        return ""
    if name in ("start_time", "end_time"):
        return value.strftime("%H:%M")
    return str(value)


def diff_lessons(stable: "Lesson", current: "Lesson") -> LessonDiff:
    """Vergleicht Fach, Tag, Zeiten und Raum.

    Ein fehlender Raum und ein leerer Raum gelten als gleich.

    Args:
        stable: Stunde der Vorlage.
        current: Wochen-Stunde.

    Returns:
        LessonDiff mit allen gefundenen Unterschieden.
    """
    diff = LessonDiff(lesson_id=current.id, stable_lesson_id=stable.id)
    for name in COMPARED_FIELDS:
        old = _as_text(name, getattr(stable, name))
        new = _as_text(name, getattr(current, name))
        if old != new:
            diff.changes.append(LessonChange(field=name, stable_value=old, current_value=new))
    return diff
