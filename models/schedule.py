"""Aufgelöster Wochenplan einer Klasse (Ausgabe, wird nicht gespeichert)."""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from models.lesson import Lesson


class ScheduledLesson(Lesson):
    """Stunde mit abgeleiteter Fachfarbe (ARGB)."""

    color: int


class ResolvedSchedule(BaseModel):
    """Ergebnis der Auflösung: nach (Tag, Beginn) sortierte Stunden.

    ``source`` nennt die Stufe, aus der die Stunden stammen: "override" wenn
    für die Woche eigene Stunden existieren (ersetzen die Vorlage komplett),
    sonst "stable".
    """

    class_id: str
    week_start_date: Optional[date] = None
    source: str = "stable"
    school_id: Optional[str] = None
    lessons: list[ScheduledLesson] = []

    @property
    def is_override(self) -> bool:
        return self.source == "override"

    def by_day(self) -> dict[int, list[ScheduledLesson]]:
        """Tag (1..7) → Stunden; jeder Wochentag ist enthalten, ggf. leer."""
        days: dict[int, list[ScheduledLesson]] = {d: [] for d in range(1, 8)}
        for lesson in self.lessons:
            days[lesson.day_of_week].append(lesson)
        return days

    def lessons_for_day(self, day: int) -> list[ScheduledLesson]:
        return [l for l in self.lessons if l.day_of_week == day]

    def __len__(self) -> int:
        return len(self.lessons)
