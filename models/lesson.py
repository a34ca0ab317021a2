"""Datenmodell für eine Unterrichtsstunde (Pydantic v2, kanonische Tage)."""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from config.defaults import DAY_NAMES


class Lesson(BaseModel):
    """Eine Stunde im Stundenplan einer Klasse.

    Stabile Stunden (``is_stable=True``) bilden die wiederkehrende Wochenvorlage
    und haben KEIN ``week_start_date``. Wochen-Stunden (``is_stable=False``)
    gelten nur für die Woche, deren Montag in ``week_start_date`` steht.
    """

    id: str
    subject_id: str = Field(min_length=1)
    day_of_week: int = Field(ge=1, le=7)   # 1=Mo .. 7=So
    start_time: time
    end_time: time
    room: Optional[str] = None
    is_stable: bool = True
    week_start_date: Optional[date] = None
    stable_lesson_id: Optional[str] = None   # nur zur Nachverfolgung
    modified_from_stable: bool = False
    # Über das Fach verknüpft, nicht in der Stunde gespeichert
    class_id: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_id: Optional[str] = None

    @model_validator(mode="after")
    def check_invariants(self):
        """Zeitspanne und Wochen-Bindung müssen zusammenpassen."""
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Beginn {self.start_time} liegt nicht vor Ende {self.end_time}")
        if self.is_stable and self.week_start_date is not None:
            raise ValueError("Stabile Stunde darf kein week_start_date haben")
        if not self.is_stable:
            if self.week_start_date is None:
                raise ValueError("Wochen-Stunde braucht ein week_start_date")
            if self.week_start_date.isoweekday() != 1:
                raise ValueError(
                    f"week_start_date {self.week_start_date} ist kein Montag")
        return self

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    @property
    def time_range(self) -> str:
        """z.B. "08:00 – 08:45"."""
        return f"{self.start_time:%H:%M} – {self.end_time:%H:%M}"

    @property
    def duration_minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def conflicts_with(self, other: "Lesson") -> bool:
        """True wenn sich beide Stunden am selben Tag zeitlich überschneiden."""
        if self.id == other.id or self.day_of_week != other.day_of_week:
            return False
        if self.class_id and other.class_id and self.class_id != other.class_id:
            return False
        return self.start_time < other.end_time and other.start_time < self.end_time

    def __str__(self) -> str:
        label = self.subject_name or self.subject_id
        return f"{label} {self.day_name} {self.time_range}"
