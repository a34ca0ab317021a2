"""Rohform einer Stunde, wie sie in der Ablage liegt (Pydantic v2).

ACHTUNG: ``day_of_week`` ist hier in Ablage-Nummerierung (0=So, 1..6=Mo..Sa).
Nur store.repository wandelt zwischen LessonRecord und Lesson um.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"


class SubjectJoin(BaseModel):
    """Mitgeladene Fachdaten (Join über subject_id)."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    class_id: Optional[str] = None
    teacher_id: Optional[str] = None


class LessonRecord(BaseModel):
    """Ein Datensatz der Tabelle ``lessons``."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    subject_id: str = Field(min_length=1)
    day_of_week: int = Field(ge=0, le=6)       # Ablage: 0=So
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    room: Optional[str] = None
    is_stable: bool = True
    stable_lesson_id: Optional[str] = None
    modified_from_stable: bool = False
    week_start_date: Optional[date] = None
    subjects: Optional[SubjectJoin] = None
