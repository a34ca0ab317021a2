"""Umwandlung Ablage-Datensatz ↔ Lesson.

Hier (und nur hier) wird die Wochentags-Konvention angewendet:
- Lesen:    parse_lesson_record  → from_storage
- Schreiben: to_record_fields    → to_storage

Rohdaten werden nie ungeprüft weitergereicht: parse_lesson_record liefert
entweder ``Ok(lesson)`` oder ``Err(ParseError)``.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from engine.day_convention import from_storage, to_storage
from engine.errors import ParseError
from engine.validator import parse_time
from models.lesson import Lesson
from models.record import LessonRecord


@dataclass(frozen=True)
class Ok:
    value: Lesson


@dataclass(frozen=True)
class Err:
    error: ParseError


ParseResult = Union[Ok, Err]


def _first_error(exc: PydanticValidationError, record_id: Optional[str]) -> ParseError:
    errors = exc.errors()
    if not errors:
        return ParseError(field="record", reason=str(exc), record_id=record_id)
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "record"
    return ParseError(field=loc, reason=first.get("msg", "ungültig"), record_id=record_id)


def parse_lesson_record(row: Mapping[str, Any]) -> ParseResult:
    """Roh-Datensatz (Ablage-Nummerierung) → Ok(Lesson) | Err(ParseError)."""
    if not isinstance(row, Mapping):
        return Err(ParseError(field="record", reason=f"kein Datensatz: {type(row).__name__}"))

    record_id = row.get("id") if isinstance(row.get("id"), str) else None
    try:
        record = LessonRecord.model_validate(dict(row))
    except PydanticValidationError as exc:
        return Err(_first_error(exc, record_id))

    start = parse_time(record.start_time)
    end = parse_time(record.end_time)
    if start is None:
        return Err(ParseError("start_time", "bad time format", record.id))
    if end is None:
        return Err(ParseError("end_time", "bad time format", record.id))

    joined = record.subjects
    # class_id liegt nicht in der Stunde, sondern im Fach; ältere Zeilen tragen es direkt
    class_id = (joined.class_id if joined else None) or row.get("class_id")

    try:
        lesson = Lesson(
            id=record.id,
            subject_id=record.subject_id,
            day_of_week=from_storage(record.day_of_week),
            start_time=start,
            end_time=end,
            room=record.room,
            is_stable=record.is_stable,
            week_start_date=record.week_start_date,
            stable_lesson_id=record.stable_lesson_id,
            modified_from_stable=record.modified_from_stable,
            class_id=class_id,
            subject_name=joined.name if joined else None,
            teacher_id=joined.teacher_id if joined else None,
        )
    except PydanticValidationError as exc:
        return Err(_first_error(exc, record.id))
    return Ok(lesson)


def _format_time(value: Union[str, time]) -> str:
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Uhrzeit nicht lesbar: {value!r}")
    return parsed.strftime("%H:%M:%S")


def to_record_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Kanonische Felder → Ablage-Felder (nur die übergebenen Schlüssel).

    ``class_id`` wird nie in die Stunde geschrieben; sie hängt am Fach.
    ``room=""`` löscht den Raum (→ None).
    """
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if key == "day_of_week":
            out[key] = to_storage(value)
        elif key in ("start_time", "end_time"):
            out[key] = _format_time(value)
        elif key == "week_start_date":
            out[key] = value.isoformat() if isinstance(value, date) else value
        elif key == "room":
            out[key] = value or None
        elif key in ("class_id", "subject_name", "teacher_id", "color"):
            continue
        else:
            out[key] = value
    return out
