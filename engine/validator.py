"""Validierung einer Stunde vor dem Schreiben in die Ablage.

Alle Regeln werden geprüft und ALLE Verletzungen gesammelt (kein Abbruch bei
der ersten). Reihenfolge der Meldungen:

1. day_of_week in 1..7
2. start_time / end_time im Format HH:MM oder HH:MM:SS
3. Ende nach Beginn (nur wenn beide Zeiten lesbar sind)
4. subject_id / class_id nicht leer

Die Referenzprüfung Fach ↔ Klasse braucht das Fach aus der Ablage und läuft
deshalb getrennt (check_subject_class), nur beim Anlegen.
"""

import re
from datetime import date, time
from typing import Any, Optional, Union

from engine.errors import FieldViolation, ReferentialError, ValidationError
from models.subject import Subject

TimeValue = Union[str, time]

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")

DAY_OUT_OF_RANGE = "day_of_week out of range"
BAD_TIME_FORMAT = "bad time format"
END_BEFORE_START = "end before start"
WEEK_START_REQUIRED = "week_start_date required"
WEEK_START_NOT_ALLOWED = "week_start_date not allowed for stable lesson"


def parse_time(value: Any) -> Optional[time]:
    """"HH:MM" / "HH:MM:SS" (oder time) → time; None wenn nicht lesbar."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        return None
    return time(hour, minute, second)


def to_minutes(value: time) -> int:
    """Minuten seit Mitternacht (Sekunden werden ignoriert)."""
    return value.hour * 60 + value.minute


class LessonValidator:
    """Prüft Tag, Zeitspanne und Verknüpfung einer Stunde."""

    def validate(
        self,
        day_of_week: Any,
        start_time: Any,
        end_time: Any,
        subject_id: Optional[str],
        class_id: Optional[str],
        is_stable: bool = True,
        week_start_date: Optional[date] = None,
    ) -> None:
        """Wirft ValidationError mit allen Verletzungen, sonst None.

        Die Wochen-Bindung (is_stable / week_start_date) wird zuletzt gemeldet.
        """
        violations: list[FieldViolation] = []
        violations.extend(self._check_day(day_of_week))
        violations.extend(self._check_times(start_time, end_time))
        violations.extend(self._check_required("subject_id", subject_id))
        violations.extend(self._check_required("class_id", class_id))
        violations.extend(self._check_week_scope(is_stable, week_start_date))
        if violations:
            raise ValidationError(violations)

    def validate_week_scope(self, is_stable: bool,
                            week_start_date: Optional[date]) -> None:
        """Wochen-Stunden brauchen ein Datum, stabile Stunden dürfen keins haben."""
        violations = self._check_week_scope(is_stable, week_start_date)
        if violations:
            raise ValidationError(violations)

    def validate_update(self, fields: dict[str, Any]) -> None:
        """Prüft nur die übergebenen Felder einer Teil-Änderung.

        Die Zeitspanne wird hier nur geprüft wenn beide Zeiten geändert werden;
        sonst prüft der Service nach dem Laden des Datensatzes mit
        validate_time_range nach.
        """
        violations: list[FieldViolation] = []
        if "day_of_week" in fields:
            violations.extend(self._check_day(fields["day_of_week"]))
        if "start_time" in fields and "end_time" in fields:
            violations.extend(self._check_times(fields["start_time"], fields["end_time"]))
        else:
            for name in ("start_time", "end_time"):
                if name in fields and parse_time(fields[name]) is None:
                    violations.append(FieldViolation(name, BAD_TIME_FORMAT))
        if "subject_id" in fields:
            violations.extend(self._check_required("subject_id", fields["subject_id"]))
        if violations:
            raise ValidationError(violations)

    def validate_time_range(self, start_time: TimeValue, end_time: TimeValue) -> None:
        violations = self._check_times(start_time, end_time)
        if violations:
            raise ValidationError(violations)

    def check_subject_class(self, subject: Optional[Subject], class_id: str) -> None:
        """Das Fach muss zur Zielklasse gehören (auch: Fach unbekannt → Fehler)."""
        if subject is None or not subject.belongs_to(class_id):
            raise ReferentialError(
                subject_id=subject.id if subject else None,
                class_id=class_id,
            )

    # ── Einzelne Regeln ───────────────────────────────────────────────────────

    def _check_day(self, day_of_week: Any) -> list[FieldViolation]:
        valid = (isinstance(day_of_week, int) and not isinstance(day_of_week, bool)
                 and 1 <= day_of_week <= 7)
        return [] if valid else [FieldViolation("day_of_week", DAY_OUT_OF_RANGE)]

    def _check_times(self, start_time: Any, end_time: Any) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        start = parse_time(start_time)
        end = parse_time(end_time)
        if start is None:
            violations.append(FieldViolation("start_time", BAD_TIME_FORMAT))
        if end is None:
            violations.append(FieldViolation("end_time", BAD_TIME_FORMAT))
        if start is not None and end is not None and to_minutes(end) <= to_minutes(start):
            violations.append(FieldViolation("end_time", END_BEFORE_START))
        return violations

    def _check_week_scope(self, is_stable: bool,
                          week_start_date: Optional[date]) -> list[FieldViolation]:
        if not is_stable and week_start_date is None:
            return [FieldViolation("week_start_date", WEEK_START_REQUIRED)]
        if is_stable and week_start_date is not None:
            return [FieldViolation("week_start_date", WEEK_START_NOT_ALLOWED)]
        return []

    def _check_required(self, name: str, value: Optional[str]) -> list[FieldViolation]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return [FieldViolation(name, f"{name} required")]
        return []
