"""Fehlerklassen der Stundenplan-Engine.

Validierungs- und Referenzfehler entstehen vor jedem Speicherzugriff und werden
unverändert an den Aufrufer gereicht. Speicherfehler werden genau einmal an der
Ablage-Grenze (LessonRepository) mit Operation und Parametern verpackt; die
ursprüngliche Ausnahme bleibt als ``__cause__`` erhalten.
"""

from dataclasses import dataclass
from typing import Any, Optional


class TimetableError(Exception):
    """Basisklasse aller Engine-Fehler."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class FieldViolation:
    """Eine einzelne verletzte Feldregel."""

    field: str
    reason: str


class ValidationError(TimetableError):
    """Eine oder mehrere Feldregeln sind verletzt (alle gesammelt, nicht nur die erste)."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        if not violations:
            raise ValueError("ValidationError ohne Verletzungen")
        self.violations = list(violations)
        summary = "; ".join(f"{v.field}: {v.reason}" for v in self.violations)
        super().__init__(f"Ungültige Stunde: {summary}", code="validation")

    @property
    def field(self) -> str:
        return self.violations[0].field

    @property
    def reason(self) -> str:
        return self.violations[0].reason

    @property
    def reasons(self) -> list[str]:
        return [v.reason for v in self.violations]

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class ReferentialError(TimetableError):
    """Fach und Klasse passen nicht zusammen (nur beim Anlegen geprüft)."""

    def __init__(self, reason: str = "subject does not belong to class",
                 subject_id: Optional[str] = None,
                 class_id: Optional[str] = None) -> None:
        self.reason = reason
        self.subject_id = subject_id
        self.class_id = class_id
        super().__init__(reason, code="referential")


class NotFoundError(TimetableError):
    """Ziel einer Änderung oder Löschung existiert nicht."""

    def __init__(self, lesson_id: str) -> None:
        self.lesson_id = lesson_id
        super().__init__(f"Stunde nicht gefunden: {lesson_id}", code="not_found")


class StorageError(TimetableError):
    """Fehler der Ablage, verpackt mit Operation und Parametern."""

    def __init__(self, operation: str, params: Optional[dict[str, Any]] = None,
                 detail: str = "") -> None:
        self.operation = operation
        self.params = dict(params or {})
        args = ", ".join(f"{k}={v!r}" for k, v in self.params.items())
        message = f"Ablage-Fehler bei {operation}({args})"
        if detail:
            message += f": {detail}"
        super().__init__(message, code="storage")


@dataclass(frozen=True)
class ParseError:
    """Ein Ablage-Datensatz ließ sich nicht in eine Stunde umwandeln.

    Wird nicht geworfen, sondern als ``Err`` zurückgegeben.
    """

    field: str
    reason: str
    record_id: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"Datensatz {self.record_id}: " if self.record_id else ""
        return f"{prefix}{self.field}: {self.reason}"
