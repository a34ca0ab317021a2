"""Prüfung eines aufgelösten Wochenplans auf Überschneidungen.

Sicherheitsnetz unabhängig von der Validierung beim Anlegen: Stunden werden
einzeln geprüft, Überschneidungen zwischen zwei Stunden fallen erst hier auf.
"""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from models.lesson import Lesson
from models.schedule import ResolvedSchedule


class ConflictViolation(BaseModel):
    """Eine einzelne gefundene Auffälligkeit."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "lesson_overlap"
    description: str
    entity: str          # lesson_id / room


class ConflictReport(BaseModel):
    """Ergebnis der Konfliktprüfung."""

    class_id: str
    violations: list[ConflictViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ KEINE KONFLIKTE[/bold green]"
            if self.is_valid
            else "[bold red]✗ KONFLIKTE GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title=f"Konfliktprüfung {self.class_id}",
                            border_style="cyan"))

        if not self.violations:
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=20)
        table.add_column("Entität", width=12)
        table.add_column("Beschreibung")
        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ConflictChecker:
    """Prüft einen ResolvedSchedule auf Überschneidungen."""

    def check(self, schedule: ResolvedSchedule) -> ConflictReport:
        violations: list[ConflictViolation] = []
        violations.extend(self._check_overlaps(schedule.lessons))
        violations.extend(self._check_room_double_booking(schedule.lessons))

        has_errors = any(v.severity == "error" for v in violations)
        return ConflictReport(class_id=schedule.class_id, violations=violations,
                              is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_overlaps(self, lessons: list[Lesson]) -> list[ConflictViolation]:
        """Zwei Stunden einer Klasse dürfen sich zeitlich nicht überschneiden."""
        violations: list[ConflictViolation] = []
        by_day: dict[int, list[Lesson]] = defaultdict(list)
        for lesson in lessons:
            by_day[lesson.day_of_week].append(lesson)

        for day, day_lessons in sorted(by_day.items()):
            for i, a in enumerate(day_lessons):
                for b in day_lessons[i + 1:]:
                    if a.conflicts_with(b):
                        violations.append(ConflictViolation(
                            severity="error",
                            constraint="lesson_overlap",
                            entity=a.id,
                            description=(
                                f"{a.day_name}: {a.subject_name or a.subject_id} "
                                f"({a.time_range}) überschneidet sich mit "
                                f"{b.subject_name or b.subject_id} ({b.time_range})."
                            ),
                        ))
        return violations

    def _check_room_double_booking(self, lessons: list[Lesson]) -> list[ConflictViolation]:
        """Gleicher Raum zur gleichen Zeit ist verdächtig (Warnung, Raum ist Freitext)."""
        violations: list[ConflictViolation] = []
        by_room: dict[tuple, list[Lesson]] = defaultdict(list)
        for lesson in lessons:
            if lesson.room:
                by_room[(lesson.room.strip().lower(), lesson.day_of_week)].append(lesson)

        for (room, _day), room_lessons in by_room.items():
            for i, a in enumerate(room_lessons):
                for b in room_lessons[i + 1:]:
                    if a.start_time < b.end_time and b.start_time < a.end_time:
                        violations.append(ConflictViolation(
                            severity="warning",
                            constraint="room_double_booking",
                            entity=a.room or room,
                            description=(
                                f"{a.day_name} {a.time_range}: Raum doppelt belegt "
                                f"({a.subject_name or a.subject_id}, "
                                f"{b.subject_name or b.subject_id})."
                            ),
                        ))
        return violations
