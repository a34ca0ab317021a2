"""Renderer für die Terminal-Anzeige eines aufgelösten Wochenplans.

Wird von den CLI-Befehlen show und copy-week verwendet.
"""

from typing import TYPE_CHECKING, Optional

from config.defaults import DAY_SHORT
from engine.colors import to_hex
from engine.day_convention import date_for_day

if TYPE_CHECKING:
    from rich.table import Table
    from models.schedule import ResolvedSchedule


def visible_days(schedule: "ResolvedSchedule") -> list[int]:
    """Mo–Fr immer; Sa/So nur wenn dort Stunden liegen."""
    days = [1, 2, 3, 4, 5]
    for weekend in (6, 7):
        if schedule.lessons_for_day(weekend):
            days.append(weekend)
    return days


def render_week_rows(schedule: "ResolvedSchedule") -> list[list[str]]:
    """Gibt Tabellenzeilen für den Wochenplan zurück.

    Jede Zeile: [Zeitspanne, Mo, Di, Mi, Do, Fr(, Sa, So)]
    Eine Zeile pro unterschiedlicher Zeitspanne, sortiert nach Beginn.
    Mehrere Stunden im selben Feld werden untereinander geschrieben.
    """
    days = visible_days(schedule)
    spans = sorted({(l.start_time, l.end_time) for l in schedule.lessons})
    rows: list[list[str]] = []

    for start, end in spans:
        cells = [f"{start:%H:%M}–{end:%H:%M}"]
        for day in days:
            hits = [
                l for l in schedule.lessons
                if l.day_of_week == day and l.start_time == start and l.end_time == end
            ]
            if not hits:
                cells.append("—")
                continue
            parts = []
            for l in hits:
                label = l.subject_name or l.subject_id
                if l.room:
                    label += f"\n{l.room}"
                parts.append(label)
            cells.append("\n".join(parts))
        rows.append(cells)

    return rows


def build_week_table(schedule: "ResolvedSchedule") -> "Table":
    """Rich-Tabelle mit Fachfarben."""
    from rich.table import Table
    from rich.text import Text
    from rich import box

    week = schedule.week_start_date.isoformat() if schedule.week_start_date else "Vorlage"
    source = "Wochenplan" if schedule.is_override else "stabile Vorlage"
    table = Table(title=f"Klasse {schedule.class_id} – {week} ({source})", box=box.ROUNDED,
                  show_lines=True)
    days = visible_days(schedule)
    table.add_column("Zeit", style="bold")
    for day in days:
        table.add_column(day_header(schedule, day), justify="center")

    for row in render_week_rows(schedule):
        cells = [row[0]]
        for cell, style in zip(row[1:], _cell_colors(schedule, row[0], days)):
            cells.append(Text(cell, style=f"bold {style}") if style else Text(cell, style="dim"))
        table.add_row(*cells)
    return table


def day_header(schedule: "ResolvedSchedule", day: int) -> str:
    """"Mo" bzw. mit Woche "Mo 03.06."."""
    if schedule.week_start_date is None:
        return DAY_SHORT[day]
    return f"{DAY_SHORT[day]} {date_for_day(schedule.week_start_date, day):%d.%m.}"


def _cell_colors(schedule: "ResolvedSchedule", span: str,
                 days: list[int]) -> list[Optional[str]]:
    """Farbe je Tageszelle, über die subject_id der ersten Stunde im Feld."""
    colors: list[Optional[str]] = []
    for day in days:
        hit = next((l for l in schedule.lessons
                    if l.day_of_week == day
                    and f"{l.start_time:%H:%M}–{l.end_time:%H:%M}" == span), None)
        colors.append(to_hex(hit.color) if hit else None)
    return colors
