"""Stundenplan-Engine — Haupt-CLI.

Verwendung:
  python main.py config init                        Standard-Konfiguration anlegen
  python main.py config show                        Konfiguration anzeigen
  python main.py subject add <id> <name> <klasse>   Fach anlegen
  python main.py subject list <klasse>              Fächer einer Klasse
  python main.py show <klasse> [--week DATUM]       Wirksamen Wochenplan anzeigen
  python main.py day <klasse> <datum>               Stunden eines Tages
  python main.py add <klasse> <fach> <tag> <beginn> Stunde anlegen (--week = Wochen-Stunde)
  python main.py edit <stunde> [--day ...]          Stunde ändern
  python main.py delete <stunde>                    Stunde löschen
  python main.py copy-week <klasse> <datum>         Vorlage in eine Woche kopieren
  python main.py conflicts <klasse> [--week DATUM]  Überschneidungen prüfen
  python main.py changes <stunde>                   Abweichungen von der Vorlage
"""

import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _service(ctx: click.Context):
    """Baut den TimetableService einmal pro Aufruf (JSON-Ablage aus der Config)."""
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        from engine.colors import SubjectColorAssigner
        from engine.service import TimetableService
        from store.json_store import JsonLessonStore

        config = obj["config"]
        store_path = obj.get("store_path") or Path(config.store.path)
        store = JsonLessonStore(store_path)
        obj["store"] = store
        obj["service"] = TimetableService(
            store, colors=SubjectColorAssigner(config.palette))
    return obj["service"]


def _fail(error: Exception) -> None:
    """Gibt einen Engine-Fehler aus und beendet mit Code 1."""
    from engine.errors import ValidationError

    if isinstance(error, ValidationError):
        lines = [f"  [red]• {v.field}: {v.reason}[/red]" for v in error.violations]
        console.print("[red bold]Ungültige Eingabe:[/red bold]\n" + "\n".join(lines))
    else:
        console.print(f"[red bold]Fehler:[/red bold] {error}")
    sys.exit(1)


def _print_lesson(lesson) -> None:
    kind = "stabil" if lesson.is_stable else f"Woche {lesson.week_start_date}"
    console.print(
        f"[green]✓[/green] {lesson.id}: {lesson.subject_name or lesson.subject_id} "
        f"{lesson.day_name} {lesson.time_range}"
        + (f" ({lesson.room})" if lesson.room else "")
        + f" [dim]{kind}[/dim]"
    )


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    from engine.colors import to_hex

    config = ctx.obj["config"]
    console.print(Panel(
        f"[bold]{config.school_name or 'Stundenplan-Engine'}[/bold]  |  "
        f"Ablage: {config.store.path}  |  Log: {config.log_level}",
        title="Konfiguration",
        border_style="cyan",
    ))
    table = Table(title="Fachfarben", box=box.ROUNDED)
    table.add_column("#")
    table.add_column("Farbe")
    for idx, color in enumerate(config.palette):
        hex_color = to_hex(color)
        table.add_row(str(idx), f"[{hex_color}]■■■[/{hex_color}] {hex_color}")
    console.print(table)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Bestehende Datei überschreiben.")
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Legt die Standard-Konfiguration als YAML an."""
    from config.defaults import default_engine_config

    mgr = ctx.obj["config_manager"]
    if not mgr.first_run_check() and not force:
        console.print("[yellow]Konfiguration existiert bereits.[/yellow] (--force zum Überschreiben)")
        return
    mgr.save(default_engine_config())


# ─── FÄCHER ───────────────────────────────────────────────────────────────────

@click.group("subject")
def cmd_subject():
    """Fächer verwalten."""


@cmd_subject.command("add")
@click.argument("subject_id")
@click.argument("name")
@click.argument("class_id")
@click.option("--teacher", default=None, help="Lehrer-ID.")
@click.option("--school", default=None, help="Schul-ID der Klasse.")
@click.pass_context
def subject_add(ctx: click.Context, subject_id: str, name: str, class_id: str,
                teacher: Optional[str], school: Optional[str]):
    """Legt ein Fach (und ggf. die Klasse) an."""
    _service(ctx)
    store = ctx.obj["store"]
    if school is not None:
        store.add_class(class_id, school_id=school)
    store.add_subject(subject_id, name, class_id, teacher_id=teacher)
    console.print(f"[green]✓[/green] Fach {subject_id} ({name}) → Klasse {class_id}")


@cmd_subject.command("list")
@click.argument("class_id")
@click.pass_context
def subject_list(ctx: click.Context, class_id: str):
    """Listet die Fächer einer Klasse mit ihrer Farbe."""
    from engine.colors import to_hex
    from engine.errors import TimetableError

    service = _service(ctx)
    try:
        subjects = service.repo.list_subjects(class_id)
    except TimetableError as e:
        _fail(e)
    if not subjects:
        console.print("[dim]Keine Fächer vorhanden.[/dim]")
        return
    table = Table(title=f"Fächer {class_id}", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Lehrer")
    table.add_column("Farbe")
    for s in subjects:
        hex_color = to_hex(service.resolver.colors.color_for(s.id))
        table.add_row(s.id, s.name, s.teacher_id or "", f"[{hex_color}]■■■[/{hex_color}]")
    console.print(table)


# ─── ANZEIGE ──────────────────────────────────────────────────────────────────

@click.command("show")
@click.argument("class_id")
@click.option("--week", type=DATE, default=None, help="Beliebiger Tag der Zielwoche (YYYY-MM-DD).")
@click.pass_context
def cmd_show(ctx: click.Context, class_id: str, week: Optional[datetime]):
    """Zeigt den wirksamen Wochenplan einer Klasse."""
    from engine.errors import TimetableError
    from export.tui_renderer import build_week_table

    service = _service(ctx)
    try:
        schedule = service.resolve_schedule(class_id, week.date() if week else None)
    except TimetableError as e:
        _fail(e)
    if not schedule.lessons:
        console.print(f"[dim]Keine Stunden für {class_id}.[/dim]")
        return
    console.print(build_week_table(schedule))


@click.command("day")
@click.argument("class_id")
@click.argument("day", type=DATE)
@click.pass_context
def cmd_day(ctx: click.Context, class_id: str, day: datetime):
    """Zeigt die Stunden eines Kalendertags."""
    from engine.errors import TimetableError

    service = _service(ctx)
    try:
        lessons = service.lessons_for_day(class_id, day.date())
    except TimetableError as e:
        _fail(e)
    if not lessons:
        console.print("[dim]Keine Stunden an diesem Tag.[/dim]")
        return
    for lesson in lessons:
        console.print(f"{lesson.time_range}  {lesson.subject_name or lesson.subject_id}"
                      + (f"  ({lesson.room})" if lesson.room else "")
                      + f"  [dim]{lesson.duration_minutes} min[/dim]")


# ─── PFLEGE ───────────────────────────────────────────────────────────────────

@click.command("add")
@click.argument("class_id")
@click.argument("subject_id")
@click.argument("day_of_week", type=int)
@click.argument("start")
@click.option("--end", default=None, help="Ende (HH:MM); Standard: Beginn + Standarddauer.")
@click.option("--room", default=None, help="Raum.")
@click.option("--week", type=DATE, default=None,
              help="Nur für diese Woche (Wochen-Stunde statt Vorlage).")
@click.pass_context
def cmd_add(ctx: click.Context, class_id: str, subject_id: str, day_of_week: int,
            start: str, end: Optional[str], room: Optional[str], week: Optional[datetime]):
    """Legt eine Stunde an (Tag: 1=Mo .. 7=So)."""
    from engine.errors import FieldViolation, TimetableError, ValidationError
    from engine.validator import BAD_TIME_FORMAT, parse_time

    service = _service(ctx)
    if end is None:
        parsed = parse_time(start)
        if parsed is None:
            # Ohne lesbaren Beginn gibt es kein Standard-Ende
            _fail(ValidationError([FieldViolation("start_time", BAD_TIME_FORMAT)]))
        minutes = ctx.obj["config"].default_duration_minutes
        end = (datetime.combine(date.min, parsed)
               + timedelta(minutes=minutes)).strftime("%H:%M")
    try:
        lesson = service.create_lesson(
            class_id, subject_id, day_of_week, start, end, room=room,
            is_stable=week is None,
            week_start_date=week.date() if week else None,
        )
    except TimetableError as e:
        _fail(e)
    _print_lesson(lesson)


@click.command("edit")
@click.argument("lesson_id")
@click.option("--subject", "subject_id", default=None)
@click.option("--day", "day_of_week", type=int, default=None)
@click.option("--start", "start_time", default=None)
@click.option("--end", "end_time", default=None)
@click.option("--room", default=None, help='Raum ("" entfernt den Raum).')
@click.pass_context
def cmd_edit(ctx: click.Context, lesson_id: str, **options):
    """Ändert einzelne Felder einer Stunde."""
    from engine.errors import TimetableError

    service = _service(ctx)
    fields = {k: v for k, v in options.items() if v is not None}
    try:
        lesson = service.update_lesson(lesson_id, **fields)
    except TimetableError as e:
        _fail(e)
    _print_lesson(lesson)


@click.command("delete")
@click.argument("lesson_id")
@click.pass_context
def cmd_delete(ctx: click.Context, lesson_id: str):
    """Löscht eine Stunde endgültig."""
    from engine.errors import TimetableError

    service = _service(ctx)
    try:
        service.delete_lesson(lesson_id)
    except TimetableError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Stunde {lesson_id} gelöscht.")


@click.command("copy-week")
@click.argument("class_id")
@click.argument("week", type=DATE)
@click.pass_context
def cmd_copy_week(ctx: click.Context, class_id: str, week: datetime):
    """Kopiert die stabile Vorlage in eine Woche (falls dort noch nichts liegt)."""
    from engine.errors import TimetableError
    from export.tui_renderer import build_week_table

    service = _service(ctx)
    try:
        schedule = service.copy_week_from_stable(class_id, week.date())
    except TimetableError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Woche {schedule.week_start_date}: {len(schedule)} Stunden")
    if schedule.lessons:
        console.print(build_week_table(schedule))


# ─── ANALYSE ──────────────────────────────────────────────────────────────────

@click.command("conflicts")
@click.argument("class_id")
@click.option("--week", type=DATE, default=None)
@click.pass_context
def cmd_conflicts(ctx: click.Context, class_id: str, week: Optional[datetime]):
    """Prüft den wirksamen Plan auf Überschneidungen."""
    from engine.errors import TimetableError

    service = _service(ctx)
    try:
        report = service.find_conflicts(class_id, week.date() if week else None)
    except TimetableError as e:
        _fail(e)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


@click.command("changes")
@click.argument("lesson_id")
@click.option("--json", "as_json", is_flag=True, default=False, help="Ausgabe als JSON.")
@click.pass_context
def cmd_changes(ctx: click.Context, lesson_id: str, as_json: bool):
    """Zeigt, worin eine Wochen-Stunde von ihrer stabilen Stunde abweicht."""
    from engine.errors import TimetableError

    service = _service(ctx)
    try:
        diff = service.lesson_changes(lesson_id)
    except TimetableError as e:
        _fail(e)
    if as_json:
        click.echo(diff.to_json())
        return
    if diff.is_empty():
        console.print("[dim]Keine Abweichungen von der Vorlage.[/dim]")
        return
    table = Table(title=f"Abweichungen {lesson_id}", box=box.ROUNDED)
    table.add_column("Feld", style="bold")
    table.add_column("Vorlage")
    table.add_column("Woche")
    for c in diff.changes:
        table.add_row(c.field, c.stable_value, c.current_value)
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Konfiguration.")
@click.option("--store", "store_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur JSON-Ablage (überschreibt die Config).")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], store_path: Optional[Path],
        verbose: bool):
    """Stundenplan-Engine: stabile Vorlage + Wochen-Stunden je Klasse."""
    from config.manager import ConfigManager

    mgr = ConfigManager(config_path)
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red bold]{e}[/red bold]")
        sys.exit(1)
    _setup_logging("DEBUG" if verbose else config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = mgr
    ctx.obj["config"] = config
    ctx.obj["store_path"] = store_path


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_subject)
cli.add_command(cmd_show)
cli.add_command(cmd_day)
cli.add_command(cmd_add)
cli.add_command(cmd_edit)
cli.add_command(cmd_delete)
cli.add_command(cmd_copy_week)
cli.add_command(cmd_conflicts)
cli.add_command(cmd_changes)


if __name__ == "__main__":
    main()
