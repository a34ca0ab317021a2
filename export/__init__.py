"""Export-Modul: Terminal-Darstellung (Rich) für aufgelöste Wochenpläne."""

from export.tui_renderer import build_week_table, render_week_rows

__all__ = ["build_week_table", "render_week_rows"]
