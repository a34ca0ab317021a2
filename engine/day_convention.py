"""Wochentags-Konvention: kanonisch (1=Mo..7=So) ↔ Ablage (0=So, 1..6=Mo..Sa).

Die Umrechnung darf nur an genau einer Stelle passieren: beim Lesen und
Schreiben in store.repository. Resolver, Validator und Service rechnen
ausschließlich kanonisch.
"""

from datetime import date, datetime, timedelta
from typing import Union

from config.defaults import DAY_NAMES, DAY_SHORT


def to_storage(day: int) -> int:
    """Kanonischer Tag (1..7) → Ablage-Tag (0..6)."""
    if not 1 <= day <= 7:
        raise ValueError(f"Kanonischer Wochentag außerhalb 1..7: {day}")
    return 0 if day == 7 else day


def from_storage(day: int) -> int:
    """Ablage-Tag (0..6) → kanonischer Tag (1..7)."""
    if not 0 <= day <= 6:
        raise ValueError(f"Ablage-Wochentag außerhalb 0..6: {day}")
    return 7 if day == 0 else day


def week_anchor(value: Union[date, datetime]) -> date:
    """Montag der ISO-Woche, in der ``value`` liegt.

    Zwei Daten derselben Woche liefern immer denselben Anker.
    """
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.isoweekday() - 1)


def date_for_day(anchor: date, day: int) -> date:
    """Kalenderdatum eines kanonischen Wochentags in der Woche von ``anchor``."""
    return week_anchor(anchor) + timedelta(days=day - 1)


def day_name(day: int, short: bool = False) -> str:
    names = DAY_SHORT if short else DAY_NAMES
    return names.get(day, str(day))
