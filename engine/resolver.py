"""Auflösung des wirksamen Stundenplans einer Klasse.

Vorrangregel (ganze Woche, alles oder nichts):
Gibt es für die Zielwoche Wochen-Stunden, sind GENAU diese der Plan der Woche.
Sie werden nie slotweise mit der stabilen Vorlage gemischt, auch wenn sie Tage
auslassen, die die Vorlage abdeckt. Nur wenn es keine gibt (oder keine Woche
angegeben ist), gilt die stabile Vorlage.

Die Stufen sind eine geordnete Liste von Strategien; die erste nicht-leere
gewinnt. Eine dritte Stufe lässt sich einfach vorne oder dazwischen einhängen.
"""

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional, Protocol, Sequence, Union

from engine.colors import SubjectColorAssigner
from engine.day_convention import week_anchor
from models.lesson import Lesson
from models.schedule import ResolvedSchedule, ScheduledLesson

if TYPE_CHECKING:
    from store.repository import LessonRepository

logger = logging.getLogger(__name__)


class ResolutionTier(Protocol):
    """Eine Stufe der Auflösung."""

    name: str

    def fetch(self, repo: "LessonRepository", class_id: str,
              anchor: Optional[date]) -> list[Lesson]:
        ...


class OverrideTier:
    """Wochen-Stunden für den Anker; ohne Anker leer."""

    name = "override"

    def fetch(self, repo: "LessonRepository", class_id: str,
              anchor: Optional[date]) -> list[Lesson]:
        if anchor is None:
            return []
        return repo.override_lessons(class_id, anchor)


class StableTier:
    """Die wiederkehrende Vorlage."""

    name = "stable"

    def fetch(self, repo: "LessonRepository", class_id: str,
              anchor: Optional[date]) -> list[Lesson]:
        return repo.stable_lessons(class_id)


DEFAULT_TIERS: tuple[ResolutionTier, ...] = (OverrideTier(), StableTier())


def sort_lessons(lessons: Sequence[Lesson]) -> list[Lesson]:
    """Nach (Tag, Beginn); bei Gleichstand bleibt die Reihenfolge der Ablage."""
    return sorted(lessons, key=lambda l: (l.day_of_week, l.start_time))


class ScheduleResolver:
    """Berechnet den sortierten, eingefärbten Plan einer Klasse für eine Woche."""

    def __init__(
        self,
        repo: "LessonRepository",
        colors: Optional[SubjectColorAssigner] = None,
        tiers: Sequence[ResolutionTier] = DEFAULT_TIERS,
    ) -> None:
        self.repo = repo
        self.colors = colors or SubjectColorAssigner()
        self.tiers = tuple(tiers)
        if not self.tiers:
            raise ValueError("Mindestens eine Auflösungsstufe nötig")

    def resolve(
        self,
        class_id: str,
        week_start_date: Optional[Union[date, datetime]] = None,
    ) -> ResolvedSchedule:
        """Plan für ``class_id``; ``week_start_date`` darf ein beliebiger Tag der Woche sein.

        Fehler der Ablage kommen als StorageError aus dem Repository; es gibt
        dann kein (Teil-)Ergebnis.
        """
        anchor = week_anchor(week_start_date) if week_start_date is not None else None

        chosen: list[Lesson] = []
        source = self.tiers[-1].name
        for tier in self.tiers:
            lessons = tier.fetch(self.repo, class_id, anchor)
            if lessons:
                chosen = lessons
                source = tier.name
                break
            logger.debug(f"Klasse {class_id}, Woche {anchor}: Stufe '{tier.name}' leer")

        scheduled = [self.decorate(l) for l in sort_lessons(chosen)]
        return ResolvedSchedule(
            class_id=class_id,
            week_start_date=anchor,
            source=source,
            lessons=scheduled,
        )

    def decorate(self, lesson: Lesson) -> ScheduledLesson:
        return ScheduledLesson(**lesson.model_dump(),
                               color=self.colors.color_for(lesson.subject_id))
