"""Abstrakte Ablage für Fächer und Stunden.

Alle Methoden arbeiten mit Roh-Datensätzen (dicts) in Ablage-Nummerierung
(0=So, 1..6=Mo..Sa), Uhrzeiten als "HH:MM:SS", Daten als ISO-Strings.
Stunden-Datensätze tragen das verknüpfte Fach unter ``subjects``.
Fehler der konkreten Ablage dürfen beliebige Exceptions sein; verpackt werden
sie erst in store.repository.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

LessonRow = dict[str, Any]


class LessonStore(ABC):
    """Schnittstelle, gegen die die Engine liest und schreibt."""

    @abstractmethod
    def list_override_lessons(self, class_id: str, week_anchor: date) -> list[LessonRow]:
        """Wochen-Stunden (is_stable=False) der Klasse für den Montag ``week_anchor``."""

    @abstractmethod
    def list_stable_lessons(self, class_id: str) -> list[LessonRow]:
        """Stabile Stunden (is_stable=True) der Klasse."""

    @abstractmethod
    def create_lesson_record(self, fields: dict[str, Any]) -> LessonRow:
        """Legt eine Stunde an und gibt den gespeicherten Datensatz zurück."""

    @abstractmethod
    def update_lesson_record(self, lesson_id: str, fields: dict[str, Any]) -> Optional[LessonRow]:
        """Ändert die übergebenen Felder; None wenn die Stunde nicht existiert."""

    @abstractmethod
    def delete_lesson_record(self, lesson_id: str) -> bool:
        """Löscht endgültig; False wenn die Stunde nicht existiert."""

    @abstractmethod
    def get_lesson_record(self, lesson_id: str) -> Optional[LessonRow]:
        """Einzelne Stunde oder None."""

    @abstractmethod
    def get_subject(self, subject_id: str) -> Optional[dict[str, Any]]:
        """Fach-Datensatz (id, name, class_id, teacher_id) oder None."""

    @abstractmethod
    def list_subjects(self, class_id: str) -> list[dict[str, Any]]:
        """Alle Fächer einer Klasse."""

    @abstractmethod
    def get_class_school(self, class_id: str) -> Optional[str]:
        """Schul-ID einer Klasse oder None."""
