"""Ablage-Modul: abstrakte Schnittstelle, Referenz-Ablagen und die Typ-Grenze."""

from store.base import LessonStore
from store.memory import InMemoryLessonStore
from store.json_store import JsonLessonStore
from store.repository import LessonRepository

__all__ = [
    "LessonStore",
    "InMemoryLessonStore",
    "JsonLessonStore",
    "LessonRepository",
]
