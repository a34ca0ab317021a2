"""Gemeinsame Testdaten: Klasse 5a mit Mathe, Bio, Geschichte."""

from datetime import date

import pytest

from engine.cache import ClassSchoolCache
from engine.service import TimetableService
from store.memory import InMemoryLessonStore

WEEK_1 = date(2024, 6, 3)    # Montag
WEEK_2 = date(2024, 6, 10)   # Montag


@pytest.fixture
def store() -> InMemoryLessonStore:
    s = InMemoryLessonStore()
    s.add_class("5a", name="Klasse 5a", school_id="gym-1")
    s.add_class("6b", name="Klasse 6b", school_id="gym-1")
    s.add_subject("math", "Mathe", "5a", teacher_id="t-mue")
    s.add_subject("bio", "Biologie", "5a")
    s.add_subject("hist", "Geschichte", "5a")
    s.add_subject("eng", "Englisch", "6b")
    return s


@pytest.fixture
def cache() -> ClassSchoolCache:
    return ClassSchoolCache()


@pytest.fixture
def service(store, cache) -> TimetableService:
    return TimetableService(store, cache=cache)


@pytest.fixture
def seeded(service):
    """Vorlage: Mathe Mo 08:00, Bio Di 09:00; Woche 1: nur Geschichte Mi 10:00."""
    math = service.create_lesson("5a", "math", 1, "08:00", "08:45", room="R101")
    bio = service.create_lesson("5a", "bio", 2, "09:00", "09:45", room="Bio1")
    hist = service.create_lesson("5a", "hist", 3, "10:00", "10:45",
                                 is_stable=False, week_start_date=WEEK_1)
    return {"math": math, "bio": bio, "hist": hist}
