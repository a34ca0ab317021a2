"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from typing import Optional
from pydantic import BaseModel


class Subject(BaseModel):
    """Ein Fach gehört genau einer Klasse; die Farbe wird abgeleitet, nie gespeichert."""

    id: str
    name: str
    class_id: str
    teacher_id: Optional[str] = None

    def belongs_to(self, class_id: str) -> bool:
        return self.class_id == class_id
