"""Memo für die Zuordnung Klasse → Schule.

Wird dem Aufrufer des Resolvers explizit übergeben und nur durch
``invalidate()`` geleert, nie automatisch.
"""

from typing import Callable, Optional

_MISSING = object()


class ClassSchoolCache:
    """Merkt sich Schul-IDs pro Klasse (auch "keine Schule" = None)."""

    def __init__(self) -> None:
        self._entries: dict[str, Optional[str]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, class_id: str, loader: Callable[[str], Optional[str]]) -> Optional[str]:
        """Gespeicherten Wert liefern oder über ``loader`` holen und merken."""
        value = self._entries.get(class_id, _MISSING)
        if value is not _MISSING:
            self.hits += 1
            return value
        self.misses += 1
        loaded = loader(class_id)
        self._entries[class_id] = loaded
        return loaded

    def invalidate(self, class_id: Optional[str] = None) -> None:
        """Leert eine Klasse oder (ohne Argument) den gesamten Cache."""
        if class_id is None:
            self._entries.clear()
        else:
            self._entries.pop(class_id, None)

    def __contains__(self, class_id: str) -> bool:
        return class_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ClassSchoolCache({len(self._entries)} Einträge)"
