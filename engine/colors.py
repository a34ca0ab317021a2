"""Deterministische Fachfarben.

Jede Fach-ID wird über einen prozessunabhängigen Hash (CRC-32) auf einen
Index der festen 15-Farben-Palette abgebildet. Pythons eingebautes ``hash()``
ist für Strings pro Prozess gesalzen und scheidet deshalb aus.
"""

import zlib
from typing import Optional, Sequence

from config.defaults import DEFAULT_PALETTE
from config.schema import check_palette


def stable_hash(value: str) -> int:
    """Über Läufe und Prozesse hinweg identischer Hash eines Strings."""
    return zlib.crc32(value.encode("utf-8"))


class SubjectColorAssigner:
    """Ordnet einer Fach-ID immer dieselbe Palettenfarbe zu (zustandslos)."""

    def __init__(self, palette: Optional[Sequence[int]] = None) -> None:
        self._palette: tuple[int, ...] = (
            DEFAULT_PALETTE if palette is None else check_palette(palette))

    @property
    def palette(self) -> tuple[int, ...]:
        return self._palette

    def color_for(self, subject_id: str) -> int:
        """ARGB-Farbe für ``subject_id``: palette[|hash| mod len(palette)]."""
        index = abs(stable_hash(subject_id)) % len(self._palette)
        return self._palette[index]

    def __repr__(self) -> str:
        return f"SubjectColorAssigner({len(self._palette)} Farben)"


def color_for(subject_id: str) -> int:
    """Farbe aus der Standard-Palette."""
    return SubjectColorAssigner().color_for(subject_id)


def to_hex(color: int) -> str:
    """ARGB-Int → "#RRGGBB" (für Rich und Exporte)."""
    return f"#{color & 0xFFFFFF:06X}"
