from pydantic import BaseModel, Field, field_validator
from typing import Optional, Sequence


# ─── SPEICHER ───

class StoreConfig(BaseModel):
    """Ablage der Unterrichtsstunden für die CLI (JSON-Datei)."""
    # Pfad zur JSON-Datei mit Fächern, Klassen und Stunden
    path: str = Field("data/timetable.json",
        description="Pfad zur JSON-Ablage")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Stundenplan-Auflösung."""
    # Farbpalette für Fächer (ARGB, exakt 15 Einträge, voll deckend)
    palette: list[int] = Field(
        default_factory=lambda: list(_default_palette()),
        description="Fachfarben als ARGB-Werte")
    # Ablage-Konfiguration
    store: StoreConfig = Field(default_factory=StoreConfig)
    # Log-Level für die CLI ("DEBUG", "INFO", "WARNING", ...)
    log_level: str = Field("INFO",
        description="Log-Level")
    # Standarddauer einer Stunde, wenn beim Anlegen kein Ende angegeben ist
    default_duration_minutes: int = Field(45, ge=5, le=240,
        description="Standarddauer einer Stunde (Minuten)")
    # Optionaler Schulname für die Anzeige
    school_name: Optional[str] = None

    @field_validator("palette")
    @classmethod
    def validate_palette(cls, value: list[int]) -> list[int]:
        """Palette muss aus 15 verschiedenen, voll deckenden Farben bestehen."""
        return list(check_palette(value))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unbekanntes Log-Level: {value}")
        return level


PALETTE_SIZE = 15


def check_palette(palette: Sequence[int]) -> tuple[int, ...]:
    """Prüft eine Fachfarben-Palette und gibt sie als Tupel zurück.

    Genau 15 verschiedene ARGB-Werte, alle voll deckend (Alpha = FF).
    Wirft ValueError bei Verstoß.
    """
    colors = tuple(palette)
    if len(colors) != PALETTE_SIZE:
        raise ValueError(f"Palette braucht genau {PALETTE_SIZE} Farben, nicht {len(colors)}")
    if len(set(colors)) != len(colors):
        raise ValueError("Palette enthält doppelte Farben")
    for color in colors:
        if not 0 <= color <= 0xFFFFFFFF or (color >> 24) != 0xFF:
            raise ValueError(f"Farbe {color:#x} ist nicht voll deckend (Alpha != FF)")
    return colors


def _default_palette() -> tuple[int, ...]:
    from config.defaults import DEFAULT_PALETTE
    return DEFAULT_PALETTE
