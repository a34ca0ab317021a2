from config.schema import EngineConfig, StoreConfig


# ─── FACHFARBEN ───
# ARGB-Werte, Reihenfolge ist fest: der Index wird aus der Fach-ID abgeleitet.
# Änderungen an der Reihenfolge färben alle bestehenden Fächer um!

DEFAULT_PALETTE: tuple[int, ...] = (
    0xFF2196F3,  # Blau
    0xFFFF5722,  # Tieforange
    0xFF4CAF50,  # Grün
    0xFF9C27B0,  # Lila
    0xFF009688,  # Petrol
    0xFFF44336,  # Rot
    0xFF3F51B5,  # Indigo
    0xFFFFC107,  # Bernstein
    0xFF00BCD4,  # Cyan
    0xFFE91E63,  # Pink
    0xFFCDDC39,  # Limette
    0xFF795548,  # Braun
    0xFF673AB7,  # Dunkellila
    0xFF03A9F4,  # Hellblau
    0xFFFF9800,  # Orange
)


# ─── WOCHENTAGE ───
# Kanonische Nummerierung: 1=Montag .. 7=Sonntag

DAY_NAMES: dict[int, str] = {
    1: "Montag",
    2: "Dienstag",
    3: "Mittwoch",
    4: "Donnerstag",
    5: "Freitag",
    6: "Samstag",
    7: "Sonntag",
}

DAY_SHORT: dict[int, str] = {
    1: "Mo", 2: "Di", 3: "Mi", 4: "Do", 5: "Fr", 6: "Sa", 7: "So",
}


def default_engine_config() -> EngineConfig:
    """Standard-Konfiguration: feste Palette, JSON-Ablage unter data/."""
    return EngineConfig(
        palette=list(DEFAULT_PALETTE),
        store=StoreConfig(path="data/timetable.json"),
        log_level="INFO",
        default_duration_minutes=45,
    )
