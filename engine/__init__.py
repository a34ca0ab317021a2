"""Stundenplan-Engine: Auflösung (Vorlage + Wochen-Stunden), Validierung, Fachfarben.

Einstiegspunkt ist engine.service.TimetableService.
"""
