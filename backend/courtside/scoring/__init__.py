"""Scoring engines for the various sports."""

from . import padel, tally, tennis
from .rules import SportRules, available_sports, get_rules

__all__ = [
    "padel",
    "tally",
    "tennis",
    "SportRules",
    "available_sports",
    "get_rules",
]
