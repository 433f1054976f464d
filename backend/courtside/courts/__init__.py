"""Court zone models for the various sports."""

from . import basketball, padel, tennis, volleyball

__all__ = [
    "basketball",
    "padel",
    "tennis",
    "volleyball",
]
