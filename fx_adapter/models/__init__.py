"""Pydantic response models for the FX adapter API."""

from .quote import ErrorOut, HealthOut, QuoteOut

__all__ = [
    "ErrorOut",
    "HealthOut",
    "QuoteOut",
]
