"""Banxico FIX quote adapter with a staleness-aware refresh cache."""
