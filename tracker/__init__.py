"""Strain tracker: real-time strain log sync and view derivation."""
