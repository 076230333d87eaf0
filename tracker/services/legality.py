"""State-level legality lookup."""

from __future__ import annotations

STATE_LEGALITY: dict[str, str] = {
    "Florida": "Medicinal",
    "California": "Recreational",
    "Texas": "Not Legal",
    "New York": "Recreational",
    "Maryland": "Recreational",
    "Colorado": "Recreational",
    "Illinois": "Recreational",
    "Virginia": "Medicinal",
    "Georgia": "Not Legal",
}

NO_SELECTION = "Select a State"


def legality_status(state: str | None) -> str:
    """Status for a state, or the prompt text when unknown or empty."""
    if not state:
        return NO_SELECTION
    return STATE_LEGALITY.get(state, NO_SELECTION)


def list_states() -> list[str]:
    return sorted(STATE_LEGALITY)
