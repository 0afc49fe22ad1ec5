"""
Stock level classification for blood inventory.
Pure functions of the unit count; the dashboard and inventory views share them.
"""

from __future__ import annotations

from typing import Iterable

from src.domains.models import InventoryItem

CRITICAL_BELOW = 10
LOW_BELOW = 20

CRITICAL = "Critical"
LOW = "Low"
GOOD = "Good"

# Display colours per status (text colour, background tint)
_STATUS_COLORS = {
    CRITICAL: ("#dc2626", "#fef2f2"),
    LOW: ("#ea580c", "#fff7ed"),
    GOOD: ("#16a34a", "#f0fdf4"),
}

_BLOOD_TYPE_COLORS = {
    "A+": "#dc2626",
    "A-": "#991b1b",
    "B+": "#2563eb",
    "B-": "#1e40af",
    "AB+": "#9333ea",
    "AB-": "#6b21a8",
    "O+": "#16a34a",
    "O-": "#166534",
}
_DEFAULT_COLOR = "#4b5563"


def classify_stock(units: int) -> str:
    """Critical below 10 units, Low below 20, Good otherwise."""
    if units < CRITICAL_BELOW:
        return CRITICAL
    if units < LOW_BELOW:
        return LOW
    return GOOD


def status_colors(status: str) -> tuple[str, str]:
    return _STATUS_COLORS.get(status, (_DEFAULT_COLOR, "#f9fafb"))


def blood_type_color(blood_type: str) -> str:
    return _BLOOD_TYPE_COLORS.get(blood_type, _DEFAULT_COLOR)


def low_stock_items(inventory: Iterable[InventoryItem]) -> list[InventoryItem]:
    """Items that are not Good (Critical or Low), in inventory order."""
    return [item for item in inventory if item.units < LOW_BELOW]


def low_stock_blood_types(inventory: Iterable[InventoryItem]) -> list[str]:
    return [item.blood_type for item in low_stock_items(inventory)]
