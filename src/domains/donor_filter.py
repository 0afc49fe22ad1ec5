"""Local (in-memory) donor filtering for the donor list view."""

from __future__ import annotations

from typing import Iterable

from src.domains.models import Donor


def donor_matches(donor: Donor, term: str) -> bool:
    """True if term is a case-insensitive substring of "first last", email or blood type."""
    needle = (term or "").lower()
    if not needle:
        return True
    return (
        needle in donor.full_name.lower()
        or needle in donor.email.lower()
        or needle in donor.blood_type.lower()
    )


def filter_donors(donors: Iterable[Donor], term: str) -> list[Donor]:
    return [d for d in donors if donor_matches(d, term)]


def distinct_blood_types(donors: Iterable[Donor]) -> list[str]:
    """Blood types present in donors, in first-seen order."""
    seen: list[str] = []
    for d in donors:
        if d.blood_type not in seen:
            seen.append(d.blood_type)
    return seen


def eligible_count(donors: Iterable[Donor]) -> int:
    return sum(1 for d in donors if d.is_eligible)
