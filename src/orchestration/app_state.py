"""
Explicit, owned view state for the console.

An AppState lives in `st.session_state` between Streamlit reruns, so it must
stay picklable: plain dataclasses, no clients, no locks.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domains.models import Donor, DonorDraft, InventoryItem, Notification, SearchCriteria

DASHBOARD = "dashboard"
REGISTER = "register"
DONORS = "donors"
INVENTORY = "inventory"
FIND = "find"

# Navigation order and labels
VIEWS: dict[str, str] = {
    DASHBOARD: "Dashboard",
    FIND: "Find Donors",
    REGISTER: "Register Donor",
    DONORS: "View Donors",
    INVENTORY: "Blood Stock",
}

# Finder phases
IDLE = "idle"
SEARCHING = "searching"
RESULTS = "results"


@dataclass
class FinderState:
    criteria: SearchCriteria = field(default_factory=SearchCriteria)
    phase: str = IDLE
    results: list[Donor] = field(default_factory=list)
    generated_message: str = ""
    generation_error: str | None = None
    is_generating: bool = False


@dataclass
class AppState:
    view: str = DASHBOARD
    donors: list[Donor] = field(default_factory=list)
    inventory: list[InventoryItem] = field(default_factory=list)
    draft: DonorDraft = field(default_factory=DonorDraft)
    # Bumped whenever the draft is reset so form widgets are recreated with defaults
    draft_version: int = 0
    search_term: str = ""
    notification: Notification | None = None
    connectivity_fault: str | None = None
    is_retrying: bool = False
    loaded: bool = False
    finder: FinderState = field(default_factory=FinderState)
    campaign_ideas: str = ""
    campaign_error: str | None = None
    is_generating_campaign: bool = False
