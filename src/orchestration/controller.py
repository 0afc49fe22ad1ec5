"""
Application controller: the only code that mutates AppState.

Renderers read the state and call the intent methods below; the controller
talks to the backend and the text-generation clients and applies the results.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from src.domains.donor_filter import distinct_blood_types, eligible_count, filter_donors
from src.domains.models import Donor, DonorDraft, InventoryItem, Notification
from src.domains.prompts import campaign_ideas_prompt, outreach_message_prompt
from src.domains.stock import low_stock_blood_types, low_stock_items
from src.infrastructure.data.sources.backend_client import BackendUnavailableError
from src.orchestration.app_state import DONORS, IDLE, RESULTS, SEARCHING, VIEWS, AppState
from src.orchestration.gemini_client import GenerationResult
from src.utils.config import notification_seconds
from src.utils.logger import get_logger

logger = get_logger()

SUCCESS = "success"
ERROR = "error"

MSG_MISSING_FIELDS = "Please fill in all required fields."
MSG_REGISTERED = "Donor registered successfully!"
MSG_REGISTER_FAILED = "Failed to register donor. Please try again."
MSG_MISSING_LOCATION = "Please enter both a state and a city."
MSG_SEARCH_FAILED = "Failed to find donors. The server may be down."


def connectivity_fault_message(base_url: str) -> str:
    return (
        "Could not connect to the backend. Please ensure the backend server is running "
        f"at {base_url} and click Retry."
    )


# (payload, error) pairs produced by the fetch workers before they are applied
_Outcome = tuple[Any, "BackendUnavailableError | None"]


class AppController:
    def __init__(
        self,
        state: AppState,
        backend: Any,
        generator: Any,
        clock: Callable[[], float] = time.time,
        notification_ttl: float | None = None,
    ) -> None:
        self.state = state
        self._backend = backend
        self._generator = generator
        self._clock = clock
        self._notification_ttl = (
            notification_ttl if notification_ttl is not None else notification_seconds()
        )

    # --- Notifications ---

    def show_notification(self, message: str, kind: str = SUCCESS) -> None:
        self.state.notification = Notification(message, kind, self._clock())

    def active_notification(self) -> Notification | None:
        """The current notification, or None once its display window has passed."""
        n = self.state.notification
        if n is None:
            return None
        if self._clock() - n.shown_at >= self._notification_ttl:
            return None
        return n

    def dismiss_notification(self) -> None:
        self.state.notification = None

    # --- Loading ---

    def _backend_ok(self) -> None:
        if self.state.connectivity_fault:
            logger.info("Backend reachable again; clearing connectivity fault")
        self.state.connectivity_fault = None

    def _load_donors(self) -> _Outcome:
        try:
            return self._backend.list_donors(), None
        except BackendUnavailableError as e:
            return None, e

    def _load_inventory(self) -> _Outcome:
        try:
            return self._backend.list_inventory(), None
        except BackendUnavailableError as e:
            return None, e

    def _apply_donors(self, outcome: _Outcome) -> bool:
        donors, err = outcome
        if err is not None:
            logger.warning("Failed to fetch donors: %s", err)
            self.state.connectivity_fault = connectivity_fault_message(
                getattr(self._backend, "base_url", "the configured URL")
            )
            return False
        self.state.donors = list(donors)
        self._backend_ok()
        return True

    def _apply_inventory(self, outcome: _Outcome) -> bool:
        items, err = outcome
        if err is not None:
            # Inventory failures never raise the connectivity banner
            logger.warning("Failed to fetch inventory: %s", err)
            return False
        self.state.inventory = list(items)
        self._backend_ok()
        return True

    def fetch_donors(self) -> bool:
        return self._apply_donors(self._load_donors())

    def fetch_inventory(self) -> bool:
        return self._apply_inventory(self._load_inventory())

    def _fetch_all(self) -> None:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="backend-fetch") as pool:
            donors_future = pool.submit(self._load_donors)
            inventory_future = pool.submit(self._load_inventory)
            donors_outcome = donors_future.result()
            inventory_outcome = inventory_future.result()
        # Inventory first so a failed donor fetch leaves the banner up
        self._apply_inventory(inventory_outcome)
        self._apply_donors(donors_outcome)

    def initialize(self) -> None:
        """First activation: fetch donors and inventory concurrently. No-op once loaded."""
        if self.state.loaded:
            return
        self._fetch_all()
        self.state.loaded = True

    def retry_connection(self) -> None:
        self.state.is_retrying = True
        try:
            self._fetch_all()
        finally:
            self.state.is_retrying = False

    # --- Navigation and local filter ---

    def set_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view!r}")
        self.state.view = view

    def set_search_term(self, term: str) -> None:
        self.state.search_term = term or ""

    def filtered_donors(self) -> list[Donor]:
        return filter_donors(self.state.donors, self.state.search_term)

    def dashboard_summary(self) -> dict[str, int]:
        return {
            "total_donors": len(self.state.donors),
            "eligible_donors": eligible_count(self.state.donors),
            "low_stock_items": len(low_stock_items(self.state.inventory)),
        }

    # --- Registration ---

    def update_draft(self, **changes: str) -> None:
        self.state.draft = self.state.draft.updated(**changes)

    def reset_draft(self) -> None:
        self.state.draft = DonorDraft()
        self.state.draft_version += 1

    def submit_registration(self) -> bool:
        """Validate and submit the draft. Returns True when the donor was created."""
        draft = self.state.draft
        missing = draft.missing_fields()
        if missing:
            logger.info("Registration rejected, missing fields: %s", ", ".join(missing))
            self.show_notification(MSG_MISSING_FIELDS, ERROR)
            return False
        try:
            self._backend.create_donor(draft)
        except BackendUnavailableError as e:
            logger.warning("Failed to register donor: %s", e)
            self.show_notification(MSG_REGISTER_FAILED, ERROR)
            return False
        self._backend_ok()
        self.reset_draft()
        self.show_notification(MSG_REGISTERED)
        self.fetch_donors()
        self.state.view = DONORS
        return True

    # --- Donor finder ---

    def update_criteria(self, state: str | None = None, city: str | None = None) -> None:
        criteria = self.state.finder.criteria
        if state is not None:
            criteria.state = state
        if city is not None:
            criteria.city = city

    def finder_search(self) -> bool:
        """Run a location search. Returns False when the criteria are incomplete."""
        finder = self.state.finder
        if not finder.criteria.is_complete():
            self.show_notification(MSG_MISSING_LOCATION, ERROR)
            return False
        finder.phase = SEARCHING
        finder.generated_message = ""
        finder.generation_error = None
        try:
            results = self._backend.search_donors(finder.criteria.state, finder.criteria.city)
        except BackendUnavailableError as e:
            logger.warning("Failed to search for donors: %s", e)
            results = []
            self.show_notification(MSG_SEARCH_FAILED, ERROR)
        else:
            self._backend_ok()
        finder.results = list(results)
        finder.phase = RESULTS
        return True

    def can_generate_outreach(self) -> bool:
        finder = self.state.finder
        return finder.phase == RESULTS and bool(finder.results)

    def generate_outreach_message(self) -> GenerationResult | None:
        """Draft an outreach message for the current results; overwrites any previous one."""
        if not self.can_generate_outreach():
            return None
        finder = self.state.finder
        prompt = outreach_message_prompt(
            finder.criteria.city,
            finder.criteria.state,
            distinct_blood_types(finder.results),
        )
        finder.is_generating = True
        try:
            result = self._generator.generate(prompt)
        finally:
            finder.is_generating = False
        if result.error:
            logger.warning("Outreach message generation failed: %s", result.error)
        finder.generated_message = result.text
        finder.generation_error = result.error
        return result

    def reset_finder(self) -> None:
        finder = self.state.finder
        finder.phase = IDLE
        finder.results = []
        finder.generated_message = ""
        finder.generation_error = None

    # --- Dashboard campaign ideas ---

    def generate_campaign_ideas(self) -> GenerationResult:
        prompt = campaign_ideas_prompt(low_stock_blood_types(self.state.inventory))
        self.state.is_generating_campaign = True
        try:
            result = self._generator.generate(prompt)
        finally:
            self.state.is_generating_campaign = False
        if result.error:
            logger.warning("Campaign idea generation failed: %s", result.error)
        self.state.campaign_ideas = result.text
        self.state.campaign_error = result.error
        return result

    def low_stock_inventory(self) -> list[InventoryItem]:
        return low_stock_items(self.state.inventory)
