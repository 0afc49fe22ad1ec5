"""
Tests for AppController: loading, connectivity fault, registration, local filter,
notifications, donor finder and text generation.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from src.domains.models import Donor, DonorDraft, InventoryItem
from src.infrastructure.data.sources.backend_client import BackendClient, BackendUnavailableError
from src.orchestration.app_state import DASHBOARD, DONORS, FIND, IDLE, RESULTS, AppState
from src.orchestration.controller import (
    ERROR,
    MSG_MISSING_FIELDS,
    MSG_MISSING_LOCATION,
    MSG_REGISTER_FAILED,
    MSG_REGISTERED,
    MSG_SEARCH_FAILED,
    SUCCESS,
    AppController,
)
from src.orchestration.gemini_client import FALLBACK_TEXT, GenerationResult


def donor(id: int, first: str, blood_type: str, eligible: bool = True) -> Donor:
    return Donor(
        id=id, first_name=first, last_name="Doe", email=f"{first.lower()}@x.com", phone="",
        blood_type=blood_type, date_of_birth="1990-01-01", gender="Other",
        city="Austin", state="TX", is_eligible=eligible,
    )


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def backend() -> MagicMock:
    b = MagicMock()
    b.base_url = "http://backend.test/api"
    b.list_donors.return_value = [donor(1, "Ann", "O-"), donor(2, "Bob", "AB+", eligible=False)]
    b.list_inventory.return_value = [InventoryItem("A+", 25), InventoryItem("O-", 4)]
    b.search_donors.return_value = [donor(1, "Ann", "O-"), donor(3, "Cy", "B+"), donor(4, "Di", "O-")]
    return b


@pytest.fixture
def generator() -> MagicMock:
    g = MagicMock()
    g.generate.return_value = GenerationResult("Please come donate!")
    return g


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def controller(backend: MagicMock, generator: MagicMock, clock: FakeClock) -> AppController:
    return AppController(AppState(), backend, generator, clock=clock, notification_ttl=3.0)


def complete_draft(c: AppController) -> None:
    c.update_draft(
        first_name="Ann", last_name="Lee", email="a@x.com",
        city="Austin", state="TX", date_of_birth="1990-04-02",
    )


# --- Loading and connectivity fault ---

def test_initialize_fetches_both_once(controller: AppController, backend: MagicMock) -> None:
    controller.initialize()
    controller.initialize()
    assert backend.list_donors.call_count == 1
    assert backend.list_inventory.call_count == 1
    assert len(controller.state.donors) == 2
    assert len(controller.state.inventory) == 2
    assert controller.state.loaded
    assert controller.state.connectivity_fault is None


def test_donor_failure_sets_fault_even_when_inventory_succeeds(
    controller: AppController, backend: MagicMock
) -> None:
    backend.list_donors.side_effect = BackendUnavailableError("refused")
    controller.initialize()
    assert "Could not connect to the backend" in controller.state.connectivity_fault
    assert "http://backend.test/api" in controller.state.connectivity_fault
    assert len(controller.state.inventory) == 2


def test_inventory_failure_alone_never_sets_fault(controller: AppController, backend: MagicMock) -> None:
    backend.list_inventory.side_effect = BackendUnavailableError("boom")
    controller.initialize()
    assert controller.state.connectivity_fault is None
    assert controller.state.inventory == []
    assert len(controller.state.donors) == 2


def test_successful_donor_fetch_clears_fault(controller: AppController) -> None:
    controller.state.connectivity_fault = "down"
    assert controller.fetch_donors()
    assert controller.state.connectivity_fault is None


def test_retry_refetches_and_clears_busy_flag(controller: AppController, backend: MagicMock) -> None:
    backend.list_donors.side_effect = BackendUnavailableError("refused")
    controller.initialize()
    assert controller.state.connectivity_fault

    seen_busy = []
    backend.list_donors.side_effect = lambda: seen_busy.append(controller.state.is_retrying) or [donor(9, "Zed", "A-")]
    controller.retry_connection()
    assert seen_busy == [True]
    assert controller.state.is_retrying is False
    assert controller.state.connectivity_fault is None
    assert [d.id for d in controller.state.donors] == [9]
    assert backend.list_inventory.call_count == 2


def test_malformed_donor_record_does_not_raise_fault(generator: MagicMock, clock: FakeClock) -> None:
    """A reachable backend returning one bad record keeps the good ones and no banner."""
    good = {"id": 1, "firstName": "Ann", "lastName": "Lee", "email": "a@x.com", "bloodType": "O-"}
    bad = dict(good, id=2, bloodType=None)
    r = MagicMock(status_code=200)
    r.json.return_value = [good, bad]
    r.raise_for_status = MagicMock()
    c = AppController(
        AppState(), BackendClient(base_url="http://backend.test/api", timeout=1),
        generator, clock=clock, notification_ttl=3.0,
    )
    c.state.connectivity_fault = "down"
    with patch("src.infrastructure.data.sources.backend_client.requests.get", return_value=r):
        assert c.fetch_donors()
    assert [d.id for d in c.state.donors] == [1]
    assert c.state.connectivity_fault is None


def test_failed_fetch_keeps_previous_donors(controller: AppController, backend: MagicMock) -> None:
    controller.initialize()
    backend.list_donors.side_effect = BackendUnavailableError("refused")
    assert not controller.fetch_donors()
    assert len(controller.state.donors) == 2


# --- Views and local filter ---

def test_set_view(controller: AppController) -> None:
    assert controller.state.view == DASHBOARD
    controller.set_view(FIND)
    assert controller.state.view == FIND
    with pytest.raises(ValueError):
        controller.set_view("settings")


def test_filtered_donors_recomputed_from_full_collection(controller: AppController) -> None:
    controller.initialize()
    controller.set_search_term("ab+")
    assert [d.id for d in controller.filtered_donors()] == [2]
    controller.set_search_term("ANN")
    assert [d.id for d in controller.filtered_donors()] == [1]
    controller.set_search_term("")
    assert len(controller.filtered_donors()) == 2


def test_dashboard_summary(controller: AppController) -> None:
    controller.initialize()
    assert controller.dashboard_summary() == {
        "total_donors": 2,
        "eligible_donors": 1,
        "low_stock_items": 1,
    }


# --- Registration ---

@pytest.mark.parametrize(
    "blank", ["first_name", "last_name", "email", "city", "state", "date_of_birth"]
)
def test_registration_requires_each_field(
    controller: AppController, backend: MagicMock, blank: str
) -> None:
    complete_draft(controller)
    controller.update_draft(**{blank: ""})
    assert controller.submit_registration() is False
    backend.create_donor.assert_not_called()
    assert controller.state.notification.kind == ERROR
    assert controller.state.notification.message == MSG_MISSING_FIELDS


def test_registration_success(controller: AppController, backend: MagicMock) -> None:
    complete_draft(controller)
    version = controller.state.draft_version
    assert controller.submit_registration() is True

    backend.create_donor.assert_called_once()
    submitted = backend.create_donor.call_args.args[0]
    assert submitted.first_name == "Ann"
    assert submitted.blood_type == "A+" and submitted.gender == "Male"
    assert controller.state.draft == DonorDraft()
    assert controller.state.draft_version == version + 1
    assert controller.state.view == DONORS
    assert controller.state.notification.message == MSG_REGISTERED
    assert controller.state.notification.kind == SUCCESS
    backend.list_donors.assert_called_once()


def test_registration_network_failure_keeps_draft(controller: AppController, backend: MagicMock) -> None:
    backend.create_donor.side_effect = BackendUnavailableError("refused")
    complete_draft(controller)
    controller.set_view("register")
    assert controller.submit_registration() is False
    assert controller.state.draft.first_name == "Ann"
    assert controller.state.view == "register"
    assert controller.state.notification.message == MSG_REGISTER_FAILED
    backend.list_donors.assert_not_called()


# --- Notifications ---

def test_notification_expires_after_three_seconds(controller: AppController, clock: FakeClock) -> None:
    controller.show_notification("Saved")
    clock.now += 2
    assert controller.active_notification().message == "Saved"
    clock.now += 1
    assert controller.active_notification() is None


def test_newer_notification_replaces_older(controller: AppController, clock: FakeClock) -> None:
    controller.show_notification("first")
    clock.now += 2
    controller.show_notification("second", ERROR)
    n = controller.active_notification()
    assert (n.message, n.kind) == ("second", ERROR)


def test_dismiss_notification(controller: AppController) -> None:
    controller.show_notification("bye")
    controller.dismiss_notification()
    assert controller.active_notification() is None


# --- Finder ---

@pytest.mark.parametrize("region,city", [("", "Austin"), ("TX", ""), ("", ""), ("  ", "Austin")])
def test_finder_requires_state_and_city(
    controller: AppController, backend: MagicMock, region: str, city: str
) -> None:
    controller.update_criteria(state=region, city=city)
    assert controller.finder_search() is False
    backend.search_donors.assert_not_called()
    assert controller.state.finder.phase == IDLE
    assert controller.state.notification.message == MSG_MISSING_LOCATION


def test_finder_search_lands_in_results(controller: AppController, backend: MagicMock) -> None:
    controller.update_criteria(state="TX", city="Austin")
    assert controller.finder_search()
    backend.search_donors.assert_called_once_with("TX", "Austin")
    finder = controller.state.finder
    assert finder.phase == RESULTS
    assert [d.id for d in finder.results] == [1, 3, 4]


def test_finder_failure_clears_results(controller: AppController, backend: MagicMock) -> None:
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    backend.search_donors.side_effect = BackendUnavailableError("down")
    controller.finder_search()
    finder = controller.state.finder
    assert finder.phase == RESULTS
    assert finder.results == []
    assert controller.state.notification.message == MSG_SEARCH_FAILED
    assert not controller.can_generate_outreach()


def test_finder_success_clears_fault(controller: AppController) -> None:
    controller.state.connectivity_fault = "down"
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    assert controller.state.connectivity_fault is None


def test_outreach_requires_results(controller: AppController, generator: MagicMock, backend: MagicMock) -> None:
    assert controller.generate_outreach_message() is None
    backend.search_donors.return_value = []
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    assert controller.generate_outreach_message() is None
    generator.generate.assert_not_called()


def test_outreach_uses_distinct_blood_types_and_overwrites(
    controller: AppController, generator: MagicMock
) -> None:
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    controller.generate_outreach_message()
    prompt = generator.generate.call_args.args[0]
    assert "Austin, TX" in prompt
    assert "O-, B+" in prompt
    assert controller.state.finder.generated_message == "Please come donate!"

    generator.generate.return_value = GenerationResult("Second draft")
    controller.generate_outreach_message()
    assert controller.state.finder.generated_message == "Second draft"
    assert controller.state.finder.is_generating is False


def test_outreach_failure_is_distinguishable(controller: AppController, generator: MagicMock) -> None:
    generator.generate.return_value = GenerationResult(FALLBACK_TEXT, error="timeout")
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    controller.generate_outreach_message()
    assert controller.state.finder.generated_message == FALLBACK_TEXT
    assert controller.state.finder.generation_error == "timeout"


def test_new_search_clears_generated_message(controller: AppController) -> None:
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    controller.generate_outreach_message()
    controller.finder_search()
    assert controller.state.finder.generated_message == ""


def test_outreach_generation_posts_no_notification(controller: AppController) -> None:
    """Copying happens in the browser; generating a message never raises a toast."""
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    controller.generate_outreach_message()
    assert controller.state.finder.generated_message == "Please come donate!"
    assert controller.state.notification is None


def test_reset_finder(controller: AppController) -> None:
    controller.update_criteria(state="TX", city="Austin")
    controller.finder_search()
    controller.reset_finder()
    assert controller.state.finder.phase == IDLE
    assert controller.state.finder.results == []
    assert controller.state.finder.criteria.city == "Austin"


# --- Campaign ideas ---

def test_campaign_ideas_target_low_stock(controller: AppController, generator: MagicMock) -> None:
    controller.initialize()
    result = controller.generate_campaign_ideas()
    assert result.ok
    prompt = generator.generate.call_args.args[0]
    assert "blood types: O-." in prompt
    assert controller.state.campaign_ideas == "Please come donate!"
    assert controller.state.is_generating_campaign is False


def test_campaign_ideas_all_types_when_nothing_low(controller: AppController, generator: MagicMock) -> None:
    controller.generate_campaign_ideas()
    assert "all types" in generator.generate.call_args.args[0]
