"""
HTTP client for the blood-donation backend (donors and inventory).

Every call either returns parsed records or raises BackendUnavailableError;
how a failure is surfaced to the user is decided by the controller.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests

from src.domains.models import Donor, DonorDraft, InventoryItem
from src.utils.config import backend_base_url, backend_timeout
from src.utils.logger import get_logger

logger = get_logger()


class BackendUnavailableError(RuntimeError):
    """Raised when the backend cannot be reached or answers with an error/unparseable body."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def _parse_list(data: Any, parse, what: str) -> list:
    """Parse each record on its own; records that fail validation are logged and skipped."""
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    out = []
    for i, item in enumerate(data):
        try:
            out.append(parse(item))
        except ValueError as e:
            logger.warning("Skipping %s record %d: %s", what, i, e)
    return out


class BackendClient:
    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or backend_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else backend_timeout()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(self, path: str) -> Any:
        url = self._url(path)
        logger.debug("GET %s", url)
        try:
            r = requests.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise BackendUnavailableError(f"GET {path} failed: {e}", e) from e
        except ValueError as e:
            raise BackendUnavailableError(f"GET {path} returned invalid JSON: {e}", e) from e

    def list_donors(self) -> list[Donor]:
        """GET /donors. Raises BackendUnavailableError."""
        data = self._get_json("/donors")
        try:
            donors = _parse_list(data, Donor.from_dict, "donor")
        except ValueError as e:
            raise BackendUnavailableError(f"Unexpected donor payload: {e}", e) from e
        logger.info("Fetched %d donors", len(donors))
        return donors

    def list_inventory(self) -> list[InventoryItem]:
        """GET /inventory. Raises BackendUnavailableError."""
        data = self._get_json("/inventory")
        try:
            items = _parse_list(data, InventoryItem.from_dict, "inventory")
        except ValueError as e:
            raise BackendUnavailableError(f"Unexpected inventory payload: {e}", e) from e
        logger.info("Fetched %d inventory items", len(items))
        return items

    def create_donor(self, draft: DonorDraft) -> None:
        """POST /donors with the draft. The response body is not used."""
        url = self._url("/donors")
        logger.info("Registering donor %s %s", draft.first_name, draft.last_name)
        try:
            r = requests.post(
                url,
                json=draft.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise BackendUnavailableError(f"POST /donors failed: {e}", e) from e

    def search_donors(self, state: str, city: str) -> list[Donor]:
        """GET /donors/search for a location. Matching rules belong to the backend."""
        path = f"/donors/search?state={quote(state, safe='')}&city={quote(city, safe='')}"
        data = self._get_json(path)
        try:
            donors = _parse_list(data, Donor.from_dict, "donor")
        except ValueError as e:
            raise BackendUnavailableError(f"Unexpected search payload: {e}", e) from e
        logger.info("Search %s/%s returned %d donors", state, city, len(donors))
        return donors
