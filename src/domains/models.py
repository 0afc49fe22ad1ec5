"""
Donor and inventory records as exchanged with the blood-donation backend.

The backend speaks camelCase JSON; these dataclasses use snake_case fields and
convert at the edges (`from_dict` / `to_payload`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any

BLOOD_TYPES: tuple[str, ...] = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
GENDERS: tuple[str, ...] = ("Male", "Female", "Other")

# Draft fields that must be non-empty before a registration is submitted.
REQUIRED_DRAFT_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "city",
    "state",
    "date_of_birth",
)

_WIRE_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "blood_type": "bloodType",
    "date_of_birth": "dateOfBirth",
    "gender": "gender",
    "city": "city",
    "state": "state",
}


def _text(data: dict[str, Any], key: str) -> str:
    val = data.get(key)
    return "" if val is None else str(val)


def parse_blood_type(value: Any) -> str:
    """Return value if it is one of the eight ABO/Rh types, else raise ValueError."""
    bt = "" if value is None else str(value).strip().upper()
    if bt not in BLOOD_TYPES:
        raise ValueError(f"Unknown blood type: {value!r}")
    return bt


@dataclass(frozen=True)
class Donor:
    id: Any
    first_name: str
    last_name: str
    email: str
    phone: str
    blood_type: str
    date_of_birth: str
    gender: str
    city: str
    state: str
    is_eligible: bool
    registration_date: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Donor":
        """Build a Donor from a backend JSON object. Raises ValueError on a bad blood type."""
        if not isinstance(data, dict):
            raise ValueError(f"Donor record must be an object, got {type(data).__name__}")
        # Jackson serialises a boolean `isEligible` field as either name depending on the getter
        eligible = data.get("isEligible", data.get("eligible", False))
        return cls(
            id=data.get("id"),
            first_name=_text(data, "firstName"),
            last_name=_text(data, "lastName"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            blood_type=parse_blood_type(data.get("bloodType")),
            date_of_birth=_text(data, "dateOfBirth"),
            gender=_text(data, "gender"),
            city=_text(data, "city"),
            state=_text(data, "state"),
            is_eligible=bool(eligible),
            registration_date=data.get("registrationDate"),
        )


@dataclass(frozen=True)
class InventoryItem:
    blood_type: str
    units: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InventoryItem":
        """Build an InventoryItem; `units` must be present and a whole, non-negative number."""
        if not isinstance(data, dict):
            raise ValueError(f"Inventory record must be an object, got {type(data).__name__}")
        units = _whole_units(data.get("units"))
        if units < 0:
            raise ValueError(f"Negative unit count: {units}")
        return cls(blood_type=parse_blood_type(data.get("bloodType")), units=units)


def _whole_units(raw: Any) -> int:
    # bool is an int subclass; 9.7 or "9.7" must not be truncated to 9
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw)
    raise ValueError(f"Invalid unit count: {raw!r}")


@dataclass
class DonorDraft:
    """In-progress registration form. Mutable; reset to defaults after a successful submit."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    blood_type: str = BLOOD_TYPES[0]
    date_of_birth: str = ""
    gender: str = GENDERS[0]
    city: str = ""
    state: str = ""

    def missing_fields(self) -> list[str]:
        """Names of required fields that are still empty."""
        return [name for name in REQUIRED_DRAFT_FIELDS if not getattr(self, name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_payload(self) -> dict[str, str]:
        """camelCase JSON body for POST /donors."""
        return {_WIRE_NAMES[k]: v for k, v in asdict(self).items()}

    def updated(self, **changes: str) -> "DonorDraft":
        unknown = set(changes) - set(_WIRE_NAMES)
        if unknown:
            raise ValueError(f"Unknown draft fields: {sorted(unknown)}")
        return replace(self, **changes)


@dataclass
class SearchCriteria:
    state: str = ""
    city: str = ""

    def is_complete(self) -> bool:
        return bool(self.state.strip()) and bool(self.city.strip())


@dataclass
class Notification:
    message: str
    kind: str = "success"
    shown_at: float = field(default=0.0)
