from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date
from typing import Any, List

_INT_FIELDS = ("id", "number_of_days")


@dataclass(frozen=True)
class Conference:
    id: int
    name: str
    cfp_deadline: str  # date string, e.g. 2024-03-01
    conf_start_date: str  # date string
    city: str
    province: str
    country: str
    twitter: str
    website: str
    cfp_details: str
    speaker_benefits: str
    code_of_conduct: str
    created_at: str  # timestamp string
    number_of_days: int

    @classmethod
    def from_dict(cls, row: Any) -> "Conference":
        """Build a record from one decoded JSON object.

        Every field is required and must have its JSON type; a null is
        rejected like a missing key. Keys the record does not know about are
        dropped so that new server-side fields do not break older clients.
        """
        if not isinstance(row, dict):
            raise ValueError(f"expected a JSON object, got {type(row).__name__}")
        values = {}
        for f in fields(cls):
            if f.name not in row:
                raise ValueError(f"missing field {f.name!r}")
            value = row[f.name]
            if f.name in _INT_FIELDS:
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ValueError(f"field {f.name!r} must be an integer, got {value!r}")
            elif not isinstance(value, str):
                raise ValueError(f"field {f.name!r} must be a string, got {value!r}")
            values[f.name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

    def deadline_date(self) -> date:
        return date.fromisoformat(self.cfp_deadline[:10])

    def start_date(self) -> date:
        return date.fromisoformat(self.conf_start_date[:10])


def conferences_from_json(payload: Any) -> List[Conference]:
    """Decode a JSON array of conference objects, keeping server order."""
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    return [Conference.from_dict(row) for row in payload]
