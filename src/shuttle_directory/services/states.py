"""US state lookup and normalization."""

from __future__ import annotations

from typing import Optional

US_STATES: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

_NAME_TO_CODE = {name.lower(): code for code, name in US_STATES.items()}


def normalize_state(value: str) -> Optional[str]:
    """Return the two-letter code for ``"VA"``, ``"va"`` or ``"Virginia"``; ``None`` if unknown."""

    trimmed = value.strip()
    upper = trimmed.upper()
    if upper in US_STATES:
        return upper
    return _NAME_TO_CODE.get(trimmed.lower())


def get_state_name(value: str) -> Optional[str]:
    code = normalize_state(value)
    return US_STATES[code] if code else None


def all_states() -> list[dict[str, str]]:
    return [{"code": code, "name": name} for code, name in US_STATES.items()]
