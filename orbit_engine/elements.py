"""Orbital-element extraction from loosely-typed provider records.

Handles NeoWs-style ``orbital_data`` blocks (string-encoded numbers keyed by
name) and SBDB-style ``orbit.elements`` lists (``{"name": "a", "value": "1.4"}``).
Every field comes back as a finite float or ``None``; nothing here raises.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from orbit_engine.models import OrbitalElements

DAYS_PER_YEAR = 365.25

# NeoWs orbital_data keys, first match wins
_NEOWS_KEYS: dict[str, tuple[str, ...]] = {
    "semi_major_axis": ("semi_major_axis",),
    "eccentricity": ("eccentricity",),
    "inclination": ("inclination",),
    "perihelion_distance": ("perihelion_distance",),
    "aphelion_distance": ("aphelion_distance",),
    "argument_of_perihelion": ("argument_of_perihelion", "perihelion_argument"),
    "longitude_of_ascending_node": ("longitude_of_ascending_node", "ascending_node_longitude"),
    "mean_anomaly": ("mean_anomaly",),
}

# SBDB element names
_SBDB_KEYS: dict[str, tuple[str, ...]] = {
    "semi_major_axis": ("a",),
    "eccentricity": ("e",),
    "inclination": ("i",),
    "perihelion_distance": ("q",),
    "aphelion_distance": ("ad", "Q"),
    "orbital_period": ("per",),
    "argument_of_perihelion": ("w",),
    "longitude_of_ascending_node": ("om",),
    "mean_anomaly": ("ma",),
}

_NON_NEGATIVE = {"semi_major_axis", "eccentricity", "perihelion_distance", "aphelion_distance", "orbital_period"}


def parse_number(value: Any) -> float | None:
    """Parse a provider value into a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _first(source: Mapping[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        number = parse_number(source.get(key))
        if number is not None:
            return number
    return None


def _sbdb_elements(record: Mapping[str, Any]) -> dict[str, Any] | None:
    orbit = record.get("orbit")
    if not isinstance(orbit, Mapping):
        return None
    elements = orbit.get("elements")
    if not isinstance(elements, list):
        return None
    flat: dict[str, Any] = {}
    for item in elements:
        if isinstance(item, Mapping) and isinstance(item.get("name"), str):
            flat[item["name"]] = item.get("value")
    return flat


def _drop_inconsistent(fields: dict[str, float | None]) -> dict[str, float | None]:
    """Enforce 0 <= e and q <= a <= Q; out-of-range values become absent."""
    for name in _NON_NEGATIVE:
        value = fields.get(name)
        if value is not None and value < 0:
            fields[name] = None

    a = fields.get("semi_major_axis")
    if a is not None:
        q = fields.get("perihelion_distance")
        if q is not None and q > a:
            fields["perihelion_distance"] = None
        aphelion = fields.get("aphelion_distance")
        if aphelion is not None and aphelion < a:
            fields["aphelion_distance"] = None
    return fields


def extract_orbital_elements(record: Any) -> OrbitalElements:
    """Normalize a raw provider record into ``OrbitalElements``.

    Accepts a full object record (``{"orbital_data": {...}}`` or
    ``{"orbit": {"elements": [...]}}``) or a bare ``orbital_data`` mapping.
    Missing or malformed fields are absent, never an error.
    """
    if not isinstance(record, Mapping):
        return OrbitalElements()

    sbdb = _sbdb_elements(record)
    if sbdb is not None:
        fields = {name: _first(sbdb, keys) for name, keys in _SBDB_KEYS.items()}
        if fields["orbital_period"] is not None:
            fields["orbital_period"] = fields["orbital_period"] / DAYS_PER_YEAR
    else:
        orbital_data = record.get("orbital_data", record)
        if not isinstance(orbital_data, Mapping):
            return OrbitalElements()
        fields = {name: _first(orbital_data, keys) for name, keys in _NEOWS_KEYS.items()}
        period_days = parse_number(orbital_data.get("orbital_period"))
        fields["orbital_period"] = (
            period_days / DAYS_PER_YEAR if period_days is not None else parse_number(orbital_data.get("period_yr"))
        )

    return OrbitalElements(**_drop_inconsistent(fields))
