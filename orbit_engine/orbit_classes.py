"""Reference catalogue of named orbit classes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from orbit_engine.models import OrbitRiskLevel


@dataclass(frozen=True)
class OrbitClassInfo:
    name: str
    description: str
    risk_level: OrbitRiskLevel


ORBIT_CLASSES: dict[str, OrbitClassInfo] = {
    info.name: info
    for info in (
        OrbitClassInfo("Apollo", "Earth-crossing asteroids with semi-major axis > 1 AU. Most dangerous type.", OrbitRiskLevel.HIGH),
        OrbitClassInfo("Aten", "Earth-crossing asteroids with semi-major axis < 1 AU. Cross Earth's orbit.", OrbitRiskLevel.HIGH),
        OrbitClassInfo("Amor", "Near-Earth asteroids that approach Earth's orbit but do not cross it.", OrbitRiskLevel.MEDIUM),
        OrbitClassInfo("Atira", "Asteroids with orbits entirely within Earth's orbit. Also called Interior Earth Objects.", OrbitRiskLevel.MEDIUM),
        OrbitClassInfo("Long Period", "Comets with orbital periods > 200 years. Originate from the Oort Cloud.", OrbitRiskLevel.LOW),
        OrbitClassInfo("Short Period", "Comets with orbital periods < 200 years. Originate from the Kuiper Belt.", OrbitRiskLevel.LOW),
        OrbitClassInfo("Halley-type", "Comets with orbital periods 20-200 years. Highly inclined orbits.", OrbitRiskLevel.MEDIUM),
        OrbitClassInfo("Jupiter Family", "Short-period comets with orbital periods < 20 years. Influenced by Jupiter.", OrbitRiskLevel.LOW),
        OrbitClassInfo("Unknown", "Orbit classification not yet determined or insufficient data.", OrbitRiskLevel.LOW),
    )
}

_NON_LETTERS = re.compile(r"[^a-zA-Z\s]")


def _normalize(name: str) -> str:
    cleaned = _NON_LETTERS.sub("", name).strip()
    return " ".join(word.capitalize() for word in cleaned.split())


def get_orbit_class_info(orbit_class: str | None) -> OrbitClassInfo:
    """Look up catalogue info for a class label, tolerating case, punctuation and partial names."""
    if not orbit_class:
        return ORBIT_CLASSES["Unknown"]

    normalized = _normalize(orbit_class)
    if not normalized:
        return ORBIT_CLASSES["Unknown"]
    if normalized in ORBIT_CLASSES:
        return ORBIT_CLASSES[normalized]

    lowered = normalized.lower()
    for key, info in ORBIT_CLASSES.items():
        key_lower = _normalize(key).lower()
        if key_lower in lowered or lowered in key_lower:
            return info
    return ORBIT_CLASSES["Unknown"]
