"""Geometric orbit classification from heliocentric orbital elements.

Rules are evaluated in Earth-proximity order, first match wins: a body that
falls in several bands is always labelled by the band nearest Earth.
"""

from __future__ import annotations

from typing import Any

from orbit_engine.models import (
    ClassificationMethod,
    OrbitalElements,
    OrbitClassification,
    OrbitRiskLevel,
)

# Earth's perihelion / aphelion (AU)
EARTH_PERIHELION = 0.983
EARTH_APHELION = 1.017

AMOR_PERIHELION_MAX = 1.3
MAIN_BELT_A = (2.1, 3.3)
TROJAN_A = (5.1, 5.4)
CENTAUR_A = (5.4, 30.1)
JUPITER_A = 5.2
NEPTUNE_A = 30.1
COMETARY_ECCENTRICITY = 0.7
LONG_PERIOD_A = 20.0
HIGH_INCLINATION_DEG = 60.0

HIGH_RISK_KEYWORDS = ("APOLLO", "ATEN", "APO", "ATE")
MEDIUM_RISK_KEYWORDS = ("AMOR", "ATIRA", "AMO", "ATI", "POTENTIALLY HAZARDOUS")


def _computed(orbit_class: str, description: str, confidence: int, risk: OrbitRiskLevel) -> OrbitClassification:
    return OrbitClassification(
        orbit_class=orbit_class,
        description=description,
        confidence=confidence,
        method=ClassificationMethod.COMPUTED,
        risk_level=risk,
    )


def fallback_classification(hazardous: bool | None = None) -> OrbitClassification:
    """Terminal classification used when nothing better is known."""
    if hazardous:
        return OrbitClassification(
            orbit_class="Potentially Hazardous",
            description="Potentially hazardous asteroid with insufficient orbital data for precise classification.",
            confidence=50,
            method=ClassificationMethod.FALLBACK,
            risk_level=OrbitRiskLevel.HIGH,
        )
    return OrbitClassification(
        orbit_class="Unknown",
        description="Orbit class could not be determined due to insufficient orbital data.",
        confidence=0,
        method=ClassificationMethod.FALLBACK,
        risk_level=OrbitRiskLevel.LOW,
    )


def risk_level_from_class(orbit_class: Any) -> OrbitRiskLevel:
    """Keyword heuristic over a free-text class label (case-insensitive substring match)."""
    if not isinstance(orbit_class, str) or not orbit_class:
        return OrbitRiskLevel.LOW

    normalized = orbit_class.upper()
    if any(keyword in normalized for keyword in HIGH_RISK_KEYWORDS):
        return OrbitRiskLevel.HIGH
    if any(keyword in normalized for keyword in MEDIUM_RISK_KEYWORDS):
        return OrbitRiskLevel.MEDIUM
    return OrbitRiskLevel.LOW


def classify(elements: OrbitalElements, hazardous: bool | None = None) -> OrbitClassification:
    """Classify an orbit from its elements. Total, pure and deterministic.

    Without a, e and i the fallback classification is returned; q and Q are
    derived from a and e when the provider did not supply them.
    """
    if not elements.has_shape:
        return fallback_classification(hazardous)

    a = elements.semi_major_axis
    e = elements.eccentricity
    i = elements.inclination
    q = elements.perihelion
    big_q = elements.aphelion

    # Earth-crossing
    if big_q >= EARTH_PERIHELION and q <= EARTH_APHELION:
        if a > 1.0:
            return _computed(
                "Apollo",
                "Earth-crossing asteroid with semi-major axis > 1 AU. Most dangerous type.",
                85,
                OrbitRiskLevel.HIGH,
            )
        return _computed(
            "Aten",
            "Earth-crossing asteroid with semi-major axis < 1 AU. Crosses Earth's orbit.",
            85,
            OrbitRiskLevel.HIGH,
        )

    if EARTH_APHELION < q <= AMOR_PERIHELION_MAX:
        return _computed(
            "Amor",
            "Near-Earth asteroid that approaches Earth's orbit but does not cross it.",
            80,
            OrbitRiskLevel.MEDIUM,
        )

    if big_q < EARTH_PERIHELION:
        return _computed(
            "Atira",
            "Asteroid with orbit entirely within Earth's orbit. Also called Interior Earth Objects.",
            85,
            OrbitRiskLevel.MEDIUM,
        )

    if MAIN_BELT_A[0] <= a <= MAIN_BELT_A[1] and e < 0.3 and i < 30:
        return _computed(
            "Main Belt",
            "Asteroid located in the main asteroid belt between Mars and Jupiter.",
            90,
            OrbitRiskLevel.LOW,
        )

    if TROJAN_A[0] <= a <= TROJAN_A[1] and e < 0.1 and i < 30:
        return _computed(
            "Trojan",
            "Asteroid sharing Jupiter's orbit at stable Lagrange points.",
            85,
            OrbitRiskLevel.LOW,
        )

    if CENTAUR_A[0] <= a <= CENTAUR_A[1] and (big_q > JUPITER_A or q < NEPTUNE_A):
        return _computed(
            "Centaur",
            "Small Solar System body with orbit between Jupiter and Neptune.",
            80,
            OrbitRiskLevel.LOW,
        )

    if a > NEPTUNE_A:
        return _computed(
            "Trans-Neptunian",
            "Object with orbit beyond Neptune, including Kuiper Belt objects.",
            85,
            OrbitRiskLevel.LOW,
        )

    if e > COMETARY_ECCENTRICITY:
        if a > LONG_PERIOD_A:
            return _computed(
                "Long Period",
                "Comet with orbital period > 200 years. Originates from the Oort Cloud.",
                75,
                OrbitRiskLevel.LOW,
            )
        return _computed(
            "Short Period",
            "Comet with orbital period < 200 years. Originates from the Kuiper Belt.",
            75,
            OrbitRiskLevel.LOW,
        )

    if i > HIGH_INCLINATION_DEG:
        return _computed(
            "High Inclination",
            "Object with highly inclined orbit, possibly captured or perturbed.",
            70,
            OrbitRiskLevel.MEDIUM,
        )

    # Distance-banded default
    if a < 1.5:
        return _computed(
            "Inner Solar System",
            "Object in the inner solar system with unusual orbital parameters.",
            60,
            OrbitRiskLevel.MEDIUM,
        )
    if a < 5.5:
        return _computed(
            "Outer Asteroid Belt",
            "Asteroid in the outer regions of the asteroid belt.",
            65,
            OrbitRiskLevel.LOW,
        )
    return _computed(
        "Outer Solar System",
        "Object in the outer solar system with unusual orbital parameters.",
        60,
        OrbitRiskLevel.LOW,
    )
