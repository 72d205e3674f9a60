"""Deterministic risk heuristics and report templates.

These always run: they are the primary path when no generative service is
configured and the fallback when it fails. Given the same records and the
same timestamp they produce identical text.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from orbit_engine.models import ApproachRecord, RiskLevel
from orbit_engine.orbit_classes import get_orbit_class_info

AU_IN_MILLION_KM = 149.6

# Batch thresholds
CRITICAL_HAZARDOUS_COUNT = 5
HIGH_HAZARDOUS_COUNT = 2
VERY_CLOSE_AU = 0.01
CLOSE_AU = 0.05

# Single-object thresholds
LARGE_DIAMETER_M = 1000.0
MEDIUM_DIAMETER_M = 100.0

LIST_MARKERS = ("-", "*", "•")


def dedupe(items: Iterable[str]) -> list[str]:
    """Drop repeats, keeping first occurrence order."""
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def closest_approach(records: Sequence[ApproachRecord]) -> ApproachRecord | None:
    if not records:
        return None
    return min(records, key=lambda r: r.miss_distance)


def size_category(diameter_m: float) -> str:
    if diameter_m < MEDIUM_DIAMETER_M:
        return "small"
    if diameter_m < LARGE_DIAMETER_M:
        return "medium"
    return "large"


def distance_category(miss_distance_au: float) -> str:
    if miss_distance_au < VERY_CLOSE_AU:
        return "very close"
    if miss_distance_au < CLOSE_AU:
        return "close"
    return "distant"


# --- Risk levels ---

def batch_risk_level(records: Sequence[ApproachRecord]) -> RiskLevel:
    """Aggregate risk over a set of close approaches."""
    hazardous_count = sum(1 for r in records if r.is_hazardous)
    closest = closest_approach(records)
    closest_au = closest.miss_distance if closest else None

    if hazardous_count > CRITICAL_HAZARDOUS_COUNT or (closest_au is not None and closest_au < VERY_CLOSE_AU):
        return RiskLevel.CRITICAL
    if hazardous_count > HIGH_HAZARDOUS_COUNT or (closest_au is not None and closest_au < CLOSE_AU):
        return RiskLevel.HIGH
    if hazardous_count > 0:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def single_object_risk_level(record: ApproachRecord) -> RiskLevel:
    """Risk for one object from hazard flag, size and proximity."""
    is_large = record.diameter.mean > LARGE_DIAMETER_M
    is_very_close = record.miss_distance < CLOSE_AU

    if record.is_hazardous and is_very_close and is_large:
        return RiskLevel.CRITICAL
    if record.is_hazardous and (is_very_close or is_large):
        return RiskLevel.HIGH
    if record.is_hazardous or is_very_close:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def summary_risk_level(record: ApproachRecord) -> RiskLevel:
    """Per-object label used in the batch prompt summary lines."""
    if record.is_hazardous and record.miss_distance < VERY_CLOSE_AU:
        return RiskLevel.CRITICAL
    if record.is_hazardous and record.miss_distance < CLOSE_AU:
        return RiskLevel.HIGH
    if record.is_hazardous:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


# --- Recommendations ---

def batch_recommendations(records: Sequence[ApproachRecord]) -> list[str]:
    recommendations = [
        "Enhanced tracking for hazardous objects",
        "Regular orbital updates",
        "International coordination",
        "Continuous monitoring of high-risk objects",
    ]
    closest = closest_approach(records)
    if closest is not None and closest.miss_distance < VERY_CLOSE_AU:
        recommendations.append("Immediate attention required for very close approaches")
    return dedupe(recommendations)


def single_recommendations(record: ApproachRecord) -> list[str]:
    is_large = record.diameter.mean > LARGE_DIAMETER_M
    is_very_close = record.miss_distance < CLOSE_AU
    return dedupe([
        "Enhanced tracking required" if is_very_close else "Routine monitoring",
        "Radar observations recommended" if is_large else "Optical observations adequate",
        "Priority monitoring" if record.is_hazardous else "Standard monitoring",
        "Coordinate with international networks",
        "Update orbital elements post-encounter",
    ])


def extract_recommendations(text: str) -> list[str]:
    """Pull list-marker lines out of free text; no such lines gives an empty list."""
    found = []
    for line in (text or "").splitlines():
        stripped = line.strip()
        for marker in LIST_MARKERS:
            if stripped.startswith(marker):
                item = stripped[len(marker):].strip()
                if item:
                    found.append(item)
                break
    return dedupe(found)


# --- Report templates ---

def build_batch_report(records: Sequence[ApproachRecord], generated_at: datetime) -> str:
    risk = batch_risk_level(records)
    hazardous_count = sum(1 for r in records if r.is_hazardous)
    closest = closest_approach(records)

    lines = [
        "AI IMPACT ANALYSIS REPORT",
        f"Generated: {generated_at.isoformat()}",
        "",
        "EXECUTIVE SUMMARY:",
        f"Total objects analyzed: {len(records)}",
        f"Hazardous objects identified: {hazardous_count}",
        f"Risk level: {risk.value.upper()}",
    ]
    if closest is None:
        lines += ["Closest approach: N/A", "", "No objects were analyzed."]
        return "\n".join(lines)

    avg_velocity = sum(r.velocity for r in records) / len(records)
    smallest = min(r.diameter.min for r in records)
    largest = max(r.diameter.max for r in records)
    lines += [
        f"Closest approach: {closest.miss_distance:.4f} AU",
        "",
        "DETAILED ANALYSIS:",
        f"CLOSEST APPROACH: {closest.name} will approach within {closest.miss_distance:.4f} AU",
        f"VELOCITY ANALYSIS: Average approach velocity is {avg_velocity:.1f} km/s",
        f"SIZE DISTRIBUTION: Objects range from {smallest:.0f}m to {largest:.0f}m in diameter",
        f"HAZARD ASSESSMENT: {hazardous_count} objects pose potential risk to Earth",
        "",
        "RECOMMENDATIONS:",
        "Enhanced tracking required for hazardous objects" if hazardous_count else "Continue routine monitoring",
    ]
    if closest.miss_distance < VERY_CLOSE_AU:
        lines.append("Immediate attention required for very close approaches")
    lines += [
        "Regular orbital updates recommended",
        "Coordinate with international space agencies",
        "Maintain continuous monitoring of high-risk objects",
        "",
        "RISK MITIGATION:",
        "Deploy additional tracking resources",
        "Calculate precise orbital trajectories",
        "Develop contingency plans for high-risk scenarios",
        "Share data with global monitoring networks",
    ]
    return "\n".join(lines)


def build_single_report(record: ApproachRecord, generated_at: datetime) -> str:
    risk = single_object_risk_level(record)
    avg_diameter = record.diameter.mean
    is_large = avg_diameter > LARGE_DIAMETER_M
    is_very_close = record.miss_distance < CLOSE_AU
    kind = record.object_type.value
    hazard_label = "Potentially Hazardous" if record.is_hazardous else "Non-Hazardous"
    magnitude = record.magnitude if record.magnitude is not None else "N/A"

    orbital = [
        f"Miss Distance: {record.miss_distance:.6f} AU ({record.miss_distance * AU_IN_MILLION_KM:.2f} million km)",
        f"Approach Velocity: {record.velocity:.2f} km/s",
        f"Approach Date: {record.approach_date}",
    ]
    if record.orbit_class:
        info = get_orbit_class_info(record.orbit_class)
        orbital.append(f"Orbit Class: {record.orbit_class} ({info.description})")
    if record.orbital_period:
        orbital.append(f"Orbital Period: {record.orbital_period} years")
    if record.inclination:
        orbital.append(f"Inclination: {record.inclination}°")
    if record.eccentricity:
        orbital.append(f"Eccentricity: {record.eccentricity}")

    lines = [
        f"DETAILED {kind.upper()} ANALYSIS REPORT",
        f"Generated: {generated_at.isoformat()}",
        "",
        "EXECUTIVE SUMMARY:",
        f"Object: {record.name}",
        f"Type: {kind.upper()}",
        f"Risk Level: {risk.value.upper()}",
        f"Average Diameter: {avg_diameter:.0f} meters",
        f"Approach Distance: {record.miss_distance:.6f} AU",
        f"Approach Velocity: {record.velocity:.2f} km/s",
        "",
        "DETAILED ANALYSIS:",
        "",
        "PHYSICAL CHARACTERISTICS:",
        f"Size Range: {record.diameter.min:g}-{record.diameter.max:g} meters",
        f"Average Size: {avg_diameter:.0f} meters",
        f"Magnitude: {magnitude}",
        f"Classification: {hazard_label}",
        "",
        "ORBITAL PARAMETERS:",
        *orbital,
        "",
        "RISK ASSESSMENT:",
        f"Threat Level: {risk.value.upper()}",
        f"Hazard Classification: {hazard_label}",
        f"Size Impact: {'Large object - significant impact potential' if is_large else 'Small to medium object'}",
        f"Approach Proximity: {'Very close approach - requires monitoring' if is_very_close else 'Distant approach'}",
        "",
        "SCIENTIFIC SIGNIFICANCE:",
        f"This {kind} provides valuable data for understanding solar system dynamics",
        "Orbital parameters contribute to asteroid/comet population studies",
        "Close approach offers opportunity for radar observations",
        "Physical characteristics help refine size distribution models",
        "",
        "MONITORING RECOMMENDATIONS:",
        "Enhanced tracking required due to close approach" if is_very_close else "Routine monitoring sufficient",
        "Radar observations recommended for size verification" if is_large else "Optical observations adequate",
        "Priority monitoring due to hazardous classification" if record.is_hazardous else "Standard monitoring protocol",
        "Coordinate with international observation networks",
        "",
        "FUTURE PREDICTIONS:",
        "Monitor for potential orbital perturbations",
        "Track for future close approaches",
        "Update orbital elements post-encounter",
        "Assess long-term trajectory stability",
    ]
    return "\n".join(lines)
