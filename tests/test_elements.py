"""Tests for orbital-element extraction."""

import math

import pytest

from orbit_engine.elements import extract_orbital_elements, parse_number
from orbit_engine.models import OrbitalElements
from orbit_engine.orbit_classifier import classify


class TestParseNumber:
    """Provider values coerced to finite floats."""

    @pytest.mark.parametrize("value, expected", [
        ("1.25", 1.25),
        (" 0.5 ", 0.5),
        (3, 3.0),
        ("0", 0.0),
    ])
    def test_valid_values(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "nan", "inf", float("nan"), True, [], {}])
    def test_invalid_values_are_absent(self, value):
        assert parse_number(value) is None


class TestNeoWsExtraction:
    """NeoWs orbital_data records."""

    def test_all_fields_present(self, neows_record):
        elements = extract_orbital_elements(neows_record)
        assert elements.semi_major_axis == pytest.approx(1.4702)
        assert elements.eccentricity == pytest.approx(0.56)
        assert elements.inclination == pytest.approx(6.35)
        assert elements.perihelion_distance == pytest.approx(0.6469)
        assert elements.aphelion_distance == pytest.approx(2.2935)
        assert elements.argument_of_perihelion == pytest.approx(286.0)
        assert elements.longitude_of_ascending_node == pytest.approx(35.5)
        assert elements.mean_anomaly == pytest.approx(180.1)

    def test_orbital_period_days_converted_to_years(self, neows_record):
        elements = extract_orbital_elements(neows_record)
        assert elements.orbital_period == pytest.approx(650.2 / 365.25)

    def test_malformed_fields_are_absent(self):
        elements = extract_orbital_elements({
            "orbital_data": {"semi_major_axis": "n/a", "eccentricity": "0.1", "inclination": None},
        })
        assert elements.semi_major_axis is None
        assert elements.eccentricity == pytest.approx(0.1)
        assert elements.inclination is None

    def test_zero_eccentricity_is_kept(self):
        elements = extract_orbital_elements({
            "orbital_data": {"semi_major_axis": "2.5", "eccentricity": "0", "inclination": "0"},
        })
        assert elements.eccentricity == 0.0
        assert elements.inclination == 0.0
        assert elements.has_shape

    def test_bare_orbital_data_mapping(self):
        elements = extract_orbital_elements({"semi_major_axis": "2.7", "eccentricity": "0.1", "inclination": "5"})
        assert elements.semi_major_axis == pytest.approx(2.7)

    def test_negative_eccentricity_dropped(self):
        elements = extract_orbital_elements({"orbital_data": {"eccentricity": "-0.2"}})
        assert elements.eccentricity is None

    def test_inconsistent_perihelion_dropped(self):
        elements = extract_orbital_elements({
            "orbital_data": {"semi_major_axis": "1.0", "eccentricity": "0.1", "inclination": "3",
                             "perihelion_distance": "1.5", "aphelion_distance": "0.5"},
        })
        assert elements.perihelion_distance is None
        assert elements.aphelion_distance is None
        assert elements.perihelion == pytest.approx(0.9)
        assert elements.aphelion == pytest.approx(1.1)

    @pytest.mark.parametrize("record", [None, "string", 42, [], {"orbital_data": None}, {}])
    def test_absent_or_unusable_record(self, record):
        assert extract_orbital_elements(record) == OrbitalElements()

    def test_no_nan_anywhere(self):
        elements = extract_orbital_elements({"orbital_data": {k: "NaN" for k in (
            "semi_major_axis", "eccentricity", "inclination", "mean_anomaly")}})
        for value in elements.model_dump().values():
            assert value is None or math.isfinite(value)


class TestSbdbExtraction:
    """SBDB orbit.elements records."""

    def test_element_list(self):
        record = {"orbit": {"elements": [
            {"name": "a", "value": "2.766"},
            {"name": "e", "value": ".0785"},
            {"name": "i", "value": "10.59"},
            {"name": "q", "value": "2.549"},
            {"name": "ad", "value": "2.983"},
            {"name": "per", "value": "1680.0"},
            {"name": "w", "value": "73.4"},
            {"name": "om", "value": "80.3"},
            {"name": "ma", "value": "291.4"},
        ]}}
        elements = extract_orbital_elements(record)
        assert elements.semi_major_axis == pytest.approx(2.766)
        assert elements.eccentricity == pytest.approx(0.0785)
        assert elements.aphelion_distance == pytest.approx(2.983)
        assert elements.orbital_period == pytest.approx(1680.0 / 365.25)
        assert elements.argument_of_perihelion == pytest.approx(73.4)

    def test_garbage_entries_ignored(self):
        record = {"orbit": {"elements": ["junk", {"value": "1"}, {"name": "a", "value": "x"}]}}
        assert extract_orbital_elements(record) == OrbitalElements()


class TestDerivedDistances:
    """Perihelion and aphelion derived from a and e."""

    def test_derived_from_a_and_e(self):
        elements = OrbitalElements(semi_major_axis=2.0, eccentricity=0.25, inclination=1.0)
        assert elements.perihelion == pytest.approx(1.5)
        assert elements.aphelion == pytest.approx(2.5)

    def test_missing_shape_has_no_derived_distance(self):
        elements = OrbitalElements(semi_major_axis=2.0)
        assert elements.perihelion is None
        assert elements.aphelion is None


class TestRoundTrip:
    """Extraction followed by classification."""

    def test_extract_and_classify_is_repeatable(self, neows_record):
        first = extract_orbital_elements(neows_record)
        second = extract_orbital_elements(neows_record)
        assert first == second
        assert classify(first, True) == classify(second, True)
        assert classify(first, True).orbit_class == "Apollo"
