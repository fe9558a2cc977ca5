"""Tests for argument range checks."""

import pytest

from postcodes_io import validation
from postcodes_io.exceptions import InvalidArgument, MissingRequired, OutOfRange
from postcodes_io.models import Geolocation


class TestCheckRange:
    def test_boundaries_accepted(self):
        validation.check_range("limit", 1, validation.LIMIT)
        validation.check_range("limit", 100, validation.LIMIT)

    def test_below_minimum(self):
        with pytest.raises(OutOfRange) as exc:
            validation.check_range("limit", 0, validation.LIMIT)
        assert exc.value.param == "limit"
        assert exc.value.minimum == 1
        assert exc.value.maximum == 100
        assert exc.value.value == 0

    def test_above_maximum(self):
        with pytest.raises(OutOfRange):
            validation.check_range("radius", 2001, validation.POSTCODE_RADIUS)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validation.check_range("latitude", 10.0, validation.LATITUDE)

    def test_message_names_param(self):
        with pytest.raises(InvalidArgument, match="`longitude` must be between"):
            validation.check_range("longitude", 60.0, validation.LONGITUDE)


class TestCheckRanges:
    def test_first_violation_reported(self):
        with pytest.raises(OutOfRange) as exc:
            validation.check_ranges([
                ("limit", 0, validation.LIMIT),
                ("radius", 0, validation.OUTCODE_RADIUS),
            ])
        assert exc.value.param == "limit"

    def test_all_valid(self):
        validation.check_ranges([
            ("latitude", 49.85, validation.LATITUDE),
            ("longitude", 52.483333, validation.LONGITUDE),
            ("radius", 25000, validation.OUTCODE_RADIUS),
        ])


class TestCheckGeolocation:
    def test_valid_item(self):
        validation.check_geolocation(Geolocation(51.5, -0.13, limit=100, radius=2000).to_dict(), 0)

    def test_missing_longitude(self):
        with pytest.raises(MissingRequired) as exc:
            validation.check_geolocation({"latitude": 51.5}, 3)
        assert exc.value.param == "longitude"
        assert exc.value.index == 3

    def test_latitude_out_of_range(self):
        with pytest.raises(OutOfRange, match="geolocation 2"):
            validation.check_geolocation({"latitude": 61.0, "longitude": -0.13}, 2)

    def test_limit_override_out_of_range(self):
        with pytest.raises(OutOfRange) as exc:
            validation.check_geolocation({"latitude": 51.5, "longitude": -0.13, "limit": 101}, 0)
        assert exc.value.param == "limit"

    def test_optional_overrides_may_be_absent(self):
        validation.check_geolocation({"latitude": 51.5, "longitude": -0.13}, 0)


class TestGeolocation:
    def test_to_dict_omits_unset_overrides(self):
        assert Geolocation(51.5, -0.13).to_dict() == {"latitude": 51.5, "longitude": -0.13}

    def test_to_dict_includes_overrides(self):
        data = Geolocation(51.5, -0.13, limit=5, radius=250).to_dict()
        assert data == {"latitude": 51.5, "longitude": -0.13, "limit": 5, "radius": 250}
