import pytest

from src.payroll_engine.payroll_engine.core.exceptions import EntityNotFoundError, ValidationError
from src.payroll_engine.payroll_engine.geo.model import Coordinate, StoreLocation
from src.payroll_engine.payroll_engine.geo.verifier import (
    LocationVerificationService,
    distance_meters,
    is_within_radius,
)

CENTER = Coordinate(37.5665, 126.9780)


def test_distance_is_symmetric_and_zero_for_same_point():
    other = Coordinate(37.5000, 126.9000)
    assert distance_meters(CENTER, CENTER) == 0.0
    assert distance_meters(CENTER, other) == pytest.approx(distance_meters(other, CENTER))


def test_one_degree_of_latitude_is_about_111_km():
    assert distance_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0)) == pytest.approx(111_195, rel=1e-3)


def test_nearby_point_is_inside_radius():
    assert is_within_radius(CENTER, Coordinate(37.5660, 126.9785), 100)


def test_far_point_is_outside_radius():
    assert not is_within_radius(CENTER, Coordinate(37.5000, 126.9000), 100)


def test_missing_point_is_never_inside():
    assert not is_within_radius(CENTER, None, 100)
    assert not is_within_radius(None, CENTER, 100)


def test_coordinate_rejects_out_of_range_values():
    with pytest.raises(ValidationError):
        Coordinate(91.0, 0.0)
    with pytest.raises(ValidationError):
        Coordinate(0.0, -180.5)


def test_store_location_requires_positive_radius():
    with pytest.raises(ValidationError):
        StoreLocation(1, CENTER, 0)


def test_verify_user_in_store(stores):
    service = LocationVerificationService(stores)

    assert service.verify_user_in_store(1, 37.5660, 126.9785) is True
    assert service.verify_user_in_store(1, 37.5000, 126.9000) is False


def test_verify_user_fails_closed_on_missing_or_invalid_input(stores):
    service = LocationVerificationService(stores)

    assert service.verify_user_in_store(1, None, 126.9780) is False
    assert service.verify_user_in_store(1, 137.0, 126.9780) is False
    # Store without coordinates cannot prove presence.
    assert service.verify_user_in_store(2, 37.5665, 126.9780) is False


def test_verify_user_unknown_store(stores):
    service = LocationVerificationService(stores)

    with pytest.raises(EntityNotFoundError):
        service.verify_user_in_store(99, 37.5665, 126.9780)
