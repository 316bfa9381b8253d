import pytest
import math
from travelord.geometry import Position, calculate_bbox
from travelord.geometry_utils import (
    deg2rad,
    rad2deg,
    haversine_distance,
    calculate_bearing,
    calculate_bearing_diff,
    bearings_aligned,
)

BERLIN = Position(latitude=52.520008, longitude=13.404954)
OTTAWA = Position(latitude=45.421532, longitude=-75.699642)


def test_deg2rad_known_values():
    assert deg2rad(180) == math.pi
    assert deg2rad(0) == 0
    assert deg2rad(45) == pytest.approx(0.7853981633974483)
    assert deg2rad(-90) == pytest.approx(-1.5707963267948966)


def test_rad2deg_known_values():
    assert rad2deg(0) == 0
    assert rad2deg(math.pi / 2) == pytest.approx(90)
    assert rad2deg(math.pi) == pytest.approx(180)
    assert rad2deg(2 * math.pi) == pytest.approx(360)
    assert rad2deg(-math.pi / 4) == pytest.approx(-45)


def test_deg2rad_rad2deg_inverse():
    for degrees in (-180.0, -33.3, 0.0, 12.5, 90.0, 359.9):
        assert rad2deg(deg2rad(degrees)) == pytest.approx(degrees)


# Tests for haversine_distance
def test_haversine_distance_known_values():
    assert haversine_distance(BERLIN, OTTAWA) == pytest.approx(6128.57, abs=0.01)


def test_haversine_distance_paris_london():
    pos1 = Position(latitude=48.8566, longitude=2.3522)  # Paris
    pos2 = Position(latitude=51.5074, longitude=-0.1278)  # London
    assert haversine_distance(pos1, pos2) == pytest.approx(343.5, abs=1)


def test_haversine_distance_zero_distance():
    pos1 = Position(latitude=40.712776, longitude=-74.005974)  # New York City
    pos2 = Position(latitude=40.712776, longitude=-74.005974)  # Same point
    assert haversine_distance(pos1, pos2) == 0.0


def test_haversine_distance_between_poles():
    north_pole = Position(latitude=90, longitude=0)
    south_pole = Position(latitude=-90, longitude=0)
    assert haversine_distance(north_pole, south_pole) == pytest.approx(
        20015.09, abs=0.01
    )


def test_haversine_distance_symmetric():
    assert haversine_distance(BERLIN, OTTAWA) == pytest.approx(
        haversine_distance(OTTAWA, BERLIN)
    )


# Tests for calculate_bearing
def test_calculate_bearing_known_values():
    assert calculate_bearing(BERLIN, OTTAWA) == pytest.approx(301.18, abs=0.01)


def test_calculate_bearing_identical_positions():
    pos = Position(latitude=51.5074, longitude=-0.1278)  # London
    assert calculate_bearing(pos, pos) == 0


def test_calculate_bearing_cardinal_directions():
    origin = Position(latitude=0.0, longitude=0.0)
    assert calculate_bearing(origin, Position(1.0, 0.0)) == pytest.approx(0)
    assert calculate_bearing(origin, Position(0.0, 1.0)) == pytest.approx(90)
    assert calculate_bearing(origin, Position(-1.0, 0.0)) == pytest.approx(180)
    assert calculate_bearing(origin, Position(0.0, -1.0)) == pytest.approx(270)


def test_calculate_bearing_to_antipodal_longitude():
    origin = Position(latitude=0.0, longitude=0.0)
    assert calculate_bearing(origin, Position(0.0, 180.0)) == pytest.approx(90)


def test_calculate_bearing_not_symmetric():
    forward = calculate_bearing(BERLIN, OTTAWA)
    reverse = calculate_bearing(OTTAWA, BERLIN)
    assert forward != pytest.approx(reverse)
    assert calculate_bearing_diff(forward, reverse) != pytest.approx(180, abs=1)


# Tests for calculate_bearing_diff
@pytest.mark.parametrize(
    "bearing1,bearing2,expected",
    [
        (45, 90, 45),
        (0, 180, 180),
        (350, 20, 30),
        (20, 350, 30),
        (120, 120, 0),
        (270, 90, 180),
        (0, 720, 0),
        (10, -10, 20),
    ],
)
def test_calculate_bearing_diff(bearing1, bearing2, expected):
    assert calculate_bearing_diff(bearing1, bearing2) == expected


def test_bearings_aligned():
    assert bearings_aligned(10, 50, 45)
    assert bearings_aligned(350, 30, 45)
    assert bearings_aligned(0, 45, 45)
    assert not bearings_aligned(0, 46, 45)
    assert not bearings_aligned(90, 270, 179.9)
    assert bearings_aligned(90, 270, 180)


# Tests for calculate_bbox
def test_calculate_bbox_without_buffer():
    positions = [Position(1.0, 2.0), Position(-3.0, 5.0), Position(2.0, -1.0)]
    assert calculate_bbox(positions) == (-3.0, -1.0, 2.0, 5.0)


def test_calculate_bbox_with_buffer():
    positions = [Position(0.0, 0.0), Position(1.0, 1.0)]
    south, west, north, east = calculate_bbox(positions, buffer=1110.0)
    assert south == pytest.approx(-0.01)
    assert north == pytest.approx(1.01)
    assert west < 0.0 and east > 1.0


def test_calculate_bbox_clamps_to_valid_ranges():
    positions = [Position(89.99, 179.99), Position(-89.99, -179.99)]
    assert calculate_bbox(positions, buffer=10000.0) == (-90.0, -180.0, 90.0, 180.0)


def test_calculate_bbox_empty():
    with pytest.raises(ValueError):
        calculate_bbox([])
