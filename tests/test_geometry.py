"""Tests for object-frame geometry transforms."""

import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from features.geometry import (
    normalize_angle,
    obj_coord_to_world_coord,
    world_angle_to_obj_angle,
    world_coord_to_obj_coord,
    world_vector_to_obj_vector,
)


class TestWorldCoordToObjCoord:
    def test_identity_frame(self):
        lon, lat = world_coord_to_obj_coord((3.0, -2.0), (0.0, 0.0), 0.0)
        assert lon == pytest.approx(3.0)
        assert lat == pytest.approx(-2.0)

    def test_rotated_frame(self):
        # Facing +y: a point ahead along +y is purely longitudinal
        lon, lat = world_coord_to_obj_coord((5.0, 7.0), (5.0, 5.0), math.pi / 2)
        assert lon == pytest.approx(2.0)
        assert lat == pytest.approx(0.0, abs=1e-12)

        # A point at -x is to the left when facing +y
        lon, lat = world_coord_to_obj_coord((4.0, 5.0), (5.0, 5.0), math.pi / 2)
        assert lon == pytest.approx(0.0, abs=1e-12)
        assert lat == pytest.approx(1.0)

    def test_zero_offset(self):
        assert world_coord_to_obj_coord((1.5, 2.5), (1.5, 2.5), 0.7) == (0.0, 0.0)

    def test_round_trip(self):
        rng = np.random.RandomState(0)
        for _ in range(50):
            point = tuple(rng.uniform(-100, 100, size=2))
            origin = tuple(rng.uniform(-100, 100, size=2))
            heading = rng.uniform(-math.pi, math.pi)
            local = world_coord_to_obj_coord(point, origin, heading)
            recovered = obj_coord_to_world_coord(local, origin, heading)
            np.testing.assert_allclose(recovered, point, atol=1e-9)


class TestVectorTransform:
    def test_translation_cancels(self):
        vel = world_vector_to_obj_vector((1.0, 0.0), (50.0, -20.0), math.pi / 2)
        np.testing.assert_allclose(vel, (0.0, -1.0), atol=1e-9)

    def test_aligned_velocity_is_longitudinal(self):
        heading = 0.3
        speed = 12.0
        vel = world_vector_to_obj_vector(
            (speed * math.cos(heading), speed * math.sin(heading)), (3.0, 4.0), heading,
        )
        np.testing.assert_allclose(vel, (speed, 0.0), atol=1e-9)


class TestAngles:
    def test_normalize_boundaries(self):
        assert normalize_angle(math.pi) == math.pi
        assert normalize_angle(-math.pi) == math.pi
        assert normalize_angle(0.0) == 0.0

    def test_normalize_wraps(self):
        assert normalize_angle(1.5 * math.pi) == pytest.approx(-0.5 * math.pi)
        assert normalize_angle(-1.5 * math.pi) == pytest.approx(0.5 * math.pi)
        assert normalize_angle(5.0 * math.pi + 0.1) == pytest.approx(-math.pi + 0.1)

    def test_relative_heading(self):
        assert world_angle_to_obj_angle(0.1, -0.2) == pytest.approx(0.3)
        assert world_angle_to_obj_angle(3.0, -3.0) == pytest.approx(6.0 - 2 * math.pi)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
