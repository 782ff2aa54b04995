"""Object-centric frame transforms.

The object frame is centered on a reference object's position and rotated
with its heading: +x (longitudinal) points along the heading, +y (lateral)
to its left.
"""

import math


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    a = math.fmod(angle + math.pi, 2.0 * math.pi)
    if a <= 0.0:
        a += 2.0 * math.pi
    return a - math.pi


def world_coord_to_obj_coord(point: tuple, obj_pos: tuple, obj_heading: float) -> tuple:
    """Express a world point in the object frame.

    Args:
        point: (x, y) world position
        obj_pos: (x, y) world position of the reference object
        obj_heading: reference object heading in radians

    Returns:
        (longitudinal, lateral) offset in the object frame
    """
    x_diff = point[0] - obj_pos[0]
    y_diff = point[1] - obj_pos[1]
    rho = math.hypot(x_diff, y_diff)
    theta = math.atan2(y_diff, x_diff) - obj_heading
    return (math.cos(theta) * rho, math.sin(theta) * rho)


def world_vector_to_obj_vector(vector: tuple, obj_pos: tuple, obj_heading: float) -> tuple:
    """Rotate a free vector (velocity, acceleration) into the object frame.

    Transforms the vector endpoint and the world origin, then differences
    them so the translation cancels.
    """
    end = world_coord_to_obj_coord(vector, obj_pos, obj_heading)
    begin = world_coord_to_obj_coord((0.0, 0.0), obj_pos, obj_heading)
    return (end[0] - begin[0], end[1] - begin[1])


def world_angle_to_obj_angle(angle: float, obj_heading: float) -> float:
    return normalize_angle(angle - obj_heading)


def obj_coord_to_world_coord(local: tuple, obj_pos: tuple, obj_heading: float) -> tuple:
    """Inverse of world_coord_to_obj_coord: rotate by +heading, then translate."""
    c, s = math.cos(obj_heading), math.sin(obj_heading)
    return (
        obj_pos[0] + c * local[0] - s * local[1],
        obj_pos[1] + s * local[0] + c * local[1],
    )
