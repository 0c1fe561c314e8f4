# Copyright 2024 Gergely Bencsik
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import numpy as np
from gearsketch.defs import *
from scipy.spatial.transform import Rotation as scp_Rotation


def rotation_matrix(angle):
    """2x2 rotation matrix for a counter-clockwise rotation in the x-y plane."""
    return scp_Rotation.from_euler("z", angle).as_matrix()[:2, :2]


def rotate_vector(v, angle):
    """Rotate a point or an array of points about the origin.

    Works on a single row vector of shape (2) as well as point arrays of
    shape (N,2).
    """
    # multiplying on the right with the transpose of the rotation matrix
    # keeps the row vector convention
    return np.asarray(v, dtype=float) @ rotation_matrix(angle).transpose()


def xy_to_polar(points):
    """Return radius and polar angle of a point or point array."""
    points = np.asarray(points, dtype=float)
    return (
        np.linalg.norm(points, axis=-1),
        np.arctan2(points[..., 1], points[..., 0]),
    )


def involute_circle(t, r=1.0, angle=0.0):
    """
    Returns the x-y values of the circle involute.

    The curve is traced by the end of a taut string unwound from the base circle.
    t: input angle, scalar or array. Negative values give the mirrored curve.
    r: base circle radius
    angle: offset angle, angle of the starting point of the involute on the base circle
    """
    t = np.asarray(t, dtype=float)
    points = np.stack(
        [
            r * (np.cos(t) + t * np.sin(t)),
            r * (np.sin(t) - t * np.cos(t)),
        ],
        axis=-1,
    )
    if angle != 0:
        points = rotate_vector(points, angle)
    return points


def involute_param_at_radius(radius, base_radius):
    """Involute parameter where the curve reaches `radius`.

    Only meaningful for radius >= base_radius, smaller radii give nan."""
    return np.sqrt((radius / base_radius) ** 2 - 1)


def involute_func(alpha):
    """The involute function inv(alpha) = tan(alpha) - alpha.

    This is the polar angle of the involute point whose profile angle is alpha."""
    return np.tan(alpha) - alpha


def involute_polar_angle(t):
    """Polar angle of the involute point at parameter t (base angle 0)."""
    return t - np.arctan(t)
