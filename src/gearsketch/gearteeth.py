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

import logging
import warnings
import numpy as np
from gearsketch.defs import *
from gearsketch.function_generators import *
from gearsketch.gearsketch_base_classes import *


def checked_arccos(value, name="arccos argument"):
    if abs(value) > 1 + DOMAIN_TOL:
        raise GeometryDomainError(f"{name} out of [-1, 1]: {value}")
    return np.arccos(np.clip(value, -1.0, 1.0))


def checked_arcsin(value, name="arcsin argument"):
    if abs(value) > 1 + DOMAIN_TOL:
        raise GeometryDomainError(f"{name} out of [-1, 1]: {value}")
    return np.arcsin(np.clip(value, -1.0, 1.0))


def involute_theta_bounds(base_radius, root_radius, outer_radius):
    """Involute parameter range of one flank.

    Returns
    -------
    tuple
        (theta_min, theta_max). theta_min is exactly 0 when the root circle is
        on or inside the base circle (undercut case), the root is then closed
        by the root connector instead of the involute.
    """
    if outer_radius < base_radius:
        raise GeometryDomainError(
            f"outer radius {outer_radius} is inside the base circle {base_radius}"
        )
    theta_max = involute_param_at_radius(outer_radius, base_radius)
    if root_radius > base_radius:
        theta_min = involute_param_at_radius(root_radius, base_radius)
    else:
        theta_min = 0.0
    return theta_min, theta_max


def involute_theta_values(theta_min, theta_max, steps=DEFAULT_INVOLUTE_STEPS):
    """Linearly spaced flank parameters, from theta_min towards theta_max.

    The last sample stops one step short of theta_max, the tip is closed by the
    straight tip connector between the two flanks."""
    return np.linspace(theta_min, theta_max, steps, endpoint=False)


def sample_involute_flank(
    base_radius, root_radius, outer_radius, steps=DEFAULT_INVOLUTE_STEPS
):
    """Sample the positive flank from its innermost valid radius to the tip."""
    theta_min, theta_max = involute_theta_bounds(base_radius, root_radius, outer_radius)
    return involute_circle(involute_theta_values(theta_min, theta_max, steps), base_radius)


def mirror_flank(base_radius, thetas):
    """The opposite flank: involute at -theta, traversed from tip to root."""
    return involute_circle(-np.asarray(thetas)[::-1], base_radius)


def calc_pitch_correction_angle(geometry: ResolvedGearGeometry) -> float:
    """Rotation that puts the flank's pitch point on angle 0, net of backlash.

    The first term aligns the involute's pitch point to the x axis, the second
    one rotates the flank to open half of the backlash gap."""
    rp = geometry.pitch_radius
    rb = geometry.base_radius
    theta_pitch = involute_param_at_radius(rp, rb)
    pitch_point = involute_circle(theta_pitch, rb)
    pitch_alignment = checked_arccos(pitch_point[0] / rp, name="pitch point angle")
    backlash_angle = checked_arcsin(
        geometry.backlash_allowance / 2 / rp, name="backlash allowance / pitch radius"
    )
    return pitch_alignment - backlash_angle


class InvoluteToothGenerator:
    """Generates the outline of a single involute tooth.

    Parameters
    ----------
    geometry : ResolvedGearGeometry
        Resolved gear dimensions.
    involute_steps : int, optional
        Number of samples per flank. Accuracy/cost trade-off, anything above
        about 20 gives a visually smooth flank. The default is 100.
    """

    def __init__(
        self,
        geometry: ResolvedGearGeometry,
        involute_steps: int = DEFAULT_INVOLUTE_STEPS,
    ):
        if int(involute_steps) != involute_steps or involute_steps < MIN_INVOLUTE_STEPS:
            raise InvalidSpecError(
                f"involute_steps must be an integer >= {MIN_INVOLUTE_STEPS}, "
                f"got {involute_steps}"
            )
        self.geometry = geometry
        self.involute_steps = int(involute_steps)

    def theta_bounds(self):
        return involute_theta_bounds(
            self.geometry.base_radius,
            self.geometry.root_radius,
            self.geometry.outer_radius,
        )

    def theta_values(self):
        return involute_theta_values(*self.theta_bounds(), steps=self.involute_steps)

    def generate_flank(self):
        return involute_circle(self.theta_values(), self.geometry.base_radius)

    def generate_mirrored_flank(self):
        return mirror_flank(self.geometry.base_radius, self.theta_values())

    def generate_tooth_outline(self) -> ToothOutlineData:
        """Assemble both flanks and the root connectors into one tooth.

        Point order: root point at -pc, positive flank from root to tip,
        negative flank from tip to root, root point at tp/2+pc, root point at
        tp-pc. The last point is where the next tooth starts.

        Returns
        -------
        ToothOutlineData
            Outline with 2 * involute_steps + 2 points.
        """
        geometry = self.geometry
        theta_min, theta_max = self.theta_bounds()
        thetas = involute_theta_values(theta_min, theta_max, self.involute_steps)
        flank = involute_circle(thetas, geometry.base_radius)
        flank_mirror = mirror_flank(geometry.base_radius, thetas)

        pc = calc_pitch_correction_angle(geometry)
        tp = geometry.tooth_angular_pitch
        root_point = RIGHT * geometry.root_radius

        self.check_tip_crossing(thetas[-1], pc)

        points = np.concatenate(
            [
                rotate_vector(root_point, -pc)[np.newaxis, :],
                # the first flank sample is replaced by the root point
                rotate_vector(flank[1:], -pc),
                rotate_vector(flank_mirror, tp / 2 + pc),
                rotate_vector(root_point, tp / 2 + pc)[np.newaxis, :],
                rotate_vector(root_point, tp - pc)[np.newaxis, :],
            ]
        )
        logging.debug(
            f"Tooth outline: {points.shape[0]} points, "
            f"theta {theta_min:.5f}..{theta_max:.5f}, "
            f"pitch correction {pc:.6f} rad, undercut={geometry.is_undercut}"
        )
        return ToothOutlineData(
            points=points,
            pitch_correction_angle=pc,
            theta_min=theta_min,
            theta_max=theta_max,
        )

    def check_tip_crossing(self, theta_tip, pitch_correction):
        """Warn when the two flanks cross below the tip (pointed teeth)."""
        tip_angle = involute_polar_angle(theta_tip)
        angle_pos = tip_angle - pitch_correction
        angle_neg = self.geometry.tooth_angular_pitch / 2 + pitch_correction - tip_angle
        if angle_pos >= angle_neg:
            warnings.warn(
                f"Tooth flanks of a {self.geometry.num_teeth}-tooth gear cross "
                "below the outer radius, the tooth tip is pointed and overlapping.",
                RuntimeWarning,
                stacklevel=3,
            )


def assemble_tooth(
    geometry: ResolvedGearGeometry, involute_steps: int = DEFAULT_INVOLUTE_STEPS
) -> ToothOutlineData:
    """Shorthand for InvoluteToothGenerator(...).generate_tooth_outline()."""
    return InvoluteToothGenerator(geometry, involute_steps).generate_tooth_outline()
