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

from typing import List
import numpy as np
from gearsketch.defs import *
from gearsketch.function_generators import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearteeth import *


def calc_module(spec: GearSpec, scale: float = 1.0) -> float:
    """Module in drawing units.

    `scale` is the number of drawing units per unit of the pitch convention,
    e.g. pixels per inch for diametric pitch given in teeth per inch."""
    if spec.convention is PitchConvention.DIAMETRIC_PITCH:
        return scale / spec.pitch_density
    else:
        return scale * spec.pitch_density


def resolve_gear_geometry(spec: GearSpec, scale: float = 1.0) -> ResolvedGearGeometry:
    """Convert gear parameters into radii and angles.

    Parameters
    ----------
    spec : GearSpec
        Gear parameters.
    scale : float
        Drawing units per unit of the pitch convention. The core never assumes
        a display unit, screens pass pixels per inch here.

    Raises
    ------
    InvalidSpecError
        If the scale is not positive or any resolved radius is not positive,
        e.g. too few teeth push the root circle through the center.
    """
    if isinstance(scale, bool) or not np.isfinite(scale) or scale <= 0:
        raise InvalidSpecError(f"scale must be positive, got {scale}")

    module = calc_module(spec, scale)
    pressure_angle = spec.pressure_angle * DEG2RAD
    pitch_diameter = spec.teeth * module
    base_diameter = pitch_diameter * np.cos(pressure_angle)
    addendum = module
    clearance = spec.clearance_mult * module
    dedendum = clearance + module
    backlash_allowance = spec.backlash_mult * module
    root_diameter = pitch_diameter - 2 * dedendum
    outer_diameter = pitch_diameter + 2 * addendum

    geometry = ResolvedGearGeometry(
        num_teeth=spec.teeth,
        module=module,
        pressure_angle=pressure_angle,
        addendum=addendum,
        dedendum=dedendum,
        clearance=clearance,
        backlash_allowance=backlash_allowance,
        pitch_radius=pitch_diameter / 2,
        base_radius=base_diameter / 2,
        root_radius=root_diameter / 2,
        outer_radius=outer_diameter / 2,
    )
    for name in ("pitch_radius", "base_radius", "root_radius", "outer_radius"):
        value = getattr(geometry, name)
        if not value > 0:
            raise InvalidSpecError(
                f"{name} of a {spec.teeth}-tooth gear is not positive ({value:.6g})"
            )
    return geometry


def tile_tooth_profile(
    outline: ToothOutlineData,
    geometry: ResolvedGearGeometry,
    placement: GearPlacement = GearPlacement(),
) -> np.ndarray:
    """Repeat the tooth outline around the gear and move it into place.

    Each copy is rotated about the gear origin first and translated by the
    placement offset afterwards. The leading point of every tooth after the
    first is dropped, it is the same as the trailing point of the previous
    tooth.

    Returns
    -------
    np.ndarray
        Continuous outline of shape (teeth * (N-1) + 1, 2), where N is the
        number of points of one tooth. The last point closes onto the first.
    """
    tp = geometry.tooth_angular_pitch
    teeth = [outline.points]
    for k in range(1, geometry.num_teeth):
        teeth.append(rotate_vector(outline.points[1:], k * tp))
    offset = placement.center_offset(geometry.pitch_radius)
    return np.concatenate(teeth) + offset


def emit_path(points) -> List[PathInstruction]:
    """One MOVE_TO for the first point, LINE_TO for all the others.

    Closing the path is left to the renderer."""
    return [
        PathInstruction(
            PathCommand.MOVE_TO if k == 0 else PathCommand.LINE_TO,
            float(point[0]),
            float(point[1]),
        )
        for k, point in enumerate(np.asarray(points, dtype=float))
    ]


def generate_gear_points(
    spec: GearSpec,
    scale: float = 1.0,
    placement: GearPlacement = GearPlacement(),
    involute_steps: int = DEFAULT_INVOLUTE_STEPS,
) -> np.ndarray:
    """Full gear outline as a point array."""
    geometry = resolve_gear_geometry(spec, scale)
    outline = assemble_tooth(geometry, involute_steps)
    return tile_tooth_profile(outline, geometry, placement)


def generate_gear_path(
    spec: GearSpec,
    scale: float = 1.0,
    placement: GearPlacement = GearPlacement(),
    involute_steps: int = DEFAULT_INVOLUTE_STEPS,
) -> List[PathInstruction]:
    """Drawing instructions of one gear's full outline.

    Either the complete path is returned or an error is raised, a failing
    resolver or tooth assembler never leaves a partial outline behind.

    Raises
    ------
    InvalidSpecError
        Non-positive scale or resolved radius.
    GeometryDomainError
        Backlash allowance too large for the pitch radius.
    """
    return emit_path(generate_gear_points(spec, scale, placement, involute_steps))
