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

import dataclasses
import numbers
from enum import Enum
import numpy as np
from gearsketch.defs import *

# If a dataclass tends to be user input, it should be named spec or param.
# If a dataclass tends to be generated or manipulated by functions,
# it should be named data or geometry.


class GearSketchError(Exception):
    """Base class of all errors raised by gearsketch."""


class InvalidSpecError(GearSketchError, ValueError):
    """Gear parameters that cannot describe a drawable gear."""


class GeometryDomainError(GearSketchError, ValueError):
    """An inverse trigonometric argument fell outside [-1, 1]."""


class PitchConvention(Enum):
    """Meaning of `GearSpec.pitch_density`.

    DIAMETRIC_PITCH: teeth per unit of pitch diameter, module = scale / density.
    MODULE: pitch diameter units per tooth, module = scale * density.
    """

    DIAMETRIC_PITCH = "diametric_pitch"
    MODULE = "module"


class GearSide(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self):
        return GearSide.RIGHT if self is GearSide.LEFT else GearSide.LEFT


def _check_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidSpecError(f"{name} must be a number, got {value!r}")
    if not np.isfinite(value) or value <= 0:
        raise InvalidSpecError(f"{name} must be positive, got {value}")


def _check_non_negative(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidSpecError(f"{name} must be a number, got {value!r}")
    if not np.isfinite(value) or value < 0:
        raise InvalidSpecError(f"{name} must be non-negative, got {value}")


@dataclasses.dataclass(frozen=True)
class GearSpec:
    """
    User-facing gear parameters, validated on construction.

    Attributes
    ----------
    teeth : int
        Number of teeth. Integral floats are accepted and stored as int.
    pitch_density : float
        Tooth size in the unit chosen by `convention`. With the default
        diametric pitch convention this is teeth per inch of pitch diameter.
    pressure_angle : float
        Pressure angle in degrees.
    clearance_mult : float
        Dedendum clearance as a fraction of the module.
    backlash_mult : float
        Circumferential backlash allowance as a fraction of the module.
    convention : PitchConvention
        How `pitch_density` converts to the module.
    """

    teeth: int
    pitch_density: float = DEFAULT_DIAMETRIC_PITCH
    pressure_angle: float = DEFAULT_PRESSURE_ANGLE
    clearance_mult: float = DEFAULT_CLEARANCE_MULT
    backlash_mult: float = DEFAULT_BACKLASH_MULT
    convention: PitchConvention = PitchConvention.DIAMETRIC_PITCH

    def __post_init__(self):
        teeth = self.teeth
        if isinstance(teeth, bool) or not isinstance(teeth, numbers.Real):
            raise InvalidSpecError(f"teeth must be an integer, got {teeth!r}")
        if not np.isfinite(teeth) or int(teeth) != teeth:
            raise InvalidSpecError(f"teeth must be an integer, got {teeth}")
        if teeth <= 0:
            raise InvalidSpecError(f"teeth must be positive, got {teeth}")
        object.__setattr__(self, "teeth", int(teeth))

        _check_positive("pitch_density", self.pitch_density)
        _check_positive("pressure_angle", self.pressure_angle)
        if self.pressure_angle >= 90:
            raise InvalidSpecError(
                f"pressure_angle must be below 90 degrees, got {self.pressure_angle}"
            )
        _check_non_negative("clearance_mult", self.clearance_mult)
        _check_non_negative("backlash_mult", self.backlash_mult)
        if not isinstance(self.convention, PitchConvention):
            try:
                object.__setattr__(
                    self, "convention", PitchConvention(self.convention)
                )
            except ValueError as err:
                raise InvalidSpecError(
                    f"unknown pitch convention {self.convention!r}"
                ) from err

    def replace(self, **changes) -> "GearSpec":
        """Return a new, validated spec with some fields changed."""
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass(frozen=True)
class GearPlacement:
    """Left/right placement of a gear relative to its meshing partner.

    The pitch point of the pair sits on the origin, so the gear center is
    shifted by one pitch radius along x."""

    side: GearSide = GearSide.LEFT

    def center_offset(self, pitch_radius: float) -> np.ndarray:
        if self.side is GearSide.LEFT:
            return LEFT * pitch_radius
        return RIGHT * pitch_radius


@dataclasses.dataclass(frozen=True)
class ResolvedGearGeometry:
    """Derived gear dimensions in drawing units. Computed fresh for every draw.

    Attributes
    ----------
    num_teeth : int
        Number of teeth.
    module : float
        Size of one tooth-pitch unit in drawing units.
    pressure_angle : float
        Pressure angle in radians.
    addendum, dedendum, clearance, backlash_allowance : float
        Radial tooth heights and circumferential backlash, drawing units.
    pitch_radius, base_radius, root_radius, outer_radius : float
        Reference circle radii.
    """

    num_teeth: int
    module: float
    pressure_angle: float
    addendum: float
    dedendum: float
    clearance: float
    backlash_allowance: float
    pitch_radius: float
    base_radius: float
    root_radius: float
    outer_radius: float

    @property
    def tooth_angular_pitch(self):
        """Angle between corresponding points of adjacent teeth in radians."""
        return 2 * PI / self.num_teeth

    @property
    def pitch_diameter(self):
        return 2 * self.pitch_radius

    @property
    def is_undercut(self):
        """True when the root circle lies on or inside the base circle.

        The involute then starts on the base circle and the root is reached
        by a straight connector instead."""
        return self.root_radius <= self.base_radius

    # shorthands
    @property
    def rp(self):
        return self.pitch_radius

    @property
    def rb(self):
        return self.base_radius


@dataclasses.dataclass
class ToothOutlineData:
    """Single tooth outline, before tiling around the gear.

    Attributes
    ----------
    points : np.ndarray
        Outline points, shape (N,2). The last point is the start of the next
        tooth.
    pitch_correction_angle : float
        Rotation aligning the flanks to the pitch point, net of backlash.
    theta_min, theta_max : float
        Involute parameter range of the flank samples.
    """

    points: np.ndarray
    pitch_correction_angle: float
    theta_min: float
    theta_max: float

    @property
    def num_points(self):
        return self.points.shape[0]


class PathCommand(Enum):
    """Drawing commands. Values match matplotlib.path.Path codes."""

    MOVE_TO = 1
    LINE_TO = 2


@dataclasses.dataclass(frozen=True)
class PathInstruction:
    command: PathCommand
    x: float
    y: float

    @property
    def point(self):
        return np.array((self.x, self.y))
