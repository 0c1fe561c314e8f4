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
import numpy as np
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_core import *
from gearsketch.gearteeth import *
from gearsketch.gearmath import check_mesh_compatible


class GearInfoMixin:
    """Read-only dimensions of a gear, resolved from its spec on every access."""

    spec: GearSpec
    scale: float

    @property
    def geometry(self) -> ResolvedGearGeometry:
        return resolve_gear_geometry(self.spec, self.scale)

    @property
    def number_of_teeth(self):
        return self.spec.teeth

    @property
    def module(self):
        return self.geometry.module

    @property
    def pitch_radius(self):
        return self.geometry.pitch_radius

    @property
    def rp(self):
        return self.pitch_radius

    @property
    def base_radius(self):
        return self.geometry.base_radius

    @property
    def root_radius(self):
        return self.geometry.root_radius

    @property
    def outer_radius(self):
        return self.geometry.outer_radius

    @property
    def pitch_angle(self):
        return self.geometry.tooth_angular_pitch


class SpurGear(GearInfoMixin):
    """A spur gear placed left or right of the pitch point.

    Parameters
    ----------
    number_of_teeth : int
        Number of teeth.
    pitch_density : float, optional
        Diametric pitch (teeth per inch) by default, see `convention`.
    pressure_angle : float, optional
        Pressure angle in degrees. The default is 20.
    clearance_mult : float, optional
        Root clearance as a fraction of the module. The default is 0.167.
    backlash_mult : float, optional
        Backlash allowance as a fraction of the module. The default is 0.05.
    convention : PitchConvention, optional
        Diametric pitch or module convention for `pitch_density`.
    side : GearSide, optional
        Placement relative to the meshing partner. The default is LEFT.
    scale : float, optional
        Drawing units per unit of the pitch convention. The default is 1.
    involute_steps : int, optional
        Samples per flank. The default is 100.
    """

    def __init__(
        self,
        number_of_teeth: int,
        pitch_density: float = DEFAULT_DIAMETRIC_PITCH,
        pressure_angle: float = DEFAULT_PRESSURE_ANGLE,
        clearance_mult: float = DEFAULT_CLEARANCE_MULT,
        backlash_mult: float = DEFAULT_BACKLASH_MULT,
        convention: PitchConvention = PitchConvention.DIAMETRIC_PITCH,
        side: GearSide = GearSide.LEFT,
        scale: float = 1.0,
        involute_steps: int = DEFAULT_INVOLUTE_STEPS,
    ):
        self.spec = GearSpec(
            teeth=number_of_teeth,
            pitch_density=pitch_density,
            pressure_angle=pressure_angle,
            clearance_mult=clearance_mult,
            backlash_mult=backlash_mult,
            convention=convention,
        )
        self.side = side
        self.scale = scale
        self.involute_steps = involute_steps

    @classmethod
    def from_spec(cls, spec: GearSpec, side=GearSide.LEFT, scale=1.0, **kwargs):
        gear = cls(spec.teeth, side=side, scale=scale, **kwargs)
        gear.spec = spec
        return gear

    @property
    def placement(self):
        return GearPlacement(self.side)

    @property
    def center(self):
        return self.placement.center_offset(self.pitch_radius)

    def tooth_outline(self) -> ToothOutlineData:
        return assemble_tooth(self.geometry, self.involute_steps)

    def points(self) -> np.ndarray:
        return generate_gear_points(
            self.spec, self.scale, self.placement, self.involute_steps
        )

    def path(self):
        return generate_gear_path(
            self.spec, self.scale, self.placement, self.involute_steps
        )

    def mesh_to(self, other: "SpurGear"):
        """Place this gear on the opposite side of the pitch point.

        Both gears must share module and pressure angle."""
        check_mesh_compatible(self.geometry, other.geometry)
        self.side = other.side.opposite
        return self


@dataclasses.dataclass(frozen=True)
class PageState:
    """The pair of gears shown on a page.

    Edits never mutate a state, they return a new one. The diametric pitch is
    shared so the two gears always mesh."""

    left: GearSpec = GearSpec(teeth=DEFAULT_LEFT_TEETH)
    right: GearSpec = GearSpec(teeth=DEFAULT_RIGHT_TEETH)

    def with_pitch_density(self, pitch_density) -> "PageState":
        return PageState(
            left=self.left.replace(pitch_density=pitch_density),
            right=self.right.replace(pitch_density=pitch_density),
        )

    def with_left_teeth(self, teeth) -> "PageState":
        return dataclasses.replace(self, left=self.left.replace(teeth=teeth))

    def with_right_teeth(self, teeth) -> "PageState":
        return dataclasses.replace(self, right=self.right.replace(teeth=teeth))

    def gears(self, scale=1.0, involute_steps=DEFAULT_INVOLUTE_STEPS):
        """The two gears as SpurGear objects, left first."""
        return (
            SpurGear.from_spec(
                self.left, GearSide.LEFT, scale, involute_steps=involute_steps
            ),
            SpurGear.from_spec(
                self.right, GearSide.RIGHT, scale, involute_steps=involute_steps
            ),
        )


def parse_teeth(text: str):
    """Parse a typed tooth count, None when the text is not a whole number."""
    try:
        teeth = int(text.strip())
    except ValueError:
        return None
    return teeth if teeth > 0 else None


def parse_pitch_density(text: str):
    """Parse a typed diametric pitch, None when the text is not a positive number."""
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if np.isfinite(value) and value > 0 else None
