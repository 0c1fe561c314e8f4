import dataclasses
import numpy as np
from scipy.optimize import root_scalar
from gearsketch.defs import *
from gearsketch.function_generators import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_core import *
from gearsketch.gearteeth import calc_pitch_correction_angle


@dataclasses.dataclass
class ToothThicknessData:
    """Tooth thickness measured at a given radius.

    Attributes
    ----------
    radius : float
        Radius of the measurement.
    angle : float
        Angular thickness in radians.
    arc : float
        Thickness along the circle of the measurement.
    chord : float
        Straight-line thickness between the two flanks.
    """

    radius: float
    angle: float
    arc: float
    chord: float


def _angular_thickness(geometry: ResolvedGearGeometry, pitch_correction, radius):
    alpha = np.arccos(geometry.base_radius / radius)
    return (
        geometry.tooth_angular_pitch / 2
        + 2 * pitch_correction
        - 2 * involute_func(alpha)
    )


def calc_tooth_thickness(
    geometry: ResolvedGearGeometry, radius: float = None
) -> ToothThicknessData:
    """Thickness of the generated tooth at a radius, pitch radius by default.

    The thickness includes the backlash correction, so it shrinks as the
    backlash allowance grows.
    """
    if radius is None:
        radius = geometry.pitch_radius
    if radius < geometry.base_radius:
        raise GeometryDomainError(
            f"radius {radius} is inside the base circle {geometry.base_radius}"
        )
    pc = calc_pitch_correction_angle(geometry)
    angle = _angular_thickness(geometry, pc, radius)
    return ToothThicknessData(
        radius=radius,
        angle=angle,
        arc=angle * radius,
        chord=2 * radius * np.sin(angle / 2),
    )


def calc_pointed_tip_radius(geometry: ResolvedGearGeometry) -> float:
    """Radius where the two flanks of a tooth meet.

    Teeth with an outer radius above this value come out pointed."""
    pc = calc_pitch_correction_angle(geometry)
    r0 = geometry.base_radius
    if _angular_thickness(geometry, pc, r0) <= 0:
        return r0
    r1 = 2 * r0
    # the involute function grows without limit, the bracket closes quickly
    while _angular_thickness(geometry, pc, r1) > 0:
        r1 *= 2
    sol = root_scalar(
        lambda r: _angular_thickness(geometry, pc, r),
        bracket=[r0, r1],
        method="brentq",
        xtol=1e-12 * r0,
    )
    return sol.root


def check_mesh_compatible(geometry1: ResolvedGearGeometry, geometry2: ResolvedGearGeometry):
    if not np.isclose(geometry1.module, geometry2.module, rtol=1e-9):
        raise InvalidSpecError(
            f"Gears must have the same module to mesh: "
            f"{geometry1.module:.6g} vs {geometry2.module:.6g}"
        )
    if not np.isclose(geometry1.pressure_angle, geometry2.pressure_angle, rtol=1e-9):
        raise InvalidSpecError("Gears must have the same pressure angle to mesh")


def calc_center_distance(spec1: GearSpec, spec2: GearSpec, scale: float = 1.0) -> float:
    """Nominal center distance, the pitch circles touch at the pitch point."""
    geometry1 = resolve_gear_geometry(spec1, scale)
    geometry2 = resolve_gear_geometry(spec2, scale)
    check_mesh_compatible(geometry1, geometry2)
    return geometry1.pitch_radius + geometry2.pitch_radius


def calc_gear_ratio(spec1: GearSpec, spec2: GearSpec) -> float:
    """Speed ratio of gear 1 driving gear 2."""
    return spec2.teeth / spec1.teeth


def calc_contact_ratio(spec1: GearSpec, spec2: GearSpec, scale: float = 1.0) -> float:
    """Transverse contact ratio at the nominal center distance.

    Length of the path of contact divided by the base pitch. Values below 1
    mean the teeth lose contact during the mesh cycle.
    """
    g1 = resolve_gear_geometry(spec1, scale)
    g2 = resolve_gear_geometry(spec2, scale)
    check_mesh_compatible(g1, g2)
    alpha = g1.pressure_angle
    distance = g1.pitch_radius + g2.pitch_radius
    contact_length = (
        np.sqrt(g1.outer_radius**2 - g1.base_radius**2)
        + np.sqrt(g2.outer_radius**2 - g2.base_radius**2)
        - distance * np.sin(alpha)
    )
    base_pitch = PI * g1.module * np.cos(alpha)
    return contact_length / base_pitch
