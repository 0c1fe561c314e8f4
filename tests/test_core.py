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
import pytest as pytest
import shapely as shp
from gearsketch.defs import *
from gearsketch.function_generators import rotate_vector, xy_to_polar
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_core import *
from gearsketch.gearteeth import *
from gearsketch.gearmath import calc_tooth_thickness


def test_resolve_default_gear():
    geometry = resolve_gear_geometry(GearSpec(teeth=50, pitch_density=12))
    assert geometry.module == pytest.approx(1 / 12)
    assert geometry.pitch_radius == pytest.approx(2.083333, rel=1e-6)
    assert geometry.base_radius == pytest.approx(
        geometry.pitch_radius * np.cos(20 * DEG2RAD)
    )
    assert geometry.root_radius == pytest.approx(geometry.pitch_radius - 1.167 / 12)
    assert geometry.outer_radius == pytest.approx(geometry.pitch_radius + 1 / 12)
    assert geometry.pressure_angle == pytest.approx(20 * DEG2RAD)
    assert geometry.backlash_allowance == pytest.approx(0.05 / 12)


def test_resolve_scale_and_convention():
    spec = GearSpec(teeth=50, pitch_density=12)
    g1 = resolve_gear_geometry(spec)
    g96 = resolve_gear_geometry(spec, scale=96)
    assert g96.pitch_radius == pytest.approx(96 * g1.pitch_radius)
    assert g96.root_radius == pytest.approx(96 * g1.root_radius)

    metric = resolve_gear_geometry(GearSpec(teeth=20, pitch_density=2, convention="module"))
    assert metric.module == pytest.approx(2)
    assert metric.pitch_radius == pytest.approx(20)


@pytest.mark.parametrize("num_teeth", [3, 10, 25, 50, 100])
@pytest.mark.parametrize("pressure_angle", [14.5, 20, 25])
def test_radius_ordering(num_teeth, pressure_angle):
    geometry = resolve_gear_geometry(
        GearSpec(teeth=num_teeth, pressure_angle=pressure_angle)
    )
    assert geometry.root_radius > 0
    assert geometry.root_radius < geometry.pitch_radius
    assert geometry.base_radius < geometry.pitch_radius
    assert geometry.pitch_radius < geometry.outer_radius


@pytest.mark.parametrize(
    "kwargs",
    [
        {"teeth": 0},
        {"teeth": -5},
        {"teeth": 2.5},
        {"teeth": True},
        {"teeth": "ten"},
        {"teeth": 10, "pitch_density": 0},
        {"teeth": 10, "pitch_density": -12},
        {"teeth": 10, "pitch_density": float("nan")},
        {"teeth": 10, "pressure_angle": 0},
        {"teeth": 10, "pressure_angle": 90},
        {"teeth": 10, "clearance_mult": -0.1},
        {"teeth": 10, "backlash_mult": -0.1},
        {"teeth": 10, "convention": "furlongs"},
    ],
)
def test_invalid_spec(kwargs):
    with pytest.raises(InvalidSpecError):
        GearSpec(**kwargs)


def test_integral_float_teeth():
    spec = GearSpec(teeth=12.0)
    assert spec.teeth == 12
    assert isinstance(spec.teeth, int)


def test_degenerate_low_tooth_count():
    # 2 teeth at 12 DP: the dedendum is larger than the pitch radius
    with pytest.raises(InvalidSpecError):
        resolve_gear_geometry(GearSpec(teeth=2))
    with pytest.raises(InvalidSpecError):
        generate_gear_path(GearSpec(teeth=2))
    # 3 teeth still resolve
    geometry = resolve_gear_geometry(GearSpec(teeth=3))
    assert geometry.root_radius > 0


def test_invalid_scale():
    with pytest.raises(InvalidSpecError):
        resolve_gear_geometry(GearSpec(teeth=10), scale=0)
    with pytest.raises(InvalidSpecError):
        resolve_gear_geometry(GearSpec(teeth=10), scale=-96)


def test_backlash_out_of_domain():
    with pytest.raises(GeometryDomainError):
        generate_gear_path(GearSpec(teeth=10, backlash_mult=25))


def test_domain_errors_are_value_errors():
    assert issubclass(InvalidSpecError, ValueError)
    assert issubclass(GeometryDomainError, GearSketchError)


def test_undercut_switch():
    # dedendum 1.167 module: root is outside the base circle above ~39 teeth at 20 deg
    big = resolve_gear_geometry(GearSpec(teeth=50))
    small = resolve_gear_geometry(GearSpec(teeth=30))
    assert not big.is_undercut
    assert small.is_undercut

    theta_min, theta_max = InvoluteToothGenerator(big).theta_bounds()
    assert theta_min > 0
    assert theta_min < theta_max
    theta_min, theta_max = InvoluteToothGenerator(small).theta_bounds()
    assert theta_min == 0.0


@pytest.mark.parametrize("num_teeth", [30, 50])
@pytest.mark.parametrize("steps", [2, 10, 100])
def test_sample_flank(num_teeth, steps):
    g = resolve_gear_geometry(GearSpec(teeth=num_teeth))
    flank = sample_involute_flank(g.base_radius, g.root_radius, g.outer_radius, steps)
    assert flank.shape == (steps, 2)
    r, _ = xy_to_polar(flank)
    # samples start at the innermost valid radius and stop short of the tip
    assert r[0] == pytest.approx(max(g.root_radius, g.base_radius))
    assert np.all(np.diff(r) > 0)
    assert np.all(r < g.outer_radius)


def test_mirror_flank():
    g = resolve_gear_geometry(GearSpec(teeth=50))
    thetas = involute_theta_values(*involute_theta_bounds(g.rb, g.root_radius, g.outer_radius))
    flank = involute_circle(thetas, g.rb)
    mirrored = mirror_flank(g.rb, thetas)
    assert mirrored == pytest.approx((flank * np.array([1, -1]))[::-1])


def test_outer_inside_base():
    with pytest.raises(GeometryDomainError):
        involute_theta_bounds(1.0, 0.5, 0.9)


@pytest.mark.parametrize("steps", [2, 5, 20, 100])
@pytest.mark.parametrize("num_teeth", [10, 30, 50])
def test_tooth_outline_length(steps, num_teeth):
    g = resolve_gear_geometry(GearSpec(teeth=num_teeth))
    outline = assemble_tooth(g, steps)
    assert outline.num_points == 2 * steps + 2
    tp = g.tooth_angular_pitch
    pc = outline.pitch_correction_angle
    # root connectors
    assert outline.points[0] == pytest.approx(rotate_vector(RIGHT * g.root_radius, -pc))
    assert outline.points[-2] == pytest.approx(
        rotate_vector(RIGHT * g.root_radius, tp / 2 + pc)
    )
    assert outline.points[-1] == pytest.approx(
        rotate_vector(RIGHT * g.root_radius, tp - pc)
    )


def test_invalid_steps():
    g = resolve_gear_geometry(GearSpec(teeth=20))
    with pytest.raises(InvalidSpecError):
        InvoluteToothGenerator(g, 1)
    with pytest.raises(InvalidSpecError):
        InvoluteToothGenerator(g, 10.5)


def test_tooth_symmetry():
    """The tooth is mirror symmetric about the angle tp/4."""
    steps = 50
    g = resolve_gear_geometry(GearSpec(teeth=40))
    outline = assemble_tooth(g, steps)
    pts = rotate_vector(outline.points, -g.tooth_angular_pitch / 4)
    mirror = np.array([1, -1])
    # root points on both sides of the tooth
    assert pts[0] * mirror == pytest.approx(pts[2 * steps], abs=1e-12)
    # the positive flank lost its first sample to the root point
    positive = pts[1:steps]
    negative = pts[steps : 2 * steps - 1]
    assert (positive * mirror)[::-1] == pytest.approx(negative, abs=1e-12)


@pytest.mark.parametrize("num_teeth", [10, 31, 50])
@pytest.mark.parametrize("side", [GearSide.LEFT, GearSide.RIGHT])
def test_tile_profile(num_teeth, side):
    steps = 100
    g = resolve_gear_geometry(GearSpec(teeth=num_teeth), scale=96)
    outline = assemble_tooth(g, steps)
    placement = GearPlacement(side)
    tiled = tile_tooth_profile(outline, g, placement)
    n = 2 * steps + 1
    assert tiled.shape == (num_teeth * n + 1, 2)
    # closed outline
    assert tiled[-1] == pytest.approx(tiled[0])

    offset = placement.center_offset(g.pitch_radius)
    assert offset == pytest.approx(
        np.array([-g.rp if side is GearSide.LEFT else g.rp, 0])
    )
    centered = tiled - offset
    # each tooth maps onto the next one under rotation by the angular pitch
    tp = g.tooth_angular_pitch
    for k in range(num_teeth - 1):
        block = centered[1 + n * k : 1 + n * (k + 1)]
        next_block = centered[1 + n * (k + 1) : 1 + n * (k + 2)]
        assert rotate_vector(block, tp) == pytest.approx(next_block, abs=1e-9)

    assert np.mean(tiled[:-1], axis=0) == pytest.approx(offset, abs=1e-9)


def test_emit_path():
    instructions = emit_path(np.array([[0.0, 0.0], [1.0, 0.5], [2.0, -1.0]]))
    assert [inst.command for inst in instructions] == [
        PathCommand.MOVE_TO,
        PathCommand.LINE_TO,
        PathCommand.LINE_TO,
    ]
    assert instructions[1].x == 1.0
    assert instructions[1].y == 0.5
    assert instructions[2].point == pytest.approx(np.array([2.0, -1.0]))
    assert emit_path(np.zeros((0, 2))) == []


def test_default_gear_path():
    path = generate_gear_path(GearSpec(teeth=50, pitch_density=12))
    assert len(path) == 50 * (2 * DEFAULT_INVOLUTE_STEPS + 1) + 1
    assert len(path) == 10051
    moves = [inst for inst in path if inst.command is PathCommand.MOVE_TO]
    assert len(moves) == 1
    assert path[0].command is PathCommand.MOVE_TO
    assert path[-1].point == pytest.approx(path[0].point)

    center = LEFT * 50 / 24
    r = np.linalg.norm(np.array([inst.point for inst in path]) - center, axis=1)
    g = resolve_gear_geometry(GearSpec(teeth=50))
    assert r.min() == pytest.approx(g.root_radius)
    assert r.max() < g.outer_radius


def test_right_gear_path():
    path = generate_gear_path(GearSpec(teeth=10), placement=GearPlacement(GearSide.RIGHT))
    points = np.array([inst.point for inst in path])
    center = points[:-1].mean(axis=0)
    assert center == pytest.approx(RIGHT * 10 / 24, abs=1e-9)


@pytest.mark.parametrize("num_teeth", [12, 30, 50])
def test_backlash_thins_teeth(num_teeth):
    backlash_values = [0, 0.05, 0.1, 0.2]
    thickness = []
    areas = []
    for backlash in backlash_values:
        spec = GearSpec(teeth=num_teeth, pitch_density=1, backlash_mult=backlash)
        g = resolve_gear_geometry(spec)
        thickness.append(calc_tooth_thickness(g).angle)
        areas.append(shp.geometry.Polygon(generate_gear_points(spec)).area)
    assert np.all(np.diff(thickness) < 0)
    assert np.all(np.diff(areas) < 0)


def test_pointed_teeth_warning():
    with pytest.warns(RuntimeWarning):
        generate_gear_path(GearSpec(teeth=3, pressure_angle=35))


def test_generator_flanks():
    g = resolve_gear_geometry(GearSpec(teeth=45), scale=96)
    generator = InvoluteToothGenerator(g, 25)
    flank = generator.generate_flank()
    assert flank == pytest.approx(
        sample_involute_flank(g.base_radius, g.root_radius, g.outer_radius, 25)
    )
    assert generator.generate_mirrored_flank() == pytest.approx(
        (flank * np.array([1, -1]))[::-1]
    )
    assert generator.theta_values()[0] == generator.theta_bounds()[0]
