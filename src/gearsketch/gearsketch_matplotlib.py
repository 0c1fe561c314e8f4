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

"""Matplotlib backend: turns gear paths into patches on a pixel-exact page."""

import logging
import time
from typing import List
import numpy as np
import matplotlib.path as mpath
import matplotlib.patches as mpatch
from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_wrapper import SpurGear, PageState
from gearsketch.gearsketch_config import DebugConfig, GearSketchConfig

GEAR_COLOR = "black"
GRID_COLOR = "lightblue"
CROSSHAIR_COLOR = "red"
CROSSHAIR_SIZE_PX = 5

# (toggle, geometry attribute, color)
DEBUG_CIRCLES = [
    ("show_base_circle", "base_radius", "lightblue"),
    ("show_root_circle", "root_radius", "purple"),
    ("show_outer_circle", "outer_radius", "lightgreen"),
    ("show_pitch_circle", "pitch_radius", "red"),
]


def px_to_points(px, ppi):
    """Line widths are given in points, the page is laid out in pixels."""
    return px * 72 / ppi


def instructions_to_path(instructions: List[PathInstruction]) -> mpath.Path:
    """Convert path instructions into a matplotlib Path.

    PathCommand values are matplotlib path codes, they pass through unchanged.
    """
    vertices = np.array([(inst.x, inst.y) for inst in instructions], dtype=float)
    codes = np.array([inst.command.value for inst in instructions], dtype=mpath.Path.code_type)
    return mpath.Path(vertices.reshape(-1, 2), codes)


def setup_page_axes(ax, width, height):
    """Pixel coordinates with the origin in the middle and y pointing down."""
    ax.set_xlim(-width / 2, width / 2)
    ax.set_ylim(height / 2, -height / 2)
    ax.set_aspect("equal")
    ax.set_axis_off()


def create_page_figure(width, height, ppi):
    """Figure of exactly width x height pixels with a single full-size axes."""
    fig = Figure(figsize=(width / ppi, height / ppi), dpi=ppi)
    FigureCanvasAgg(fig)
    ax = fig.add_axes([0, 0, 1, 1])
    setup_page_axes(ax, width, height)
    return fig, ax


def draw_background(ax, width, height, ppi):
    """White page, grid lines every half inch through the center, crosshair."""
    lw = px_to_points(1, ppi)
    ax.add_patch(
        mpatch.Rectangle(
            (-width / 2, -height / 2),
            width,
            height,
            facecolor="white",
            edgecolor="none",
            zorder=0,
        )
    )
    spacing = ppi * GRID_SPACING
    kx = int(np.ceil(width / 2 / spacing))
    ky = int(np.ceil(height / 2 / spacing))
    xs = np.arange(-kx, kx + 1) * spacing
    ys = np.arange(-ky, ky + 1) * spacing
    ax.vlines(xs, -height / 2, height / 2, colors=GRID_COLOR, linewidth=lw, zorder=1)
    ax.hlines(ys, -width / 2, width / 2, colors=GRID_COLOR, linewidth=lw, zorder=1)

    s = CROSSHAIR_SIZE_PX
    ax.plot([0, 0], [-s, s], color=CROSSHAIR_COLOR, linewidth=lw, zorder=2)
    ax.plot([-s, s], [0, 0], color=CROSSHAIR_COLOR, linewidth=lw, zorder=2)


def draw_debug_circles(ax, gear: SpurGear, debug: DebugConfig, ppi):
    geometry = gear.geometry
    center = gear.placement.center_offset(geometry.pitch_radius)
    circles = []
    for toggle, radius_name, color in DEBUG_CIRCLES:
        if getattr(debug, toggle):
            circle = mpatch.Circle(
                tuple(center),
                getattr(geometry, radius_name),
                fill=False,
                edgecolor=color,
                linewidth=px_to_points(1, ppi),
                zorder=3,
            )
            ax.add_patch(circle)
            circles.append(circle)
    return circles


def draw_gear_path(ax, instructions: List[PathInstruction], ppi):
    patch = mpatch.PathPatch(
        instructions_to_path(instructions),
        fill=False,
        edgecolor=GEAR_COLOR,
        linewidth=px_to_points(1, ppi),
        zorder=4,
    )
    ax.add_patch(patch)
    return patch


def draw_gears(ax, page_state: PageState, ppi, config: GearSketchConfig = GearSketchConfig()):
    """Draw both gears of the page, scaled to `ppi` pixels per inch.

    Both paths are generated before anything is drawn, a failing gear leaves
    the axes untouched.
    """
    gears = page_state.gears(scale=ppi, involute_steps=config.involute_steps)
    paths = [gear.path() for gear in gears]
    patches = []
    for gear, instructions in zip(gears, paths):
        patches.extend(draw_debug_circles(ax, gear, config.debug, ppi))
        patches.append(draw_gear_path(ax, instructions, ppi))
    return patches


def render_page(
    page_state: PageState,
    width: int,
    height: int,
    ppi: int,
    config: GearSketchConfig = GearSketchConfig(),
) -> Figure:
    """Render the page into a new pixel-exact figure."""
    start = time.time()
    fig, ax = create_page_figure(width, height, ppi)
    draw_background(ax, width, height, ppi)
    draw_gears(ax, page_state, ppi, config)
    logging.info(
        f"Page {width}x{height} px at {ppi} ppi rendered in {time.time()-start:.5f} seconds"
    )
    return fig


def figure_to_rgba(fig: Figure) -> np.ndarray:
    """Rasterize a figure, returns an array of shape (height, width, 4)."""
    canvas = fig.canvas
    if not isinstance(canvas, FigureCanvasAgg):
        canvas = FigureCanvasAgg(fig)
    canvas.draw()
    return np.asarray(canvas.buffer_rgba()).copy()
