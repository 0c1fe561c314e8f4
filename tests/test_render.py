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

import matplotlib

matplotlib.use("Agg")

import matplotlib.colors as mcolors
import matplotlib.patches as mpatch
import matplotlib.path as mpath
import numpy as np
import pytest as pytest
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_core import emit_path
from gearsketch.gearsketch_config import DebugConfig, GearSketchConfig
from gearsketch.gearsketch_wrapper import PageState
from gearsketch.gearsketch_matplotlib import *

# 5 x 3 inches at screen resolution
WIDTH = 480
HEIGHT = 288


def test_instructions_to_path():
    path = instructions_to_path(emit_path(np.array([[0, 0], [1, 0], [1, 1]])))
    assert list(path.codes) == [mpath.Path.MOVETO, mpath.Path.LINETO, mpath.Path.LINETO]
    assert path.vertices == pytest.approx(np.array([[0, 0], [1, 0], [1, 1]]))


def test_px_to_points():
    assert px_to_points(96, 96) == pytest.approx(72)
    assert px_to_points(1, 300) == pytest.approx(0.24)


def test_render_page_size():
    fig = render_page(PageState(), WIDTH, HEIGHT, SCREEN_PPI)
    image = figure_to_rgba(fig)
    assert image.shape == (HEIGHT, WIDTH, 4)
    assert image.dtype == np.uint8


def test_render_page_content():
    fig = render_page(PageState(), WIDTH, HEIGHT, SCREEN_PPI)
    ax = fig.axes[0]
    gear_patches = [p for p in ax.patches if isinstance(p, mpatch.PathPatch)]
    assert len(gear_patches) == 2
    # y axis points down, origin in the middle
    assert ax.get_xlim() == pytest.approx((-WIDTH / 2, WIDTH / 2))
    assert ax.get_ylim() == pytest.approx((HEIGHT / 2, -HEIGHT / 2))

    image = figure_to_rgba(fig).astype(int)
    # antialiased 1 px lines, half covered pixels are mid gray
    gray = (np.abs(image[:, :, 0] - image[:, :, 1]) < 30) & (np.abs(image[:, :, 1] - image[:, :, 2]) < 30)
    dark = gray & (image[:, :, 0] < 160)
    assert dark.sum() > 100
    reddish = (image[:, :, 0] > 200) & (image[:, :, 0] - image[:, :, 1] > 60)
    assert reddish.any()


def test_debug_circles():
    config = GearSketchConfig(debug=DebugConfig.all_circles())
    fig = render_page(PageState(), WIDTH, HEIGHT, SCREEN_PPI, config)
    circles = [p for p in fig.axes[0].patches if isinstance(p, mpatch.Circle)]
    assert len(circles) == 8

    left, _ = PageState().gears(scale=SCREEN_PPI)
    pitch_circles = [c for c in circles if c.get_radius() == pytest.approx(left.pitch_radius)]
    assert len(pitch_circles) == 1
    assert pitch_circles[0].center == pytest.approx((-left.pitch_radius, 0))
    assert mcolors.same_color(pitch_circles[0].get_edgecolor(), "red")


def test_draw_gears_failure_leaves_axes_untouched():
    fig, ax = create_page_figure(WIDTH, HEIGHT, SCREEN_PPI)
    state = PageState().with_right_teeth(2)
    with pytest.raises(InvalidSpecError):
        draw_gears(ax, state, SCREEN_PPI)
    assert len(ax.patches) == 0


def test_gear_scale_on_page():
    """A 12 DP gear of 48 teeth has a 4 inch pitch diameter, 384 px on screen."""
    state = PageState().with_left_teeth(48)
    left, _ = state.gears(scale=SCREEN_PPI)
    assert 2 * left.pitch_radius == pytest.approx(384)
