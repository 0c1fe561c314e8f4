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

"""Interactive gear viewer: a sidebar of text boxes next to the gear page."""

import logging
from pathlib import Path
import matplotlib.pyplot as plt
from matplotlib.widgets import TextBox, Button
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_wrapper import PageState, parse_teeth, parse_pitch_density
from gearsketch.gearsketch_config import GearSketchConfig
from gearsketch.gearsketch_matplotlib import (
    setup_page_axes,
    draw_background,
    draw_gears,
)
from gearsketch.gearsketch_export import export_pdf


class GearViewer:
    """Gear designer window.

    The viewer owns the current `PageState`. Every edit builds a new state and
    redraws the page from scratch; values that do not parse or do not make a
    valid gear keep the last valid drawing.

    Parameters
    ----------
    page_state : PageState, optional
        Initial gears. The default is a 50 and a 10 tooth gear at 12 DP.
    config : GearSketchConfig, optional
        Screen ppi, print dpi, sampling and debug circles.
    export_path : str or Path, optional
        Where the Print button writes the PDF. The default is "gears.pdf".
    """

    def __init__(
        self,
        page_state: PageState = PageState(),
        config: GearSketchConfig = GearSketchConfig(),
        export_path="gears.pdf",
        width=1200,
        height=800,
    ):
        self.page_state = page_state
        self.config = config
        self.export_path = Path(export_path)
        ppi = config.ppi
        self.fig = plt.figure(figsize=(width / ppi, height / ppi), dpi=ppi)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title("Gear Designer")
        self.sidebar_frac = min(SIDEBAR_WIDTH_PX / width, 0.5)
        self.ax = self.fig.add_axes([self.sidebar_frac, 0, 1 - self.sidebar_frac, 1])
        self.create_sidebar()
        self.fig.canvas.mpl_connect("resize_event", self.on_resize)
        self.redraw()

    def create_sidebar(self):
        sb = self.sidebar_frac
        left = sb * 0.1
        box_width = sb * 0.8
        self.fig.text(sb / 2, 0.95, "Gear Designer", ha="center", fontsize=14, weight="bold")
        self.fig.text(sb / 2, 0.89, "Gear Specs", ha="center", fontsize=12)
        self.fig.text(left, 0.845, "Diametric Pitch:", fontsize=10)

        self.pitch_box = TextBox(
            self.fig.add_axes([left, 0.80, box_width, 0.04]),
            "",
            initial=f"{self.page_state.left.pitch_density:g}",
        )
        self.fig.text(sb / 2, 0.73, "Left Gear", ha="center", fontsize=12)
        self.fig.text(left, 0.695, "Teeth:", fontsize=10)
        self.left_box = TextBox(
            self.fig.add_axes([left, 0.65, box_width, 0.04]),
            "",
            initial=str(self.page_state.left.teeth),
        )
        self.fig.text(sb / 2, 0.58, "Right Gear", ha="center", fontsize=12)
        self.fig.text(left, 0.545, "Teeth:", fontsize=10)
        self.right_box = TextBox(
            self.fig.add_axes([left, 0.50, box_width, 0.04]),
            "",
            initial=str(self.page_state.right.teeth),
        )
        self.print_button = Button(
            self.fig.add_axes([left, 0.03, box_width, 0.05]), "Print"
        )

        self.pitch_box.on_submit(self.on_pitch_density)
        self.left_box.on_submit(self.on_left_teeth)
        self.right_box.on_submit(self.on_right_teeth)
        self.print_button.on_clicked(self.on_print)

    def page_size(self):
        """Size of the drawing area in pixels."""
        width, height = self.fig.canvas.get_width_height()
        return width * (1 - self.sidebar_frac), height

    def update_state(self, make_state):
        """Replace the page state and redraw, keep the old one on failure."""
        try:
            new_state = make_state()
        except GearSketchError as err:
            logging.warning(f"Ignoring gear edit: {err}")
            return False
        previous = self.page_state
        self.page_state = new_state
        if not self.redraw():
            self.page_state = previous
            self.redraw()
            return False
        return True

    def on_pitch_density(self, text):
        value = parse_pitch_density(text)
        if value is None:
            return False
        return self.update_state(lambda: self.page_state.with_pitch_density(value))

    def on_left_teeth(self, text):
        teeth = parse_teeth(text)
        if teeth is None:
            return False
        return self.update_state(lambda: self.page_state.with_left_teeth(teeth))

    def on_right_teeth(self, text):
        teeth = parse_teeth(text)
        if teeth is None:
            return False
        return self.update_state(lambda: self.page_state.with_right_teeth(teeth))

    def on_resize(self, event):
        self.redraw()

    def on_print(self, event=None):
        export_pdf(self.page_state, self.export_path, self.config.print_dpi, self.config)
        logging.info(f"Printed gears to {self.export_path}")
        self.redraw()
        return self.export_path

    def redraw(self):
        """Draw the current state, returns False if the gears could not be built."""
        width, height = self.page_size()
        ppi = self.config.ppi
        self.ax.clear()
        setup_page_axes(self.ax, width, height)
        draw_background(self.ax, width, height, ppi)
        try:
            draw_gears(self.ax, self.page_state, ppi, self.config)
        except GearSketchError as err:
            logging.warning(f"Cannot draw gears: {err}")
            return False
        self.fig.canvas.draw_idle()
        return True

    def show(self):
        plt.show()


def run_viewer(page_state=PageState(), config=GearSketchConfig(), export_path="gears.pdf"):
    viewer = GearViewer(page_state, config, export_path)
    viewer.show()
    return viewer
