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

from gearsketch import *
from gearsketch.viewer import run_viewer
import matplotlib.pyplot as plt
import logging

# These examples are meant to showcase the functionality of the library,
# and serve as manual testing templates for the developer.

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


def spur_gears():
    """Plot a meshing pair in inches, with all reference circles."""
    gear1 = SpurGear(number_of_teeth=36, pitch_density=8)
    gear2 = SpurGear(number_of_teeth=14, pitch_density=8)
    gear2.mesh_to(gear1)

    ax = plt.axes()
    for gear in (gear1, gear2):
        points = gear.points()
        ax.plot(points[:, 0], points[:, 1])
        for radius in (gear.base_radius, gear.root_radius, gear.outer_radius, gear.rp):
            ax.add_patch(plt.Circle(tuple(gear.center), radius, fill=False, linestyle=":"))
    ax.axis("equal")
    plt.show()


def single_tooth():
    """One tooth outline, undercut and regular root side by side."""
    ax = plt.axes()
    for teeth in (20, 80):
        geometry = resolve_gear_geometry(GearSpec(teeth=teeth, pitch_density=1), scale=1)
        outline = assemble_tooth(geometry, involute_steps=30)
        # shift the tooth to the origin so both fit on one plot
        points = outline.points - RIGHT * geometry.root_radius
        ax.plot(points[:, 0], points[:, 1], marker=".", label=f"{teeth} teeth")
    ax.axis("equal")
    ax.legend()
    plt.show()


def metric_gear_info():
    spec1 = GearSpec(teeth=24, pitch_density=1.5, convention=PitchConvention.MODULE)
    spec2 = GearSpec(teeth=40, pitch_density=1.5, convention=PitchConvention.MODULE)
    geometry = resolve_gear_geometry(spec1)
    logging.info(f"Pitch diameter: {geometry.pitch_diameter:.3f} mm")
    logging.info(f"Tooth thickness: {calc_tooth_thickness(geometry).chord:.3f} mm")
    logging.info(f"Center distance: {calc_center_distance(spec1, spec2):.3f} mm")
    logging.info(f"Contact ratio: {calc_contact_ratio(spec1, spec2):.3f}")


def print_page():
    page_state = PageState().with_pitch_density(10).with_right_teeth(18)
    config = GearSketchConfig(debug=DebugConfig(show_pitch_circle=True))
    export_pdf(page_state, "gears.pdf", config=config)


if __name__ == "__main__":
    metric_gear_info()
    run_viewer(config=GearSketchConfig(debug=DebugConfig.all_circles()))
