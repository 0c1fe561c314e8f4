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

"""Command line entry point: view, export and inspect a pair of meshing gears."""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import typer

from gearsketch.gearsketch_base_classes import GearSketchError, GearSpec, PitchConvention
from gearsketch.gearsketch_config import GearSketchConfig, load_config, save_config
from gearsketch.gearsketch_core import resolve_gear_geometry
from gearsketch.gearsketch_wrapper import PageState
from gearsketch.gearmath import (
    calc_center_distance,
    calc_contact_ratio,
    calc_gear_ratio,
    calc_pointed_tip_radius,
    calc_tooth_thickness,
)

app = typer.Typer(
    name="gearsketch",
    help="Involute spur gear sketcher - draws a meshing gear pair to scale for printing",
)

LeftTeethOption = typer.Option(None, "--left-teeth", help="Teeth of the left gear")
RightTeethOption = typer.Option(None, "--right-teeth", help="Teeth of the right gear")
PitchOption = typer.Option(
    None, "--pitch", help="Diametric pitch shared by both gears (teeth per inch)"
)
PressureAngleOption = typer.Option(
    None, "--pressure-angle", help="Pressure angle in degrees"
)
ClearanceOption = typer.Option(
    None, "--clearance", help="Root clearance as a fraction of the module"
)
BacklashOption = typer.Option(
    None, "--backlash", help="Backlash allowance as a fraction of the module"
)
StepsOption = typer.Option(None, "--steps", help="Samples per involute flank")
ConfigOption = typer.Option(
    None, "-c", "--config", help="JSON parameter file written by save-config"
)


def build_state(
    config_file: Optional[Path] = None,
    left_teeth: Optional[int] = None,
    right_teeth: Optional[int] = None,
    pitch: Optional[float] = None,
    pressure_angle: Optional[float] = None,
    clearance: Optional[float] = None,
    backlash: Optional[float] = None,
    steps: Optional[int] = None,
):
    """Page state and config from an optional file, overridden by the options.

    Raises
    ------
    GearSketchError
        If the combined parameters are invalid.
    """
    if config_file is not None:
        page_state, config = load_config(config_file)
    else:
        page_state, config = PageState(), GearSketchConfig()

    shared = {
        "pitch_density": pitch,
        "pressure_angle": pressure_angle,
        "clearance_mult": clearance,
        "backlash_mult": backlash,
    }
    shared = {key: value for key, value in shared.items() if value is not None}
    left = page_state.left.replace(**shared)
    right = page_state.right.replace(**shared)
    if left_teeth is not None:
        left = left.replace(teeth=left_teeth)
    if right_teeth is not None:
        right = right.replace(teeth=right_teeth)
    if steps is not None:
        config = dataclasses.replace(config, involute_steps=steps)
    return PageState(left=left, right=right), config


def _fail(err):
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(1)


def _check_config_file(config_file):
    if config_file is not None and not config_file.exists():
        _fail(f"Config file not found: {config_file}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log progress and timings"),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@app.command()
def show(
    config_file: Optional[Path] = ConfigOption,
    left_teeth: Optional[int] = LeftTeethOption,
    right_teeth: Optional[int] = RightTeethOption,
    pitch: Optional[float] = PitchOption,
    pressure_angle: Optional[float] = PressureAngleOption,
    clearance: Optional[float] = ClearanceOption,
    backlash: Optional[float] = BacklashOption,
    steps: Optional[int] = StepsOption,
    output: Path = typer.Option(
        Path("gears.pdf"), "-o", "--output", help="PDF written by the Print button"
    ),
) -> None:
    """Open the interactive gear viewer."""
    from gearsketch.viewer import run_viewer

    _check_config_file(config_file)
    try:
        page_state, config = build_state(
            config_file, left_teeth, right_teeth, pitch, pressure_angle, clearance, backlash, steps
        )
    except GearSketchError as err:
        _fail(err)
    run_viewer(page_state, config, output)


@app.command()
def export(
    output: Path = typer.Argument(..., help="Output file, .pdf or .png"),
    config_file: Optional[Path] = ConfigOption,
    left_teeth: Optional[int] = LeftTeethOption,
    right_teeth: Optional[int] = RightTeethOption,
    pitch: Optional[float] = PitchOption,
    pressure_angle: Optional[float] = PressureAngleOption,
    clearance: Optional[float] = ClearanceOption,
    backlash: Optional[float] = BacklashOption,
    steps: Optional[int] = StepsOption,
    dpi: Optional[int] = typer.Option(None, "--dpi", help="Print resolution (default 300)"),
) -> None:
    """Export the gear page for printing at true size."""
    from gearsketch.gearsketch_export import export_page

    _check_config_file(config_file)
    if output.suffix.lower() not in (".pdf", ".png"):
        _fail(f"Unsupported export format '{output.suffix}', use .pdf or .png")
    try:
        page_state, config = build_state(
            config_file, left_teeth, right_teeth, pitch, pressure_angle, clearance, backlash, steps
        )
        if dpi is not None:
            config = dataclasses.replace(config, print_dpi=dpi)
        typer.echo(f"Exporting to {output}...")
        export_page(page_state, output, config.print_dpi, config)
    except GearSketchError as err:
        _fail(err)
    typer.echo(f"Gears exported to {output}")


def _echo_gear(name, spec: GearSpec):
    geometry = resolve_gear_geometry(spec)
    if spec.convention is PitchConvention.DIAMETRIC_PITCH:
        density, unit = f"{spec.pitch_density:g} DP", "in"
    else:
        density, unit = f"module {spec.pitch_density:g}", "mm"
    typer.echo(f"{name} gear: {spec.teeth} teeth, {density}, {spec.pressure_angle:g} deg")
    typer.echo(f"  module:       {geometry.module:.5f} {unit}")
    typer.echo(f"  pitch radius: {geometry.pitch_radius:.5f} {unit}")
    typer.echo(f"  base radius:  {geometry.base_radius:.5f} {unit}")
    typer.echo(f"  root radius:  {geometry.root_radius:.5f} {unit}")
    typer.echo(f"  outer radius: {geometry.outer_radius:.5f} {unit}")
    typer.echo(f"  undercut:     {'yes' if geometry.is_undercut else 'no'}")
    thickness = calc_tooth_thickness(geometry)
    typer.echo(f"  tooth thickness at pitch circle: {thickness.chord:.5f} {unit}")
    typer.echo(f"  pointed tip radius: {calc_pointed_tip_radius(geometry):.5f} {unit}")


@app.command()
def info(
    config_file: Optional[Path] = ConfigOption,
    left_teeth: Optional[int] = LeftTeethOption,
    right_teeth: Optional[int] = RightTeethOption,
    pitch: Optional[float] = PitchOption,
    pressure_angle: Optional[float] = PressureAngleOption,
    clearance: Optional[float] = ClearanceOption,
    backlash: Optional[float] = BacklashOption,
) -> None:
    """Print the resolved dimensions of both gears at unit scale."""
    _check_config_file(config_file)
    try:
        page_state, _ = build_state(
            config_file, left_teeth, right_teeth, pitch, pressure_angle, clearance, backlash
        )
        _echo_gear("Left", page_state.left)
        _echo_gear("Right", page_state.right)
        distance = calc_center_distance(page_state.left, page_state.right)
        ratio = calc_gear_ratio(page_state.left, page_state.right)
        contact = calc_contact_ratio(page_state.left, page_state.right)
    except GearSketchError as err:
        _fail(err)
    typer.echo(f"Center distance: {distance:.5f}")
    typer.echo(f"Gear ratio:      {ratio:.4f}")
    typer.echo(f"Contact ratio:   {contact:.4f}")


@app.command("save-config")
def save_config_command(
    output: Path = typer.Argument(..., help="JSON file to write"),
    config_file: Optional[Path] = ConfigOption,
    left_teeth: Optional[int] = LeftTeethOption,
    right_teeth: Optional[int] = RightTeethOption,
    pitch: Optional[float] = PitchOption,
    pressure_angle: Optional[float] = PressureAngleOption,
    clearance: Optional[float] = ClearanceOption,
    backlash: Optional[float] = BacklashOption,
    steps: Optional[int] = StepsOption,
    dpi: Optional[int] = typer.Option(None, "--dpi", help="Print resolution"),
) -> None:
    """Write the gear parameters and drawing settings to a JSON file."""
    _check_config_file(config_file)
    try:
        page_state, config = build_state(
            config_file, left_teeth, right_teeth, pitch, pressure_angle, clearance, backlash, steps
        )
        if dpi is not None:
            config = dataclasses.replace(config, print_dpi=dpi)
    except GearSketchError as err:
        _fail(err)
    save_config(output, page_state, config)
    typer.echo(f"Config saved to {output}")


if __name__ == "__main__":
    app()
