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

"""Drawing configuration and JSON parameter files."""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Tuple
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_wrapper import PageState


@dataclasses.dataclass(frozen=True)
class DebugConfig:
    """Reference circle overlays. Each toggle draws a circle of that radius."""

    show_base_circle: bool = False
    show_root_circle: bool = False
    show_outer_circle: bool = False
    show_pitch_circle: bool = False

    @classmethod
    def all_circles(cls):
        return cls(True, True, True, True)


@dataclasses.dataclass(frozen=True)
class GearSketchConfig:
    """Rendering and export settings.

    Attributes
    ----------
    ppi : int
        Screen pixels per inch.
    print_dpi : int
        Raster resolution of the printed page.
    margin : float
        Page margin in inches.
    involute_steps : int
        Samples per involute flank.
    debug : DebugConfig
        Reference circle overlays.
    """

    ppi: int = SCREEN_PPI
    print_dpi: int = PRINT_DPI
    margin: float = PAGE_MARGIN
    involute_steps: int = DEFAULT_INVOLUTE_STEPS
    debug: DebugConfig = DebugConfig()

    def __post_init__(self):
        for name in ("ppi", "print_dpi", "involute_steps"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidSpecError(f"{name} must be a positive integer, got {value!r}")
        if self.involute_steps < MIN_INVOLUTE_STEPS:
            raise InvalidSpecError(
                f"involute_steps must be at least {MIN_INVOLUTE_STEPS}"
            )
        if not 0 <= self.margin < PAGE_HEIGHT / 2:
            raise InvalidSpecError(f"margin out of range: {self.margin}")


def _from_dict(cls, data, section):
    if not isinstance(data, dict):
        raise InvalidSpecError(f"'{section}' must be a mapping, got {data!r}")
    names = {field.name for field in dataclasses.fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise InvalidSpecError(f"unknown keys in '{section}': {sorted(unknown)}")
    try:
        return cls(**data)
    except TypeError as err:
        raise InvalidSpecError(f"invalid '{section}' section: {err}") from err


def spec_to_dict(spec: GearSpec) -> dict:
    data = dataclasses.asdict(spec)
    data["convention"] = spec.convention.value
    return data


def spec_from_dict(data: dict, default: GearSpec, section="gear") -> GearSpec:
    """Build a spec from a (possibly partial) mapping, defaults fill the gaps."""
    merged = spec_to_dict(default)
    if not isinstance(data, dict):
        raise InvalidSpecError(f"'{section}' must be a mapping, got {data!r}")
    merged.update(data)
    return _from_dict(GearSpec, merged, section)


def config_to_dict(config: GearSketchConfig) -> dict:
    return dataclasses.asdict(config)


def config_from_dict(data: dict) -> GearSketchConfig:
    if not isinstance(data, dict):
        raise InvalidSpecError(f"'config' must be a mapping, got {data!r}")
    data = dict(data)
    debug = _from_dict(DebugConfig, data.pop("debug", {}), "config.debug")
    return _from_dict(GearSketchConfig, {**data, "debug": debug}, "config")


def save_config(
    filepath, page_state: PageState, config: GearSketchConfig = GearSketchConfig()
) -> Path:
    """Write both gear specs and the drawing settings to a JSON file."""
    filepath = Path(filepath)
    data = {
        "left": spec_to_dict(page_state.left),
        "right": spec_to_dict(page_state.right),
        "config": config_to_dict(config),
    }
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)
    logging.info(f"Saved gear config to {filepath}")
    return filepath


def load_config(filepath) -> Tuple[PageState, GearSketchConfig]:
    """Read a JSON file written by `save_config`.

    Missing sections and keys fall back to the defaults, unknown keys are
    rejected.

    Raises
    ------
    InvalidSpecError
        If the file is not valid JSON or holds invalid values.
    """
    filepath = Path(filepath)
    with open(filepath) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as err:
            raise InvalidSpecError(f"{filepath} is not valid JSON: {err}") from err
    if not isinstance(data, dict):
        raise InvalidSpecError(f"{filepath} must hold a JSON object")
    unknown = set(data) - {"left", "right", "config"}
    if unknown:
        raise InvalidSpecError(f"unknown sections in {filepath}: {sorted(unknown)}")

    defaults = PageState()
    page_state = PageState(
        left=spec_from_dict(data.get("left", {}), defaults.left, "left"),
        right=spec_from_dict(data.get("right", {}), defaults.right, "right"),
    )
    config = config_from_dict(data.get("config", {}))
    logging.info(f"Loaded gear config from {filepath}")
    return page_state, config
