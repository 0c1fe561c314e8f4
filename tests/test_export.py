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

import matplotlib.image as mimage
import pytest as pytest
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_config import GearSketchConfig
from gearsketch.gearsketch_wrapper import PageState
from gearsketch.gearsketch_export import *

# low resolution keeps the tests fast
DPI = 20


def test_printable_area():
    assert printable_area(300) == (3225, 2475)
    assert printable_area(DPI) == (215, 165)
    assert printable_area(DPI, margin=0) == (220, 170)


def test_rasterize_page():
    image = rasterize_page(PageState(), DPI)
    assert image.shape == (165, 215, 4)


def test_export_png(tmp_path):
    filepath = export_png(PageState(), tmp_path / "gears.png", DPI)
    with open(filepath, "rb") as f:
        assert f.read(8) == b"\x89PNG\r\n\x1a\n"
    assert mimage.imread(filepath).shape == (165, 215, 4)


def test_export_pdf(tmp_path):
    filepath = export_pdf(PageState(), tmp_path / "gears.pdf", DPI)
    with open(filepath, "rb") as f:
        assert f.read(4) == b"%PDF"


def test_export_page_dispatch(tmp_path):
    assert export_page(PageState(), tmp_path / "a.PDF", DPI).exists()
    assert export_page(PageState(), tmp_path / "a.png", DPI).exists()
    with pytest.raises(ValueError):
        export_page(PageState(), tmp_path / "a.svg", DPI)


def test_export_invalid_state(tmp_path):
    state = PageState().with_left_teeth(2)
    with pytest.raises(InvalidSpecError):
        export_pdf(state, tmp_path / "gears.pdf", DPI)
    assert not (tmp_path / "gears.pdf").exists()


def test_export_margin(tmp_path):
    config = GearSketchConfig(margin=0.5)
    image = rasterize_page(PageState(), DPI, config)
    assert image.shape == (160, 210, 4)
