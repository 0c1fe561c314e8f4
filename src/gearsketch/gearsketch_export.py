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

import logging
import time
from pathlib import Path
import numpy as np
from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg
import matplotlib.image as mimage
from gearsketch.defs import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearsketch_wrapper import PageState
from gearsketch.gearsketch_config import GearSketchConfig
from gearsketch.gearsketch_matplotlib import render_page, figure_to_rgba


def printable_area(dpi, margin=PAGE_MARGIN):
    """Width and height in pixels of the landscape letter page minus the margin."""
    return int(dpi * (PAGE_WIDTH - margin)), int(dpi * (PAGE_HEIGHT - margin))


def rasterize_page(
    page_state: PageState,
    dpi: int = PRINT_DPI,
    config: GearSketchConfig = GearSketchConfig(),
) -> np.ndarray:
    """Render the printable area at `dpi`, one inch of diametric pitch is `dpi` pixels.

    Returns
    -------
    np.ndarray
        RGBA image of shape (height, width, 4), landscape orientation.
    """
    width, height = printable_area(dpi, config.margin)
    fig = render_page(page_state, width, height, dpi, config)
    return figure_to_rgba(fig)


def export_png(
    page_state: PageState,
    filepath,
    dpi: int = PRINT_DPI,
    config: GearSketchConfig = GearSketchConfig(),
) -> Path:
    """Write the landscape page raster as PNG."""
    filepath = Path(filepath)
    start = time.time()
    image = rasterize_page(page_state, dpi, config)
    mimage.imsave(filepath, image, format="png", dpi=dpi)
    logging.info(f"PNG exported to {filepath} in {time.time()-start:.5f} seconds")
    return filepath


def export_pdf(
    page_state: PageState,
    filepath,
    dpi: int = PRINT_DPI,
    config: GearSketchConfig = GearSketchConfig(),
) -> Path:
    """Export a print-ready portrait letter PDF.

    The landscape page raster is rotated 90 degrees counter-clockwise and
    placed on the portrait page with half a margin on every side, so the gears
    print at true size.
    """
    filepath = Path(filepath)
    start = time.time()
    image = rasterize_page(page_state, dpi, config)
    logging.info(f"Page rasterized in {time.time()-start:.5f} seconds")

    rotated = np.rot90(image)
    offset = config.margin / 2
    page = Figure(figsize=(PAGE_HEIGHT, PAGE_WIDTH), dpi=dpi)
    FigureCanvasAgg(page)
    ax = page.add_axes(
        [
            offset / PAGE_HEIGHT,
            offset / PAGE_WIDTH,
            (PAGE_HEIGHT - config.margin) / PAGE_HEIGHT,
            (PAGE_WIDTH - config.margin) / PAGE_WIDTH,
        ]
    )
    ax.imshow(rotated, interpolation="nearest", aspect="auto")
    ax.set_axis_off()

    start = time.time()
    page.savefig(filepath, format="pdf", dpi=dpi)
    logging.info(f"PDF exported to {filepath} in {time.time()-start:.5f} seconds")
    return filepath


def export_page(
    page_state: PageState,
    filepath,
    dpi: int = PRINT_DPI,
    config: GearSketchConfig = GearSketchConfig(),
) -> Path:
    """Export by file extension, .pdf or .png."""
    ext = Path(filepath).suffix.lower()
    if ext == ".pdf":
        return export_pdf(page_state, filepath, dpi, config)
    elif ext == ".png":
        return export_png(page_state, filepath, dpi, config)
    else:
        raise ValueError(f"Unsupported export format '{ext}', use .pdf or .png")
