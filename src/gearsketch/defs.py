import numpy as np

DEG2RAD = np.pi / 180
RAD2DEG = 180 / np.pi
PI = np.pi


# Dimension and shape conventions
# Points: 2D row vectors, shape(2)
# The sketch is planar, there is no z coordinate.
# Arrays: the point index comes before the coordinates, e.g. 100 points: (100,2)

# Geometry: directions
ORIGIN = np.array((0.0, 0.0))
"""The center of the coordinate system."""
UP = np.array((0.0, 1.0))
"""One unit step in the positive Y direction."""
DOWN = np.array((0.0, -1.0))
"""One unit step in the negative Y direction."""
RIGHT = np.array((1.0, 0.0))
"""One unit step in the positive X direction."""
LEFT = np.array((-1.0, 0.0))
"""One unit step in the negative X direction."""

# tolerance for inverse trigonometric arguments hitting +-1 by rounding
DOMAIN_TOL = 1e-12

# Involute curve resolution
DEFAULT_INVOLUTE_STEPS = 100
MIN_INVOLUTE_STEPS = 2

# Gear defaults (diametric pitch in teeth per inch)
DEFAULT_DIAMETRIC_PITCH = 12.0
DEFAULT_PRESSURE_ANGLE = 20.0
DEFAULT_CLEARANCE_MULT = 0.167
DEFAULT_BACKLASH_MULT = 0.05
DEFAULT_LEFT_TEETH = 50
DEFAULT_RIGHT_TEETH = 10

# Screen and paper, inches unless noted
SCREEN_PPI = 96  # browsers and toolkits rarely expose the real value
PRINT_DPI = 300
PAGE_WIDTH = 11.0
PAGE_HEIGHT = 8.5
PAGE_MARGIN = 0.25
GRID_SPACING = 0.5
SIDEBAR_WIDTH_PX = 200
