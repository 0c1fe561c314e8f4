from importlib.metadata import version, PackageNotFoundError
from gearsketch.defs import *
from gearsketch.function_generators import *
from gearsketch.gearsketch_base_classes import *
from gearsketch.gearteeth import *
from gearsketch.gearsketch_core import *
from gearsketch.gearmath import *
from gearsketch.gearsketch_wrapper import *
from gearsketch.gearsketch_config import *
from gearsketch.gearsketch_matplotlib import *
from gearsketch.gearsketch_export import *


try:
    __version__ = version("gearsketch")
except PackageNotFoundError:
    __version__ = "unknown version"
