"""sigmem — pattern learning and memory consolidation for Sigels."""

__version__ = "0.1.0"

from sigmem.config import Config
from sigmem.engine import SigelEngine
from sigmem.sigel import Sigel

__all__ = [
    "__version__",
    "Config",
    "Sigel",
    "SigelEngine",
]
