"""LaTeX math to Unicode translation."""

from .parser import LatexConverter
from .symbols import LATEX_STYLES, LATEX_SYMBOLS, NOT_MAP

__all__ = ["LATEX_STYLES", "LATEX_SYMBOLS", "NOT_MAP", "LatexConverter"]
