"""Application package for the speaker cleaner.

Holds the windowed and headless runners used by :mod:`speakercleaner.cli`.
"""

from . import cleaner

__all__ = ["cleaner"]
