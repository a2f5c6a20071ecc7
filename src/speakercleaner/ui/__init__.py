"""UI package: the cleaner screen and the controller that drives it."""

from .controllers import UiConfig, UiController  # re-export for convenience
from .screen import CleanerScreen

__all__ = ["UiConfig", "UiController", "CleanerScreen"]
