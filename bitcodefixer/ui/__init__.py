"""
BitCodeFixer UI Module
Terminal color helpers.
"""

from .colors import colorize, colors_enabled

__all__ = ["colorize", "colors_enabled"]
