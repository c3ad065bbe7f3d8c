"""
ANSI colors for BitCodeFixer terminal output.
"""

import os
import sys

ELECTRIC_CYAN = "\033[38;5;51m"    # Headings / progress
BRIGHT_MAGENTA = "\033[38;5;201m"  # Model names
MID_GRAY = "\033[38;5;250m"        # Muted labels
RED = "\033[38;5;196m"            # Errors
GREEN = "\033[38;5;46m"           # Success

BOLD = "\033[1m"
RESET = "\033[0m"


def colors_enabled(stream=None) -> bool:
    """Colors only on a TTY, and never when NO_COLOR is set."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str, style: str = "") -> str:
    """Wrap text in color codes when the terminal supports them."""
    if not colors_enabled():
        return text
    return f"{style}{color}{text}{RESET}"
