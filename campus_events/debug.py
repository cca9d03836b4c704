"""
Debug output for Campus Events.

Every component writes timestamped, tagged lines to stderr through
debug_print(). Output is off until set_debug() enables it (from the
[General] debug config key or the --debug command line flag).
"""

from datetime import datetime
import sys


_debug_enabled: bool = False


def set_debug(enabled: bool) -> None:
    """Enable or disable debug output for the whole application."""
    global _debug_enabled
    _debug_enabled = enabled


def is_debug_enabled() -> bool:
    return _debug_enabled


def debug_print(tag: str, message: str) -> None:
    """Print '[HH:MM:SS] TAG: message' to stderr when debugging is on."""
    if not _debug_enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {message}", file=sys.stderr)
