"""Console helpers: cancel key, key prompts, quick-edit mode and banner."""

import os
import sys

ESCAPE = "\x1b"
SPACE = " "

# Console input mode flags (wincon.h).
_STD_INPUT_HANDLE = -10
_ENABLE_QUICK_EDIT_MODE = 0x0040
_ENABLE_EXTENDED_FLAGS = 0x0080

BANNER = """
+------------------------------+
|   exportwatch has started.   |
+------------------------------+"""


def escape_pressed() -> bool:
    """
    Check, without blocking, whether ESC was pressed in the console.

    Only Windows consoles support non-blocking key reads; elsewhere this
    always returns False and Ctrl+C is the cancel key.
    """
    if os.name != "nt":
        return False

    import msvcrt

    while msvcrt.kbhit():
        if msvcrt.getwch() == ESCAPE:
            return True
    return False


def read_key() -> str:
    """Block until the operator presses a key (a line on non-Windows consoles)."""
    if os.name == "nt":
        import msvcrt
        return msvcrt.getwch()

    line = sys.stdin.readline()
    return line[:1] if line else ""


def disable_quick_edit() -> bool:
    """
    Turn off quick-edit mode in a Windows console.

    With quick-edit on, clicking the console window selects text and pauses
    the process until the selection is cleared.

    Returns:
        True if the console mode was changed
    """
    if os.name != "nt":
        return False

    import ctypes
    from ctypes import wintypes

    kernel32 = ctypes.windll.kernel32
    handle = kernel32.GetStdHandle(_STD_INPUT_HANDLE)
    mode = wintypes.DWORD()
    if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        return False

    new_mode = mode.value & ~(_ENABLE_QUICK_EDIT_MODE | _ENABLE_EXTENDED_FLAGS)
    return bool(kernel32.SetConsoleMode(handle, new_mode))


def print_banner() -> None:
    print(BANNER)
    print("Watching for exports. Press ESC or Ctrl+C to stop.")
