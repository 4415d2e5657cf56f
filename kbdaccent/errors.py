"""Error taxonomy; none of these is fatal to the running tray"""


class KbdAccentError(Exception):
    pass


class ToolUnavailable(KbdAccentError):
    """openrgb is not on PATH"""

    def __init__(self, tool: str):
        super().__init__(f"'{tool}' not found on PATH")
        self.tool = tool


class InvocationFailed(KbdAccentError):
    """openrgb ran but exited non-zero, timed out or could not be spawned"""

    def __init__(self, command: str, returncode=None, detail: str = ""):
        msg = f"command failed: {command}"
        if returncode is not None:
            msg += f" (exit {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.command = command
        self.returncode = returncode
        self.detail = detail


class UnmappedColor(KbdAccentError):
    """A color name with no palette entry"""

    def __init__(self, name: str):
        super().__init__(f"no palette entry for color '{name}'")
        self.name = name


class InvalidInput(KbdAccentError):
    """Malformed hex color typed by the user"""

    def __init__(self, text: str):
        super().__init__(f"not a hex color: {text!r}")
        self.text = text
