"""
kbdaccent entry point
- no action flags: tray app following the desktop accent color
- --color/--mode/--accent: apply once and exit
- --list-devices: print OpenRGB devices
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from . import colors
from .accent import GnomeAccentSource, StaticAccentSource
from .errors import InvalidInput, KbdAccentError
from .log import setup_logging
from .runner import ProcessRunner

logger = logging.getLogger("kbdaccent")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kbdaccent", description="Sync keyboard RGB with the desktop accent color")
    parser.add_argument("--color", type=str, help="Palette name (e.g. teal) or hex color (e.g. #ff8800)")
    parser.add_argument("--mode", type=str, help="Lighting effect: " + ", ".join(e.id for e in colors.EFFECTS))
    parser.add_argument("--accent", type=str, help="Apply the palette color for this accent name")
    parser.add_argument("--list-devices", action="store_true", help="List devices known to OpenRGB")
    parser.add_argument("--settings", type=str, metavar="PATH", help="Use this INI file instead of the default settings")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def resolve_color(value: str) -> str:
    entry = colors.lookup(value)
    if entry is not None:
        return entry.hex
    return colors.normalize_hex(value)


def handle_cli(args, runner: ProcessRunner) -> int:
    if args.list_devices:
        try:
            devices = runner.list_devices()
        except KbdAccentError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if not devices:
            print("No devices reported by OpenRGB")
        for index, name in devices:
            print(f"{index}: {name}")
        return 0

    if args.color:
        try:
            hex_color = resolve_color(args.color)
        except InvalidInput as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
    else:
        source = StaticAccentSource(args.accent) if args.accent is not None else GnomeAccentSource()
        hex_color = colors.resolve_accent(source.read()).hex

    result = runner.apply(hex_color, args.mode)
    if result.pending is not None:
        # One-shot: wait so the exit status reflects the device call
        code = result.pending.result()
        return 0 if code == 0 else 1
    return 0 if result.ok else 1


def run_tray(settings_path=None) -> int:
    from PyQt6.QtCore import QTimer
    from PyQt6.QtWidgets import QApplication

    from .controller import SyncController
    from .settings import open_settings
    from .tray import TrayMenu

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    # Let Ctrl+C / SIGTERM stop the event loop
    for sig in (signal.SIGTERM, signal.SIGINT):
        signal.signal(sig, lambda s, f: QApplication.instance().quit())
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(500)

    settings = open_settings(settings_path)
    runner = ProcessRunner()
    controller = SyncController.create(settings, GnomeAccentSource(), runner)
    tray = TrayMenu(controller)
    runner.notify = tray.notify
    tray.show()
    first = controller.last_result
    if first is not None and first.error is not None:
        tray.notify("Keyboard color not applied", str(first.error))

    logger.info("Application started")
    try:
        return app.exec()
    finally:
        controller.teardown()
        runner.shutdown()
        logger.info("Application stopped")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    if args.list_devices or args.color or args.mode or args.accent is not None:
        runner = ProcessRunner()
        try:
            return handle_cli(args, runner)
        finally:
            runner.shutdown()
    return run_tray(args.settings)


if __name__ == "__main__":
    sys.exit(main())
