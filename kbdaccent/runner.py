"""
OpenRGB process runner
1. locate openrgb on PATH
2. try the named profile (blocking)
3. fall back to a direct per-device call (fire-and-forget, exit code in a Future)
"""

import logging
import re
import shutil
import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Tuple

from . import command
from . import config
from .errors import InvocationFailed, KbdAccentError, ToolUnavailable

logger = logging.getLogger("kbdaccent")

NotifyFn = Callable[[str, str], None]

DEVICE_LINE = re.compile(r"^\s*(\d+):\s*(.+?)\s*$")


@dataclass
class ApplyResult:
    ok: bool
    path: Optional[str] = None            # "profile" | "direct" | None
    error: Optional[KbdAccentError] = None
    pending: Optional[Future] = None      # direct path only; resolves to the exit code


def _log_notify(title: str, message: str) -> None:
    logger.debug(f"notify: {title}: {message}")


class ProcessRunner:
    def __init__(self, tool: str = config.TOOL, profile: Optional[str] = config.PROFILE,
                 device: int = config.DEVICE_INDEX, brightness: int = config.BRIGHTNESS,
                 profile_timeout: Optional[float] = config.PROFILE_TIMEOUT,
                 notify: Optional[NotifyFn] = None):
        self.tool = tool
        self.profile = profile
        self.device = device
        self.brightness = brightness
        self.profile_timeout = profile_timeout
        self.notify: NotifyFn = notify or _log_notify
        self._pending: Set[Future] = set()

    def find_tool(self) -> Optional[str]:
        return shutil.which(self.tool)

    # --- Apply ---
    def apply(self, hex_color: str, effect: Optional[str]) -> ApplyResult:
        tool_path = self.find_tool()
        if tool_path is None:
            err = ToolUnavailable(self.tool)
            logger.error(f"{err}; keyboard left unchanged")
            self.notify("OpenRGB not found", f"Install OpenRGB or set KBDACCENT_TOOL ({err})")
            return ApplyResult(ok=False, error=err)

        if self.profile:
            try:
                self._run_profile(tool_path, hex_color, effect)
                return ApplyResult(ok=True, path="profile")
            except InvocationFailed as e:
                logger.warning(f"Profile invocation failed, falling back to direct: {e}")

        try:
            pending = self._spawn_direct(tool_path, hex_color, effect)
        except InvocationFailed as e:
            logger.error(str(e))
            self.notify("OpenRGB failed", str(e))
            return ApplyResult(ok=False, error=e)
        return ApplyResult(ok=True, path="direct", pending=pending)

    def _run_profile(self, tool_path: str, hex_color: str, effect: Optional[str]) -> None:
        argv = [tool_path] + command.profile_args(self.profile, hex_color, effect)
        cmd = command.format_command(argv)
        logger.info(f"Executing: {cmd}")
        try:
            proc = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                  text=True, timeout=self.profile_timeout)
        except subprocess.TimeoutExpired:
            raise InvocationFailed(cmd, detail=f"timed out after {self.profile_timeout}s")
        except OSError as e:
            raise InvocationFailed(cmd, detail=str(e))
        if proc.returncode != 0:
            raise InvocationFailed(cmd, proc.returncode, (proc.stderr or "").strip())
        logger.debug(f"Profile applied: {cmd}")

    def _spawn_direct(self, tool_path: str, hex_color: str, effect: Optional[str]) -> Future:
        argv = [tool_path] + command.direct_args(self.device, hex_color, effect, self.brightness)
        cmd = command.format_command(argv)
        logger.info(f"Executing (detached): {cmd}")
        try:
            proc = subprocess.Popen(argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            raise InvocationFailed(cmd, detail=str(e))
        logger.debug(f"openrgb spawned: PID = {proc.pid}")

        pending: Future = Future()
        pending.set_running_or_notify_cancel()
        self._pending.add(pending)
        pending.add_done_callback(self._pending.discard)
        pending.add_done_callback(lambda f: self._log_exit(cmd, f))

        # Daemon thread: a hung openrgb must not keep the app from exiting
        waiter = threading.Thread(target=_collect_exit, args=(proc, pending),
                                  daemon=True, name=f"openrgb-wait-{proc.pid}")
        waiter.start()
        return pending

    def _log_exit(self, cmd: str, fut: Future) -> None:
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is not None:
            logger.error(f"Waiting for '{cmd}' failed: {exc}")
        elif fut.result() != 0:
            logger.warning(str(InvocationFailed(cmd, fut.result())))
        else:
            logger.debug(f"Direct invocation finished: {cmd}")

    # --- Queries ---
    def list_devices(self) -> List[Tuple[int, str]]:
        """Devices reported by `openrgb --list-devices` as (index, name)"""
        tool_path = self.find_tool()
        if tool_path is None:
            raise ToolUnavailable(self.tool)
        argv = [tool_path, "--list-devices"]
        cmd = command.format_command(argv)
        logger.info(f"Executing: {cmd}")
        try:
            proc = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                  text=True, timeout=self.profile_timeout)
        except subprocess.TimeoutExpired:
            raise InvocationFailed(cmd, detail="timed out")
        except OSError as e:
            raise InvocationFailed(cmd, detail=str(e))
        if proc.returncode != 0:
            raise InvocationFailed(cmd, proc.returncode, (proc.stderr or "").strip())
        return parse_device_list(proc.stdout)

    def shutdown(self) -> None:
        # Children keep running; their waiter threads die with the process
        running = len(self._pending)
        if running:
            logger.info(f"{running} openrgb call(s) still running, not waiting for them")


def _collect_exit(proc, pending: Future) -> None:
    try:
        code = proc.wait()
    except OSError as e:
        pending.set_exception(e)
    else:
        pending.set_result(code)


def parse_device_list(output: str) -> List[Tuple[int, str]]:
    devices = []
    for line in (output or "").splitlines():
        m = DEVICE_LINE.match(line)
        if m:
            devices.append((int(m.group(1)), m.group(2)))
    return devices
