# fedora-postinstall/postinstall/sudo_keeper.py

import subprocess
import threading
from typing import Optional

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import SUDO_REFRESH_INTERVAL
from postinstall.logger_utils import app_logger


class SudoKeepAlive:
    """
    Keeps the cached sudo credential fresh for the lifetime of a `with` block.

    Entering prompts once with `sudo -v`, then a daemon thread runs `sudo -n true`
    every `interval` seconds. Leaving the block, by any path, stops and joins the
    thread, so no refresh loop survives the run.
    """

    def __init__(self, interval: float = SUDO_REFRESH_INTERVAL):
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        con.print_info("Requesting sudo privileges for this session...")
        # Interactive: the password prompt needs the terminal.
        util.run_command(["sudo", "-v"], check=True)
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._refresh_loop, name="sudo-keepalive", daemon=True)
        self._thread.start()
        app_logger.info(f"sudo keep-alive started (refresh every {self.interval}s).")

    def _refresh_loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                util.run_command(["sudo", "-n", "true"], capture_output=True, check=True)
            except (subprocess.CalledProcessError, OSError) as e:
                app_logger.warning(f"sudo credential refresh failed: {e}")

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=max(self.interval, 1) + 5)
        if self._thread.is_alive():
            app_logger.warning("sudo keep-alive thread did not stop in time.")
        else:
            app_logger.info("sudo keep-alive stopped.")
        self._thread = None

    def __enter__(self) -> "SudoKeepAlive":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
