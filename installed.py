# installed.py
from __future__ import annotations
import threading
from typing import Optional

from logger import log
from storage.config_file import ConfigFile


class InstallStatus:
    """
    Process-wide "is the wiki installed" flag.

    Read once from the configuration artifact at startup and flipped only
    by a successful finalize; it is never re-read mid-session.
    """

    def __init__(self) -> None:
        self._installed: Optional[bool] = None
        self._lock = threading.Lock()

    def init_from_config(self, config_file: ConfigFile) -> bool:
        with self._lock:
            self._installed = config_file.is_installed()
        log.info("Install status loaded from %s: installed=%s",
                 config_file.path, self._installed)
        return self._installed

    def is_installed(self) -> bool:
        if self._installed is None:
            raise RuntimeError("Install status has not been initialised.")
        return self._installed

    def mark_installed(self) -> None:
        with self._lock:
            self._installed = True
        log.info("Install status set to installed")


install_status = InstallStatus()
