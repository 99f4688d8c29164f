# probes/filesystem.py
from __future__ import annotations
import stat
import uuid
from pathlib import Path

from logger import log
from probes.result import ProbeResult
from settings import InstallerSettings

CONFIG_LABEL = "Configuration file"
ATTACHMENTS_LABEL = "Attachments folder"


def _probe_file_name() -> str:
    return f".wiki-installer-{uuid.uuid4().hex}.tmp"


def _touch_and_remove(directory: Path) -> None:
    probe = directory / _probe_file_name()
    probe.write_text("")
    probe.unlink()


def test_config_writable(path) -> ProbeResult:
    """Can the configuration artifact be opened for writing?"""
    path = Path(path)
    target = str(path)
    try:
        if path.exists():
            if path.is_dir():
                log.warning("Config probe FAIL: %s is a directory", path)
                return ProbeResult(CONFIG_LABEL, target, False,
                                   f"{path} is a directory, not a file.",
                                   error="not_a_file")
            with open(path, "a"):
                pass
        else:
            if not path.parent.is_dir():
                log.warning("Config probe FAIL: %s missing", path.parent)
                return ProbeResult(CONFIG_LABEL, target, False,
                                   f"The directory {path.parent} does not exist.",
                                   error="missing")
            _touch_and_remove(path.parent)
    except PermissionError as e:
        log.warning("Config probe FAIL: %s is read-only: %s", path, e)
        return ProbeResult(CONFIG_LABEL, target, False,
                           f"{path} is read-only or its directory is not writable.",
                           error="read_only")
    except OSError as e:
        log.warning("Config probe FAIL: %s: %s", path, e)
        return ProbeResult(CONFIG_LABEL, target, False,
                           f"{path} could not be opened for writing: {e}",
                           error="inaccessible")
    log.info("Config probe PASS: %s", path)
    return ProbeResult(CONFIG_LABEL, target, True, f"{path} is writable.")


def test_attachments_folder(raw_path: str, settings: InstallerSettings) -> ProbeResult:
    """
    Does the attachments folder exist inside the install root and accept files?

    A missing folder and a folder that refuses writes are reported with
    different error codes.
    """
    try:
        path = settings.resolve(raw_path)
    except ValueError as e:
        log.warning("Attachments probe FAIL: %s", e)
        return ProbeResult(ATTACHMENTS_LABEL, raw_path, False, str(e),
                           error="outside_root")

    target = str(path)
    try:
        mode = path.stat().st_mode
    except (FileNotFoundError, NotADirectoryError):
        log.warning("Attachments probe FAIL: %s does not exist", path)
        return ProbeResult(ATTACHMENTS_LABEL, target, False,
                           f"The folder {path} does not exist.", error="missing")
    except OSError as e:
        # EACCES on a parent directory
        log.warning("Attachments probe FAIL: %s not accessible: %s", path, e)
        return ProbeResult(ATTACHMENTS_LABEL, target, False,
                           f"Permission denied while looking for the folder {path}.",
                           error="not_accessible")
    if not stat.S_ISDIR(mode):
        log.warning("Attachments probe FAIL: %s is not a directory", path)
        return ProbeResult(ATTACHMENTS_LABEL, target, False,
                           f"{path} exists but is not a folder.",
                           error="not_a_directory")
    try:
        _touch_and_remove(path)
    except OSError as e:
        log.warning("Attachments probe FAIL: %s not writable: %s", path, e)
        return ProbeResult(ATTACHMENTS_LABEL, target, False,
                           f"The folder {path} exists but is not writable.",
                           error="not_writable")
    log.info("Attachments probe PASS: %s", path)
    return ProbeResult(ATTACHMENTS_LABEL, target, True,
                       f"The folder {path} exists and is writable.")
