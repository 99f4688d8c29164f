# storage/config_file.py
from __future__ import annotations
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

import yaml

from logger import log


class ConfigFileError(Exception):
    """The configuration artifact exists but is not a YAML mapping."""
    pass


class ConfigFile:
    """The wiki's YAML settings file, the artifact the installer commits."""

    def __init__(self, path):
        self.path = Path(path)

    # -- Read --------------------------------------------------------------

    def read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(f"{self.path} does not contain a settings mapping.")
        return data

    def is_installed(self) -> bool:
        return bool(self.read().get("installed", False))

    # -- Write -------------------------------------------------------------

    def write(self, values: Dict[str, Any]) -> None:
        """
        Merge values into the file, keeping unrelated keys.

        The new content goes to a temp file in the same directory which then
        replaces the artifact, so readers never see a partial file.
        """
        config = self.read()
        config.update(values)
        fd, tmp = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        log.info("Wrote configuration to %s", self.path)
