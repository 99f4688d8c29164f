# settings.py
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

CONFIG_FILENAME = "wiki.yaml"
DEFAULT_BASE_URL = "http://localhost"
DEFAULT_MIN_PASSWORD_LENGTH = 6
DEFAULT_PROBE_TIMEOUT = 10.0


@dataclass
class InstallerSettings:
    """Where the wiki is being installed and the knobs the wizard honours."""
    install_root: Path
    config_path: Path
    base_url: str = DEFAULT_BASE_URL
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT

    @classmethod
    def for_root(cls, install_root, config_path=None, **kwargs) -> "InstallerSettings":
        root = Path(install_root).resolve()
        config = Path(config_path) if config_path else root / CONFIG_FILENAME
        return cls(install_root=root, config_path=config, **kwargs)

    @classmethod
    def from_env(cls, install_root: Optional[str] = None) -> "InstallerSettings":
        """Build settings from WIKI_* environment variables."""
        root = install_root or os.environ.get("WIKI_INSTALL_ROOT") or os.getcwd()
        return cls.for_root(
            root,
            config_path=os.environ.get("WIKI_CONFIG_PATH"),
            base_url=os.environ.get("WIKI_BASE_URL", DEFAULT_BASE_URL),
            min_password_length=int(
                os.environ.get("WIKI_MIN_PASSWORD_LENGTH", DEFAULT_MIN_PASSWORD_LENGTH)
            ),
            probe_timeout=float(
                os.environ.get("WIKI_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT)
            ),
        )

    @property
    def data_directory(self) -> Path:
        return self.install_root / "data"

    @property
    def lock_path(self) -> Path:
        return self.config_path.with_name(self.config_path.name + ".lock")

    def resolve(self, raw: str) -> Path:
        """
        Map an operator-supplied path into the install root.

        '~/x' and 'x' are relative to the root; absolute paths must already
        sit inside it. Raises ValueError for anything that escapes the root.
        """
        raw = raw.strip()
        if raw.startswith("~/") or raw.startswith("~\\"):
            raw = raw[2:]
        elif raw == "~":
            raw = ""
        raw = raw.replace("\\", "/")
        candidate = Path(raw)
        if not candidate.is_absolute():
            candidate = self.install_root / candidate
        resolved = candidate.resolve()
        if resolved != self.install_root and self.install_root not in resolved.parents:
            raise ValueError(f"'{raw}' is outside the install root {self.install_root}.")
        return resolved
