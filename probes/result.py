# probes/result.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ProbeResult:
    label: str
    target: str
    succeeded: bool
    message: str = ""
    error: str = ""     # short cause code, empty on success

    @property
    def status_icon(self) -> str:
        return "✓" if self.succeeded else "✗"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "succeeded": self.succeeded,
            "message": self.message,
            "error": self.error,
        }

    def __str__(self) -> str:
        status = "PASS" if self.succeeded else f"FAIL ({self.error})"
        return f"[{self.status_icon}] {self.label}: {self.target} -> {status}"
