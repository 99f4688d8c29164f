# state.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Tuple

from settings import InstallerSettings


class Step(IntEnum):
    ENVIRONMENT = 0
    SITE_AND_DATASTORE = 1
    ADMIN_ACCOUNT = 2
    ATTACHMENTS_AND_OPTIONS = 3
    COMPLETE = 4


STEP_COUNT = len(Step)

# Field names owned by each step
STEP_FIELDS: Dict[Step, Tuple[str, ...]] = {
    Step.ENVIRONMENT: (),
    Step.SITE_AND_DATASTORE: ("SiteName", "SiteUrl", "DataStoreType", "ConnectionString"),
    Step.ADMIN_ACCOUNT: ("AdminEmail", "AdminPassword", "PasswordConfirmation"),
    Step.ATTACHMENTS_AND_OPTIONS: ("AttachmentsFolder", "UseObjectCache"),
    Step.COMPLETE: (),
}

SECRET_FIELDS = frozenset({"AdminPassword", "PasswordConfirmation"})

DEFAULT_ATTACHMENTS_FOLDER = "~/attachments"


class Language(str, Enum):
    """Installer languages, in the order the language picker lists them."""
    ENGLISH = "en"
    CZECH = "cs"
    GERMAN = "de"
    DUTCH = "nl"
    SPANISH = "es"
    HINDI = "hi"
    ITALIAN = "it"
    POLISH = "pl"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    SWEDISH = "sv"


def parse_toggle(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WizardState:
    current_step: int = 0
    fields: Dict[str, str] = field(default_factory=dict)
    selected_language: Language = Language.ENGLISH
    installed: bool = False

    @classmethod
    def new(cls, settings: InstallerSettings) -> "WizardState":
        """Fresh session with the form defaults pre-filled."""
        return cls(fields={
            "DataStoreType": "sqlite",
            "SiteUrl": settings.base_url,
            "AttachmentsFolder": DEFAULT_ATTACHMENTS_FOLDER,
            "UseObjectCache": "false",
        })

    @property
    def step(self) -> Step:
        return Step(self.current_step)

    def step_values(self, step: Step) -> Dict[str, str]:
        return {name: self.fields.get(name, "") for name in STEP_FIELDS[step]}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_step": self.current_step,
            "fields": dict(self.fields),
            "selected_language": self.selected_language.value,
            "installed": self.installed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WizardState":
        step = int(data.get("current_step", 0))
        if not 0 <= step < STEP_COUNT:
            raise ValueError(f"Step index {step} is out of range.")
        return cls(
            current_step=step,
            fields={str(k): str(v) for k, v in data.get("fields", {}).items()},
            selected_language=Language(data.get("selected_language", "en")),
            installed=bool(data.get("installed", False)),
        )
