# errors.py


class WizardError(Exception):
    """Base class for wizard errors."""
    stage = "wizard"
    fatal = False


class AlreadyInstalledError(WizardError):
    """The target is installed; the wizard must not run again."""
    stage = "installed"


class InstallationLockedError(WizardError):
    """Another finalize holds the installation lock."""
    stage = "lock"


class FinalizationError(WizardError):
    """Finalize failed before the configuration artifact was written; retryable."""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class FatalFinalizationError(FinalizationError):
    """Writing the configuration artifact failed after storage was provisioned."""
    fatal = True

    def __init__(self, message: str, stage: str = "config"):
        super().__init__(message, stage)
