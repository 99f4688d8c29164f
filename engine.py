# engine.py
from __future__ import annotations
from typing import Dict, Mapping, Optional, Union

from errors import AlreadyInstalledError, FatalFinalizationError, WizardError
from finalizer import FinalizationRecord, InstallationFinalizer
from installed import InstallStatus, install_status
from logger import log
from probes import ProbeResult
from probes.datastore import test_datastore_connection
from probes.filesystem import test_attachments_folder, test_config_writable
from settings import InstallerSettings
from state import STEP_FIELDS, Language, Step, WizardState
from validators import ValidationResult, validate_step


class WizardEngine:
    """
    Drives one installation session through the wizard steps.

    Only advance() and retreat() move the step pointer, and advance() only
    moves it once the current step validates. Probes are informational and
    never touch the state.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        state: Optional[WizardState] = None,
        status: InstallStatus = install_status,
        finalizer: Optional[InstallationFinalizer] = None,
    ) -> None:
        if status.is_installed():
            raise AlreadyInstalledError("The wiki is already installed.")
        self.settings = settings
        self.status = status
        self.state = state or WizardState.new(settings)
        self.finalizer = finalizer or InstallationFinalizer(settings, status=status)
        self.fatal_error: Optional[FatalFinalizationError] = None
        self.record: Optional[FinalizationRecord] = None

    @property
    def step(self) -> Step:
        return self.state.step

    def _candidate(self, step: Step, submitted: Mapping[str, str]) -> Dict[str, str]:
        values = self.state.step_values(step)
        for name in STEP_FIELDS[step]:
            if name in submitted and submitted[name] is not None:
                values[name] = str(submitted[name])
        return values

    # -- Navigation -------------------------------------------------------------

    async def advance(self, step_fields: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Validate the current step and move forward.

        Returns the violations; an empty set means the step was accepted.
        Leaving the attachments step runs finalize, whose errors propagate
        with the pointer left on the attachments step.
        """
        if self.fatal_error is not None:
            raise self.fatal_error
        step = self.step
        if step is Step.COMPLETE:
            raise AlreadyInstalledError("Installation is already complete.")

        values = self._candidate(step, step_fields or {})
        violations = validate_step(step, values, self.settings.min_password_length)
        if violations:
            log.debug("Step %s rejected: %s", step.name,
                      ", ".join(sorted(v.field for v in violations)))
            return violations

        self.state.fields.update(values)
        if step is Step.ATTACHMENTS_AND_OPTIONS:
            await self._finalize()
        self.state.current_step = step + 1
        log.info("Advanced to step %s", self.step.name)
        return violations

    async def _finalize(self) -> None:
        try:
            self.record = await self.finalizer.finalize(self.state)
        except FatalFinalizationError as e:
            self.fatal_error = e
            raise
        self.state.installed = True

    def retreat(self) -> Step:
        if self.state.installed:
            raise WizardError("Installation is complete; there is nothing to go back to.")
        if self.state.current_step > 0:
            self.state.current_step -= 1
            log.info("Went back to step %s", self.step.name)
        return self.step

    def select_language(self, tag: Union[str, Language]) -> Language:
        language = Language(tag)
        self.state.selected_language = language
        return language

    # -- Probes -------------------------------------------------------------------

    def probe_config_writable(self) -> ProbeResult:
        return test_config_writable(self.settings.config_path)

    async def probe_datastore(
        self,
        store_type: Optional[str] = None,
        connection_string: Optional[str] = None,
    ) -> ProbeResult:
        if store_type is None:
            store_type = self.state.fields.get("DataStoreType", "")
        if connection_string is None:
            connection_string = self.state.fields.get("ConnectionString", "")
        return await test_datastore_connection(store_type, connection_string, self.settings)

    def probe_attachments_folder(self, path: Optional[str] = None) -> ProbeResult:
        if path is None:
            path = self.state.fields.get("AttachmentsFolder", "")
        if not path.strip():
            return ProbeResult("Attachments folder", "", False,
                               "No attachments folder was entered.", error="missing")
        return test_attachments_folder(path, self.settings)

    async def run_probe(self, fields: Optional[Mapping[str, str]] = None) -> ProbeResult:
        """Run the probe that belongs to the current step."""
        step = self.step
        values = self._candidate(step, fields or {})
        if step is Step.ENVIRONMENT:
            return self.probe_config_writable()
        if step is Step.SITE_AND_DATASTORE:
            return await self.probe_datastore(values["DataStoreType"], values["ConnectionString"])
        if step is Step.ATTACHMENTS_AND_OPTIONS:
            return self.probe_attachments_folder(values["AttachmentsFolder"])
        return ProbeResult(step.name, "", False,
                           f"There is nothing to test on step {step.name}.",
                           error="no_probe")
