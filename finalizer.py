# finalizer.py
from __future__ import annotations
import asyncio
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from sqlalchemy.exc import SQLAlchemyError

from errors import (
    AlreadyInstalledError, FatalFinalizationError, FinalizationError,
    InstallationLockedError,
)
from installed import InstallStatus, install_status
from logger import log
from probes.datastore import test_datastore_connection
from settings import InstallerSettings
from state import WizardState, parse_toggle
from storage.accounts import AdminExistsError, create_admin_account
from storage.config_file import ConfigFile, ConfigFileError
from storage.drivers import DataStoreType, connect, parse_store_type
from storage.schema import init_schema
from storage.site_config import save_site_configuration

# Schema and admin provisioning run here, off the event loop
_provision_pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="provision")


@dataclass
class FinalizationRecord:
    site_name: str
    site_url: str
    data_store_type: DataStoreType
    connection_string: str
    attachments_folder: str
    use_object_cache: bool
    admin_email: str
    admin_id: Optional[int] = None

    @classmethod
    def from_state(cls, state: WizardState) -> "FinalizationRecord":
        f = state.fields
        return cls(
            site_name=f.get("SiteName", "").strip(),
            site_url=f.get("SiteUrl", "").strip(),
            data_store_type=parse_store_type(f.get("DataStoreType")),
            connection_string=f.get("ConnectionString", "").strip(),
            attachments_folder=f.get("AttachmentsFolder", "").strip(),
            use_object_cache=parse_toggle(f.get("UseObjectCache", "false")),
            admin_email=f.get("AdminEmail", "").strip(),
        )

    def site_settings(self) -> Dict[str, str]:
        """Settings the running wiki reads from its data store."""
        return {
            "siteName": self.site_name,
            "siteUrl": self.site_url,
            "attachmentsFolder": self.attachments_folder,
            "useObjectCache": "true" if self.use_object_cache else "false",
        }

    def to_config(self) -> Dict[str, Any]:
        return {
            "installed": True,
            "siteName": self.site_name,
            "siteUrl": self.site_url,
            "dataStoreType": self.data_store_type.value,
            "connectionString": self.connection_string,
            "attachmentsFolder": self.attachments_folder,
            "useObjectCache": self.use_object_cache,
        }


class InstallationFinalizer:
    """
    Commits an installation.

    finalize() re-probes the data store, provisions the schema, the site
    settings and the admin account, then writes the configuration artifact.
    Failures before the artifact write are retryable; a failure while
    writing it is fatal and leaves the lock file in place.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        status: InstallStatus = install_status,
        config_file: Optional[ConfigFile] = None,
    ) -> None:
        self.settings = settings
        self.status = status
        self.config_file = config_file or ConfigFile(settings.config_path)
        self._provisioning: Optional[Future] = None

    # -- Lock ------------------------------------------------------------------

    def _acquire_lock(self) -> None:
        lock_path = self.settings.lock_path
        try:
            fd = os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
        except FileExistsError:
            raise InstallationLockedError(
                f"Another installation holds {lock_path}. If no installer is "
                "running, inspect the environment before removing it."
            ) from None
        except OSError as e:
            raise FinalizationError(f"Cannot create lock file {lock_path}: {e}",
                                    stage="lock") from e
        try:
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))
        except OSError as e:
            self._release_lock()
            raise FinalizationError(f"Cannot write lock file {lock_path}: {e}",
                                    stage="lock") from e

    def _release_lock(self) -> None:
        try:
            self.settings.lock_path.unlink()
        except FileNotFoundError:
            pass

    # -- Commit ----------------------------------------------------------------

    async def finalize(self, state: WizardState) -> FinalizationRecord:
        if self.status.is_installed():
            raise AlreadyInstalledError("The wiki is already installed.")
        self._acquire_lock()
        try:
            record = await self._commit(state)
        except FatalFinalizationError:
            log.critical("Installation did not complete cleanly; lock kept at %s",
                         self.settings.lock_path)
            raise
        except BaseException:
            self._release_after_provisioning()
            raise
        self._release_lock()
        return record

    def _release_after_provisioning(self) -> None:
        provisioning, self._provisioning = self._provisioning, None
        if provisioning is None or provisioning.done():
            self._release_lock()
            return
        # The worker thread cannot be interrupted; hold the lock until it ends
        log.warning("Finalize interrupted while provisioning; lock held until it finishes")
        provisioning.add_done_callback(lambda _: self._release_lock())

    async def _commit(self, state: WizardState) -> FinalizationRecord:
        record = FinalizationRecord.from_state(state)
        password = state.fields.get("AdminPassword", "")

        probe = await test_datastore_connection(
            record.data_store_type, record.connection_string, self.settings
        )
        if not probe.succeeded:
            log.error("Finalize aborted: data store unreachable: %s", probe.message)
            raise FinalizationError(
                f"The data store is not reachable: {probe.message}", stage="probe"
            )

        self._provisioning = _provision_pool.submit(self._provision, record, password)
        record.admin_id = await asyncio.wrap_future(self._provisioning)
        self._provisioning = None

        try:
            self.config_file.write(record.to_config())
        except (OSError, ConfigFileError, yaml.YAMLError) as e:
            raise FatalFinalizationError(
                f"The data store was initialised but {self.config_file.path} "
                f"could not be written: {e}"
            ) from e

        self.status.mark_installed()
        log.info("Installation of '%s' complete", record.site_name)
        return record

    def _provision(self, record: FinalizationRecord, password: str) -> int:
        stage = "schema"
        try:
            with connect(record.data_store_type, record.connection_string,
                         self.settings) as conn:
                init_schema(conn)
                stage = "site"
                save_site_configuration(conn, record.site_settings())
                stage = "admin"
                return create_admin_account(conn, record.admin_email, password)
        except AdminExistsError as e:
            log.error("Finalize aborted: %s", e)
            raise FinalizationError(str(e), stage="admin") from e
        except (SQLAlchemyError, OSError, ValueError) as e:
            log.error("Finalize aborted during %s: %s", stage, e)
            raise FinalizationError(
                f"Data store {stage} step failed: {e}", stage=stage
            ) from e
