# tests/conftest.py
import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from installed import InstallStatus
from settings import InstallerSettings
from state import WizardState
from storage.config_file import ConfigFile

DB_CONNECTION = r"Data Source=|DataDirectory|\wiki.db"

SITE_FIELDS = {
    "SiteName": "Acceptance tests",
    "SiteUrl": "http://localhost",
    "DataStoreType": "sqlite",
    "ConnectionString": DB_CONNECTION,
}
ADMIN_FIELDS = {
    "AdminEmail": "admin@localhost",
    "AdminPassword": "password",
    "PasswordConfirmation": "password",
}
ATTACHMENT_FIELDS = {
    "AttachmentsFolder": "~/attachments",
    "UseObjectCache": "true",
}

@pytest.fixture
def settings(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    return InstallerSettings.for_root(root, probe_timeout=5.0)

@pytest.fixture
def status(settings):
    s = InstallStatus()
    s.init_from_config(ConfigFile(settings.config_path))
    return s

@pytest.fixture
def sqlite_db(settings):
    """An empty SQLite database at <root>/data/wiki.db."""
    settings.data_directory.mkdir()
    path = settings.data_directory / "wiki.db"
    path.touch()
    return path

@pytest.fixture
def state(settings):
    return WizardState.new(settings)
