# tests/test_state.py
import pytest

from settings import InstallerSettings
from state import STEP_COUNT, Language, Step, WizardState, parse_toggle

def test_new_state_prefills_defaults(settings):
    state = WizardState.new(settings)
    assert state.current_step == 0
    assert state.step is Step.ENVIRONMENT
    assert state.fields["DataStoreType"] == "sqlite"
    assert state.fields["SiteUrl"] == settings.base_url
    assert state.fields["AttachmentsFolder"] == "~/attachments"
    assert state.selected_language is Language.ENGLISH
    assert state.installed is False

def test_step_values_only_returns_step_fields(state):
    state.fields["SiteName"] = "Wiki"
    state.fields["AdminEmail"] = "admin@localhost"
    values = state.step_values(Step.SITE_AND_DATASTORE)
    assert set(values) == {"SiteName", "SiteUrl", "DataStoreType", "ConnectionString"}
    assert values["SiteName"] == "Wiki"
    assert values["ConnectionString"] == ""

def test_to_dict_from_dict(state):
    state.current_step = 2
    state.fields["SiteName"] = "Wiki"
    state.selected_language = Language.SWEDISH
    restored = WizardState.from_dict(state.to_dict())
    assert restored == state

def test_from_dict_rejects_out_of_range_step():
    with pytest.raises(ValueError):
        WizardState.from_dict({"current_step": STEP_COUNT})

def test_language_order_starts_with_english():
    assert list(Language)[0] is Language.ENGLISH
    assert len(Language) == 11

def test_parse_toggle():
    assert parse_toggle("true") and parse_toggle("on") and parse_toggle("1")
    assert not parse_toggle("false") and not parse_toggle("")

def test_settings_resolve_tilde(settings):
    assert settings.resolve("~/attachments") == settings.install_root / "attachments"
    assert settings.resolve("attachments") == settings.install_root / "attachments"

def test_settings_resolve_backslashes(settings):
    assert settings.resolve(r"~\files\a") == settings.install_root / "files" / "a"

def test_settings_resolve_rejects_escape(settings):
    with pytest.raises(ValueError):
        settings.resolve("~/../elsewhere")
    with pytest.raises(ValueError):
        settings.resolve("/etc")

def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("WIKI_INSTALL_ROOT", str(tmp_path))
    monkeypatch.setenv("WIKI_MIN_PASSWORD_LENGTH", "8")
    monkeypatch.setenv("WIKI_PROBE_TIMEOUT", "2.5")
    monkeypatch.delenv("WIKI_CONFIG_PATH", raising=False)
    s = InstallerSettings.from_env()
    assert s.install_root == tmp_path.resolve()
    assert s.config_path == tmp_path.resolve() / "wiki.yaml"
    assert s.min_password_length == 8
    assert s.probe_timeout == 2.5
    assert s.lock_path.name == "wiki.yaml.lock"
