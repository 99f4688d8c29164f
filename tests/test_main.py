# tests/test_main.py
import yaml
import pytest
from click.testing import CliRunner

from conftest import ADMIN_FIELDS, ATTACHMENT_FIELDS, SITE_FIELDS
from main import cli
from storage.config_file import ConfigFile

@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("WIKI_CONFIG_PATH", raising=False)
    return CliRunner()

def _answers(tmp_path, **overrides):
    answers = {
        "language": "en",
        "site": dict(SITE_FIELDS),
        "admin": {k: v for k, v in ADMIN_FIELDS.items() if k != "PasswordConfirmation"},
        "attachments": dict(ATTACHMENT_FIELDS, UseObjectCache=True),
    }
    answers.update(overrides)
    path = tmp_path / "answers.yaml"
    path.write_text(yaml.safe_dump(answers))
    return str(path)

def test_status_not_installed(runner, settings):
    result = runner.invoke(cli, ["--root", str(settings.install_root), "status"])
    assert result.exit_code == 0
    assert "Not installed" in result.output

def test_probe_folder(runner, settings):
    (settings.install_root / "attachments").mkdir()
    root = str(settings.install_root)
    ok = runner.invoke(cli, ["--root", root, "probe", "folder", "~/attachments"])
    assert ok.exit_code == 0
    missing = runner.invoke(cli, ["--root", root, "probe", "folder", "~/missing"])
    assert missing.exit_code == 1

def test_probe_datastore(runner, settings, sqlite_db):
    root = str(settings.install_root)
    result = runner.invoke(cli, ["--root", root, "probe", "datastore", "data/wiki.db"])
    assert result.exit_code == 0, result.output

def test_install_from_answers(runner, settings, sqlite_db, tmp_path):
    root = str(settings.install_root)
    result = runner.invoke(cli, ["--root", root, "install", _answers(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Installation successful" in result.output
    config = ConfigFile(settings.config_path).read()
    assert config["installed"] is True
    assert config["useObjectCache"] is True

    again = runner.invoke(cli, ["--root", root, "status"])
    assert "Installed" in again.output

def test_install_stops_on_violation(runner, settings, sqlite_db, tmp_path):
    root = str(settings.install_root)
    answers = _answers(tmp_path, admin={"AdminEmail": "admin@localhost", "AdminPassword": "1"})
    result = runner.invoke(cli, ["--root", root, "install", answers])
    assert result.exit_code == 2
    assert "AdminPassword" in result.output
    assert not settings.config_path.exists()

def test_install_reports_finalize_failure(runner, settings, tmp_path):
    # no database file
    root = str(settings.install_root)
    result = runner.invoke(cli, ["--root", root, "install", _answers(tmp_path)])
    assert result.exit_code == 1
    assert "probe" in result.output

def test_install_blocked_by_lock(runner, settings, sqlite_db, tmp_path):
    settings.lock_path.write_text("12345")
    root = str(settings.install_root)
    result = runner.invoke(cli, ["--root", root, "install", _answers(tmp_path)])
    assert result.exit_code == 4, result.output
    assert "lock" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert not settings.config_path.exists()
