# tests/test_validators.py
import pytest

from conftest import ADMIN_FIELDS, ATTACHMENT_FIELDS, SITE_FIELDS
from state import Step
from validators import (
    Violation, validate_admin_account, validate_attachments_and_options,
    validate_email, validate_environment, validate_password_length,
    validate_required, validate_site_and_datastore, validate_step,
)

def test_required_rejects_empty_and_blank():
    assert not validate_required("")[0]
    assert not validate_required("   ")[0]
    assert validate_required("x") == (True, "")

def test_valid_email():
    ok, msg = validate_email("admin@localhost")
    assert ok and msg == ""

def test_invalid_email():
    for bad in ("not empty", "admin", "a@b@c", "@localhost", "admin@"):
        ok, _ = validate_email(bad)
        assert not ok, bad

def test_password_length():
    assert not validate_password_length("1", 6)[0]
    assert validate_password_length("secret", 6)[0]

def test_environment_has_no_required_fields():
    assert validate_environment({}) == frozenset()

def test_site_step_valid():
    assert validate_site_and_datastore(SITE_FIELDS) == frozenset()

@pytest.mark.parametrize("name", ["SiteName", "SiteUrl", "ConnectionString"])
def test_site_step_missing_field_reports_exactly_that_field(name):
    fields = dict(SITE_FIELDS, **{name: ""})
    assert validate_site_and_datastore(fields) == {Violation(name, f"{name}Required")}

def test_site_step_reports_all_violations_at_once():
    violations = validate_site_and_datastore({"DataStoreType": "sqlite"})
    assert {v.field for v in violations} == {"SiteName", "SiteUrl", "ConnectionString"}

def test_empty_store_type_uses_default():
    fields = dict(SITE_FIELDS, DataStoreType="")
    assert validate_site_and_datastore(fields) == frozenset()

def test_unknown_store_type_rejected():
    fields = dict(SITE_FIELDS, DataStoreType="oracle")
    assert validate_site_and_datastore(fields) == {
        Violation("DataStoreType", "DataStoreTypeInvalid")
    }

def test_admin_step_valid():
    assert validate_admin_account(ADMIN_FIELDS) == frozenset()

@pytest.mark.parametrize("name", ["AdminEmail", "AdminPassword"])
def test_admin_step_missing_field(name):
    fields = dict(ADMIN_FIELDS, **{name: ""})
    if name == "AdminPassword":
        fields["PasswordConfirmation"] = ""
    assert validate_admin_account(fields) == {Violation(name, f"{name}Required")}

def test_admin_missing_confirmation_reported_on_confirmation():
    fields = dict(ADMIN_FIELDS, PasswordConfirmation="")
    assert validate_admin_account(fields) == {
        Violation("PasswordConfirmation", "PasswordConfirmationMismatch")
    }

def test_admin_short_password_rejected():
    fields = dict(ADMIN_FIELDS, AdminPassword="1", PasswordConfirmation="1")
    assert validate_admin_account(fields) == {
        Violation("AdminPassword", "AdminPasswordTooShort")
    }

def test_admin_mismatch_reported_against_confirmation_only():
    fields = dict(ADMIN_FIELDS, AdminPassword="secret1", PasswordConfirmation="secret2")
    violations = validate_admin_account(fields)
    assert violations == {Violation("PasswordConfirmation", "PasswordConfirmationMismatch")}

def test_admin_min_length_is_configurable():
    fields = dict(ADMIN_FIELDS, AdminPassword="secret1", PasswordConfirmation="secret1")
    assert validate_admin_account(fields, min_password_length=10) == {
        Violation("AdminPassword", "AdminPasswordTooShort")
    }

def test_admin_malformed_email():
    fields = dict(ADMIN_FIELDS, AdminEmail="not empty")
    assert validate_admin_account(fields) == {Violation("AdminEmail", "AdminEmailInvalid")}

def test_attachments_step():
    assert validate_attachments_and_options(ATTACHMENT_FIELDS) == frozenset()
    fields = dict(ATTACHMENT_FIELDS, AttachmentsFolder="")
    assert validate_attachments_and_options(fields) == {
        Violation("AttachmentsFolder", "AttachmentsFolderRequired")
    }

def test_object_cache_toggle_never_validated():
    fields = dict(ATTACHMENT_FIELDS, UseObjectCache="")
    assert validate_attachments_and_options(fields) == frozenset()

def test_validate_step_dispatches_by_step():
    assert validate_step(Step.SITE_AND_DATASTORE, {}) != frozenset()
    assert validate_step(Step.ENVIRONMENT, {}) == frozenset()
    assert validate_step(Step.COMPLETE, {}) == frozenset()
