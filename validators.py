# validators.py
from __future__ import annotations
import re
from typing import Callable, Dict, FrozenSet, Mapping, NamedTuple, Tuple

from settings import DEFAULT_MIN_PASSWORD_LENGTH
from state import Step
from storage.drivers import parse_store_type

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class Violation(NamedTuple):
    field: str
    message_key: str


ValidationResult = FrozenSet[Violation]


# -- Field checks ----------------------------------------------------------

def validate_required(value: str) -> Tuple[bool, str]:
    if value is None or not str(value).strip():
        return False, "A value is required."
    return True, ""

def validate_email(address: str) -> Tuple[bool, str]:
    if not _EMAIL_RE.match(address.strip()):
        return False, f"'{address}' is not a valid email address."
    return True, ""

def validate_password_length(password: str, min_length: int) -> Tuple[bool, str]:
    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters."
    return True, ""

def validate_store_type(value: str) -> Tuple[bool, str]:
    try:
        parse_store_type(value)
    except ValueError:
        return False, f"'{value}' is not a supported data store."
    return True, ""


# -- Step validators -------------------------------------------------------

def _required(fields: Mapping[str, str], *names: str) -> set:
    return {
        Violation(name, f"{name}Required")
        for name in names
        if not validate_required(fields.get(name, ""))[0]
    }

def validate_environment(fields: Mapping[str, str], **_) -> ValidationResult:
    return frozenset()

def validate_site_and_datastore(fields: Mapping[str, str], **_) -> ValidationResult:
    violations = _required(fields, "SiteName", "SiteUrl", "ConnectionString")
    if not validate_store_type(fields.get("DataStoreType", ""))[0]:
        violations.add(Violation("DataStoreType", "DataStoreTypeInvalid"))
    return frozenset(violations)

def validate_admin_account(
    fields: Mapping[str, str],
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    **_,
) -> ValidationResult:
    violations = _required(fields, "AdminEmail", "AdminPassword")
    email = fields.get("AdminEmail", "")
    password = fields.get("AdminPassword", "")

    if email.strip() and not validate_email(email)[0]:
        violations.add(Violation("AdminEmail", "AdminEmailInvalid"))
    if password.strip() and not validate_password_length(password, min_password_length)[0]:
        violations.add(Violation("AdminPassword", "AdminPasswordTooShort"))
    # A mismatch belongs to the confirmation field, never to the password
    if fields.get("PasswordConfirmation", "") != password:
        violations.add(Violation("PasswordConfirmation", "PasswordConfirmationMismatch"))
    return frozenset(violations)

def validate_attachments_and_options(fields: Mapping[str, str], **_) -> ValidationResult:
    return frozenset(_required(fields, "AttachmentsFolder"))

def validate_complete(fields: Mapping[str, str], **_) -> ValidationResult:
    return frozenset()


STEP_VALIDATORS: Dict[Step, Callable[..., ValidationResult]] = {
    Step.ENVIRONMENT: validate_environment,
    Step.SITE_AND_DATASTORE: validate_site_and_datastore,
    Step.ADMIN_ACCOUNT: validate_admin_account,
    Step.ATTACHMENTS_AND_OPTIONS: validate_attachments_and_options,
    Step.COMPLETE: validate_complete,
}


def validate_step(
    step: Step,
    fields: Mapping[str, str],
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
) -> ValidationResult:
    """Every violation of the step at once; empty means the step may advance."""
    return STEP_VALIDATORS[Step(step)](fields, min_password_length=min_password_length)
