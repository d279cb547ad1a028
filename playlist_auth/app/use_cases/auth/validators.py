"""
Credential Input Validators

Each rule is a pure function taking the field value (and the whole input,
for cross-field rules) and returning an error message or None.
validate_fields() runs the rules as a pipeline and collects field errors.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from email_validator import EmailNotValidError, validate_email

from playlist_auth.app.services.password_hasher import BCRYPT_MAX_PASSWORD_BYTES
from playlist_auth.libs.result import Error

Rule = Callable[[Any, Mapping[str, Any]], Optional[str]]

NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8


def required(value: Any, data: Mapping[str, Any]) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return "This field is required"
    return None


def max_length(limit: int) -> Rule:
    def rule(value: Any, data: Mapping[str, Any]) -> Optional[str]:
        if value is not None and len(value.strip()) > limit:
            return f"Must contain at most {limit} characters"
        return None

    return rule


def valid_email(value: Any, data: Mapping[str, Any]) -> Optional[str]:
    if not value:
        return None
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return "Must be a valid email address"
    return None


def strong_password(value: Any, data: Mapping[str, Any]) -> Optional[str]:
    if not value:
        return None
    if len(value) < PASSWORD_MIN_LENGTH:
        return f"Must contain at least {PASSWORD_MIN_LENGTH} characters"
    if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        return f"Must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long"
    if not any(c.islower() for c in value):
        return "Must contain a lowercase letter"
    if not any(c.isupper() for c in value):
        return "Must contain an uppercase letter"
    if not any(c.isdigit() for c in value):
        return "Must contain a digit"
    return None


def matches(other_field: str) -> Rule:
    def rule(value: Any, data: Mapping[str, Any]) -> Optional[str]:
        if value != data.get(other_field):
            return "Passwords do not match"
        return None

    return rule


USERNAME_RULES: Sequence[Rule] = (required, max_length(NAME_MAX_LENGTH))
EMAIL_RULES: Sequence[Rule] = (required, max_length(NAME_MAX_LENGTH), valid_email)
PASSWORD_RULES: Sequence[Rule] = (required, strong_password)


def validate_fields(
    rules: Mapping[str, Sequence[Rule]], data: Mapping[str, Any]
) -> List[Dict[str, str]]:
    """
    Run each field's rules in order, stopping at the field's first failure.

    Returns:
        List of {"field", "message"} dicts; empty when the input is valid
    """
    errors = []
    for field, field_rules in rules.items():
        value = data.get(field)
        for rule in field_rules:
            message = rule(value, data)
            if message is not None:
                errors.append({"field": field, "message": message})
                break
    return errors


def validation_error(errors: List[Dict[str, str]]) -> Error:
    return Error("VALIDATION_FAILED", "Invalid input", details=errors)
