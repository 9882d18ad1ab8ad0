"""Field validation rules shared by every bounded context.

Each declared field has a fixed list of rules. A rule inspects the raw value
and returns an error fragment when violated. Fragments for one field are
joined into a single message prefixed with the field label, e.g.
"Password must contain at least one uppercase letter, must not contain whitespace".

The validator is pure: it holds compiled patterns and rule tables only, performs
no I/O and can be shared freely between requests.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
EMAIL_MAX_LENGTH = 254

_DIGITS_ONLY = re.compile(r"[0-9]+")
_EMAIL_SHAPE = re.compile(
    r"[A-Za-z0-9_+&*%'-]+(?:\.[A-Za-z0-9_+&*%'-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
)
_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile("[" + re.escape(PASSWORD_SPECIAL_CHARACTERS) + "]")
_WHITESPACE = re.compile(r"\s")

Rule = Callable[[str], str | None]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one field value."""

    valid: bool
    error_message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def invalid(cls, error_message: str) -> ValidationResult:
        return cls(valid=False, error_message=error_message)


@dataclass(frozen=True)
class FieldRuleSet:
    """Declared rules for a single field.

    Attributes:
        label: Human readable prefix used in error messages
        rules: Ordered rule callables, each returning a fragment or None
        strip: Whether surrounding whitespace is removed before the rules run
    """

    label: str
    rules: tuple[Rule, ...]
    strip: bool = True


def _length_between(minimum: int, maximum: int, fragment: str) -> Rule:
    def rule(value: str) -> str | None:
        return None if minimum <= len(value) <= maximum else fragment

    return rule


def _no_digits(value: str) -> str | None:
    if any(ch.isdigit() for ch in value):
        return "must not contain numbers"
    return None


def _email_max_length(value: str) -> str | None:
    if len(value) > EMAIL_MAX_LENGTH:
        return f"must not exceed {EMAIL_MAX_LENGTH} characters"
    return None


def _email_no_spaces(value: str) -> str | None:
    return "must not contain spaces" if _WHITESPACE.search(value) else None


def _email_shape(value: str) -> str | None:
    if _EMAIL_SHAPE.fullmatch(value) is None:
        return "must be a valid email address (e.g. user@example.com)"
    return None


def _phone_digits_only(value: str) -> str | None:
    if _DIGITS_ONLY.fullmatch(value) is None:
        return "must contain only digits"
    return None


def _phone_length(value: str) -> str | None:
    return None if len(value) == 10 else "must be exactly 10 digits"


def _phone_prefix(value: str) -> str | None:
    if value[:1] in ("6", "7", "8", "9"):
        return None
    return "must start with 6, 7, 8, or 9"


def _password_length(value: str) -> str | None:
    if len(value) < PASSWORD_MIN_LENGTH:
        return f"must be at least {PASSWORD_MIN_LENGTH} characters"
    return None


def _requires(pattern: re.Pattern[str], fragment: str) -> Rule:
    def rule(value: str) -> str | None:
        return None if pattern.search(value) else fragment

    return rule


def _password_no_whitespace(value: str) -> str | None:
    return "must not contain whitespace" if _WHITESPACE.search(value) else None


DEFAULT_RULE_SETS: Mapping[str, FieldRuleSet] = {
    "name": FieldRuleSet(
        label="Name",
        rules=(_length_between(1, 25, "must be 1-25 characters"), _no_digits),
    ),
    "email": FieldRuleSet(
        label="Email",
        rules=(_email_max_length, _email_no_spaces, _email_shape),
    ),
    "phone_number": FieldRuleSet(
        label="Phone number",
        rules=(_phone_digits_only, _phone_length, _phone_prefix),
    ),
    "username": FieldRuleSet(
        label="Username",
        rules=(_length_between(3, 50, "must be 3-50 characters"),),
    ),
    "password": FieldRuleSet(
        label="Password",
        rules=(
            _password_length,
            _requires(_UPPERCASE, "must contain at least one uppercase letter"),
            _requires(_LOWERCASE, "must contain at least one lowercase letter"),
            _requires(_DIGIT, "must contain at least one number"),
            _requires(
                _SPECIAL,
                f"must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS})",
            ),
            _password_no_whitespace,
        ),
        strip=False,
    ),
}


class FieldValidator:
    """Validates field values against declared rule sets.

    Instantiate once per process and inject it wherever validation is needed.
    """

    def __init__(self, rule_sets: Mapping[str, FieldRuleSet] | None = None) -> None:
        self._rule_sets = dict(rule_sets or DEFAULT_RULE_SETS)

    @property
    def fields(self) -> frozenset[str]:
        """Names of the fields this validator knows how to check."""
        return frozenset(self._rule_sets)

    def validate(self, field_name: str, raw_value: object) -> ValidationResult:
        """Validate a single field value.

        Args:
            field_name: Declared field name (e.g. "email")
            raw_value: Value as received; None and blank strings are "missing"

        Returns:
            ValidationResult with every violated rule joined into one message

        Raises:
            ValueError: If no rule set is declared for field_name
        """
        try:
            rule_set = self._rule_sets[field_name]
        except KeyError:
            raise ValueError(
                f"No validation rules declared for field '{field_name}'"
            ) from None

        if raw_value is None or not str(raw_value).strip():
            return ValidationResult.invalid(f"{rule_set.label} is required")

        value = str(raw_value)
        if rule_set.strip:
            value = value.strip()

        fragments = [
            fragment for rule in rule_set.rules if (fragment := rule(value)) is not None
        ]
        if fragments:
            return ValidationResult.invalid(f"{rule_set.label} {', '.join(fragments)}")
        return ValidationResult.ok()

    def validate_fields(self, values: Mapping[str, object]) -> dict[str, str]:
        """Validate several fields at once without stopping at the first failure.

        Args:
            values: Mapping of field name to raw value

        Returns:
            Mapping of field name to error message for every failing field.
            Empty when all fields are valid.
        """
        errors: dict[str, str] = {}
        for field_name, raw_value in values.items():
            result = self.validate(field_name, raw_value)
            if not result.valid:
                errors[field_name] = result.error_message or "is invalid"
        return errors


def mask_email(email: str | None) -> str:
    """Mask an email for logs, keeping the first character and the domain."""
    if not email or "@" not in email:
        return "***@***.***"
    local, _, domain = email.partition("@")
    if not local:
        return f"***@{domain}"
    return local[0] + "*" * (len(local) - 1) + "@" + domain


def mask_phone(phone_number: str | None) -> str:
    """Mask a phone number for logs, keeping the last four digits."""
    if not phone_number or len(phone_number) < 4:
        return "****"
    return "*" * (len(phone_number) - 4) + phone_number[-4:]


def normalize_identity(value: str) -> str:
    """Canonical form of an identity value (email, username) for lookup and storage."""
    return value.strip().lower()
