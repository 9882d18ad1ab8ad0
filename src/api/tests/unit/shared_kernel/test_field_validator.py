"""Unit tests for FieldValidator."""

import pytest

from shared_kernel.validation import (
    FieldValidator,
    mask_email,
    mask_phone,
    normalize_identity,
)


@pytest.fixture
def validator() -> FieldValidator:
    return FieldValidator()


class TestRequiredValues:
    """Missing values are reported before any other rule."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_name_is_required(self, validator, raw):
        result = validator.validate("name", raw)

        assert not result.valid
        assert result.error_message == "Name is required"

    def test_blank_password_is_required(self, validator):
        result = validator.validate("password", "")

        assert result.error_message == "Password is required"

    def test_unknown_field_raises(self, validator):
        with pytest.raises(ValueError, match="shoe_size"):
            validator.validate("shoe_size", "42")


class TestNameRules:
    def test_accepts_letters_and_spaces(self, validator):
        assert validator.validate("name", "Jane Doe").valid

    def test_rejects_digits(self, validator):
        result = validator.validate("name", "Jane 2")

        assert result.error_message == "Name must not contain numbers"

    def test_rejects_long_names(self, validator):
        result = validator.validate("name", "A" * 26)

        assert result.error_message == "Name must be 1-25 characters"

    def test_surrounding_whitespace_is_ignored(self, validator):
        assert validator.validate("name", "  " + "A" * 25 + "  ").valid


class TestEmailRules:
    def test_accepts_plain_address(self, validator):
        assert validator.validate("email", "jane.doe@example.com").valid

    @pytest.mark.parametrize(
        "raw",
        ["jane", "jane@", "@example.com", "jane@example", "jane..doe@example.com"],
    )
    def test_rejects_malformed_addresses(self, validator, raw):
        result = validator.validate("email", raw)

        assert not result.valid
        assert "must be a valid email address" in result.error_message

    def test_inner_space_reports_every_violation(self, validator):
        result = validator.validate("email", "jane doe@example.com")

        assert result.error_message == (
            "Email must not contain spaces, "
            "must be a valid email address (e.g. user@example.com)"
        )

    def test_rejects_overlong_address(self, validator):
        local = "a" * 250
        result = validator.validate("email", f"{local}@example.com")

        assert "must not exceed 254 characters" in result.error_message


class TestPhoneRules:
    def test_accepts_ten_digits_with_valid_prefix(self, validator):
        assert validator.validate("phone_number", "9876543210").valid

    def test_reports_all_violations_together(self, validator):
        result = validator.validate("phone_number", "12ab")

        assert result.error_message == (
            "Phone number must contain only digits, "
            "must be exactly 10 digits, must start with 6, 7, 8, or 9"
        )

    def test_rejects_bad_prefix(self, validator):
        result = validator.validate("phone_number", "5876543210")

        assert result.error_message == "Phone number must start with 6, 7, 8, or 9"


class TestPasswordRules:
    def test_accepts_complex_password(self, validator):
        assert validator.validate("password", "Secret#123").valid

    def test_lists_every_missing_class(self, validator):
        result = validator.validate("password", "abc")

        message = result.error_message
        assert message.startswith("Password must be at least 8 characters")
        assert "must contain at least one uppercase letter" in message
        assert "must contain at least one number" in message
        assert "must contain at least one special character" in message
        assert "lowercase" not in message

    def test_whitespace_is_not_stripped(self, validator):
        result = validator.validate("password", " Secret#123")

        assert result.error_message == "Password must not contain whitespace"


class TestValidateFields:
    def test_returns_empty_mapping_when_all_valid(self, validator):
        errors = validator.validate_fields(
            {"name": "Jane", "email": "jane@example.com", "phone_number": "9876543210"}
        )

        assert errors == {}

    def test_collects_every_failing_field(self, validator):
        errors = validator.validate_fields(
            {"name": "", "email": "nope", "phone_number": "9876543210"}
        )

        assert set(errors) == {"name", "email"}
        assert errors["name"] == "Name is required"


class TestMaskingAndNormalization:
    def test_mask_email_keeps_first_character_and_domain(self):
        assert mask_email("jane@example.com") == "j***@example.com"

    def test_mask_email_handles_garbage(self):
        assert mask_email(None) == "***@***.***"
        assert mask_email("no-at-sign") == "***@***.***"

    def test_mask_phone_keeps_last_four_digits(self):
        assert mask_phone("9876543210") == "******3210"
        assert mask_phone("12") == "****"

    def test_normalize_identity_trims_and_lowercases(self):
        assert normalize_identity("  Jane@Example.COM ") == "jane@example.com"
