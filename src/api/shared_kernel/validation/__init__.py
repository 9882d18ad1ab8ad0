"""Pure field validation shared across bounded contexts."""

from shared_kernel.validation.field_validator import (
    DEFAULT_RULE_SETS,
    FieldRuleSet,
    FieldValidator,
    ValidationResult,
    mask_email,
    mask_phone,
    normalize_identity,
)

__all__ = [
    "DEFAULT_RULE_SETS",
    "FieldRuleSet",
    "FieldValidator",
    "ValidationResult",
    "mask_email",
    "mask_phone",
    "normalize_identity",
]
