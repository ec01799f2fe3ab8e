"""Name and value validation utilities for nmcrpc."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


MAX_NAME_LENGTH = 255
MAX_VALUE_LENGTH = 520


class NameValidator:
    @classmethod
    def validate_name(cls, name: str) -> ValidationResult:
        if not name or not name.strip():
            return ValidationResult(is_valid=False, error_message="Name is required")

        normalized = name.strip()

        if len(normalized.encode("utf-8")) > MAX_NAME_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=f"Name exceeds {MAX_NAME_LENGTH} bytes",
            )

        if "/" in normalized:
            namespace, label = normalized.split("/", 1)
            if not namespace or not label:
                return ValidationResult(
                    is_valid=False,
                    error_message="Name must have the form namespace/label",
                )

        return ValidationResult(is_valid=True, normalized_value=normalized)

    @classmethod
    def validate_value(cls, value: str) -> ValidationResult:
        if len(value.encode("utf-8")) > MAX_VALUE_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=f"Value exceeds {MAX_VALUE_LENGTH} bytes",
            )

        return ValidationResult(is_valid=True, normalized_value=value)

    @classmethod
    def is_valid_name(cls, name: str) -> bool:
        return cls.validate_name(name).is_valid
