from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping

from app.domain.entities.validation import (
    Custom,
    FormSubmissionResult,
    MaxLength,
    MinLength,
    Pattern,
    Required,
    Rule,
    ValidationErrors,
    ValidationResult,
    ValidationRules,
)


logger = logging.getLogger(__name__)


VALIDATION_PATTERNS: dict[str, re.Pattern[str]] = {
    "email": re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
    "phone": re.compile(r"^(\+44\s?|0)[1-9]\d{8,9}$"),
    "postcode": re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}$", re.IGNORECASE),
    "name": re.compile(r"^[a-zA-Z\s'-]{2,50}$"),
    "alphanumeric": re.compile(r"^[a-zA-Z0-9\s]+$"),
}


def required(message: str = "This field is required") -> list[Rule]:
    return [Required(message)]


def email(message: str = "Please enter a valid email address") -> list[Rule]:
    return [Pattern(VALIDATION_PATTERNS["email"], message)]


def phone(message: str = "Please enter a valid UK phone number") -> list[Rule]:
    return [Pattern(VALIDATION_PATTERNS["phone"], message)]


def postcode(message: str = "Please enter a valid UK postcode") -> list[Rule]:
    return [Pattern(VALIDATION_PATTERNS["postcode"], message)]


def name(message: str = "Please enter a valid name (2-50 characters, letters only)") -> list[Rule]:
    return [
        Pattern(VALIDATION_PATTERNS["name"], message),
        MinLength(2, message),
        MaxLength(50, message),
    ]


def min_length(length: int, message: str | None = None) -> list[Rule]:
    return [MinLength(length, message or f"Must be at least {length} characters")]


def max_length(length: int, message: str | None = None) -> list[Rule]:
    return [MaxLength(length, message or f"Must be no more than {length} characters")]


def custom(predicate: Callable[[Any], bool], message: str) -> list[Rule]:
    return [Custom(predicate, message)]


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else str(value)


def _check(rule: Rule, value: Any, text: str) -> str | None:
    match rule:
        case Required():
            return None
        case MinLength(length=length):
            if len(text) < length:
                return rule.message or f"Must be at least {length} characters"
            return None
        case MaxLength(length=length):
            if len(text) > length:
                return rule.message or f"Must be no more than {length} characters"
            return None
        case Pattern(regex=regex):
            if not regex.search(text):
                return rule.message or "Invalid format"
            return None
        case Custom(predicate=predicate):
            if not predicate(value):
                return rule.message or "Invalid value"
            return None
        case _:
            raise TypeError(f"Unsupported validation rule: {rule!r}")


def validate_field(value: Any, rules: list[Rule]) -> list[str]:
    """Evaluate rules for one field.

    A blank value only ever fails `Required`; a non-blank value is checked
    against every other rule and all messages are collected.
    """
    if is_blank(value):
        for rule in rules:
            if isinstance(rule, Required):
                return [rule.message or "This field is required"]
        return []

    text = _as_text(value)
    errors: list[str] = []
    for rule in rules:
        message = _check(rule, value, text)
        if message:
            errors.append(message)
    return errors


def validate_form(data: Mapping[str, Any], rules: ValidationRules) -> ValidationResult:
    errors: ValidationErrors = {}
    for field_name, field_rules in rules.items():
        field_errors = validate_field(get_nested_value(data, field_name), field_rules)
        if field_errors:
            errors[field_name] = field_errors
    return ValidationResult(is_valid=not errors, errors=errors)


def get_nested_value(obj: Mapping[str, Any], path: str) -> Any:
    current: Any = obj
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def set_nested_value(obj: dict[str, Any], path: str, value: Any) -> None:
    *parents, last = path.split(".")
    target = obj
    for key in parents:
        if not isinstance(target.get(key), dict):
            target[key] = {}
        target = target[key]
    target[last] = value


def submit_form(
    form_data: dict[str, Any],
    rules: ValidationRules,
    submit: Callable[[dict[str, Any]], Any],
) -> FormSubmissionResult:
    validation = validate_form(form_data, rules)
    if not validation.is_valid:
        return FormSubmissionResult(success=False, validation_errors=validation.errors)

    try:
        result = submit(form_data)
    except Exception as e:
        logger.warning("Form submission failed", extra={"error": str(e)})
        return FormSubmissionResult(success=False, error=str(e) or "An unexpected error occurred")
    return FormSubmissionResult(success=True, data=result)


CONTACT_FORM_RULES: ValidationRules = {
    "name": required("Please enter your full name") + name(),
    "email": required("Please enter your email address") + email(),
    "phone": phone("Please enter a valid UK phone number (optional)"),
    "subject": required("Please select a subject"),
    "message": (
        required("Please enter your message")
        + min_length(10, "Message must be at least 10 characters")
        + max_length(1000, "Message must be no more than 1000 characters")
    ),
}

QUOTE_FORM_RULES: ValidationRules = {
    "serviceType": required("Please select a service type"),
    "wasteType": required("Please select a waste type"),
    "volumeEstimate": required("Please select an estimated volume"),
    "location": required("Please enter your location") + min_length(3, "Location must be at least 3 characters"),
    "accessibility": required("Please select accessibility level"),
    "urgency": required("Please select urgency level"),
    "contactInfo.name": required("Please enter your full name") + name(),
    "contactInfo.email": required("Please enter your email address") + email(),
    "contactInfo.phone": required("Please enter your phone number") + phone(),
    "contactInfo.address": (
        required("Please enter your full address")
        + min_length(10, "Address must be at least 10 characters")
    ),
}

QUOTE_REQUEST_FORM_RULES: ValidationRules = {
    "name": required("Name is required"),
    "email": required("Email is required") + email(),
    "phone": required("Phone number is required") + phone(),
    "address": required("Address is required"),
    "siteAddress": required("Site address is required"),
}

BOOKING_DETAILS_RULES: ValidationRules = {
    "name": required("Please enter your full name"),
    "email": required("Please enter your email address") + email(),
    "phone": required("Please enter your phone number"),
    "address": required("Please enter the collection address"),
    "postcode": required("Please enter your postcode"),
    "special_instructions": max_length(500, "Special instructions must be no more than 500 characters"),
}
