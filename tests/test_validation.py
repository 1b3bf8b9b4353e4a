"""
Tests for rule-based field and form validation.
"""

import re

import pytest

from app.application.utils.validation import (
    BOOKING_DETAILS_RULES,
    CONTACT_FORM_RULES,
    QUOTE_FORM_RULES,
    custom,
    email,
    get_nested_value,
    is_blank,
    max_length,
    min_length,
    name,
    phone,
    required,
    set_nested_value,
    submit_form,
    validate_field,
    validate_form,
)
from app.domain.entities.validation import Pattern, Required


def test_blank_value_only_fails_required():
    """Empty input short-circuits to the Required message."""
    rules = required("Please enter your email address") + email()
    assert validate_field("", rules) == ["Please enter your email address"]
    assert validate_field("   ", rules) == ["Please enter your email address"]


def test_blank_optional_field_passes():
    assert validate_field("", phone()) == []
    assert validate_field(None, min_length(5)) == []


def test_non_blank_collects_every_failure():
    """A value that breaks several rules reports all of them."""
    errors = validate_field("J", name())
    assert errors == [
        "Please enter a valid name (2-50 characters, letters only)",
        "Please enter a valid name (2-50 characters, letters only)",
    ]


def test_default_messages():
    assert validate_field("", [Required()]) == ["This field is required"]
    assert validate_field("ab", min_length(3)) == ["Must be at least 3 characters"]
    assert validate_field("abcd", max_length(3)) == ["Must be no more than 3 characters"]
    assert validate_field("x", [Pattern(re.compile(r"^\d+$"))]) == ["Invalid format"]


def test_custom_rule_gets_raw_value():
    rules = custom(lambda v: v == 42, "Must be 42")
    assert validate_field(42, rules) == []
    assert validate_field(41, rules) == ["Must be 42"]


def test_values_are_stripped_before_length_checks():
    assert validate_field("  ab  ", min_length(3)) == ["Must be at least 3 characters"]


def test_zero_is_not_blank():
    assert not is_blank(0)
    assert is_blank([])
    assert is_blank(False)


@pytest.mark.parametrize("value", ["07775605848", "+447775605848", "01223456789"])
def test_uk_phone_numbers(value):
    assert validate_field(value, phone()) == []


def test_contact_form_rules():
    result = validate_form(
        {"name": "Jane Smith", "email": "jane@example.com", "phone": "", "subject": "general", "message": "short"},
        CONTACT_FORM_RULES,
    )
    assert not result.is_valid
    assert result.errors == {"message": ["Message must be at least 10 characters"]}


def test_quote_form_resolves_nested_fields():
    data = {
        "serviceType": "residential",
        "wasteType": "general",
        "volumeEstimate": "small",
        "location": "Cambridge",
        "accessibility": "easy",
        "urgency": "flexible",
        "contactInfo": {"name": "Jane Smith", "email": "nope", "phone": "07775605848", "address": "1 High Street, Cambridge"},
    }
    result = validate_form(data, QUOTE_FORM_RULES)
    assert result.errors == {"contactInfo.email": ["Please enter a valid email address"]}


def test_booking_details_special_instructions_limit():
    details = {
        "name": "Jane Smith",
        "email": "jane@example.com",
        "phone": "07775605848",
        "address": "1 High Street",
        "postcode": "CB1 2AB",
        "special_instructions": "x" * 501,
    }
    result = validate_form(details, BOOKING_DETAILS_RULES)
    assert list(result.errors) == ["special_instructions"]


def test_nested_value_helpers():
    obj: dict = {}
    set_nested_value(obj, "contactInfo.name", "Jane")
    assert obj == {"contactInfo": {"name": "Jane"}}
    assert get_nested_value(obj, "contactInfo.name") == "Jane"
    assert get_nested_value(obj, "contactInfo.missing.deeper") is None


def test_submit_form_reports_validation_errors_without_submitting():
    calls = []
    result = submit_form({"name": ""}, {"name": required()}, calls.append)
    assert not result.success
    assert result.validation_errors == {"name": ["This field is required"]}
    assert calls == []


def test_submit_form_turns_exceptions_into_error():
    def boom(data):
        raise RuntimeError("network down")

    data = {"name": "Jane"}
    result = submit_form(data, {"name": required()}, boom)
    assert not result.success
    assert result.error == "network down"
    assert data == {"name": "Jane"}


def test_submit_form_success_returns_submit_result():
    result = submit_form({"name": "Jane"}, {"name": required()}, lambda data: {"ok": True})
    assert result.success
    assert result.data == {"ok": True}
