"""
Tests for per-form touched/error tracking.
"""

from app.application.utils.form_state import FormValidationState
from app.application.utils.validation import CONTACT_FORM_RULES, QUOTE_FORM_RULES


def _contact_state() -> FormValidationState:
    return FormValidationState(
        {"name": "", "email": "", "phone": "", "subject": "", "message": ""},
        CONTACT_FORM_RULES,
    )


def test_untouched_fields_are_not_validated_on_change():
    state = _contact_state()
    state.update_field("email", "not-an-email")
    assert state.errors == {}
    assert state.field_error("email") is None


def test_touch_then_update_revalidates():
    state = _contact_state()
    assert state.touch_field("email") == ["Please enter your email address"]
    state.update_field("email", "bad")
    assert state.field_error("email") == "Please enter a valid email address"
    state.update_field("email", "jane@example.com")
    assert state.field_error("email") is None


def test_validate_all_marks_every_rule_field_touched():
    state = _contact_state()
    result = state.validate_all()
    assert not result.is_valid
    assert set(state.touched) == set(CONTACT_FORM_RULES)
    assert not state.is_valid
    assert state.field_error("phone") is None


def test_nested_update_and_value():
    state = FormValidationState({"contactInfo": {"name": ""}}, QUOTE_FORM_RULES)
    state.update_field("contactInfo.name", "Jane Smith")
    assert state.get_value("contactInfo.name") == "Jane Smith"
    assert state.touch_field("contactInfo.name") == []


def test_reset_restores_initial_data():
    state = _contact_state()
    state.update_field("name", "Jane")
    state.touch_field("name")
    state.reset()
    assert state.data["name"] == ""
    assert state.errors == {}
    assert state.touched == {}
    assert state.is_valid
