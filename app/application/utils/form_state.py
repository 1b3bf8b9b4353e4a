from __future__ import annotations

import copy
from typing import Any

from app.application.utils.validation import get_nested_value, set_nested_value, validate_field, validate_form
from app.domain.entities.validation import ValidationErrors, ValidationResult, ValidationRules


class FormValidationState:
    """Per-form values, errors and touched flags.

    Untouched fields are never validated on change; touching a field or
    calling `validate_all` does.
    """

    def __init__(self, initial_data: dict[str, Any], rules: ValidationRules) -> None:
        self._initial = copy.deepcopy(initial_data)
        self._rules = rules
        self.data: dict[str, Any] = copy.deepcopy(initial_data)
        self.errors: ValidationErrors = {}
        self.touched: dict[str, bool] = {}

    def _validate_single(self, field_name: str, value: Any) -> list[str]:
        rules = self._rules.get(field_name)
        if not rules:
            return []
        return validate_field(value, rules)

    def update_field(self, field_name: str, value: Any) -> None:
        if "." in field_name:
            set_nested_value(self.data, field_name, value)
        else:
            self.data[field_name] = value

        if self.touched.get(field_name):
            self.errors[field_name] = self._validate_single(field_name, value)

    def touch_field(self, field_name: str) -> list[str]:
        self.touched[field_name] = True
        field_errors = self._validate_single(field_name, self.get_value(field_name))
        self.errors[field_name] = field_errors
        return field_errors

    def get_value(self, field_name: str) -> Any:
        return get_nested_value(self.data, field_name)

    def validate_all(self) -> ValidationResult:
        validation = validate_form(self.data, self._rules)
        self.errors = dict(validation.errors)
        self.touched = {field_name: True for field_name in self._rules}
        return validation

    def field_error(self, field_name: str) -> str | None:
        if not self.touched.get(field_name):
            return None
        field_errors = self.errors.get(field_name) or []
        return field_errors[0] if field_errors else None

    def reset(self) -> None:
        self.data = copy.deepcopy(self._initial)
        self.errors = {}
        self.touched = {}

    @property
    def is_valid(self) -> bool:
        return all(not field_errors for field_errors in self.errors.values())
