from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Union


@dataclass(frozen=True)
class Required:
    message: str | None = None


@dataclass(frozen=True)
class MinLength:
    length: int
    message: str | None = None


@dataclass(frozen=True)
class MaxLength:
    length: int
    message: str | None = None


@dataclass(frozen=True)
class Pattern:
    regex: re.Pattern[str]
    message: str | None = None


@dataclass(frozen=True)
class Custom:
    predicate: Callable[[Any], bool]
    message: str | None = None


Rule = Union[Required, MinLength, MaxLength, Pattern, Custom]

ValidationRules = dict[str, list[Rule]]
ValidationErrors = dict[str, list[str]]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: ValidationErrors = field(default_factory=dict)


@dataclass(frozen=True)
class FormSubmissionResult:
    success: bool
    data: Any = None
    error: str | None = None
    validation_errors: ValidationErrors | None = None
