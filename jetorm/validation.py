"""Field validation for dataclass entities, driven by rules and ``validate`` tags."""

from __future__ import annotations

import dataclasses
import re
from typing import Any, Callable, Iterable, Optional

from jetorm.helpers import is_zero

Rule = Callable[[Any], None]
"""A rule takes a value and raises RuleViolation when the value is not acceptable."""


class RuleViolation(ValueError):
    """Raised by a single rule when a value fails it."""


class InvalidInputError(TypeError):
    """Raised when something other than a dataclass instance is validated."""


class ValidationError(ValueError):
    """Raised when one or more fields of an entity fail their rules."""

    def __init__(self, violations: Iterable[str]) -> None:
        self.violations = list(violations)
        super().__init__(f"validation failed: {'; '.join(self.violations)}")


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_list(values: Iterable[Any]) -> str:
    return "[" + " ".join(str(value) for value in values) + "]"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _same(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a == b


class Validator:
    """Holds per-field rules and checks entities against them and their tags."""

    def __init__(self) -> None:
        self._rules: dict[str, list[Rule]] = {}

    def register_rule(self, field: str, rule: Rule) -> None:
        """Add a rule for the named field."""
        self._rules.setdefault(field, []).append(rule)

    def validate(self, entity: Any) -> Any:
        """Check every public field of a dataclass entity and return the entity.

        Raises InvalidInputError for non-dataclass input and ValidationError
        listing every failed rule otherwise.
        """
        if not dataclasses.is_dataclass(entity) or isinstance(entity, type):
            raise InvalidInputError("invalid input")

        violations: list[str] = []
        for spec in dataclasses.fields(entity):
            if spec.name.startswith("_"):
                continue
            rules = list(self._rules.get(spec.name, ()))
            tag = spec.metadata.get("validate", "")
            if tag:
                rules.extend(parse_validation_tag(tag))
            value = getattr(entity, spec.name)
            for rule in rules:
                try:
                    rule(value)
                except RuleViolation as exc:
                    violations.append(f"{spec.name}: {exc}")

        if violations:
            raise ValidationError(violations)
        return entity


def parse_validation_tag(tag: str) -> list[Rule]:
    """Turn a comma-separated ``validate`` tag into rules.

    ``min:`` and ``max:`` bounds are recognised but carry no check.
    """
    rules: list[Rule] = []
    for part in (piece.strip() for piece in tag.split(",")):
        if part == "required":
            rules.append(required())
        elif part.startswith(("min:", "max:")):
            continue
        elif part.startswith("email"):
            rules.append(email())
        elif part.startswith("url"):
            rules.append(url())
    return rules


def is_empty(value: Any) -> bool:
    """True for None, False, numeric zero and empty strings or containers."""
    return is_zero(value)


def required() -> Rule:
    """The value must not be empty."""

    def rule(value: Any) -> None:
        if is_empty(value):
            raise RuleViolation("is required")

    return rule


def email() -> Rule:
    """A string must contain ``@``; other values pass."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and "@" not in value:
            raise RuleViolation("invalid email format")

    return rule


def url() -> Rule:
    """A string must start with ``http://`` or ``https://``; other values pass."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not value.startswith(("http://", "https://")):
            raise RuleViolation("invalid URL format")

    return rule


def validate_entity(entity: Any) -> Any:
    """Validate an entity using its tags alone."""
    return Validator().validate(entity)


def min_length(minimum: int) -> Rule:
    """A string must have at least ``minimum`` characters."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and len(value) < minimum:
            raise RuleViolation(f"must be at least {minimum} characters")

    return rule


def max_length(maximum: int) -> Rule:
    """A string must have at most ``maximum`` characters."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and len(value) > maximum:
            raise RuleViolation(f"must be at most {maximum} characters")

    return rule


def length(exact: int) -> Rule:
    """A string must have exactly ``exact`` characters."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and len(value) != exact:
            raise RuleViolation(f"must be exactly {exact} characters")

    return rule


def value_range(low: float, high: float) -> Rule:
    """A number must lie within ``low`` and ``high`` inclusive; other values pass."""

    def rule(value: Any) -> None:
        if _is_number(value) and not low <= value <= high:
            raise RuleViolation(
                f"must be between {_format_number(low)} and {_format_number(high)}"
            )

    return rule


def pattern(regex: str) -> Rule:
    """A string must contain a match for ``regex``; other values pass."""
    compiled = re.compile(regex)

    def rule(value: Any) -> None:
        if isinstance(value, str) and compiled.search(value) is None:
            raise RuleViolation("does not match pattern")

    return rule


def alpha() -> Rule:
    """A string must consist of ASCII letters only."""
    return pattern(r"\A[a-zA-Z]+\Z")


def alphanumeric() -> Rule:
    """A string must consist of ASCII letters and digits only."""
    return pattern(r"\A[a-zA-Z0-9]+\Z")


def numeric() -> Rule:
    """A string must consist of ASCII digits only."""
    return pattern(r"\A[0-9]+\Z")


def lowercase() -> Rule:
    """A string must be unchanged by lower-casing."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and value != value.lower():
            raise RuleViolation("must be lowercase")

    return rule


def uppercase() -> Rule:
    """A string must be unchanged by upper-casing."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and value != value.upper():
            raise RuleViolation("must be uppercase")

    return rule


def has_letter() -> Rule:
    """A string must contain at least one letter."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not any(char.isalpha() for char in value):
            raise RuleViolation("must contain at least one letter")

    return rule


def has_digit() -> Rule:
    """A string must contain at least one decimal digit."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not any(char.isdecimal() for char in value):
            raise RuleViolation("must contain at least one digit")

    return rule


def has_special_char() -> Rule:
    """A string must contain a character that is not a letter, digit or space."""

    def special(char: str) -> bool:
        return not (char.isalpha() or char.isdecimal() or char.isspace())

    def rule(value: Any) -> None:
        if isinstance(value, str) and not any(special(char) for char in value):
            raise RuleViolation("must contain at least one special character")

    return rule


def in_list(*allowed: Any) -> Rule:
    """The value must equal, with the same type, one of ``allowed``."""

    def rule(value: Any) -> None:
        if not any(_same(value, candidate) for candidate in allowed):
            raise RuleViolation(f"must be one of: {_format_list(allowed)}")

    return rule


def not_in_list(*disallowed: Any) -> Rule:
    """The value must not equal, with the same type, any of ``disallowed``."""

    def rule(value: Any) -> None:
        if any(_same(value, candidate) for candidate in disallowed):
            raise RuleViolation(f"must not be one of: {_format_list(disallowed)}")

    return rule


def positive() -> Rule:
    """A number must be greater than zero; other values pass."""

    def rule(value: Any) -> None:
        if _is_number(value) and value <= 0:
            raise RuleViolation("must be positive")

    return rule


def negative() -> Rule:
    """A number must be less than zero; other values pass."""

    def rule(value: Any) -> None:
        if _is_number(value) and value >= 0:
            raise RuleViolation("must be negative")

    return rule


def non_zero() -> Rule:
    """The value must not be empty or zero."""

    def rule(value: Any) -> None:
        if is_empty(value):
            raise RuleViolation("must not be zero")

    return rule


def custom(fn: Callable[[Any], Optional[object]]) -> Rule:
    """Wrap a check function as a rule.

    The function fails the value by raising, or by returning an exception
    or a message string; returning anything else passes.
    """

    def rule(value: Any) -> None:
        try:
            result = fn(value)
        except RuleViolation:
            raise
        except Exception as exc:
            raise RuleViolation(str(exc)) from exc
        if isinstance(result, BaseException):
            raise RuleViolation(str(result)) from result
        if isinstance(result, str):
            raise RuleViolation(result)

    return rule


def all_rules(*rules: Rule) -> Rule:
    """Every rule must pass; the first failure is raised."""

    def rule(value: Any) -> None:
        for each in rules:
            each(value)

    return rule


def any_rule(*rules: Rule) -> Rule:
    """At least one rule must pass; with no rules the value passes."""

    def rule(value: Any) -> None:
        last: Optional[RuleViolation] = None
        for each in rules:
            try:
                each(value)
            except RuleViolation as exc:
                last = exc
            else:
                return
        if last is not None:
            raise RuleViolation(f"none of the validation rules passed: {last}") from last

    return rule