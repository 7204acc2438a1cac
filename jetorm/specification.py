"""Composable SQL WHERE criteria with positional placeholders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

_PLACEHOLDER = re.compile(r"\$(\d+)")


def renumber_placeholders(sql: str, start: int) -> str:
    """Shift every ``$n`` placeholder in ``sql`` so that ``$1`` becomes ``$start``."""
    if start == 1:
        return sql
    offset = start - 1
    return _PLACEHOLDER.sub(lambda m: f"${int(m.group(1)) + offset}", sql)


@dataclass(frozen=True)
class Specification:
    """A WHERE clause fragment, or an AND/OR/NOT combination of fragments."""

    where_clause: str = ""
    args: tuple[Any, ...] = ()
    operator: str = ""
    left: Optional[Specification] = None
    right: Optional[Specification] = None

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render the clause and its arguments, numbering placeholders in order."""
        if not self.operator:
            return self.where_clause, list(self.args)

        parts: list[str] = []
        all_args: list[Any] = []
        left_count = 0

        if self.left is not None:
            left_sql, left_args = self.left.to_sql()
            if left_sql:
                parts.append(f"({renumber_placeholders(left_sql, 1)})")
                left_count = len(left_args)
                all_args.extend(left_args)

        if self.right is not None:
            right_sql, right_args = self.right.to_sql()
            if right_sql:
                parts.append(f"({renumber_placeholders(right_sql, left_count + 1)})")
                all_args.extend(right_args)

        if not parts:
            return "", []

        if self.operator == "NOT":
            return f"NOT {parts[0]}", all_args

        return f" {self.operator} ".join(parts), all_args

    def and_(self, other: Optional[Specification]) -> Specification:
        """Combine with ``other`` using AND."""
        return Specification(operator="AND", left=self, right=other)

    def or_(self, other: Optional[Specification]) -> Specification:
        """Combine with ``other`` using OR."""
        return Specification(operator="OR", left=self, right=other)

    def negate(self) -> Specification:
        """Return the negation of this specification."""
        return Specification(operator="NOT", left=self)

    def __and__(self, other: Specification) -> Specification:
        return self.and_(other)

    def __or__(self, other: Specification) -> Specification:
        return self.or_(other)

    def __invert__(self) -> Specification:
        return self.negate()


def where(where_clause: str, *args: Any) -> Specification:
    """Create a specification from a raw WHERE clause and its arguments."""
    return Specification(where_clause=where_clause, args=tuple(args))


def all_of(*specs: Specification) -> Optional[Specification]:
    """Combine specifications with AND, left to right; None if none are given."""
    if not specs:
        return None
    result = specs[0]
    for spec in specs[1:]:
        result = result.and_(spec)
    return result


def any_of(*specs: Specification) -> Optional[Specification]:
    """Combine specifications with OR, left to right; None if none are given."""
    if not specs:
        return None
    result = specs[0]
    for spec in specs[1:]:
        result = result.or_(spec)
    return result


def negate(spec: Optional[Specification]) -> Optional[Specification]:
    """Negate a specification; None stays None."""
    if spec is None:
        return None
    return spec.negate()


def equal(field: str, value: Any) -> Specification:
    return where(f"{field} = $1", value)


def not_equal(field: str, value: Any) -> Specification:
    return where(f"{field} != $1", value)


def greater_than(field: str, value: Any) -> Specification:
    return where(f"{field} > $1", value)


def greater_than_equal(field: str, value: Any) -> Specification:
    return where(f"{field} >= $1", value)


def less_than(field: str, value: Any) -> Specification:
    return where(f"{field} < $1", value)


def less_than_equal(field: str, value: Any) -> Specification:
    return where(f"{field} <= $1", value)


def like(field: str, pattern: str) -> Specification:
    return where(f"{field} LIKE $1", pattern)


def _placeholders(count: int) -> str:
    return ", ".join(f"${n}" for n in range(1, count + 1))


def is_in(field: str, *values: Any) -> Specification:
    """``field IN (...)``; with no values the condition is always false."""
    if not values:
        return where("1 = 0")
    return where(f"{field} IN ({_placeholders(len(values))})", *values)


def not_in(field: str, *values: Any) -> Specification:
    """``field NOT IN (...)``; with no values the condition is always true."""
    if not values:
        return where("1 = 1")
    return where(f"{field} NOT IN ({_placeholders(len(values))})", *values)


def is_null(field: str) -> Specification:
    return where(f"{field} IS NULL")


def is_not_null(field: str) -> Specification:
    return where(f"{field} IS NOT NULL")


def between(field: str, low: Any, high: Any) -> Specification:
    return where(f"{field} BETWEEN $1 AND $2", low, high)


def contains(field: str, value: str) -> Specification:
    return where(f"{field} LIKE $1", f"%{value}%")


def starts_with(field: str, value: str) -> Specification:
    return where(f"{field} LIKE $1", f"{value}%")


def ends_with(field: str, value: str) -> Specification:
    return where(f"{field} LIKE $1", f"%{value}")