"""Ready-made validation rules for common string and numeric formats."""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from typing import Any, Callable, Optional

from jetorm.validation import (
    Rule,
    RuleViolation,
    all_rules,
    alphanumeric,
    has_digit,
    has_letter,
    has_special_char,
    max_length,
    min_length,
    value_range,
)


def _regex_rule(
    expression: str,
    message: str,
    prepare: Optional[Callable[[str], str]] = None,
) -> Rule:
    """A string must match ``expression`` in full; other values pass."""
    compiled = re.compile(expression, re.ASCII)

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        text = prepare(value) if prepare is not None else value
        if compiled.fullmatch(text) is None:
            raise RuleViolation(message)

    return rule


def phone_number() -> Rule:
    """An E.164-style number: optional ``+`` and up to fifteen digits."""
    return _regex_rule(r"\+?[1-9]\d{1,14}", "invalid phone number format")


def credit_card() -> Rule:
    """A card number of 13 to 19 digits passing the Luhn check.

    Spaces and dashes are ignored.
    """

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        cleaned = value.replace(" ", "").replace("-", "").encode("utf-8")
        if not 13 <= len(cleaned) <= 19:
            raise RuleViolation("invalid credit card length")
        total = 0
        for position, byte in enumerate(reversed(cleaned)):
            digit = (byte - ord("0")) % 256
            if position % 2 == 1:
                digit *= 2
                if digit > 9:
                    digit -= 9
            total += digit
        if total % 10 != 0:
            raise RuleViolation("invalid credit card number")

    return rule


def uuid() -> Rule:
    """A UUID in 8-4-4-4-12 hexadecimal form, in either case."""
    return _regex_rule(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        "invalid UUID format",
        str.lower,
    )


def ipv4() -> Rule:
    """A dotted-quad IPv4 address with every octet at most 255."""
    shape = re.compile(r"(\d{1,3}\.){3}\d{1,3}", re.ASCII)

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        if shape.fullmatch(value) is None:
            raise RuleViolation("invalid IPv4 address")
        if any(int(part) > 255 for part in value.split(".")):
            raise RuleViolation("invalid IPv4 address")

    return rule


def ipv6() -> Rule:
    """A full, uncompressed IPv6 address of eight groups."""
    return _regex_rule(r"([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}", "invalid IPv6 address")


def mac_address() -> Rule:
    """Six hexadecimal pairs separated by ``:`` or ``-``."""
    return _regex_rule(r"([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})", "invalid MAC address")


def base64() -> Rule:
    """Standard Base64 text whose length is a multiple of four."""
    compiled = re.compile(r"[A-Za-z0-9+/]*={0,2}")

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        if len(value) % 4 != 0 or compiled.fullmatch(value) is None:
            raise RuleViolation("invalid Base64 encoding")

    return rule


def json_format() -> Rule:
    """A string that, stripped, starts like a JSON object or array."""

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        if not value.strip().startswith(("{", "[")):
            raise RuleViolation("invalid JSON format")

    return rule


def _parse_rule(layout: str, shape: Optional[str] = None) -> Rule:
    compiled = re.compile(shape, re.ASCII) if shape is not None else None
    message = f"invalid time format, expected: {layout}"

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        if compiled is not None and compiled.fullmatch(value) is None:
            raise RuleViolation(message)
        try:
            datetime.strptime(value, layout)
        except ValueError as exc:
            raise RuleViolation(message) from exc

    return rule


def time_format(layout: str) -> Rule:
    """A string that parses with the ``strptime`` format ``layout``."""
    return _parse_rule(layout)


def date() -> Rule:
    """A calendar date written ``YYYY-MM-DD``."""
    return _parse_rule("%Y-%m-%d", r"\d{4}-\d{2}-\d{2}")


_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?"
    r"(?:Z|[+-](\d{2}):(\d{2}))",
    re.ASCII,
)


def date_time() -> Rule:
    """An RFC 3339 timestamp such as ``2023-12-25T10:30:00Z``."""
    message = "invalid time format, expected: RFC3339"

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        match = _RFC3339.fullmatch(value)
        if match is None:
            raise RuleViolation(message)
        year, month, day, hour, minute, second, off_h, off_m = match.groups()
        try:
            datetime(int(year), int(month), int(day), int(hour), int(minute), int(second))
        except ValueError as exc:
            raise RuleViolation(message) from exc
        if off_h is not None and (int(off_h) > 23 or int(off_m) > 59):
            raise RuleViolation(message)

    return rule


def time_of_day() -> Rule:
    """A clock time written ``HH:MM:SS``."""
    return _parse_rule("%H:%M:%S", r"\d{1,2}:\d{2}:\d{2}")


def strong_password() -> Rule:
    """At least eight characters with a letter, a digit and a special character."""
    return all_rules(min_length(8), has_letter(), has_digit(), has_special_char())


def username() -> Rule:
    """Three to thirty ASCII letters and digits."""
    return all_rules(min_length(3), max_length(30), alphanumeric())


def domain() -> Rule:
    """A dotted domain name ending in an alphabetic top-level label."""
    return _regex_rule(
        r"([a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}",
        "invalid domain name",
    )


def slug() -> Rule:
    """Lower-case letters and digits in runs joined by single dashes."""
    return _regex_rule(r"[a-z0-9]+(?:-[a-z0-9]+)*", "invalid slug format")


def hex_color() -> Rule:
    """Six hexadecimal digits, optionally preceded by ``#``."""
    return _regex_rule(r"#?[0-9A-Fa-f]{6}", "invalid hex color code")


def isbn() -> Rule:
    """An ISBN-10 or ISBN-13; dashes and spaces are ignored."""
    return _regex_rule(
        r"(?:\d{9}[\dXx]|\d{13})",
        "invalid ISBN format",
        lambda text: text.replace("-", "").replace(" ", ""),
    )


def zip_code() -> Rule:
    """A US zip code, five digits with an optional four-digit suffix."""
    return _regex_rule(r"\d{5}(-\d{4})?", "invalid zip code format")


def country_code() -> Rule:
    """Two upper-case letters."""
    return _regex_rule(r"[A-Z]{2}", "invalid country code format")


def language_code() -> Rule:
    """Two lower-case letters with an optional upper-case region, as ``en-US``."""
    return _regex_rule(r"[a-z]{2}(-[A-Z]{2})?", "invalid language code format")


def currency_code() -> Rule:
    """Three upper-case letters."""
    return _regex_rule(r"[A-Z]{3}", "invalid currency code format")


def percentage() -> Rule:
    """A number from 0 to 100."""
    return value_range(0, 100)


def latitude() -> Rule:
    """A number from -90 to 90."""
    return value_range(-90, 90)


def longitude() -> Rule:
    """A number from -180 to 180."""
    return value_range(-180, 180)


def age() -> Rule:
    """A number from 0 to 150."""
    return value_range(0, 150)


def year() -> Rule:
    """A number from 1900 to 2100."""
    return value_range(1900, 2100)


def port() -> Rule:
    """A number from 0 to 65535."""
    return value_range(0, 65535)


def file_extension(*allowed: str) -> Rule:
    """An extension, with or without a leading dot, from ``allowed``; case is ignored."""
    accepted = {extension.lower() for extension in allowed}
    listing = "[" + " ".join(allowed) + "]"

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        extension = value.strip()
        if extension.startswith("."):
            extension = extension[1:]
        if extension.lower() not in accepted:
            raise RuleViolation(f"invalid file extension, allowed: {listing}")

    return rule


def mime_type() -> Rule:
    """A ``type/subtype`` media type; case is ignored."""
    return _regex_rule(
        r"[a-z]+/[a-z0-9][a-z0-9!#$&\-\^_.]*",
        "invalid MIME type format",
        str.lower,
    )


def semver() -> Rule:
    """A semantic version with optional pre-release and build parts."""
    return _regex_rule(
        r"\d+\.\d+\.\d+(-[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?(\+[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?",
        "invalid semantic version format",
    )


def not_empty_string() -> Rule:
    """A string with something besides whitespace."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not value.strip():
            raise RuleViolation("string cannot be empty")

    return rule


def no_whitespace() -> Rule:
    """A string without spaces, tabs, newlines or carriage returns."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and any(char in " \t\n\r" for char in value):
            raise RuleViolation("string cannot contain whitespace")

    return rule


def ascii_only() -> Rule:
    """A string of ASCII characters only."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and any(ord(char) > 127 for char in value):
            raise RuleViolation("string must contain only ASCII characters")

    return rule


def unicode_text() -> Rule:
    """A string of well-formed Unicode text: no unpaired surrogates."""

    def rule(value: Any) -> None:
        if not isinstance(value, str):
            return
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise RuleViolation("string must contain valid Unicode text") from exc

    return rule


def printable() -> Rule:
    """A string of printable characters; the only space allowed is U+0020."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not value.isprintable():
            raise RuleViolation("string must contain only printable characters")

    return rule


def _is_graph(char: str) -> bool:
    category = unicodedata.category(char)
    graphic = category[0] in "LMNPS" or category == "Zs"
    return graphic and not char.isspace()


def graph() -> Rule:
    """A string of visible characters, with no spaces of any kind."""

    def rule(value: Any) -> None:
        if isinstance(value, str) and not all(_is_graph(char) for char in value):
            raise RuleViolation("string must contain only graph characters")

    return rule