"""Conversions between snake_case, camelCase and PascalCase names."""


def to_snake_case(s: str) -> str:
    """Convert a name to snake_case by splitting before each upper-case letter."""
    out: list[str] = []
    for index, char in enumerate(s):
        if char.isupper():
            if index > 0:
                out.append("_")
            out.append(char.lower())
        else:
            out.append(char)
    return "".join(out)


def _upper_first(part: str) -> str:
    return part[:1].upper() + part[1:]


def to_camel_case(s: str) -> str:
    """Convert a snake_case name to camelCase."""
    head, *rest = s.split("_")
    return head + "".join(_upper_first(part) for part in rest)


def to_pascal_case(s: str) -> str:
    """Convert a snake_case name to PascalCase."""
    return "".join(_upper_first(part) for part in s.split("_"))