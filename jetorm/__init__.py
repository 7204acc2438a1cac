"""Query specifications, pagination values, transactions, validation rules and helpers."""

__version__ = "0.1.0"