from __future__ import annotations


class ParseError(ValueError):
    """Raised at the input boundary when a value cannot be turned into a record field."""

    def __init__(self, field_name: str, value, reason: str = ""):
        self.field_name = field_name
        self.value = value
        msg = f"Cannot parse {field_name}={value!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
