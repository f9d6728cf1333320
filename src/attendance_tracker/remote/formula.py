from __future__ import annotations


def quote_value(value: str) -> str:
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


def field_equals(field_name: str, value: str) -> str:
    """Build a ``filterByFormula`` expression such as ``{Date} = '2025-12-26'``."""
    return f"{{{field_name}}} = {quote_value(value)}"
