"""
Form-data encoding helpers.

The backend reads most write endpoints as multipart form fields, so payload
dictionaries are flattened into string-valued pairs before sending. Nested
structures use PHP-style bracket keys (``recipients[0][name]``).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


def _to_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def convert_to_form_data(data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Convert a flat mapping into string-coerced form fields.

    None values are dropped; everything else is stringified.

    Example:
        >>> convert_to_form_data({"a": 1, "b": None, "d": "x"})
        {'a': '1', 'd': 'x'}
    """
    if not data:
        return {}
    return {
        key: _to_form_value(value)
        for key, value in data.items()
        if value is not None
    }


def nested_form_fields(prefix: str, mapping: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Flatten ``{"ident": 1}`` under ``prefix`` into ``{"prefix[ident]": "1"}``."""
    if not mapping:
        return {}
    return convert_to_form_data(
        {f"{prefix}[{key}]": value for key, value in mapping.items()}
    )


def indexed_form_fields(
    prefix: str,
    items: Optional[Iterable[Mapping[str, Any]]],
    fields: Optional[List[str]] = None,
) -> Dict[str, str]:
    """
    Flatten a list of mappings into indexed bracket keys.

    Args:
        prefix: Field prefix, e.g. "recipients" or "data[emergency_contacts]"
        items: Mappings to flatten, in order
        fields: Restrict (and order) the keys taken from each item.
               Missing or None values are skipped.

    Returns:
        ``{"prefix[0][name]": "...", "prefix[1][name]": "..."}``
    """
    result: Dict[str, str] = {}
    for index, item in enumerate(items or []):
        keys = fields if fields is not None else list(item.keys())
        for key in keys:
            value = item.get(key)
            if value is not None:
                result[f"{prefix}[{index}][{key}]"] = _to_form_value(value)
    return result


__all__ = [
    "convert_to_form_data",
    "indexed_form_fields",
    "nested_form_fields",
]
