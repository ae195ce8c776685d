"""Field-type mapper.

One table per concern, each keyed by :class:`FieldType`.  Every generator
asks this module (and only this module) how a declared type turns into a
default value, a form widget, a validator predicate, or a display string.
The tables are checked for completeness when the module is imported, so
adding a member to ``FieldType`` without extending every table fails fast.
"""

from __future__ import annotations

import copy
import json
import math
import re
from dataclasses import dataclass, field as dataclass_field
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional

from .models import FieldType


class NamingDegeneracyWarning(UserWarning):
    """Raised (as a warning) when a declaration degrades to a fallback."""


DEFAULT_IDENTITY_COLLECTIONS: frozenset[str] = frozenset({
    "users", "user",
    "customer", "customers",
    "client", "clients",
    "student", "students",
    "admin", "admins",
    "account", "accounts",
})

# Recorded as the declared tag of a field that names no type.
MISSING_TYPE_TAG = "untyped"

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
EMAIL_PATTERN_JS = r"/^\S+@\S+\.\S+$/"


# ---------------------------------------------------------------------------
# Type resolution
# ---------------------------------------------------------------------------

def resolve_type(tag: Any) -> tuple[FieldType, str]:
    """Map a raw type tag to ``(FieldType, declared_tag)``.

    Unknown tags resolve to ``FieldType.STRING``; callers compare the
    declared tag with the resolved value to detect the fallback.  A missing
    or blank tag is unknown too and is recorded as ``MISSING_TYPE_TAG``.
    """
    declared = str(tag if tag is not None else "").strip().lower()
    if not declared:
        return FieldType.STRING, MISSING_TYPE_TAG
    try:
        return FieldType(declared), declared
    except ValueError:
        return FieldType.STRING, declared


def is_auth_collection(name: str, identity_names: Optional[Iterable[str]] = None) -> bool:
    """Case-insensitive membership of *name* in the identity-like name set."""
    names = DEFAULT_IDENTITY_COLLECTIONS if identity_names is None else identity_names
    return name.strip().lower() in {n.strip().lower() for n in names}


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

_DEFAULT_VALUES: dict[FieldType, Any] = {
    FieldType.STRING: "",
    FieldType.NUMBER: 0,
    FieldType.BOOLEAN: False,
    FieldType.ARRAY: [],
    FieldType.OBJECT: {},
    FieldType.TIMESTAMP: "",
    FieldType.EMAIL: "",
}

_DEFAULT_LITERALS: dict[FieldType, str] = {
    FieldType.STRING: "''",
    FieldType.NUMBER: "0",
    FieldType.BOOLEAN: "false",
    FieldType.ARRAY: "[]",
    FieldType.OBJECT: "{}",
    FieldType.TIMESTAMP: "''",
    FieldType.EMAIL: "''",
}


def default_value(field_type: FieldType) -> Any:
    """Fresh Python default for *field_type* (mutable defaults are copies)."""
    return copy.deepcopy(_DEFAULT_VALUES[field_type])


def default_literal(field_type: FieldType) -> str:
    """JavaScript source literal of the default for *field_type*."""
    return _DEFAULT_LITERALS[field_type]


# ---------------------------------------------------------------------------
# Form widgets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InputShape:
    """How a field is edited in a generated form."""

    kind: str                      # "input" | "checkbox" | "textarea"
    html_type: Optional[str]       # <input type="..."> when kind is input/checkbox
    model_modifier: str = ""       # e.g. ".number"
    placeholder: str = ""
    help_text: str = ""
    companion_suffix: str = ""     # form key suffix when the widget edits display text
    parse_error: str = ""          # message template when display text cannot be decoded

    def model_key(self, field_name: str) -> str:
        return f"{field_name}{self.companion_suffix}"


_INPUT_SHAPES: dict[FieldType, InputShape] = {
    FieldType.STRING: InputShape(kind="input", html_type="text"),
    FieldType.NUMBER: InputShape(
        kind="input", html_type="number", model_modifier=".number", placeholder="0",
    ),
    FieldType.BOOLEAN: InputShape(kind="checkbox", html_type="checkbox"),
    FieldType.ARRAY: InputShape(
        kind="textarea",
        html_type=None,
        placeholder="value1, value2, value3",
        help_text="Separate values with commas.",
        companion_suffix="Text",
    ),
    FieldType.OBJECT: InputShape(
        kind="textarea",
        html_type=None,
        placeholder='{ "key": "value" }',
        help_text="Enter a JSON object.",
        companion_suffix="Json",
        parse_error="{field} must be valid JSON.",
    ),
    FieldType.TIMESTAMP: InputShape(kind="input", html_type="datetime-local"),
    FieldType.EMAIL: InputShape(
        kind="input", html_type="email", placeholder="name@example.com",
    ),
}


def input_shape(field_type: FieldType) -> InputShape:
    return _INPUT_SHAPES[field_type]


# ---------------------------------------------------------------------------
# Validator predicates
# ---------------------------------------------------------------------------

def js_string(value: Any) -> str:
    """Approximate JavaScript ``String(value)`` for JSON-like values."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(js_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def is_blank(value: Any) -> bool:
    """Mirror of the generated ``isBlank``: null, undefined or whitespace."""
    return value is None or js_string(value).strip() == ""


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


@dataclass(frozen=True)
class ValidatorFragment:
    """One type/format check, as JS source and as a Python predicate.

    ``js_condition`` is true when the value is *invalid*; ``check`` returns
    True when the value is *valid*.  ``{ref}`` in ``js_condition`` is
    replaced with the expression that reads the field.
    """

    field: str
    js_condition: str
    message: str
    check: Callable[[Any], bool] = dataclass_field(compare=False, repr=False)

    def render_condition(self, ref: str) -> str:
        return self.js_condition.replace("{ref}", ref)


# (invalid-when JS condition, message template, predicate)
_VALIDATORS: dict[FieldType, tuple[str, str, Callable[[Any], bool]]] = {
    FieldType.STRING: (
        "typeof {ref} !== 'string'",
        "{field} must be text.",
        _is_string,
    ),
    FieldType.NUMBER: (
        "typeof {ref} !== 'number' || Number.isNaN({ref})",
        "{field} must be a number.",
        _is_number,
    ),
    FieldType.BOOLEAN: (
        "typeof {ref} !== 'boolean'",
        "{field} must be true or false.",
        _is_boolean,
    ),
    FieldType.ARRAY: (
        "!Array.isArray({ref})",
        "{field} must be a list.",
        _is_array,
    ),
    FieldType.OBJECT: (
        "typeof {ref} !== 'object' || Array.isArray({ref})",
        "{field} must be an object.",
        _is_object,
    ),
    FieldType.TIMESTAMP: (
        "(typeof {ref} !== 'string' && !({ref} instanceof Date))"
        " || Number.isNaN(new Date({ref}).getTime())",
        "{field} must be a valid date.",
        _is_timestamp,
    ),
    FieldType.EMAIL: (
        "typeof {ref} !== 'string' || !EMAIL_PATTERN.test({ref})",
        "{field} must be a valid email address.",
        _is_email,
    ),
}


def validator_fragment(field_type: FieldType, field_name: str) -> ValidatorFragment:
    condition, message, predicate = _VALIDATORS[field_type]
    return ValidatorFragment(
        field=field_name,
        js_condition=condition,
        message=message.format(field=field_name),
        check=predicate,
    )


def required_message(field_name: str) -> str:
    return f"{field_name} is required."


def email_in_use_message(field_name: str) -> str:
    return f"The email address in {field_name} is already in use."


# ---------------------------------------------------------------------------
# Display codec
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DisplayCodec:
    """Names of the generated JS helpers converting a value to/from form text."""

    encode_js: Optional[str] = None
    decode_js: Optional[str] = None


_DISPLAY_CODECS: dict[FieldType, DisplayCodec] = {
    FieldType.STRING: DisplayCodec(),
    FieldType.NUMBER: DisplayCodec(),
    FieldType.BOOLEAN: DisplayCodec(),
    FieldType.ARRAY: DisplayCodec(encode_js="toListText", decode_js="parseListText"),
    FieldType.OBJECT: DisplayCodec(encode_js="toObjectText", decode_js="parseObjectText"),
    FieldType.TIMESTAMP: DisplayCodec(encode_js="toDateTimeText"),
    FieldType.EMAIL: DisplayCodec(),
}


def display_codec(field_type: FieldType) -> DisplayCodec:
    return _DISPLAY_CODECS[field_type]


def encode_display(field_type: FieldType, value: Any) -> Any:
    """Value -> form text, matching the generated ``formCodecs.js`` helpers."""
    if field_type is FieldType.ARRAY:
        if not isinstance(value, (list, tuple)):
            return ""
        return ", ".join(js_string(item) for item in value)
    if field_type is FieldType.OBJECT:
        if not isinstance(value, dict):
            return ""
        return json.dumps(value, indent=2, ensure_ascii=False)
    if field_type is FieldType.TIMESTAMP:
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%dT%H:%M")
        if isinstance(value, date):
            return value.strftime("%Y-%m-%dT00:00")
        return "" if value is None else str(value)[:16]
    return value


def decode_display(field_type: FieldType, text: Any) -> Any:
    """Form text -> value.  Raises ``ValueError`` for undecodable object text."""
    if field_type is FieldType.ARRAY:
        if not text:
            return []
        return [part.strip() for part in str(text).split(",")]
    if field_type is FieldType.OBJECT:
        if not str(text or "").strip():
            return {}
        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise ValueError("expected a JSON object")
        return parsed
    return text


# ---------------------------------------------------------------------------
# Completeness check
# ---------------------------------------------------------------------------

def _check_tables() -> None:
    tables = {
        "defaults": _DEFAULT_VALUES,
        "literals": _DEFAULT_LITERALS,
        "input shapes": _INPUT_SHAPES,
        "validators": _VALIDATORS,
        "display codecs": _DISPLAY_CODECS,
    }
    for label, table in tables.items():
        missing = set(FieldType) - set(table)
        if missing:
            names = ", ".join(sorted(t.value for t in missing))
            raise RuntimeError(f"Field-type table '{label}' has no entry for: {names}")


_check_tables()
