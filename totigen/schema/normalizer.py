"""Schema normalizer: raw collection intake -> ``CollectionSchema`` tuple.

Accepts the loosely-typed structure read from a definition file (or built
in memory) and produces the frozen schema every generator consumes.  This is
the only place where intake is validated; generators assume its output is
well formed.
"""

from __future__ import annotations

import logging
import re
import warnings
from typing import Any, Iterable, Optional

from .field_types import MISSING_TYPE_TAG, NamingDegeneracyWarning, resolve_type
from .models import CollectionSchema, FieldSpec
from .naming import canonical, pascal

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_TYPE_TAG = re.compile(r"^[a-z][a-z0-9_-]*$")

# Managed by the generated persistence layer, never stored as a field.
RESERVED_FIELDS = frozenset({"id"})


class SchemaError(ValueError):
    """The collection intake cannot be turned into a valid schema."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize(
    raw_collections: Iterable[Any],
    *,
    identity_names: Optional[Iterable[str]] = None,
) -> tuple[CollectionSchema, ...]:
    """Normalize raw collection declarations.

    Args:
        raw_collections: Iterable of ``{"name": str, "fields": {name: type}}``
            mappings.  ``fields`` may also be a list of ``[name, type]`` pairs
            or of ``{"name": ..., "type": ...}`` mappings.
        identity_names: Names treated as identity-like collections.  Only
            used for the diagnostic log line; the predicate itself lives on
            :meth:`CollectionSchema.is_identity`.

    Returns:
        Collections in declaration order.

    Raises:
        SchemaError: An entry is missing ``name`` or ``fields``, ``fields``
            has an unsupported shape, a field name is blank, reserved or not
            an identifier, a type tag is not a plain word, or two collections
            share a canonical name (ignoring case).
    """
    if isinstance(raw_collections, (str, bytes)) or not isinstance(raw_collections, Iterable):
        raise SchemaError("Collections must be a list of collection declarations")

    schemas: list[CollectionSchema] = []
    seen: dict[str, int] = {}

    for index, entry in enumerate(raw_collections):
        if not isinstance(entry, dict):
            raise SchemaError(f"Collection #{index} must be a mapping, got {type(entry).__name__}")
        if entry.get("name") is None:
            raise SchemaError(f"Collection #{index} has no name")
        if "fields" not in entry or entry["fields"] is None:
            raise SchemaError(f"Collection #{index} ('{entry['name']}') has no fields")

        name = str(entry["name"]).strip()
        canonical_name = canonical(name)
        if not canonical_name:
            logger.warning("Skipping collection #%d: name %r has no usable characters", index, name)
            continue
        if canonical_name[0].isdigit():
            raise SchemaError(
                f"Collection #{index} ('{name}') must not start with a digit"
            )
        # Case-insensitive: artifact paths must stay distinct on any file system.
        key = canonical_name.lower()
        if key in seen:
            raise SchemaError(
                f"Collection #{index} ('{name}') collides with collection "
                f"#{seen[key]} on name '{canonical_name}'"
            )
        seen[key] = index

        fields = _normalize_fields(entry["fields"], index, name)
        schema = CollectionSchema(
            name=name,
            canonical_name=canonical_name,
            pascal_name=pascal(name),
            fields=fields,
            data_type=str(entry.get("dataType") or entry.get("data_type") or "object"),
        )
        if schema.is_identity(identity_names):
            logger.debug("Collection '%s' is identity-like", canonical_name)
        schemas.append(schema)

    return tuple(schemas)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _field_pairs(raw_fields: Any, index: int, name: str) -> list[tuple[Any, Any]]:
    if isinstance(raw_fields, dict):
        return list(raw_fields.items())
    if isinstance(raw_fields, (list, tuple)):
        pairs: list[tuple[Any, Any]] = []
        for item in raw_fields:
            if isinstance(item, dict) and "name" in item:
                pairs.append((item["name"], item.get("type")))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                pairs.append((item[0], item[1]))
            else:
                raise SchemaError(
                    f"Collection #{index} ('{name}') has an unsupported field entry: {item!r}"
                )
        return pairs
    raise SchemaError(
        f"Collection #{index} ('{name}') fields must be a mapping or a list of pairs"
    )


def _normalize_fields(raw_fields: Any, index: int, name: str) -> tuple[FieldSpec, ...]:
    # Repeated names: last type wins, first position is kept.
    ordered: dict[str, FieldSpec] = {}
    for raw_name, raw_type in _field_pairs(raw_fields, index, name):
        field_name = str(raw_name if raw_name is not None else "").strip()
        if not field_name:
            raise SchemaError(f"Collection #{index} ('{name}') has a field with a blank name")
        if not _IDENTIFIER.match(field_name):
            raise SchemaError(
                f"Collection #{index} ('{name}') field '{field_name}' is not a valid identifier"
            )
        if field_name in RESERVED_FIELDS:
            raise SchemaError(
                f"Collection #{index} ('{name}') field '{field_name}' is reserved for the document id"
            )
        field_type, declared = resolve_type(raw_type)
        if not _TYPE_TAG.match(declared):
            raise SchemaError(
                f"Collection #{index} ('{name}') field '{field_name}' has an invalid type tag {raw_type!r}"
            )
        spec = FieldSpec(name=field_name, type=field_type, declared_type=declared)
        if declared == MISSING_TYPE_TAG:
            warnings.warn(
                f"{name}.{field_name}: no type declared, treated as string",
                NamingDegeneracyWarning,
                stacklevel=3,
            )
        elif spec.is_fallback:
            warnings.warn(
                f"{name}.{field_name}: unknown type '{declared}', treated as string",
                NamingDegeneracyWarning,
                stacklevel=3,
            )
        ordered[field_name] = spec
    return tuple(ordered.values())
