"""Pydantic v2 models describing normalized collection schemas.

These models are the read-only input shared by every artifact generator.
A ``CollectionSchema`` is produced by :func:`totigen.schema.normalizer.normalize`
and never mutated afterwards; generators derive all names from it through
:class:`totigen.schema.naming.ArtifactNames`.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """Closed set of declarable field types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    TIMESTAMP = "timestamp"
    EMAIL = "email"


# ---------------------------------------------------------------------------
# Schema Models
# ---------------------------------------------------------------------------

class FieldSpec(BaseModel):
    """A single typed field of a collection."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Field name, used as identifier")
    type: FieldType = Field(..., description="Resolved field type")
    declared_type: str = Field(
        default="", description="Type tag exactly as declared (after trim/lower)"
    )

    @property
    def is_fallback(self) -> bool:
        """True when the declared tag was unknown and degraded to ``string``."""
        return bool(self.declared_type) and self.declared_type != self.type.value


class CollectionSchema(BaseModel):
    """A named collection with ordered, typed fields."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Collection name as declared (trimmed)")
    canonical_name: str = Field(..., min_length=1, description="Lower camel name")
    pascal_name: str = Field(..., min_length=1, description="Pascal-case name")
    fields: tuple[FieldSpec, ...] = Field(
        default=(), description="Fields in declaration (UI) order"
    )
    data_type: str = Field(default="object", description="Record shape tag")

    @property
    def field_map(self) -> dict[str, FieldType]:
        return {f.name: f.type for f in self.fields}

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def fields_of(self, *types: FieldType) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.type in types)

    def is_identity(self, identity_names: Optional[Iterable[str]] = None) -> bool:
        """Whether this collection holds user-identity records."""
        from totigen.schema.field_types import is_auth_collection

        return is_auth_collection(self.canonical_name, identity_names)
