"""Collection schema: models, naming, field-type tables and normalization."""

from totigen.schema.field_types import NamingDegeneracyWarning
from totigen.schema.models import CollectionSchema, FieldSpec, FieldType
from totigen.schema.naming import ArtifactNames, StoreNames, canonical, pascal
from totigen.schema.normalizer import SchemaError, normalize

__all__ = [
    "ArtifactNames",
    "CollectionSchema",
    "FieldSpec",
    "FieldType",
    "NamingDegeneracyWarning",
    "SchemaError",
    "StoreNames",
    "canonical",
    "normalize",
    "pascal",
]
