"""Artifact generators for totigen.

Each generator turns the normalized schema tuple plus the generation options
into ``GeneratedArtifact`` values.  Generators share a ``TemplateRenderer``
and never write files themselves.

Key classes:
    PersistenceGenerator - Firebase bootstrap, shared support, collection actions
    StoreGenerator       - Aggregated Pinia store rendered from a StoreRegistry
    ValidationGenerator  - Per-collection validators driven by a ValidationPlan
    FormGenerator        - Create/edit views and form codecs
    RouteGenerator       - Router, guards and placeholder views
    ArtifactWriter       - Persists artifacts under a project root
"""

from totigen.generators.artifacts import (
    ArtifactGenerator,
    ArtifactWriteError,
    ArtifactWriter,
    GeneratedArtifact,
    normalize_content,
)
from totigen.generators.form_gen import FormGenerator
from totigen.generators.persistence_gen import PaginationPolicy, PersistenceGenerator
from totigen.generators.route_gen import Route, RouteGenerator, RouteTable
from totigen.generators.store_gen import StoreGenerator, StoreRegistry
from totigen.generators.templates import TemplateRenderer
from totigen.generators.validation_gen import ValidationGenerator, ValidationPlan

__all__ = [
    # Artifacts and writing
    "ArtifactGenerator",
    "ArtifactWriteError",
    "ArtifactWriter",
    "GeneratedArtifact",
    "normalize_content",
    # Generators
    "FormGenerator",
    "PersistenceGenerator",
    "RouteGenerator",
    "StoreGenerator",
    "ValidationGenerator",
    # Supporting types
    "PaginationPolicy",
    "Route",
    "RouteTable",
    "StoreRegistry",
    "TemplateRenderer",
    "ValidationPlan",
]
