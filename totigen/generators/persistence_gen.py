"""Persistence-access generator.

Emits the Firebase bootstrap module, the shared ``collectionSupport.js``
helpers, the optional activity logger, and one actions module per
collection.  Each actions module exports a factory whose closures bake in
the collection name and return explicit ``{ok, data, error}`` results
instead of throwing or recording a shared "last error".
"""

from __future__ import annotations

from typing import Sequence

from totigen.config import GenerationOptions
from totigen.schema.models import CollectionSchema, FieldType
from totigen.schema.naming import FIREBASE_MODULE, ArtifactNames, StoreNames

from .artifacts import ArtifactGenerator, GeneratedArtifact


DEFAULT_PAGE_SIZE = 10
SEARCH_SENTINEL = "\uf8ff"
ACTIVITY_COLLECTION = "recentActivity"
RECENT_ACTIVITY_LIMIT = 50
FALLBACK_SEARCH_FIELD = "name"

FILTER_OPERATORS: tuple[str, ...] = (
    "==", "!=", "<", "<=", ">", ">=",
    "in", "not-in", "array-contains", "array-contains-any",
)


class PaginationPolicy:
    """The ``hasMore`` rule shared by the Python side and the emitted JS.

    A page is assumed to have a successor whenever it came back full, so a
    collection holding exactly ``page_size`` matching records reports
    ``has_more`` once and the following fetch returns nothing.
    """

    @staticmethod
    def has_more(returned: int, page_size: int) -> bool:
        return returned == page_size

    @staticmethod
    def js_expression(returned: str = "returned", page_size: str = "pageSize") -> str:
        return f"{returned} === {page_size}"


# ---------------------------------------------------------------------------
# Per-collection decisions
# ---------------------------------------------------------------------------

def is_role_gated(schema: CollectionSchema, options: GenerationOptions) -> bool:
    """Role operations exist only for identity-like collections with roles on."""
    return options.roles_enabled and schema.is_identity(options.identity_collections)


def default_search_field(schema: CollectionSchema) -> str:
    """First string-like field, else ``name``."""
    for spec in schema.fields:
        if spec.type in (FieldType.STRING, FieldType.EMAIL):
            return spec.name
    return FALLBACK_SEARCH_FIELD


def _field_summary(schema: CollectionSchema) -> str:
    parts = []
    for spec in schema.fields:
        label = spec.type.value
        if spec.is_fallback:
            label = f"{label}, declared '{spec.declared_type}'"
        parts.append(f"{spec.name} ({label})")
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class PersistenceGenerator(ArtifactGenerator):
    """Generates the data-access layer under ``src/stores/<store>/``."""

    stage = "persistence"

    def shared(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        store = StoreNames.for_options(options)
        artifacts = [
            self._artifact(
                FIREBASE_MODULE, "firebase.js.j2", {"auth_enabled": options.auth_enabled}
            ),
            self._artifact(
                store.support_path,
                "stores/collectionSupport.js.j2",
                {
                    "activity_logging": options.activity_logging_enabled,
                    "roles": list(options.roles),
                    "filter_operators": list(FILTER_OPERATORS),
                },
            ),
        ]
        if options.activity_logging_enabled:
            artifacts.append(
                self._artifact(
                    store.activity_logger_path,
                    "stores/activityLogger.js.j2",
                    {
                        "activity_collection": ACTIVITY_COLLECTION,
                        "recent_limit": RECENT_ACTIVITY_LIMIT,
                    },
                )
            )
        return artifacts

    def for_collection(
        self,
        schema: CollectionSchema,
        schemas: Sequence[CollectionSchema],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        names = ArtifactNames.for_schema(schema, options)
        context = {
            "names": names,
            "field_summary": _field_summary(schema),
            "identity": schema.is_identity(options.identity_collections),
            "role_gated": is_role_gated(schema, options),
            "activity_logging": options.activity_logging_enabled,
            "page_size": DEFAULT_PAGE_SIZE,
            "search_field": default_search_field(schema),
            "sentinel_escape": f"\\u{ord(SEARCH_SENTINEL):04x}",
            "has_more": PaginationPolicy.js_expression(),
        }
        return [self._artifact(names.actions_path, "stores/collectionActions.js.j2", context)]
