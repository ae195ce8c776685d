"""State-container generator.

Emits the single aggregated Pinia store ``src/stores/<store>/index.js``.  The
store is assembled from a :class:`StoreRegistry` (an ordered list of binding
descriptors, one per collection) and rendered in one pass, so adding or
removing a collection never rewrites another collection's bindings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from totigen.config import GenerationOptions
from totigen.schema.models import CollectionSchema
from totigen.schema.naming import ArtifactNames, StoreNames

from .artifacts import ArtifactGenerator, GeneratedArtifact
from .persistence_gen import is_role_gated


# ---------------------------------------------------------------------------
# Auth failure messages
# ---------------------------------------------------------------------------

AUTH_ERROR_MESSAGES: dict[str, dict[str, str]] = {
    "login": {
        "auth/user-not-found": "No user found with this email",
        "auth/wrong-password": "Incorrect password",
        "auth/invalid-credential": "Invalid email or password",
        "auth/too-many-requests": "Too many attempts. Account temporarily locked",
        "auth/user-disabled": "This account has been disabled",
    },
    "signUp": {
        "auth/email-already-in-use": "Email already registered",
        "auth/invalid-email": "Invalid email address",
        "auth/weak-password": "Password is too weak",
        "auth/operation-not-allowed": "Account creation is disabled",
    },
    "sendPasswordReset": {
        "auth/user-not-found": "No user found with this email",
        "auth/invalid-email": "Invalid email address",
    },
    "changePassword": {
        "auth/wrong-password": "Current password is incorrect",
        "auth/requires-recent-login": "Session expired. Please log in again",
        "auth/weak-password": "New password is too weak",
    },
    "updateProfile": {
        "auth/requires-recent-login": "Session expired. Please log in again",
    },
}

AUTH_OPERATIONS: tuple[str, ...] = (
    "login",
    "signUp",
    "logout",
    "sendPasswordReset",
    "updateProfile",
    "changePassword",
    "initSession",
    "resendVerificationEmail",
)

GENERIC_AUTH_MESSAGE = "Authentication error"


def describe_auth_error(operation: str, code: Optional[str], message: Optional[str] = None) -> str:
    """Python mirror of the generated ``describeAuthError``."""
    known = AUTH_ERROR_MESSAGES.get(operation, {})
    if code and code in known:
        return known[code]
    return message or GENERIC_AUTH_MESSAGE


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BindingDescriptor:
    """What the store exposes for one collection."""

    names: ArtifactNames
    role_gated: bool = False

    @property
    def exported(self) -> tuple[str, ...]:
        """Every key the binding-set function returns, in render order."""
        n = self.names
        keys = [
            n.page_state, n.search_state, n.loading_state, n.error_state,
            n.fetch_action, n.fetch_more_action, n.get_action, n.add_action,
            n.update_action, n.delete_action, n.search_action,
            n.apply_filters_action, n.change_sorting_action,
            n.clear_search_action, n.count_action,
        ]
        if self.role_gated:
            keys.extend([n.assign_roles_action, n.revoke_roles_action])
        return tuple(keys)


@dataclass
class StoreRegistry:
    """Ordered binding descriptors plus the auth binding decision."""

    store: StoreNames
    bindings: list[BindingDescriptor] = field(default_factory=list)
    auth_enabled: bool = False
    profile: Optional[ArtifactNames] = None
    activity_logging: bool = False
    roles: tuple[str, ...] = ()

    @classmethod
    def build(
        cls, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> StoreRegistry:
        registry = cls(
            store=StoreNames.for_options(options),
            auth_enabled=options.auth_enabled,
            activity_logging=options.activity_logging_enabled,
            roles=options.roles,
        )
        for schema in schemas:
            registry.register(schema, options)
        if options.auth_enabled:
            identity = next(
                (s for s in schemas if s.is_identity(options.identity_collections)), None
            )
            if identity is not None:
                registry.profile = ArtifactNames.for_schema(identity, options)
        return registry

    def register(self, schema: CollectionSchema, options: GenerationOptions) -> BindingDescriptor:
        descriptor = BindingDescriptor(
            names=ArtifactNames.for_schema(schema, options),
            role_gated=is_role_gated(schema, options),
        )
        self.bindings.append(descriptor)
        return descriptor

    def exported_names(self) -> list[str]:
        """Every top-level key of the generated store, in render order."""
        names = ["currentUser", "isAuthenticated", "hasRole"]
        if self.auth_enabled:
            names.extend(["authLoading", "authError", "authInitialized", "emailVerificationSent"])
            names.extend(AUTH_OPERATIONS)
        if self.roles:
            names.append("availableRoles")
        if self.activity_logging:
            names.extend(["recentActivity", "watchRecentActivity", "stopRecentActivity"])
        for binding in self.bindings:
            names.extend(binding.exported)
        return names


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class StoreGenerator(ArtifactGenerator):
    """Generates the aggregated store module from a :class:`StoreRegistry`."""

    stage = "store"

    def shared(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        registry = StoreRegistry.build(schemas, options)
        return [self.render_registry(registry)]

    def render_registry(self, registry: StoreRegistry) -> GeneratedArtifact:
        duplicates = _duplicates(registry.exported_names())
        if duplicates:
            raise ValueError(f"Store keys defined more than once: {', '.join(duplicates)}")
        context = {
            "store": registry.store,
            "bindings": registry.bindings,
            "auth_enabled": registry.auth_enabled,
            "profile": registry.profile,
            "activity_logging": registry.activity_logging,
            "roles": list(registry.roles),
            "auth_messages": AUTH_ERROR_MESSAGES,
            "generic_auth_message": GENERIC_AUTH_MESSAGE,
        }
        return self._artifact(registry.store.index_path, "stores/index.js.j2", context)


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for name in names:
        if name in seen and name not in repeated:
            repeated.append(name)
        seen.add(name)
    return repeated
