"""Route generator.

Builds the route table in a fixed order (home or landing, auth views, admin
views, one create/edit pair per collection, catch-all) and emits
``src/router/index.js`` together with the guards and placeholder views that
the table references.  Output carries no timestamps, so identical input
always renders identical files.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from totigen.config import GenerationOptions
from totigen.schema.models import CollectionSchema
from totigen.schema.naming import (
    GUARDS_ROOT,
    ROUTER_MODULE,
    VIEWS_ROOT,
    ArtifactNames,
    StoreNames,
)

from .artifacts import ArtifactGenerator, GeneratedArtifact
from .templates import js_literal

CATCH_ALL_PATH = "/:pathMatch(.*)*"
LOGIN_PATH = "/login"
UNAUTHORIZED_PATH = "/unauthorized"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class PlaceholderView(BaseModel):
    """A non-collection view the route table points at."""
    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Path under src/views, e.g. 'auth/LoginView.vue'")
    title: str
    description: str = ""

    @property
    def path(self) -> str:
        return f"{VIEWS_ROOT}/{self.file}"

    @property
    def import_path(self) -> str:
        return f"@/views/{self.file}"


class Route(BaseModel):
    """One entry of the generated route table."""
    model_config = ConfigDict(frozen=True)

    path: str
    name: Optional[str] = None
    component: Optional[str] = None
    redirect: Optional[str] = None
    props: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)

    def render(self, indent: str = "  ") -> str:
        inner = indent * 2
        lines = [f"{indent}{{", f"{inner}path: {js_literal(self.path)},"]
        if self.name:
            lines.append(f"{inner}name: {js_literal(self.name)},")
        if self.component:
            lines.append(f"{inner}component: () => import({js_literal(self.component)}),")
        if self.redirect:
            lines.append(f"{inner}redirect: {js_literal(self.redirect)},")
        if self.props:
            lines.append(f"{inner}props: true,")
        if self.meta:
            entries = ", ".join(f"{key}: {js_literal(value)}" for key, value in self.meta.items())
            lines.append(f"{inner}meta: {{ {entries} }},")
        lines.append(f"{indent}}},")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Route table
# ---------------------------------------------------------------------------

_AUTH_VIEWS: tuple[tuple[str, str, str, str, str], ...] = (
    # (path, name, file, title, access)
    ("/login", "Login", "auth/LoginView.vue", "Sign in", "guest"),
    ("/register", "Register", "auth/RegisterView.vue", "Create an account", "guest"),
    ("/forgot-password", "ForgotPassword", "auth/ForgotPasswordView.vue", "Forgot password", "guest"),
    ("/reset-password", "ResetPassword", "auth/ResetPasswordView.vue", "Reset password", "guest"),
    ("/verify-email", "VerifyEmail", "auth/VerifyEmailView.vue", "Verify your email", "auth"),
    ("/unauthorized", "Unauthorized", "auth/UnauthorizedView.vue", "Access denied", "public"),
    ("/account", "Account", "auth/AccountView.vue", "Account", "auth"),
    ("/settings", "Settings", "auth/SettingsView.vue", "Settings", "auth"),
)

_ADMIN_VIEWS: tuple[tuple[str, str, str, str], ...] = (
    ("/admin/dashboard", "AdminDashboard", "admin/DashboardView.vue", "Admin dashboard"),
    ("/admin/users", "AdminUsers", "admin/UsersView.vue", "Manage users"),
)


class RouteTable:
    """The ordered routes plus the placeholder views they need."""

    def __init__(self, schemas: Sequence[CollectionSchema], options: GenerationOptions) -> None:
        self.options = options
        self.routes: list[Route] = []
        self.placeholders: list[PlaceholderView] = []
        # Protected routes need somewhere to send anonymous visitors.
        self.protect = options.auth_routes_enabled
        self._build(schemas)
        self._check_unique()

    @property
    def login_path(self) -> Optional[str]:
        return LOGIN_PATH if self.protect else None

    @property
    def denied_path(self) -> str:
        return UNAUTHORIZED_PATH if self.options.auth_routes_enabled else "/"

    def _auth_meta(self) -> dict[str, Any]:
        return {"requiresAuth": True} if self.protect else {}

    def _add_view(
        self, path: str, name: str, view: PlaceholderView, meta: Optional[dict[str, Any]] = None
    ) -> None:
        self.placeholders.append(view)
        self.routes.append(
            Route(path=path, name=name, component=view.import_path, meta=meta or {})
        )

    def _build(self, schemas: Sequence[CollectionSchema]) -> None:
        options = self.options
        if options.landing_enabled:
            self._add_view(
                "/", "Landing",
                PlaceholderView(file="LandingPage.vue", title="Welcome",
                                description="Public landing page."),
            )
        else:
            self._add_view(
                "/", "Home",
                PlaceholderView(file="HomeView.vue", title="Home"),
                self._auth_meta(),
            )

        if options.auth_routes_enabled:
            for path, name, file, title, access in _AUTH_VIEWS:
                meta: dict[str, Any] = {}
                if access == "guest":
                    meta = {"guestOnly": True}
                elif access == "auth":
                    meta = self._auth_meta()
                self._add_view(path, name, PlaceholderView(file=file, title=title), meta)

        if options.admin_enabled:
            for path, name, file, title in _ADMIN_VIEWS:
                meta = dict(self._auth_meta())
                if options.roles_enabled:
                    meta["requiresAdmin"] = True
                self._add_view(path, name, PlaceholderView(file=file, title=title), meta)

        for schema in schemas:
            names = ArtifactNames.for_schema(schema, options)
            self.routes.append(
                Route(
                    path=names.create_route_path,
                    name=names.create_route_name,
                    component=names.create_view_import,
                    meta=self._auth_meta(),
                )
            )
            self.routes.append(
                Route(
                    path=names.edit_route_path,
                    name=names.edit_route_name,
                    component=names.edit_view_import,
                    props=True,
                    meta=self._auth_meta(),
                )
            )

        self.routes.append(Route(path=CATCH_ALL_PATH, redirect="/"))

    def _check_unique(self) -> None:
        for label, values in (
            ("path", [r.path for r in self.routes]),
            ("name", [r.name for r in self.routes if r.name]),
        ):
            seen: set[str] = set()
            for value in values:
                if value in seen:
                    raise ValueError(f"Duplicate route {label}: {value}")
                seen.add(value)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class RouteGenerator(ArtifactGenerator):
    """Generates the router module, its guards and placeholder views."""

    stage = "routes"

    def table(self, schemas: Sequence[CollectionSchema], options: GenerationOptions) -> RouteTable:
        return RouteTable(schemas, options)

    def shared(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        table = self.table(schemas, options)
        store = StoreNames.for_options(options)
        auth_guard = options.auth_enabled
        role_guard = options.roles_enabled

        artifacts = [
            self._artifact(
                ROUTER_MODULE,
                "router/index.js.j2",
                {
                    "routes": [route.render() for route in table.routes],
                    "auth_guard": auth_guard,
                    "role_guard": role_guard,
                },
            )
        ]
        if auth_guard:
            artifacts.append(
                self._artifact(
                    f"{GUARDS_ROOT}/authGuard.js",
                    "router/authGuard.js.j2",
                    {"store": store, "login_path": table.login_path},
                )
            )
        if role_guard:
            artifacts.append(
                self._artifact(
                    f"{GUARDS_ROOT}/roleGuard.js",
                    "router/roleGuard.js.j2",
                    {"store": store, "denied_path": table.denied_path},
                )
            )
        for view in table.placeholders:
            artifacts.append(
                self._artifact(
                    view.path,
                    "views/Placeholder.vue.j2",
                    {"title": view.title, "description": view.description},
                )
            )
        return artifacts
