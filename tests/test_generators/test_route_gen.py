"""Tests for the route table and router generator (totigen.generators.route_gen)."""

from __future__ import annotations

import pytest

from totigen.config import GenerationOptions
from totigen.generators.route_gen import (
    CATCH_ALL_PATH,
    Route,
    RouteGenerator,
    RouteTable,
)
from totigen.schema.normalizer import normalize


pytestmark = pytest.mark.unit


def _names(table: RouteTable) -> list:
    return [route.name for route in table.routes]


class TestRoute:
    def test_render_minimal(self):
        assert Route(path="/", redirect="/home").render() == (
            "  {\n    path: '/',\n    redirect: '/home',\n  },"
        )

    def test_render_full(self):
        rendered = Route(
            path="/products/edit/:id",
            name="ProductsEdit",
            component="@/views/products/Edit.vue",
            props=True,
            meta={"requiresAuth": True},
        ).render()
        assert "component: () => import('@/views/products/Edit.vue')," in rendered
        assert "props: true," in rendered
        assert "meta: { requiresAuth: true }," in rendered


class TestRouteTable:
    def test_minimal_order(self, products_schema, default_options):
        table = RouteTable((products_schema,), default_options)
        assert _names(table) == ["Landing", "ProductsCreate", "ProductsEdit", None]
        assert table.routes[-1].path == CATCH_ALL_PATH
        assert table.routes[-1].redirect == "/"

    def test_full_order(self, products_schema, users_schema, roles_options):
        table = RouteTable((products_schema, users_schema), roles_options)
        assert _names(table) == [
            "Home",
            "Login",
            "Register",
            "ForgotPassword",
            "ResetPassword",
            "VerifyEmail",
            "Unauthorized",
            "Account",
            "Settings",
            "AdminDashboard",
            "AdminUsers",
            "ProductsCreate",
            "ProductsEdit",
            "UsersCreate",
            "UsersEdit",
            None,
        ]

    def test_collection_routes(self, products_schema, default_options):
        table = RouteTable((products_schema,), default_options)
        create, edit = table.routes[1], table.routes[2]
        assert create.path == "/products/create"
        assert create.component == "@/views/products/Create.vue"
        assert edit.path == "/products/edit/:id"
        assert edit.props is True

    def test_protection_requires_login_route(self, products_schema):
        table = RouteTable((products_schema,), GenerationOptions(auth_enabled=True))
        assert table.login_path is None
        assert all("requiresAuth" not in route.meta for route in table.routes)

    def test_protected_routes(self, products_schema, roles_options):
        table = RouteTable((products_schema,), roles_options)
        by_name = {route.name: route for route in table.routes}
        assert by_name["ProductsCreate"].meta == {"requiresAuth": True}
        assert by_name["Home"].meta == {"requiresAuth": True}
        assert by_name["Login"].meta == {"guestOnly": True}
        assert by_name["Unauthorized"].meta == {}
        assert by_name["AdminUsers"].meta == {"requiresAuth": True, "requiresAdmin": True}
        assert table.login_path == "/login"
        assert table.denied_path == "/unauthorized"

    def test_admin_without_roles(self, products_schema):
        options = GenerationOptions(auth_enabled=True, auth_views_enabled=True, admin_enabled=True)
        by_name = {r.name: r for r in RouteTable((products_schema,), options).routes}
        assert by_name["AdminDashboard"].meta == {"requiresAuth": True}

    def test_landing_has_no_meta(self, products_schema):
        options = GenerationOptions(auth_enabled=True, auth_views_enabled=True)
        landing = RouteTable((products_schema,), options).routes[0]
        assert landing.name == "Landing"
        assert landing.meta == {}

    def test_duplicate_route_rejected(self, products_schema, default_options):
        with pytest.raises(ValueError, match="Duplicate route path: /products/create"):
            RouteTable((products_schema, products_schema.model_copy()), default_options)

    def test_distinct_collections_do_not_clash(self, default_options):
        schemas = normalize([{"name": "login", "fields": {}}, {"name": "Login Create", "fields": {}}])
        assert len(RouteTable(schemas, default_options).routes) == 6


class TestRouteGenerator:
    def test_minimal_artifacts(self, renderer, products_schema, default_options):
        artifacts = RouteGenerator(renderer).generate((products_schema,), default_options)
        paths = [a.path for a in artifacts]
        assert paths == ["src/router/index.js", "src/views/LandingPage.vue"]
        router = artifacts[0].content
        assert "import { createRouter, createWebHistory } from 'vue-router';" in router
        assert "path: '/:pathMatch(.*)*'," in router
        assert "beforeEach" not in router
        assert router.index("ProductsCreate") < router.index("ProductsEdit")

    def test_guards(self, renderer, products_schema, users_schema, roles_options):
        artifacts = {
            a.path: a.content
            for a in RouteGenerator(renderer).shared((products_schema, users_schema), roles_options)
        }
        router = artifacts["src/router/index.js"]
        assert "router.beforeEach(authGuard);" in router
        assert "router.beforeEach(roleGuard);" in router
        assert router.index("beforeEach(authGuard)") < router.index("beforeEach(roleGuard)")

        auth_guard = artifacts["src/router/guards/authGuard.js"]
        assert "await store.initSession();" in auth_guard
        assert "return { path: '/login', query: { redirect: to.fullPath } };" in auth_guard

        role_guard = artifacts["src/router/guards/roleGuard.js"]
        assert "store.hasRole('admin')" in role_guard
        assert "return '/unauthorized';" in role_guard

        assert "src/views/auth/LoginView.vue" in artifacts
        assert "src/views/admin/UsersView.vue" in artifacts
        assert "<h1>Sign in</h1>" in artifacts["src/views/auth/LoginView.vue"]

    def test_auth_guard_without_login_route(self, renderer, products_schema):
        artifacts = {
            a.path: a.content
            for a in RouteGenerator(renderer).shared(
                (products_schema,), GenerationOptions(auth_enabled=True)
            )
        }
        guard = artifacts["src/router/guards/authGuard.js"]
        assert "initSession" in guard
        assert "requiresAuth" not in guard

    def test_roles_without_auth_views_deny_to_root(self, renderer, products_schema):
        options = GenerationOptions(roles=("admin",), auth_enabled=True)
        artifacts = {a.path: a.content for a in RouteGenerator(renderer).shared((products_schema,), options)}
        assert "return '/';" in artifacts["src/router/guards/roleGuard.js"]

    def test_output_is_stable(self, renderer, products_schema, roles_options):
        first = RouteGenerator(renderer).generate((products_schema,), roles_options)
        second = RouteGenerator(renderer).generate((products_schema,), roles_options)
        assert first == second
