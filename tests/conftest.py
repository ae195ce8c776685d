"""Shared pytest fixtures for the totigen test suite.

Provides reusable fixtures for:
- Raw collection definitions (products, users, contacts)
- Normalized schemas built from them
- Generation options for the common configurations
- A real TemplateRenderer
- A temporary target project carrying the project-root markers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from totigen.config import GenerationOptions
from totigen.generators.templates import TemplateRenderer
from totigen.schema.models import CollectionSchema
from totigen.schema.normalizer import normalize


# ---------------------------------------------------------------------------
# Raw definitions
# ---------------------------------------------------------------------------

@pytest.fixture
def products_raw() -> dict[str, Any]:
    """A plain content collection with one field of each common type."""
    return {
        "name": "products",
        "fields": {
            "title": "string",
            "price": "number",
            "inStock": "boolean",
            "tags": "array",
        },
    }


@pytest.fixture
def users_raw() -> dict[str, Any]:
    """An identity-like collection."""
    return {
        "name": "Users",
        "fields": {
            "displayName": "string",
            "email": "email",
            "roles": "array",
            "profile": "object",
            "joinedAt": "timestamp",
        },
    }


@pytest.fixture
def contacts_raw() -> dict[str, Any]:
    """A non-identity collection with an email field."""
    return {"name": "contacts", "fields": {"fullName": "string", "email": "email"}}


@pytest.fixture
def definition(products_raw, users_raw) -> dict[str, Any]:
    """A complete intake definition with auth, roles and activity logging."""
    return {
        "collections": [products_raw, users_raw],
        "options": {
            "enableAuth": True,
            "enableRoles": True,
            "roles": ["admin", "editor", "user"],
            "enableAuthViews": True,
            "enableAdmin": True,
            "enableLanding": False,
            "addActivityLogging": True,
            "storeName": "appStore",
        },
    }


# ---------------------------------------------------------------------------
# Schemas & options
# ---------------------------------------------------------------------------

@pytest.fixture
def products_schema(products_raw) -> CollectionSchema:
    return normalize([products_raw])[0]


@pytest.fixture
def users_schema(users_raw) -> CollectionSchema:
    return normalize([users_raw])[0]


@pytest.fixture
def contacts_schema(contacts_raw) -> CollectionSchema:
    return normalize([contacts_raw])[0]


@pytest.fixture
def default_options() -> GenerationOptions:
    """No auth, no roles, no activity logging."""
    return GenerationOptions()


@pytest.fixture
def roles_options() -> GenerationOptions:
    """Auth with views, admin views, roles and activity logging."""
    return GenerationOptions(
        roles=("admin", "user"),
        auth_enabled=True,
        auth_views_enabled=True,
        admin_enabled=True,
        landing_enabled=False,
        activity_logging_enabled=True,
    )


# ---------------------------------------------------------------------------
# Rendering & filesystem
# ---------------------------------------------------------------------------

@pytest.fixture
def renderer() -> TemplateRenderer:
    """The real renderer over the packaged templates."""
    return TemplateRenderer()


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary target project with package.json, src/ and .env.example."""
    project_dir = tmp_path / "web-app"
    (project_dir / "src").mkdir(parents=True)
    (project_dir / "package.json").write_text('{"name": "web-app"}\n', encoding="utf-8")
    (project_dir / ".env.example").write_text("VITE_FIREBASE_API_KEY=\n", encoding="utf-8")
    yield project_dir
