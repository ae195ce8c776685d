"""Unit tests for GenerationOptions and Config (totigen.config).

Tests cover:
- GenerationOptions defaults, store-name and role cleanup
- GenerationOptions.from_answers flag interplay
- Config defaults and from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from totigen.config import Config, GenerationOptions
from totigen.schema.field_types import DEFAULT_IDENTITY_COLLECTIONS


# ---------------------------------------------------------------------------
# GenerationOptions
# ---------------------------------------------------------------------------


class TestGenerationOptions:
    @pytest.mark.unit
    def test_defaults(self):
        options = GenerationOptions()
        assert options.store_name == "appStore"
        assert options.roles == ()
        assert options.roles_enabled is False
        assert options.auth_enabled is False
        assert options.landing_enabled is True
        assert options.identity_collections == DEFAULT_IDENTITY_COLLECTIONS

    @pytest.mark.unit
    def test_store_name_canonicalized(self):
        assert GenerationOptions(store_name="Shop Store").store_name == "shopStore"

    @pytest.mark.unit
    def test_degenerate_store_name_falls_back(self):
        assert GenerationOptions(store_name="--").store_name == "appStore"

    @pytest.mark.unit
    def test_roles_from_comma_string(self):
        assert GenerationOptions(roles=" admin, editor,,admin ").roles == ("admin", "editor")

    @pytest.mark.unit
    def test_roles_none(self):
        assert GenerationOptions(roles=None).roles == ()

    @pytest.mark.unit
    def test_frozen(self):
        options = GenerationOptions()
        with pytest.raises(ValidationError):
            options.auth_enabled = True

    @pytest.mark.unit
    def test_auth_routes_need_auth(self):
        assert not GenerationOptions(auth_views_enabled=True).auth_routes_enabled
        assert GenerationOptions(auth_enabled=True, auth_views_enabled=True).auth_routes_enabled


class TestFromAnswers:
    @pytest.mark.unit
    def test_empty(self):
        assert GenerationOptions.from_answers(None) == GenerationOptions()

    @pytest.mark.unit
    def test_full(self, definition):
        options = GenerationOptions.from_answers(definition["options"])
        assert options.auth_enabled is True
        assert options.roles == ("admin", "editor", "user")
        assert options.auth_views_enabled is True
        assert options.admin_enabled is True
        assert options.landing_enabled is False
        assert options.activity_logging_enabled is True

    @pytest.mark.unit
    def test_roles_ignored_without_auth(self):
        options = GenerationOptions.from_answers({"enableRoles": True, "roles": ["admin"]})
        assert options.roles == ()

    @pytest.mark.unit
    def test_roles_ignored_without_enable_roles(self):
        options = GenerationOptions.from_answers({"enableAuth": True, "roles": ["admin"]})
        assert options.roles == ()

    @pytest.mark.unit
    def test_auth_views_default_to_auth(self):
        assert GenerationOptions.from_answers({"enableAuth": True}).auth_views_enabled is True
        assert GenerationOptions.from_answers({"enableAuthViews": True}).auth_views_enabled is False

    @pytest.mark.unit
    def test_identity_collections(self):
        options = GenerationOptions.from_answers({"identityCollections": ["members"]})
        assert options.identity_collections == frozenset({"members"})

    @pytest.mark.unit
    def test_store_name(self):
        assert GenerationOptions.from_answers({"storeName": "data store"}).store_name == "dataStore"


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.project_root is None
        assert config.definition_path is None
        assert config.dry_run is False

    @pytest.mark.unit
    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_from_env(self, tmp_path: Path):
        env = {
            "TOTIGEN_PROJECT_ROOT": str(tmp_path),
            "TOTIGEN_DEFINITION": str(tmp_path / "def.yaml"),
            "TOTIGEN_DRY_RUN": "yes",
            "TOTIGEN_VERBOSE": "0",
            "TOTIGEN_STORE_NAME": "shop store",
            "TOTIGEN_ROLES": "admin,user",
            "TOTIGEN_ENABLE_AUTH": "true",
            "TOTIGEN_ENABLE_AUTH_VIEWS": "1",
            "TOTIGEN_ENABLE_ADMIN": "on",
            "TOTIGEN_ENABLE_LANDING": "false",
            "TOTIGEN_ACTIVITY_LOGGING": "TRUE",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.project_root == tmp_path
        assert config.definition_path == tmp_path / "def.yaml"
        assert config.dry_run is True
        assert config.verbose is False
        options = config.options
        assert options.store_name == "shopStore"
        assert options.roles == ("admin", "user")
        assert options.auth_enabled and options.auth_views_enabled and options.admin_enabled
        assert options.landing_enabled is False
        assert options.activity_logging_enabled is True
