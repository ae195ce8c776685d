"""totigen configuration.

Typed configuration for a generation run.  ``GenerationOptions`` holds the
answers that shape the generated tree (store name, roles, which auth/admin
surfaces exist) and is passed read-only to every generator.  ``Config``
wraps it together with run-level settings (project root, dry run) and can be
built from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schema.field_types import DEFAULT_IDENTITY_COLLECTIONS
from .schema.naming import canonical


_TRUE_VALUES = {"1", "true", "yes", "on"}


class GenerationOptions(BaseModel):
    """Options shared by every artifact generator.

    Built once per run; frozen so no generator can change what another one
    sees.
    """

    model_config = ConfigDict(frozen=True)

    store_name: str = Field(default="appStore", description="Aggregated store name")
    roles: tuple[str, ...] = Field(
        default=(), description="Configured roles; empty disables role features"
    )
    activity_logging_enabled: bool = Field(default=False)
    auth_enabled: bool = Field(default=False)
    auth_views_enabled: bool = Field(default=False)
    admin_enabled: bool = Field(default=False)
    landing_enabled: bool = Field(default=True)
    identity_collections: frozenset[str] = Field(
        default=DEFAULT_IDENTITY_COLLECTIONS,
        description="Collection names treated as user-identity records",
    )

    @field_validator("store_name")
    @classmethod
    def _canonical_store_name(cls, value: str) -> str:
        return canonical(value) or "appStore"

    @field_validator("roles", mode="before")
    @classmethod
    def _clean_roles(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        cleaned: list[str] = []
        for role in value:
            role = str(role).strip()
            if role and role not in cleaned:
                cleaned.append(role)
        return tuple(cleaned)

    @property
    def roles_enabled(self) -> bool:
        return bool(self.roles)

    @property
    def auth_routes_enabled(self) -> bool:
        """Auth views are only routed when auth itself is enabled."""
        return self.auth_enabled and self.auth_views_enabled

    @classmethod
    def from_answers(cls, answers: Optional[dict[str, Any]] = None) -> "GenerationOptions":
        """Map the flat intake ``options`` object onto generation options.

        Recognised keys: ``enableAuth``, ``enableRoles``, ``roles``,
        ``enableAuthViews``, ``enableAdmin``, ``enableLanding``,
        ``addActivityLogging``, ``storeName``, ``identityCollections``.
        Roles only apply when both auth and roles are enabled; auth views
        only when auth is enabled.
        """
        answers = answers or {}
        auth = bool(answers.get("enableAuth", False))
        roles_on = auth and bool(answers.get("enableRoles", False))
        kwargs: dict[str, Any] = {
            "store_name": answers.get("storeName") or "appStore",
            "roles": answers.get("roles") if roles_on else (),
            "activity_logging_enabled": bool(answers.get("addActivityLogging", False)),
            "auth_enabled": auth,
            "auth_views_enabled": auth and bool(answers.get("enableAuthViews", auth)),
            "admin_enabled": bool(answers.get("enableAdmin", False)),
            "landing_enabled": bool(answers.get("enableLanding", True)),
        }
        if answers.get("identityCollections"):
            kwargs["identity_collections"] = frozenset(answers["identityCollections"])
        return cls(**kwargs)


class Config(BaseModel):
    """Run-level configuration for the generation pipeline."""

    project_root: Optional[Path] = Field(
        default=None, description="Target project; located by marker when unset"
    )
    definition_path: Optional[Path] = Field(
        default=None, description="JSON/YAML collection definition file"
    )
    dry_run: bool = Field(default=False, description="Render without writing files")
    verbose: bool = Field(default=False)
    options: GenerationOptions = Field(default_factory=GenerationOptions)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            TOTIGEN_PROJECT_ROOT, TOTIGEN_DEFINITION, TOTIGEN_DRY_RUN,
            TOTIGEN_VERBOSE, TOTIGEN_STORE_NAME, TOTIGEN_ROLES,
            TOTIGEN_ENABLE_AUTH, TOTIGEN_ENABLE_AUTH_VIEWS,
            TOTIGEN_ENABLE_ADMIN, TOTIGEN_ENABLE_LANDING,
            TOTIGEN_ACTIVITY_LOGGING.
        """
        option_kwargs: dict[str, Any] = {}
        if os.environ.get("TOTIGEN_STORE_NAME"):
            option_kwargs["store_name"] = os.environ["TOTIGEN_STORE_NAME"]
        if os.environ.get("TOTIGEN_ROLES"):
            option_kwargs["roles"] = os.environ["TOTIGEN_ROLES"]
        flags = {
            "TOTIGEN_ENABLE_AUTH": "auth_enabled",
            "TOTIGEN_ENABLE_AUTH_VIEWS": "auth_views_enabled",
            "TOTIGEN_ENABLE_ADMIN": "admin_enabled",
            "TOTIGEN_ENABLE_LANDING": "landing_enabled",
            "TOTIGEN_ACTIVITY_LOGGING": "activity_logging_enabled",
        }
        for env_name, option_name in flags.items():
            if os.environ.get(env_name):
                option_kwargs[option_name] = _env_flag(env_name)

        kwargs: dict[str, Any] = {"options": GenerationOptions(**option_kwargs)}
        if os.environ.get("TOTIGEN_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["TOTIGEN_PROJECT_ROOT"])
        if os.environ.get("TOTIGEN_DEFINITION"):
            kwargs["definition_path"] = Path(os.environ["TOTIGEN_DEFINITION"])
        if os.environ.get("TOTIGEN_DRY_RUN"):
            kwargs["dry_run"] = _env_flag("TOTIGEN_DRY_RUN")
        if os.environ.get("TOTIGEN_VERBOSE"):
            kwargs["verbose"] = _env_flag("TOTIGEN_VERBOSE")
        return cls(**kwargs)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUE_VALUES
