"""Validation generator.

A :class:`ValidationPlan` is the ordered list of checks for one collection:
required checks for every field in declaration order, then one type/format
check per field, then best-effort email-existence checks.  The plan renders
``src/validators/validate<Pascal>.js`` and can also evaluate a record in
Python with the same semantics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from totigen.config import GenerationOptions
from totigen.schema.field_types import (
    EMAIL_PATTERN_JS,
    ValidatorFragment,
    email_in_use_message,
    is_blank,
    required_message,
    validator_fragment,
)
from totigen.schema.models import CollectionSchema, FieldType
from totigen.schema.naming import ArtifactNames

from .artifacts import ArtifactGenerator, GeneratedArtifact

logger = logging.getLogger(__name__)

EmailExists = Callable[[str], Awaitable[bool]]


@dataclass(frozen=True)
class RequiredCheck:
    field: str
    message: str


@dataclass(frozen=True)
class TypeCheck:
    fragment: ValidatorFragment
    annotation: str = ""

    @property
    def field(self) -> str:
        return self.fragment.field


@dataclass(frozen=True)
class ValidationPlan:
    """Ordered validation checks for one collection."""

    collection: str
    required: tuple[RequiredCheck, ...]
    type_checks: tuple[TypeCheck, ...]
    email_fields: tuple[str, ...]

    @classmethod
    def for_schema(cls, schema: CollectionSchema) -> ValidationPlan:
        required = tuple(RequiredCheck(f.name, required_message(f.name)) for f in schema.fields)
        type_checks = tuple(
            TypeCheck(
                fragment=validator_fragment(f.type, f.name),
                annotation=(
                    f"declared as '{f.declared_type}', validated as {f.type.value}"
                    if f.is_fallback
                    else ""
                ),
            )
            for f in schema.fields
        )
        email_fields = tuple(f.name for f in schema.fields if f.type is FieldType.EMAIL)
        return cls(
            collection=schema.canonical_name,
            required=required,
            type_checks=type_checks,
            email_fields=email_fields,
        )

    # -- Python evaluation ---------------------------------------------------

    def check(self, data: Optional[Mapping[str, Any]]) -> list[str]:
        """Required and type checks only (no existence lookups)."""
        record = data or {}
        errors: list[str] = []
        missing: set[str] = set()
        for req in self.required:
            if is_blank(record.get(req.field)):
                errors.append(req.message)
                missing.add(req.field)
        for type_check in self.type_checks:
            if type_check.field in missing:
                continue
            if not type_check.fragment.check(record.get(type_check.field)):
                errors.append(type_check.fragment.message)
        return errors

    async def validate(
        self,
        data: Optional[Mapping[str, Any]],
        email_exists: Optional[EmailExists] = None,
    ) -> list[str]:
        """Full validation, including the best-effort email existence check.

        A failure of *email_exists* is logged and ignored; it never adds an
        error.
        """
        errors = self.check(data)
        if email_exists is None or not self.email_fields:
            return errors

        record = data or {}
        failed = set(errors)
        for field_name in self.email_fields:
            value = record.get(field_name)
            fragment = validator_fragment(FieldType.EMAIL, field_name)
            if required_message(field_name) in failed or not fragment.check(value):
                continue
            try:
                exists = await email_exists(value)
            except Exception as exc:
                logger.warning("Email existence check failed for %s: %s", field_name, exc)
                continue
            if exists:
                errors.append(email_in_use_message(field_name))
        return errors


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ValidationGenerator(ArtifactGenerator):
    """Generates one ``validate<Pascal>.js`` module per collection."""

    stage = "validation"

    def plan(self, schema: CollectionSchema) -> ValidationPlan:
        return ValidationPlan.for_schema(schema)

    def for_collection(
        self,
        schema: CollectionSchema,
        schemas: Sequence[CollectionSchema],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        names = ArtifactNames.for_schema(schema, options)
        plan = self.plan(schema)
        context = {
            "names": names,
            "plan": plan,
            "conditions": [tc.fragment.render_condition(f"record.{tc.field}") for tc in plan.type_checks],
            "email_pattern": EMAIL_PATTERN_JS,
            "uses_email_pattern": bool(plan.email_fields),
            "email_in_use": {f: email_in_use_message(f) for f in plan.email_fields},
        }
        return [self._artifact(names.validator_path, "validators/validator.js.j2", context)]
