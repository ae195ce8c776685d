"""Form-view generator.

Emits ``src/views/<canonical>/Create.vue`` and ``Edit.vue`` for every
collection, plus the shared ``src/utils/formCodecs.js`` helpers that turn
list, object and timestamp values into editable text and back.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from totigen.config import GenerationOptions
from totigen.schema.field_types import (
    InputShape,
    default_literal,
    default_value,
    display_codec,
    encode_display,
    input_shape,
)
from totigen.schema.models import CollectionSchema, FieldSpec
from totigen.schema.naming import FORM_CODECS_MODULE, ArtifactNames, StoreNames

from .artifacts import ArtifactGenerator, GeneratedArtifact
from .templates import js_literal


CODECS_IMPORT = "@/utils/formCodecs"
REDIRECT_DELAY_MS = 1500

# Acronyms stay whole in labels: "imageURL" -> "Image URL".
_LABEL_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+")


def label_for(name: str) -> str:
    """``"unitPrice"`` -> ``"Unit price"``."""
    words = _LABEL_WORD.findall(name)
    if not words:
        return name
    text = " ".join(w if len(w) > 1 and w.isupper() else w.lower() for w in words)
    return text[0].upper() + text[1:]


@dataclass(frozen=True)
class FormField:
    """Everything a view template needs to know about one field."""

    spec: FieldSpec
    shape: InputShape
    label: str
    encode_js: Optional[str]
    decode_js: Optional[str]

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def model_key(self) -> str:
        return self.shape.model_key(self.spec.name)

    @property
    def initial(self) -> str:
        """JS literal the form starts from on the create view."""
        if self.shape.companion_suffix:
            return js_literal(encode_display(self.spec.type, default_value(self.spec.type)))
        return default_literal(self.spec.type)

    @property
    def load_expression(self) -> str:
        """JS expression filling the form from ``record`` on the edit view."""
        ref = f"record.{self.name}"
        if self.encode_js:
            return f"{self.encode_js}({ref})"
        return f"{ref} ?? {default_literal(self.spec.type)}"

    @property
    def parse_error(self) -> str:
        if not self.shape.parse_error:
            return ""
        return self.shape.parse_error.format(field=self.name)

    @property
    def fallback_note(self) -> str:
        if not self.spec.is_fallback:
            return ""
        return f"Declared as '{self.spec.declared_type}'; edited as plain text."

    @property
    def widget(self) -> str:
        return "\n".join(_widget_lines(self))


def form_fields(schema: CollectionSchema) -> list[FormField]:
    fields = []
    for spec in schema.fields:
        codec = display_codec(spec.type)
        shape = input_shape(spec.type)
        fields.append(
            FormField(
                spec=spec,
                shape=shape,
                label=label_for(spec.name),
                encode_js=codec.encode_js,
                decode_js=codec.decode_js if shape.companion_suffix else None,
            )
        )
    return fields


def _widget_lines(field: FormField) -> list[str]:
    name = field.name
    shape = field.shape
    model = f"v-model{shape.model_modifier}=\"form.{field.model_key}\""
    placeholder = (
        f' placeholder="{html.escape(shape.placeholder, quote=True)}"' if shape.placeholder else ""
    )
    indent = "      "

    if shape.kind == "checkbox":
        lines = [
            f'{indent}<div class="form-field form-field--checkbox">',
            f'{indent}  <label for="{name}">',
            f'{indent}    <input id="{name}" {model} type="checkbox" />',
            f"{indent}    {field.label}",
            f"{indent}  </label>",
        ]
    elif shape.kind == "textarea":
        lines = [
            f'{indent}<div class="form-field">',
            f'{indent}  <label for="{name}">{field.label}</label>',
            f'{indent}  <textarea id="{name}" {model} rows="4"{placeholder}></textarea>',
        ]
    else:
        lines = [
            f'{indent}<div class="form-field">',
            f'{indent}  <label for="{name}">{field.label}</label>',
            f'{indent}  <input id="{name}" {model} type="{shape.html_type}"{placeholder} />',
        ]

    if shape.help_text:
        lines.append(f'{indent}  <small class="field-help">{html.escape(shape.help_text)}</small>')
    if field.fallback_note:
        lines.append(f'{indent}  <small class="field-note">{html.escape(field.fallback_note)}</small>')
    lines.append(
        f'{indent}  <p v-if="fieldErrors.{name}" class="field-error">'
        f"{{{{ fieldErrors.{name} }}}}</p>"
    )
    lines.append(f"{indent}</div>")
    return lines


def _codec_imports(fields: Sequence[FormField], *, include_encoders: bool) -> list[str]:
    used: list[str] = []
    for field in fields:
        candidates = [field.decode_js]
        if include_encoders:
            candidates.insert(0, field.encode_js)
        for fn in candidates:
            if fn and fn not in used:
                used.append(fn)
    return used


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class FormGenerator(ArtifactGenerator):
    """Generates the create/edit views and the shared form codecs."""

    stage = "forms"

    def shared(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        needs_codecs = any(
            _codec_imports(form_fields(schema), include_encoders=True) for schema in schemas
        )
        if not needs_codecs:
            return []
        return [self._artifact(FORM_CODECS_MODULE, "views/formCodecs.js.j2", {})]

    def for_collection(
        self,
        schema: CollectionSchema,
        schemas: Sequence[CollectionSchema],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        names = ArtifactNames.for_schema(schema, options)
        fields = form_fields(schema)
        base = {
            "names": names,
            "store": StoreNames.for_options(options),
            "fields": fields,
            "codecs_import": CODECS_IMPORT,
            "title": label_for(schema.name),
        }
        create_ctx = {**base, "codecs": _codec_imports(fields, include_encoders=False)}
        edit_ctx = {
            **base,
            "codecs": _codec_imports(fields, include_encoders=True),
            "redirect_delay": REDIRECT_DELAY_MS,
        }
        return [
            self._artifact(names.create_view_path, "views/Create.vue.j2", create_ctx),
            self._artifact(names.edit_view_path, "views/Edit.vue.j2", edit_ctx),
        ]
