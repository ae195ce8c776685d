"""Tests for the create/edit view generator (totigen.generators.form_gen)."""

from __future__ import annotations

import pytest

from totigen.config import GenerationOptions
from totigen.generators.form_gen import (
    REDIRECT_DELAY_MS,
    FormGenerator,
    form_fields,
    label_for,
)
from totigen.schema.normalizer import normalize


pytestmark = pytest.mark.unit


@pytest.fixture
def form_gen(renderer) -> FormGenerator:
    return FormGenerator(renderer)


def _views(form_gen, schema, options):
    create, edit = form_gen.for_collection(schema, (schema,), options)
    return create, edit


class TestLabels:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("unitPrice", "Unit price"),
            ("title", "Title"),
            ("order lines", "Order lines"),
            ("imageURL", "Image URL"),
            ("planBItems", "Plan b items"),
        ],
    )
    def test_label_for(self, name, expected):
        assert label_for(name) == expected


class TestFormFields:
    def test_companion_keys(self, users_schema):
        fields = {f.name: f for f in form_fields(users_schema)}
        assert fields["roles"].model_key == "rolesText"
        assert fields["profile"].model_key == "profileJson"
        assert fields["email"].model_key == "email"

    def test_initial_values(self, products_schema, users_schema):
        products = {f.name: f for f in form_fields(products_schema)}
        users = {f.name: f for f in form_fields(users_schema)}
        assert products["title"].initial == "''"
        assert products["price"].initial == "0"
        assert products["inStock"].initial == "false"
        assert products["tags"].initial == "''"
        # Same text toObjectText({}) produces on the edit view.
        assert users["profile"].initial == "'{}'"

    def test_load_expressions(self, users_schema):
        fields = {f.name: f for f in form_fields(users_schema)}
        assert fields["roles"].load_expression == "toListText(record.roles)"
        assert fields["profile"].load_expression == "toObjectText(record.profile)"
        assert fields["joinedAt"].load_expression == "toDateTimeText(record.joinedAt)"
        assert fields["email"].load_expression == "record.email ?? ''"

    def test_only_object_fields_have_parse_errors(self, users_schema):
        errors = {f.name: f.parse_error for f in form_fields(users_schema)}
        assert errors["profile"] == "profile must be valid JSON."
        assert errors["roles"] == ""

    def test_timestamp_has_no_decoder(self, users_schema):
        fields = {f.name: f for f in form_fields(users_schema)}
        assert fields["joinedAt"].decode_js is None

    def test_widgets(self, products_schema):
        widgets = {f.name: f.widget for f in form_fields(products_schema)}
        assert 'v-model.number="form.price" type="number"' in widgets["price"]
        assert 'type="checkbox"' in widgets["inStock"]
        assert '<textarea id="tags" v-model="form.tagsText"' in widgets["tags"]
        assert "{{ fieldErrors.title }}" in widgets["title"]

    def test_placeholder_is_escaped(self, users_schema):
        widgets = {f.name: f.widget for f in form_fields(users_schema)}
        assert 'placeholder="{ &quot;key&quot;: &quot;value&quot; }"' in widgets["profile"]


class TestSharedCodecs:
    def test_emitted_when_needed(self, form_gen, products_schema, default_options):
        (artifact,) = form_gen.shared((products_schema,), default_options)
        assert artifact.path == "src/utils/formCodecs.js"
        assert "export function parseListText(text) {" in artifact.content
        assert "export function toDateTimeText(value) {" in artifact.content

    def test_skipped_for_scalar_collections(self, form_gen, contacts_schema, default_options):
        assert form_gen.shared((contacts_schema,), default_options) == []


class TestCreateView:
    def test_paths(self, form_gen, products_schema, default_options):
        create, edit = _views(form_gen, products_schema, default_options)
        assert create.path == "src/views/products/Create.vue"
        assert edit.path == "src/views/products/Edit.vue"

    def test_content(self, form_gen, products_schema, default_options):
        create, _ = _views(form_gen, products_schema, default_options)
        content = create.content
        assert "import { useAppStore } from '@/stores/appStore';" in content
        assert "import { validateProducts } from '@/validators/validateProducts';" in content
        assert "import { parseListText } from '@/utils/formCodecs';" in content
        assert "  tagsText: ''," in content
        assert "  payload.tags = parseListText(form.value.tagsText);" in content
        assert "const validationErrors = await validateProducts(payload);" in content
        assert "const result = await store.addProducts(payload);" in content
        assert "router.push('/');" in content
        assert "<h1>New Products</h1>" in content
        assert "{{ message }}" in content

    def test_scalar_collection_has_no_codec_import(self, form_gen, contacts_schema, default_options):
        create, edit = _views(form_gen, contacts_schema, default_options)
        assert "formCodecs" not in create.content
        assert "formCodecs" not in edit.content

    def test_object_parse_failure_reported_per_field(self, form_gen, users_schema, default_options):
        create, _ = _views(form_gen, users_schema, default_options)
        assert "payload.profile = parseObjectText(form.value.profileJson);" in create.content
        assert "problems.profile = 'profile must be valid JSON.';" in create.content

    def test_store_name_flows_into_import(self, form_gen, products_schema):
        create, _ = _views(form_gen, products_schema, GenerationOptions(store_name="shopStore"))
        assert "import { useShopStore } from '@/stores/shopStore';" in create.content


class TestEditView:
    def test_loads_and_updates(self, form_gen, users_schema, default_options):
        _, edit = _views(form_gen, users_schema, default_options)
        content = edit.content
        assert "const recordId = props.id || route.params.id;" in content
        assert "const result = await store.getUsers(recordId);" in content
        assert "    rolesText: toListText(record.roles)," in content
        assert "    joinedAt: toDateTimeText(record.joinedAt)," in content
        assert "import { toListText, parseListText, toObjectText, parseObjectText, toDateTimeText }" in content
        assert "{ checkEmailExistence: false }" in content
        assert "const result = await store.updateUsers(recordId, payload);" in content

    def test_missing_record_redirects(self, form_gen, products_schema, default_options):
        _, edit = _views(form_gen, products_schema, default_options)
        assert "leaveWith('Products not found.');" in edit.content
        assert f"setTimeout(() => router.replace('/'), {REDIRECT_DELAY_MS});" in edit.content

    def test_fallback_note(self, form_gen, default_options):
        with pytest.warns(UserWarning):
            (schema,) = normalize([{"name": "places", "fields": {"where": "geopoint"}}])
        create, _ = _views(form_gen, schema, default_options)
        assert "Declared as &#x27;geopoint&#x27;; edited as plain text." in create.content
