"""Name derivation shared by every generator.

``canonical`` and ``pascal`` turn a free-form collection name into code
identifiers.  :class:`ArtifactNames` and :class:`StoreNames` are the only
place where cross-artifact identifiers (paths, exported functions, route
names, store bindings) are spelled out, so an artifact that imports another
one can never disagree with it about a name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from totigen.config import GenerationOptions
    from totigen.schema.models import CollectionSchema


# ---------------------------------------------------------------------------
# Layout roots
# ---------------------------------------------------------------------------

VIEWS_ROOT = "src/views"
VALIDATORS_ROOT = "src/validators"
STORES_ROOT = "src/stores"
ROUTER_MODULE = "src/router/index.js"
GUARDS_ROOT = "src/router/guards"
FIREBASE_MODULE = "src/firebase.js"
FORM_CODECS_MODULE = "src/utils/formCodecs.js"

# Every capital letter opens a word, so the output of canonical/pascal
# splits back into the words it was built from.
_WORD = re.compile(r"[A-Z][a-z0-9]*|[a-z0-9]+")


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------

def tokens(name: str) -> list[str]:
    """Split *name* into lower-case words.

    Words are separated by any run of non-alphanumeric characters, and each
    capital letter starts a new word, so ``"product items"``,
    ``"product-items"`` and ``"productItems"`` all yield
    ``["product", "items"]`` and ``"planBItems"`` yields
    ``["plan", "b", "items"]``.  An all-caps run is read letter by letter:
    ``"USERS"`` is five words, which keeps ``pascal("a b c") == "ABC"``
    stable under a second pass.
    """
    return [word.lower() for word in _WORD.findall(name)]


def pascal(name: str) -> str:
    """``"product items"`` -> ``"ProductItems"``."""
    return "".join(word[0].upper() + word[1:] for word in tokens(name))


def canonical(name: str) -> str:
    """``"Product Items"`` -> ``"productItems"``."""
    words = tokens(name)
    if not words:
        return ""
    return words[0] + "".join(word[0].upper() + word[1:] for word in words[1:])


def constant(name: str) -> str:
    """``"product items"`` -> ``"PRODUCT_ITEMS"``."""
    return "_".join(tokens(name)).upper()


# ---------------------------------------------------------------------------
# Cross-artifact names
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StoreNames:
    """Names of the aggregated store and its shared support modules."""

    store_name: str
    store_dir: str
    index_path: str
    support_path: str
    activity_logger_path: str
    hook: str
    import_path: str

    @classmethod
    def for_options(cls, options: GenerationOptions) -> StoreNames:
        store = canonical(options.store_name) or "appStore"
        store_dir = f"{STORES_ROOT}/{store}"
        return cls(
            store_name=store,
            store_dir=store_dir,
            index_path=f"{store_dir}/index.js",
            support_path=f"{store_dir}/collectionSupport.js",
            activity_logger_path=f"{store_dir}/activityLogger.js",
            hook=f"use{pascal(store)}",
            import_path=f"@/stores/{store}",
        )


@dataclass(frozen=True)
class ArtifactNames:
    """Every identifier a collection contributes to the generated tree."""

    canonical: str
    pascal: str
    constant: str
    # persistence
    actions_path: str
    actions_import: str
    actions_factory: str
    # validation
    validator_path: str
    validator_import: str
    validator_function: str
    # views
    views_dir: str
    create_view_path: str
    edit_view_path: str
    create_view_import: str
    edit_view_import: str
    # routes
    create_route_path: str
    edit_route_path: str
    create_route_name: str
    edit_route_name: str
    # store bindings
    binding_function: str
    page_state: str
    search_state: str
    loading_state: str
    error_state: str
    fetch_action: str
    fetch_more_action: str
    get_action: str
    add_action: str
    update_action: str
    delete_action: str
    search_action: str
    apply_filters_action: str
    change_sorting_action: str
    clear_search_action: str
    count_action: str
    assign_roles_action: str
    revoke_roles_action: str

    @classmethod
    def for_schema(
        cls, schema: CollectionSchema, options: GenerationOptions
    ) -> ArtifactNames:
        store = StoreNames.for_options(options)
        c = schema.canonical_name
        p = schema.pascal_name
        views_dir = f"{VIEWS_ROOT}/{c}"
        return cls(
            canonical=c,
            pascal=p,
            constant=constant(c),
            actions_path=f"{store.store_dir}/actions/{c}.js",
            actions_import=f"./actions/{c}.js",
            actions_factory=f"create{p}Actions",
            validator_path=f"{VALIDATORS_ROOT}/validate{p}.js",
            validator_import=f"@/validators/validate{p}",
            validator_function=f"validate{p}",
            views_dir=views_dir,
            create_view_path=f"{views_dir}/Create.vue",
            edit_view_path=f"{views_dir}/Edit.vue",
            create_view_import=f"@/views/{c}/Create.vue",
            edit_view_import=f"@/views/{c}/Edit.vue",
            create_route_path=f"/{c}/create",
            edit_route_path=f"/{c}/edit/:id",
            create_route_name=f"{p}Create",
            edit_route_name=f"{p}Edit",
            binding_function=f"bind{p}",
            page_state=f"{c}Page",
            search_state=f"{c}Search",
            loading_state=f"{c}Loading",
            error_state=f"{c}Error",
            fetch_action=f"fetch{p}",
            fetch_more_action=f"fetchMore{p}",
            get_action=f"get{p}",
            add_action=f"add{p}",
            update_action=f"update{p}",
            delete_action=f"delete{p}",
            search_action=f"search{p}",
            apply_filters_action=f"apply{p}Filters",
            change_sorting_action=f"change{p}Sorting",
            clear_search_action=f"clear{p}Search",
            count_action=f"count{p}",
            assign_roles_action=f"assign{p}Roles",
            revoke_roles_action=f"revoke{p}Roles",
        )
