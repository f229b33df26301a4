"""Tests for the marker catalog."""

from __future__ import annotations

import pytest

from thisgen.markers import MARKER_CATALOG, EntityNames, FileRole, Marker, lookup_marker, markers_for
from thisgen.scaffolder import TemplateRenderer


pytestmark = pytest.mark.unit

PRODUCT = EntityNames(snake="product", pascal="Product", plural="products")


class TestCatalogShape:
    def test_module_markers_in_order(self):
        assert [m.name for m in markers_for(FileRole.MODULE)] == [
            "entity_types",
            "register_entities",
            "entity_fetchers",
            "entity_creators",
        ]

    def test_stores_markers_in_order(self):
        assert [m.name for m in markers_for(FileRole.STORES)] == [
            "store_fields",
            "store_init_vars",
            "store_init_fields",
        ]

    def test_tokens_follow_anchor_syntax(self):
        for (role, name), marker in MARKER_CATALOG.items():
            assert marker.role is role
            assert marker.token == f"[this:{name}]"
            assert marker.comment == f"// [this:{name}]"

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            MARKER_CATALOG[(FileRole.MODULE, "extra")] = None  # type: ignore[index]

    def test_markers_are_frozen(self):
        marker = lookup_marker(FileRole.MODULE, "entity_types")
        with pytest.raises(Exception):
            marker.line = "changed"  # type: ignore[misc]

    def test_unknown_marker(self):
        with pytest.raises(KeyError):
            lookup_marker(FileRole.STORES, "entity_types")


class TestRendering:
    @pytest.mark.parametrize(
        "role, name, line",
        [
            (FileRole.MODULE, "entity_types", '"product",'),
            (
                FileRole.MODULE,
                "register_entities",
                "registry.register(Box::new(ProductDescriptor::new(self.stores.products_store.clone())));",
            ),
            (
                FileRole.MODULE,
                "entity_fetchers",
                '"product" => Some(Arc::new(self.stores.products_store.clone())),',
            ),
            (FileRole.STORES, "store_fields", "pub products_store: Arc<dyn ProductStore>,"),
            (
                FileRole.STORES,
                "store_init_vars",
                "let products = Arc::new(InMemoryProductStore::default());",
            ),
            (FileRole.STORES, "store_init_fields", "products_store: products.clone(),"),
        ],
    )
    def test_render_line(self, role: FileRole, name: str, line: str):
        assert lookup_marker(role, name).render_line(PRODUCT) == line

    def test_needle_is_part_of_line(self):
        for marker in MARKER_CATALOG.values():
            assert marker.render_needle(PRODUCT) in marker.render_line(PRODUCT)


class TestTemplatesCarryAnchors:
    @pytest.mark.parametrize(
        "template, role",
        [
            ("project/module.rs.j2", FileRole.MODULE),
            ("project/stores.rs.j2", FileRole.STORES),
        ],
    )
    def test_every_marker_has_its_anchor(self, template: str, role: FileRole):
        text = TemplateRenderer().render(template, {"project_name": "shop", "project_pascal": "Shop"})
        for marker in markers_for(role):
            assert isinstance(marker, Marker)
            assert marker.comment in text
