"""Shared pytest fixtures for the thisgen test suite.

Provides reusable fixtures for:
- Sample entity definition and descriptor sources
- A sample relationship document
- Scaffolded API projects in temporary directories
- Pre-built project models for the client emitter
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from thisgen.commands import init_project
from thisgen.introspect.models import (
    EntityRecord,
    FieldDescriptor,
    FieldType,
    HTTPMethod,
    ProjectModel,
    RelationRecord,
    RouteRecord,
)


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------

PRODUCT_MODEL_RS = textwrap.dedent("""\
    use this::prelude::*;

    impl_data_entity!(
        Product,
        "product",
        ["name", "sku"],
        {
            sku: String,
            price: f64,
            description: Option<String>,
        }
    );
""")

PRODUCT_DESCRIPTOR_RS = textwrap.dedent("""\
    impl EntityDescriptor for ProductDescriptor {
        fn entity_type(&self) -> &str {
            "product"
        }

        fn plural(&self) -> &str {
            "products"
        }

        fn build_routes(&self) -> Router {
            Router::new()
                .route("/products", get(list_products).post(create_product))
                .route(
                    "/products/{id}",
                    get(get_product).put(update_product).delete(delete_product),
                )
                .with_state(state)
        }
    }
""")

CATEGORY_MODEL_RS = textwrap.dedent("""\
    impl_data_entity!(Category, "category", ["name"], {
        label: String,
        position: i32,
    });
""")

LINKS_YAML = textwrap.dedent("""\
    entities:
      - singular: product
        plural: products
    links:
      - link_type: has_category
        source_type: product
        target_type: category
        forward_route_name: categories
        reverse_route_name: product
    validation_rules: {}
""")


@pytest.fixture
def product_model_rs() -> str:
    return PRODUCT_MODEL_RS


@pytest.fixture
def product_descriptor_rs() -> str:
    return PRODUCT_DESCRIPTOR_RS


@pytest.fixture
def category_model_rs() -> str:
    return CATEGORY_MODEL_RS


@pytest.fixture
def links_yaml() -> str:
    return LINKS_YAML


# ---------------------------------------------------------------------------
# Projects on disk
# ---------------------------------------------------------------------------

@pytest.fixture
def api_root(tmp_path: Path) -> Path:
    """Empty API project root (auto-cleanup)."""
    root = tmp_path / "api"
    root.mkdir()
    yield root


@pytest.fixture
def scaffolded_project(api_root: Path) -> Path:
    """An API root initialised with ``init_project``."""
    init_project(api_root, "shop")
    return api_root


@pytest.fixture
def write_entity(api_root: Path) -> Callable[..., Path]:
    """Factory writing an entity directory under ``<api_root>/src/entities``."""

    def _write(name: str, model_rs: str, descriptor_rs: str | None = None) -> Path:
        entity_dir = api_root / "src" / "entities" / name
        entity_dir.mkdir(parents=True, exist_ok=True)
        (entity_dir / "model.rs").write_text(model_rs, encoding="utf-8")
        if descriptor_rs is not None:
            (entity_dir / "descriptor.rs").write_text(descriptor_rs, encoding="utf-8")
        return entity_dir

    return _write


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

@pytest.fixture
def product_record() -> EntityRecord:
    return EntityRecord(
        name="product",
        pascal_name="Product",
        plural="products",
        fields=(
            FieldDescriptor(name="sku", type=FieldType.STRING),
            FieldDescriptor(name="price", type=FieldType.F64),
            FieldDescriptor(name="description", type=FieldType.STRING, optional=True),
        ),
        indexed_fields=("name", "sku"),
        routes=(
            RouteRecord(method=HTTPMethod.GET, path="/products", description="list products"),
            RouteRecord(method=HTTPMethod.POST, path="/products", description="create product"),
        ),
    )


@pytest.fixture
def category_record() -> EntityRecord:
    return EntityRecord(
        name="category",
        pascal_name="Category",
        plural="categories",
        fields=(
            FieldDescriptor(name="label", type=FieldType.STRING),
            FieldDescriptor(name="position", type=FieldType.I32),
        ),
        indexed_fields=("name",),
    )


@pytest.fixture
def has_category() -> RelationRecord:
    return RelationRecord(
        source="product",
        target="category",
        link_type="has_category",
        forward="categories",
        reverse="product",
    )


@pytest.fixture
def shop_model(product_record, category_record, has_category) -> ProjectModel:
    return ProjectModel(
        entities=(category_record, product_record),
        relations=(has_category,),
    )
