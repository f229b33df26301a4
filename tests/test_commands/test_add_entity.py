"""Tests for ``add_entity`` and its argument parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from thisgen.commands import add_entity, entity_names, parse_field_spec, parse_indexed
from thisgen.errors import StructuralMismatchError, ThisgenError
from thisgen.introspect.models import FieldType
from thisgen.markers import FileRole, markers_for
from thisgen.writer import DryRunWriter


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestParseFieldSpec:
    def test_valid(self):
        fields = parse_field_spec("sku:String,price:f64")
        assert [(f.name, f.rust_type, f.is_optional) for f in fields] == [
            ("sku", "String", False),
            ("price", "f64", False),
        ]

    def test_optional(self):
        (field,) = parse_field_spec("description:Option<String>")
        assert field.is_optional
        assert field.rust_type == "Option<String>"

    def test_all_types(self):
        spec = ",".join(f"f{i}:{t.value}" for i, t in enumerate(FieldType))
        assert len(parse_field_spec(spec)) == len(FieldType)

    def test_spaces_and_empty_pairs(self):
        fields = parse_field_spec(" sku : String , , price: f64 ")
        assert [(f.name, f.rust_type) for f in fields] == [("sku", "String"), ("price", "f64")]

    def test_empty(self):
        assert parse_field_spec("") == []
        assert parse_field_spec(None) == []

    def test_invalid_format(self):
        with pytest.raises(ThisgenError, match="Invalid field format"):
            parse_field_spec("sku")

    def test_unsupported_type(self):
        with pytest.raises(ThisgenError, match="Unsupported field type: 'Vec<String>'"):
            parse_field_spec("tags:Vec<String>")

    def test_unsupported_optional_type(self):
        with pytest.raises(ThisgenError, match="Unsupported field type: 'u8'"):
            parse_field_spec("small:Option<u8>")


class TestNames:
    def test_parse_indexed(self):
        assert parse_indexed("name, sku,,") == ["name", "sku"]
        assert parse_indexed(None) == []

    def test_entity_names(self):
        names = entity_names("OrderItem")
        assert (names.snake, names.pascal, names.plural) == ("order_item", "OrderItem", "order_items")

    def test_invalid_entity_name(self):
        with pytest.raises(ThisgenError, match="Invalid entity name"):
            entity_names("1st")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


class TestAddEntity:
    def test_scaffolds_and_registers(self, scaffolded_project: Path):
        result = add_entity(scaffolded_project, "product", fields="sku:String,price:f64")

        entity_dir = scaffolded_project / "src" / "entities" / "product"
        assert sorted(p.name for p in entity_dir.iterdir()) == [
            "descriptor.rs", "handlers.rs", "mod.rs", "model.rs", "store.rs",
        ]
        assert result.entity.name == "product"
        assert [f.name for f in result.entity.fields] == ["sku", "price"]
        assert result.module_declared

        module_rs = (scaffolded_project / "src" / "module.rs").read_text(encoding="utf-8")
        stores_rs = (scaffolded_project / "src" / "stores.rs").read_text(encoding="utf-8")
        mod_rs = (scaffolded_project / "src" / "entities" / "mod.rs").read_text(encoding="utf-8")
        assert '"product",' in module_rs
        assert "pub products_store: Arc<dyn ProductStore>," in stores_rs
        assert "use crate::entities::product::{ProductStore, InMemoryProductStore};" in stores_rs
        assert mod_rs.splitlines()[-1] == "pub mod product;"

    def test_twice_registers_once(self, scaffolded_project: Path):
        add_entity(scaffolded_project, "product", fields="sku:String")
        snapshot = {
            path: path.read_text(encoding="utf-8")
            for path in (scaffolded_project / "src").rglob("*.rs")
        }

        second = add_entity(scaffolded_project, "product", fields="sku:String")
        assert second.files == []
        assert not second.module_declared
        assert all(not registration.changed for registration in second.registrations)
        for path, text in snapshot.items():
            assert path.read_text(encoding="utf-8") == text

        module_rs = (scaffolded_project / "src" / "module.rs").read_text(encoding="utf-8")
        assert module_rs.count('"product",') == 1

    def test_validated(self, scaffolded_project: Path):
        add_entity(scaffolded_project, "invoice", fields="number:String", validated=True)
        model_rs = (scaffolded_project / "src" / "entities" / "invoice" / "model.rs").read_text(
            encoding="utf-8"
        )
        assert "impl_data_entity_validated!" in model_rs

    def test_legacy_stores_left_untouched(self, scaffolded_project: Path):
        stores_path = scaffolded_project / "src" / "stores.rs"
        legacy = stores_path.read_text(encoding="utf-8").replace("// [this:store_fields]", "")
        stores_path.write_text(legacy, encoding="utf-8")

        result = add_entity(scaffolded_project, "product", fields="sku:String")

        assert stores_path.read_text(encoding="utf-8") == legacy
        module_rs = (scaffolded_project / "src" / "module.rs").read_text(encoding="utf-8")
        assert '"product",' in module_rs
        by_role = {registration.role: registration for registration in result.registrations}
        assert by_role[FileRole.STORES].legacy is not None
        assert by_role[FileRole.MODULE].inserted == [m.name for m in markers_for(FileRole.MODULE)]

    def test_missing_module_file_is_not_fatal(self, api_root: Path):
        result = add_entity(api_root, "product")
        assert result.registrations == []
        assert (api_root / "src" / "entities" / "mod.rs").read_text(encoding="utf-8") == "pub mod product;\n"

    def test_broken_existing_definition_is_fatal(self, scaffolded_project: Path):
        entity_dir = scaffolded_project / "src" / "entities" / "product"
        entity_dir.mkdir()
        (entity_dir / "model.rs").write_text("pub struct Product;\n", encoding="utf-8")

        with pytest.raises(StructuralMismatchError):
            add_entity(scaffolded_project, "product")

    def test_dry_run_touches_nothing(self, scaffolded_project: Path):
        before = {
            path: path.read_text(encoding="utf-8")
            for path in scaffolded_project.rglob("*")
            if path.is_file()
        }
        writer = DryRunWriter()
        result = add_entity(scaffolded_project, "product", fields="sku:String", writer=writer)

        after = {
            path: path.read_text(encoding="utf-8")
            for path in scaffolded_project.rglob("*")
            if path.is_file()
        }
        assert after == before
        assert result.entity.name == "product"
        assert scaffolded_project / "src" / "module.rs" in writer.written
        assert '"product",' in writer.written[scaffolded_project / "src" / "module.rs"]
